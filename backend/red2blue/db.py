from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from red2blue.config import database_url

DATABASE_URL = database_url()

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# Keep pooled connections healthy for long-running API processes.
engine = create_engine(
    DATABASE_URL,
    future=True,
    pool_pre_ping=True,
    connect_args=_connect_args,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True, expire_on_commit=False)

Base = declarative_base()


def init_db() -> None:
    from red2blue import db_models  # noqa: F401

    Base.metadata.create_all(bind=engine)
