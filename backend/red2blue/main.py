import logging

from dotenv import load_dotenv

# Environment must be loaded before the database engine is created.
load_dotenv()

from fastapi import FastAPI, Request, status  # noqa: E402
from fastapi.exceptions import RequestValidationError  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402

from red2blue.api.assessments import router as assessments_router  # noqa: E402
from red2blue.api.auth import router as auth_router  # noqa: E402
from red2blue.api.catalog import router as catalog_router  # noqa: E402
from red2blue.api.chat import router as chat_router  # noqa: E402
from red2blue.api.coach import router as coach_router  # noqa: E402
from red2blue.api.progress import router as progress_router  # noqa: E402
from red2blue.api.recommendations import router as recommendations_router  # noqa: E402
from red2blue.api.tools import router as tools_router  # noqa: E402
from red2blue.config import get_settings  # noqa: E402
from red2blue.db import init_db  # noqa: E402
from red2blue.errors import Red2BlueError  # noqa: E402
from red2blue.seed import seed_catalog  # noqa: E402
from red2blue.services.store import store  # noqa: E402

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
LOGGER = logging.getLogger(__name__)

init_db()
if settings.seed_catalog:
    seed_catalog(store)

app = FastAPI(title="Red2Blue Coaching API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Red2BlueError)
async def handle_domain_error(request: Request, exc: Red2BlueError) -> JSONResponse:
    if exc.status_code >= 500:
        LOGGER.error("Request %s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg', 'invalid value')}" if location else error.get("msg", ""))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request: " + "; ".join(problems)},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(auth_router, prefix="/api")
app.include_router(assessments_router, prefix="/api")
app.include_router(chat_router, prefix="/api")
app.include_router(progress_router, prefix="/api")
app.include_router(catalog_router, prefix="/api")
app.include_router(recommendations_router, prefix="/api")
app.include_router(coach_router, prefix="/api")
app.include_router(tools_router, prefix="/api")
