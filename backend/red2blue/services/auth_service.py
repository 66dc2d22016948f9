import hashlib
import os
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

import bcrypt
import jwt

ALGORITHM = "HS256"
TOKEN_TYPE_ACCESS = "access"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _jwt_secret() -> str:
    return os.getenv("JWT_SECRET_KEY", "change-me-in-production")


def _access_ttl_minutes() -> int:
    return int(os.getenv("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))


def _bcrypt_input(password: str) -> bytes:
    # Pre-hash to fixed length so bcrypt never hits the 72-byte password limit.
    digest_hex = hashlib.sha256(password.encode("utf-8")).hexdigest()
    return digest_hex.encode("ascii")


def hash_password(password: str) -> str:
    hashed = bcrypt.hashpw(_bcrypt_input(password), bcrypt.gensalt(rounds=_bcrypt_rounds()))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_bcrypt_input(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(*, user_id: int, role: str) -> tuple[str, datetime]:
    issued_at = _utc_now()
    expires_at = issued_at + timedelta(minutes=_access_ttl_minutes())
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "role": role,
        "tokenType": TOKEN_TYPE_ACCESS,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
        "jti": str(uuid4()),
    }
    encoded = jwt.encode(payload, _jwt_secret(), algorithm=ALGORITHM)
    return encoded, expires_at


def decode_token(token: str, *, expected_type: str | None = None) -> dict[str, Any]:
    payload = jwt.decode(token, _jwt_secret(), algorithms=[ALGORITHM])
    token_type = str(payload.get("tokenType", ""))
    if expected_type and token_type != expected_type:
        raise jwt.InvalidTokenError("Unexpected token type")
    return payload


def access_expires_in_seconds() -> int:
    return _access_ttl_minutes() * 60


def _bcrypt_rounds() -> int:
    return int(os.getenv("BCRYPT_ROUNDS", "12"))
