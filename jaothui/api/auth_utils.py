import os
from datetime import UTC, datetime, timedelta
from typing import Any, cast
from uuid import UUID

from jose import jwt
from passlib.context import CryptContext

DEV_SECRET_KEY = "dev-secret-unsafe"
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24  # 24 hours

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def signing_key() -> str:
    """Read on every call so a key exported after import still applies."""
    return os.environ.get("JAOTHUI_SECRET_KEY") or DEV_SECRET_KEY


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        result: bool = pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # unknown or malformed hash
        return False
    return result


def get_password_hash(password: str) -> str:
    result: str = pwd_context.hash(password)
    return result


def create_access_token(
    subject: UUID | str,
    claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
) -> str:
    """
    Create a signed JWT for a profile.

    Args:
        subject: Profile id, stored as `sub`
        claims: Extra claims (phone_number, type, ...)
        expires_delta: Lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES
        now_utc: Issue time (for testing/determinism). Defaults to datetime.now(UTC).
    """
    issued_at = now_utc if now_utc is not None else datetime.now(UTC)
    lifetime = expires_delta if expires_delta is not None else timedelta(
        minutes=ACCESS_TOKEN_EXPIRE_MINUTES
    )

    payload = {**(claims or {}), "sub": str(subject), "iat": issued_at, "exp": issued_at + lifetime}
    encoded: str = jwt.encode(payload, signing_key(), algorithm=ALGORITHM)
    return encoded


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Verified claims, or None for a bad signature, expiry or missing subject."""
    try:
        payload = jwt.decode(token, signing_key(), algorithms=[ALGORITHM])
    except jwt.JWTError:
        return None
    if not payload.get("sub"):
        return None
    return cast(dict[str, Any], payload)
