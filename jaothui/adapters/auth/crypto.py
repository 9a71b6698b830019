from datetime import timedelta
from typing import Any

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError

from jaothui.api.auth_utils import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


class JWTAuthAdapter:
    """Auth adapter that uses JWT tokens and passlib for password hashing."""

    def hash_password(self, password: str) -> str:
        return get_password_hash(password)

    def verify_password(self, plain: str, hashed: str) -> bool:
        return verify_password(plain, hashed)

    def create_token(
        self, profile_id: Any, ttl_minutes: int, claims: dict[str, Any] | None = None
    ) -> str:
        return create_access_token(profile_id, claims, timedelta(minutes=ttl_minutes))

    def decode_token(self, token: str) -> dict[str, Any] | None:
        return decode_access_token(token)


class Argon2AuthAdapter(JWTAuthAdapter):
    """JWT tokens with argon2-cffi used directly for hashing.

    Used by the seed script, which hashes many passwords without a CryptContext.
    """

    def __init__(self) -> None:
        self.ph = PasswordHasher()

    def hash_password(self, password: str) -> str:
        return str(self.ph.hash(password))

    def verify_password(self, plain: str, hashed: str) -> bool:
        try:
            self.ph.verify(hashed, plain)
            return True
        except (VerifyMismatchError, InvalidHashError):
            return False
