from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from jaothui.domain.entities import Profile


class ProfileRepoPort(Protocol):
    def get_by_phone(self, phone_number: str) -> Profile | None: ...
    def get_by_email(self, email: str) -> Profile | None: ...
    def get_by_id(self, profile_id: UUID) -> Profile | None: ...
    def save(self, profile: Profile) -> Profile: ...


class AuthAdapterPort(Protocol):
    def verify_password(self, plain: str, hashed: str) -> bool: ...
    def hash_password(self, plain: str) -> str: ...
    def create_token(
        self, profile_id: object, ttl_minutes: int, claims: dict[str, Any] | None = None
    ) -> str: ...
    def decode_token(self, token: str) -> dict[str, Any] | None: ...


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


class PasswordPolicyPort(Protocol):
    """Password complexity settings from rules."""

    def get_min_length(self) -> int: ...
    def get_require_uppercase(self) -> bool: ...
    def get_require_lowercase(self) -> bool: ...
    def get_require_numbers(self) -> bool: ...
    def get_require_special(self) -> bool: ...
