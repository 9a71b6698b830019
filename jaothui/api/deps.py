import os
import secrets
from functools import lru_cache
from pathlib import Path
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from jaothui.adapters.auth.crypto import JWTAuthAdapter
from jaothui.adapters.clock import SystemClock
from jaothui.adapters.fs.filestore import FileSystemStore
from jaothui.adapters.sqlite.repos import (
    SQLiteActivityRepo,
    SQLiteAnimalRepo,
    SQLiteAnimalTypeRepo,
    SQLiteFarmRepo,
    SQLiteProfileRepo,
    SQLiteScheduleRepo,
)
from jaothui.api.auth_utils import decode_access_token
from jaothui.api.errors import error_detail
from jaothui.app_shell.rate_limit import RateLimiter
from jaothui.domain.entities import Profile
from jaothui.rules.loader import load_rules
from jaothui.rules.models import Rules

DEFAULT_CRON_SECRET = "dev-secret-key"
RATE_LIMITED_MESSAGE = "มีการเรียกใช้งานมากเกินไป กรุณาลองใหม่ภายหลัง"


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("JAOTHUI_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "jaothui.db")
        self.uploads_dir = self.data_dir / "uploads"
        self.migrations_dir = str(self.base_dir / "migrations")
        self.rules_path = Path(os.environ.get("JAOTHUI_RULES_PATH", self.base_dir / "rules.yaml"))
        self.cron_secret = os.environ.get("CRON_SECRET", DEFAULT_CRON_SECRET)


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


class MicrochipRulesAdapter:
    """Maps Rules to the microchip component RulesPort."""

    def __init__(self, rules: Rules):
        self._rules = rules.microchip

    def get_prefix(self) -> str:
        return self._rules.prefix

    def get_max_attempts(self) -> int:
        return self._rules.max_attempts

    def get_on_exhausted(self) -> str:
        return self._rules.on_exhausted

    def get_batch_max(self) -> int:
        return self._rules.batch_max


class RecurrenceRulesAdapter:
    """Maps Rules to the recurrence component RulesPort."""

    def __init__(self, rules: Rules):
        self._rules = rules.recurrence

    def get_max_additional_occurrences(self) -> int:
        return self._rules.max_additional_occurrences

    def get_creation_horizon_months(self) -> int:
        return self._rules.creation_horizon_months

    def get_backfill_horizon_months(self) -> int:
        return self._rules.backfill_horizon_months

    def get_backfill_due_window_days(self) -> int:
        return self._rules.backfill_due_window_days

    def get_dedupe_tolerance_hours(self) -> int:
        return self._rules.dedupe_tolerance_hours


class UploadRulesAdapter:
    """Maps Rules to the uploads component RulesPort."""

    def __init__(self, rules: Rules):
        self._rules = rules.uploads

    def get_max_bytes_by_mime(self) -> dict[str, int]:
        return self._rules.max_bytes_by_mime

    def get_default_max_bytes(self) -> int:
        return self._rules.default_max_bytes

    def get_dangerous_extensions(self) -> list[str]:
        return self._rules.dangerous_extensions

    def get_max_filename_length(self) -> int:
        return self._rules.max_filename_length


class PasswordPolicyAdapter:
    def __init__(self, rules: Rules):
        self._rules = rules.auth.password

    def get_min_length(self) -> int:
        return self._rules.min_length

    def get_require_uppercase(self) -> bool:
        return self._rules.require_uppercase

    def get_require_lowercase(self) -> bool:
        return self._rules.require_lowercase

    def get_require_numbers(self) -> bool:
        return self._rules.require_numbers

    def get_require_special(self) -> bool:
        return self._rules.require_special


def get_microchip_rules(rules: Rules = Depends(get_rules)) -> MicrochipRulesAdapter:
    return MicrochipRulesAdapter(rules)


def get_recurrence_rules(rules: Rules = Depends(get_rules)) -> RecurrenceRulesAdapter:
    return RecurrenceRulesAdapter(rules)


def get_upload_rules(rules: Rules = Depends(get_rules)) -> UploadRulesAdapter:
    return UploadRulesAdapter(rules)


def get_password_policy(rules: Rules = Depends(get_rules)) -> PasswordPolicyAdapter:
    return PasswordPolicyAdapter(rules)


# --- Repos ---
def get_profile_repo(settings: Settings = Depends(get_settings)) -> SQLiteProfileRepo:
    return SQLiteProfileRepo(settings.db_path)


def get_farm_repo(settings: Settings = Depends(get_settings)) -> SQLiteFarmRepo:
    return SQLiteFarmRepo(settings.db_path)


def get_animal_type_repo(settings: Settings = Depends(get_settings)) -> SQLiteAnimalTypeRepo:
    return SQLiteAnimalTypeRepo(settings.db_path)


def get_animal_repo(settings: Settings = Depends(get_settings)) -> SQLiteAnimalRepo:
    return SQLiteAnimalRepo(settings.db_path)


def get_schedule_repo(settings: Settings = Depends(get_settings)) -> SQLiteScheduleRepo:
    return SQLiteScheduleRepo(settings.db_path)


def get_activity_repo(settings: Settings = Depends(get_settings)) -> SQLiteActivityRepo:
    return SQLiteActivityRepo(settings.db_path)


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_current_profile(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
) -> Profile:
    # 1. Cookie first (HttpOnly)
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        token = cookie_token.split(" ", 1)[1]

    # 2. Otherwise the Authorization header, via oauth2_scheme
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="ไม่พบ token การยืนยันตัวตน",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(token)
    if not payload or payload.get("type", "access") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token ไม่ถูกต้องหรือหมดอายุ",
            headers={"WWW-Authenticate": "Bearer"},
        )

    subject = payload.get("sub")
    try:
        profile_id = UUID(str(subject))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token ไม่ถูกต้องหรือหมดอายุ",
        ) from None

    profile = profile_repo.get_by_id(profile_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="ไม่พบผู้ใช้งาน",
        )

    return profile


def require_cron_secret(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """The backfill trigger authenticates with `Authorization: Bearer <CRON_SECRET>`."""
    expected = f"Bearer {settings.cron_secret}"
    provided = request.headers.get("authorization", "")
    if not secrets.compare_digest(provided.encode(), expected.encode()):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def get_file_store(settings: Settings = Depends(get_settings)) -> FileSystemStore:
    return FileSystemStore(base_path=str(settings.uploads_dir))


# Adapters needed for component injection
def get_auth_adapter() -> JWTAuthAdapter:
    return JWTAuthAdapter()


# Time adapter for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


_rate_limiter_instance: RateLimiter | None = None


def get_rate_limiter(rules: Rules = Depends(get_rules)) -> RateLimiter:
    """Get rate limiter singleton; its windows live for the process lifetime."""
    global _rate_limiter_instance
    if _rate_limiter_instance is None:
        _rate_limiter_instance = RateLimiter(rules.rate_limit)
    return _rate_limiter_instance


def client_ip(request: Request, trust_forwarded_for: bool = False) -> str:
    """Socket peer address; X-Forwarded-For only when the proxy is trusted."""
    forwarded = request.headers.get("x-forwarded-for") if trust_forwarded_for else None
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def enforce_auth_rate_limit(
    request: Request,
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> None:
    if not limiter.check_auth(client_ip(request, limiter.rules.trust_forwarded_for)):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=error_detail(RATE_LIMITED_MESSAGE, "rate_limited"),
        )
