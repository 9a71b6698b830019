from typing import Literal

from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str

class MicrochipRules(BaseModel):
    prefix: str = "TH"
    max_attempts: int = Field(default=10, ge=1)
    on_exhausted: Literal["fail", "bypass"] = "fail"
    batch_max: int = Field(default=100, ge=1)

class RecurrenceRules(BaseModel):
    max_additional_occurrences: int = Field(default=5, ge=0)
    creation_horizon_months: int = Field(default=24, ge=1)
    backfill_horizon_months: int = Field(default=6, ge=1)
    backfill_due_window_days: int = Field(default=2, ge=0)
    dedupe_tolerance_hours: int = Field(default=24, ge=0)

class UploadsRules(BaseModel):
    max_bytes_by_mime: dict[str, int]
    default_max_bytes: int
    dangerous_extensions: list[str]
    max_filename_length: int = 255

class PasswordRules(BaseModel):
    min_length: int = 8
    require_uppercase: bool = True
    require_lowercase: bool = True
    require_numbers: bool = True
    require_special: bool = True

class CookieRules(BaseModel):
    secure: bool
    http_only: bool
    same_site: Literal["lax", "strict", "none"]

class AuthRules(BaseModel):
    access_token_ttl_minutes: int
    password: PasswordRules
    cookie: CookieRules

class RateLimitWindow(BaseModel):
    window_seconds: int = Field(ge=1)
    max_attempts: int = Field(ge=0)

class RateLimitRules(BaseModel):
    auth: RateLimitWindow
    upload: RateLimitWindow
    # Only enable behind a proxy that overwrites X-Forwarded-For.
    trust_forwarded_for: bool = False
    sweep_interval_seconds: int = Field(default=300, ge=1)

class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)

class Rules(BaseModel):
    project: ProjectRules
    microchip: MicrochipRules
    recurrence: RecurrenceRules
    uploads: UploadsRules
    auth: AuthRules
    rate_limit: RateLimitRules
    ops: OpsRules = Field(default_factory=OpsRules)
