from dataclasses import dataclass, field

from jaothui.domain.entities import Profile


@dataclass
class RegisterInput:
    phone_number: str
    password: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None


@dataclass
class LoginInput:
    phone_number: str
    password: str


@dataclass
class IssueTokenInput:
    profile: Profile


@dataclass
class VerifyTokenInput:
    token: str


@dataclass
class AuthOutput:
    profile: Profile | None = None
    token_raw: str | None = None
    success: bool = False
    error: str | None = None
    error_code: str | None = None
    details: list[str] = field(default_factory=list)
