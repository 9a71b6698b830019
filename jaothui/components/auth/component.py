import re
from dataclasses import dataclass
from uuid import UUID

from jaothui.domain.entities import Profile

from .models import AuthOutput, IssueTokenInput, LoginInput, RegisterInput, VerifyTokenInput
from .ports import AuthAdapterPort, PasswordPolicyPort, ProfileRepoPort, TimePort

THAI_MOBILE_RE = re.compile(r"^0?[689]\d{8}$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SPECIAL_CHARS_RE = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")
_PHONE_NOISE_RE = re.compile(r"[\s\-()]")

INVALID_CREDENTIALS = "ไม่พบบัญชีผู้ใช้ หรือรหัสผ่านไม่ถูกต้อง"


@dataclass(frozen=True)
class PasswordPolicy:
    min_length: int = 8
    require_uppercase: bool = True
    require_lowercase: bool = True
    require_numbers: bool = True
    require_special: bool = True


def _build_policy(port: PasswordPolicyPort | None) -> PasswordPolicy:
    if port is None:
        return PasswordPolicy()
    return PasswordPolicy(
        min_length=port.get_min_length(),
        require_uppercase=port.get_require_uppercase(),
        require_lowercase=port.get_require_lowercase(),
        require_numbers=port.get_require_numbers(),
        require_special=port.get_require_special(),
    )


def normalize_phone_number(raw: str) -> str | None:
    """
    Canonical 10-digit Thai mobile number, or None if invalid.

    Spaces, dashes and parentheses are ignored; a 9-digit number gets a
    leading zero.
    """
    sanitized = _PHONE_NOISE_RE.sub("", raw)
    if not THAI_MOBILE_RE.match(sanitized):
        return None
    if len(sanitized) == 9:
        return "0" + sanitized
    return sanitized


def validate_password(password: str, policy: PasswordPolicy = PasswordPolicy()) -> list[str]:
    errors: list[str] = []
    if len(password) < policy.min_length:
        errors.append(f"รหัสผ่านต้องมีอย่างน้อย {policy.min_length} ตัวอักษร")
    if policy.require_uppercase and not re.search(r"[A-Z]", password):
        errors.append("รหัสผ่านต้องมีตัวอักษรพิมพ์ใหญ่อย่างน้อย 1 ตัว")
    if policy.require_lowercase and not re.search(r"[a-z]", password):
        errors.append("รหัสผ่านต้องมีตัวอักษรพิมพ์เล็กอย่างน้อย 1 ตัว")
    if policy.require_numbers and not re.search(r"\d", password):
        errors.append("รหัสผ่านต้องมีตัวเลขอย่างน้อย 1 ตัว")
    if policy.require_special and not SPECIAL_CHARS_RE.search(password):
        errors.append("รหัสผ่านต้องมีอักขระพิเศษอย่างน้อย 1 ตัว (!@#$%^&* ฯลฯ)")
    return errors


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def run_register(
    inp: RegisterInput,
    profile_repo: ProfileRepoPort,
    auth_adapter: AuthAdapterPort,
    time: TimePort,
    password_policy: PasswordPolicyPort | None = None,
) -> AuthOutput:
    if not inp.phone_number or not inp.password:
        return AuthOutput(
            error="เบอร์โทรศัพท์และรหัสผ่านจำเป็นต้องกรอก", error_code="validation_error"
        )

    phone = normalize_phone_number(inp.phone_number)
    if phone is None:
        return AuthOutput(
            error="รูปแบบเบอร์โทรศัพท์ไม่ถูกต้อง (ต้องเป็นเบอร์มือถือไทย 10 หลัก)",
            error_code="validation_error",
        )

    password_errors = validate_password(inp.password, _build_policy(password_policy))
    if password_errors:
        return AuthOutput(
            error="รหัสผ่านไม่ตรงตามเงื่อนไข",
            error_code="validation_error",
            details=password_errors,
        )

    email = inp.email.strip().lower() if inp.email else None
    if email is not None and not is_valid_email(email):
        return AuthOutput(error="รูปแบบอีเมลไม่ถูกต้อง", error_code="validation_error")

    if profile_repo.get_by_phone(phone):
        return AuthOutput(error="เบอร์โทรศัพท์นี้ถูกใช้แล้ว", error_code="phone_taken")

    if email is not None and profile_repo.get_by_email(email):
        return AuthOutput(error="อีเมลนี้ถูกใช้แล้ว", error_code="email_taken")

    now = time.now_utc()
    profile = Profile(
        phone_number=phone,
        email=email,
        first_name=inp.first_name or None,
        last_name=inp.last_name or None,
        password_hash=auth_adapter.hash_password(inp.password),
        created_at=now,
        updated_at=now,
    )
    profile_repo.save(profile)
    return AuthOutput(profile=profile, success=True)


def run_login(
    inp: LoginInput, profile_repo: ProfileRepoPort, auth_adapter: AuthAdapterPort
) -> AuthOutput:
    if not inp.phone_number or not inp.password:
        return AuthOutput(
            error="เบอร์โทรศัพท์และรหัสผ่านจำเป็นต้องกรอก", error_code="validation_error"
        )

    phone = normalize_phone_number(inp.phone_number)
    if phone is None:
        return AuthOutput(
            error="รูปแบบเบอร์โทรศัพท์ไม่ถูกต้อง (ต้องเป็นเบอร์มือถือไทย 10 หลัก)",
            error_code="validation_error",
        )

    profile = profile_repo.get_by_phone(phone)
    if not profile:
        return AuthOutput(error=INVALID_CREDENTIALS, error_code="invalid_credentials")

    if not auth_adapter.verify_password(inp.password, profile.password_hash):
        return AuthOutput(error=INVALID_CREDENTIALS, error_code="invalid_credentials")

    return AuthOutput(profile=profile, success=True)


def run_issue_token(
    inp: IssueTokenInput, auth_adapter: AuthAdapterPort, ttl_minutes: int = 24 * 60
) -> AuthOutput:
    claims = {"phone_number": inp.profile.phone_number, "type": "access"}
    if inp.profile.email:
        claims["email"] = inp.profile.email
    token = auth_adapter.create_token(inp.profile.id, ttl_minutes, claims)
    return AuthOutput(profile=inp.profile, token_raw=token, success=True)


def run_verify_token(
    inp: VerifyTokenInput, profile_repo: ProfileRepoPort, auth_adapter: AuthAdapterPort
) -> AuthOutput:
    payload = auth_adapter.decode_token(inp.token)
    if not payload:
        return AuthOutput(error="Invalid token", error_code="invalid_token")

    if payload.get("type", "access") != "access":
        return AuthOutput(error="Invalid token type", error_code="invalid_token")

    subject = payload.get("sub")
    try:
        profile_id = UUID(str(subject))
    except (ValueError, TypeError):
        return AuthOutput(error="Invalid token payload", error_code="invalid_token")

    profile = profile_repo.get_by_id(profile_id)
    if not profile:
        return AuthOutput(error="User not found", error_code="invalid_token")

    return AuthOutput(profile=profile, token_raw=inp.token, success=True)


def run(
    inp: RegisterInput | LoginInput | IssueTokenInput | VerifyTokenInput,
    *,
    profile_repo: ProfileRepoPort | None = None,
    auth_adapter: AuthAdapterPort | None = None,
    time: TimePort | None = None,
    password_policy: PasswordPolicyPort | None = None,
    ttl_minutes: int = 24 * 60,
) -> AuthOutput:
    if isinstance(inp, RegisterInput):
        assert profile_repo and auth_adapter and time
        return run_register(inp, profile_repo, auth_adapter, time, password_policy)

    elif isinstance(inp, LoginInput):
        assert profile_repo and auth_adapter
        return run_login(inp, profile_repo, auth_adapter)

    elif isinstance(inp, IssueTokenInput):
        assert auth_adapter
        return run_issue_token(inp, auth_adapter, ttl_minutes)

    elif isinstance(inp, VerifyTokenInput):
        assert profile_repo and auth_adapter
        return run_verify_token(inp, profile_repo, auth_adapter)

    raise ValueError(f"Unknown input type: {type(inp)}")
