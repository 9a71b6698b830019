import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status

from jaothui.adapters.auth.crypto import JWTAuthAdapter
from jaothui.adapters.clock import SystemClock
from jaothui.adapters.sqlite.repos import SQLiteProfileRepo
from jaothui.api.deps import (
    PasswordPolicyAdapter,
    enforce_auth_rate_limit,
    get_auth_adapter,
    get_clock,
    get_current_profile,
    get_password_policy,
    get_profile_repo,
    get_rules,
)
from jaothui.api.errors import STATUS_BY_CODE, error_detail
from jaothui.api.schemas import LoginRequest, ProfileResponse, RegisterRequest, TokenResponse
from jaothui.components.auth import (
    AuthOutput,
    IssueTokenInput,
    LoginInput,
    RegisterInput,
    run_issue_token,
    run_login,
    run_register,
)
from jaothui.domain.entities import Profile
from jaothui.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()


def _raise_auth_error(result: AuthOutput) -> None:
    code = result.error_code or "validation_error"
    raise HTTPException(
        status_code=STATUS_BY_CODE.get(code, status.HTTP_400_BAD_REQUEST),
        detail=error_detail(result.error or "", code, list(result.details)),
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_auth_rate_limit)],
)
def register(
    data: RegisterRequest,
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    clock: SystemClock = Depends(get_clock),
    password_policy: PasswordPolicyAdapter = Depends(get_password_policy),
) -> dict[str, Any]:
    """Register a profile with a Thai mobile number."""
    result = run_register(
        RegisterInput(
            phone_number=data.phone_number,
            password=data.password,
            email=data.email,
            first_name=data.first_name,
            last_name=data.last_name,
        ),
        profile_repo,
        auth_adapter,
        clock,
        password_policy,
    )
    if not result.success or result.profile is None:
        _raise_auth_error(result)
    assert result.profile is not None

    logger.info("Registered profile %s", result.profile.id)
    return {
        "message": "สมัครสมาชิกสำเร็จ",
        "profile": ProfileResponse.from_entity(result.profile).model_dump(mode="json"),
    }


@router.post(
    "/login",
    response_model=TokenResponse,
    dependencies=[Depends(enforce_auth_rate_limit)],
)
def login(
    data: LoginRequest,
    response: Response,
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    rules: Rules = Depends(get_rules),
) -> TokenResponse:
    """Authenticate by phone number and set the access cookie."""
    result = run_login(LoginInput(data.phone_number, data.password), profile_repo, auth_adapter)
    if not result.success or result.profile is None:
        _raise_auth_error(result)
    assert result.profile is not None

    ttl_minutes = rules.auth.access_token_ttl_minutes
    issued = run_issue_token(IssueTokenInput(result.profile), auth_adapter, ttl_minutes)
    assert issued.token_raw is not None

    cookie = rules.auth.cookie
    response.set_cookie(
        key="access_token",
        value=f"Bearer {issued.token_raw}",
        httponly=cookie.http_only,
        max_age=ttl_minutes * 60,
        expires=ttl_minutes * 60,
        samesite=cookie.same_site,
        secure=cookie.secure,
    )

    return TokenResponse(
        access_token=issued.token_raw,
        profile=ProfileResponse.from_entity(result.profile),
    )


@router.post("/logout")
def logout(response: Response) -> dict[str, str]:
    """Log out by clearing the cookie."""
    response.delete_cookie(key="access_token")
    return {"message": "ออกจากระบบสำเร็จ"}


@router.get("/me", response_model=ProfileResponse)
def read_me(
    current_profile: Profile = Depends(get_current_profile),
) -> ProfileResponse:
    """Get the current profile."""
    return ProfileResponse.from_entity(current_profile)
