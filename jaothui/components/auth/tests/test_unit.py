"""
Auth component unit tests.

Tests for registration, phone-number login and access tokens.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

import pytest

from jaothui.components.auth import (
    IssueTokenInput,
    LoginInput,
    PasswordPolicy,
    RegisterInput,
    VerifyTokenInput,
    normalize_phone_number,
    run,
    run_issue_token,
    run_login,
    run_register,
    run_verify_token,
    validate_password,
)
from jaothui.domain.entities import Profile

GOOD_PASSWORD = "Buffalo#2024"

# --- Mock Implementations ---


class MockProfileRepo:
    """In-memory profile repository for testing."""

    def __init__(self) -> None:
        self._profiles: dict[UUID, Profile] = {}

    def get_by_phone(self, phone_number: str) -> Profile | None:
        return next((p for p in self._profiles.values() if p.phone_number == phone_number), None)

    def get_by_email(self, email: str) -> Profile | None:
        return next((p for p in self._profiles.values() if p.email == email), None)

    def get_by_id(self, profile_id: UUID) -> Profile | None:
        return self._profiles.get(profile_id)

    def save(self, profile: Profile) -> Profile:
        self._profiles[profile.id] = profile
        return profile


class MockAuthAdapter:
    """Mock auth adapter for testing."""

    def __init__(self) -> None:
        self._tokens: dict[str, dict[str, Any]] = {}

    def verify_password(self, plain: str, hashed: str) -> bool:
        return hashed == f"hashed_{plain}"

    def hash_password(self, plain: str) -> str:
        return f"hashed_{plain}"

    def create_token(
        self, profile_id: object, ttl_minutes: int, claims: dict[str, Any] | None = None
    ) -> str:
        token = f"token_{profile_id}_{ttl_minutes}"
        self._tokens[token] = {"sub": str(profile_id), **(claims or {})}
        return token

    def decode_token(self, token: str) -> dict[str, Any] | None:
        return self._tokens.get(token)


class MockTimePort:
    def __init__(self, fixed_time: datetime | None = None) -> None:
        self._time = fixed_time or datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)

    def now_utc(self) -> datetime:
        return self._time


# --- Fixtures ---


@pytest.fixture
def profile_repo() -> MockProfileRepo:
    return MockProfileRepo()


@pytest.fixture
def auth_adapter() -> MockAuthAdapter:
    return MockAuthAdapter()


@pytest.fixture
def time_port() -> MockTimePort:
    return MockTimePort()


@pytest.fixture
def registered(profile_repo, auth_adapter, time_port) -> Profile:
    out = run_register(
        RegisterInput(phone_number="081-234-5678", password=GOOD_PASSWORD, email="Som@Farm.th"),
        profile_repo,
        auth_adapter,
        time_port,
    )
    assert out.profile is not None
    return out.profile


# --- Validation helpers ---


class TestPhoneNumber:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("0812345678", "0812345678"),
            ("081-234-5678", "0812345678"),
            ("(081) 234 5678", "0812345678"),
            ("812345678", "0812345678"),
            ("0612345678", "0612345678"),
            ("0912345678", "0912345678"),
        ],
    )
    def test_valid(self, raw: str, expected: str) -> None:
        assert normalize_phone_number(raw) == expected

    @pytest.mark.parametrize("raw", ["0212345678", "08123456", "08123456789", "+66812345678", ""])
    def test_invalid(self, raw: str) -> None:
        assert normalize_phone_number(raw) is None


class TestPasswordComplexity:
    def test_good_password(self) -> None:
        assert validate_password(GOOD_PASSWORD) == []

    def test_every_rule_reported(self) -> None:
        errors = validate_password("abc")

        # short, no uppercase, no digit, no special
        assert len(errors) == 4

    def test_policy_relaxed(self) -> None:
        policy = PasswordPolicy(min_length=4, require_special=False, require_uppercase=False)

        assert validate_password("abc1", policy) == []


# --- Register ---


class TestRegister:
    def test_creates_profile(self, registered: Profile) -> None:
        assert registered.phone_number == "0812345678"
        assert registered.email == "som@farm.th"
        assert registered.password_hash == f"hashed_{GOOD_PASSWORD}"
        assert registered.created_at == datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)

    def test_duplicate_phone(self, registered, profile_repo, auth_adapter, time_port) -> None:
        out = run_register(
            RegisterInput(phone_number="812345678", password=GOOD_PASSWORD),
            profile_repo,
            auth_adapter,
            time_port,
        )

        assert not out.success
        assert out.error_code == "phone_taken"

    def test_duplicate_email(self, registered, profile_repo, auth_adapter, time_port) -> None:
        out = run_register(
            RegisterInput(
                phone_number="0899999999", password=GOOD_PASSWORD, email="som@farm.th"
            ),
            profile_repo,
            auth_adapter,
            time_port,
        )

        assert out.error_code == "email_taken"

    def test_weak_password_details(self, profile_repo, auth_adapter, time_port) -> None:
        out = run_register(
            RegisterInput(phone_number="0812345678", password="password"),
            profile_repo,
            auth_adapter,
            time_port,
        )

        assert out.error_code == "validation_error"
        assert len(out.details) == 3

    def test_invalid_email(self, profile_repo, auth_adapter, time_port) -> None:
        out = run_register(
            RegisterInput(phone_number="0812345678", password=GOOD_PASSWORD, email="not-mail"),
            profile_repo,
            auth_adapter,
            time_port,
        )

        assert out.error_code == "validation_error"

    def test_invalid_phone(self, profile_repo, auth_adapter, time_port) -> None:
        out = run_register(
            RegisterInput(phone_number="021234567", password=GOOD_PASSWORD),
            profile_repo,
            auth_adapter,
            time_port,
        )

        assert out.error_code == "validation_error"


# --- Login / tokens ---


class TestLogin:
    def test_success_with_formatted_number(self, registered, profile_repo, auth_adapter) -> None:
        out = run_login(LoginInput("(081) 234-5678", GOOD_PASSWORD), profile_repo, auth_adapter)

        assert out.success
        assert out.profile == registered

    def test_wrong_password(self, registered, profile_repo, auth_adapter) -> None:
        out = run_login(LoginInput("0812345678", "Wrong#Pass1"), profile_repo, auth_adapter)

        assert not out.success
        assert out.error_code == "invalid_credentials"

    def test_unknown_number_same_error(self, profile_repo, auth_adapter) -> None:
        out = run_login(LoginInput("0899999999", GOOD_PASSWORD), profile_repo, auth_adapter)

        assert out.error_code == "invalid_credentials"


class TestTokens:
    def test_issue_and_verify(self, registered, profile_repo, auth_adapter) -> None:
        issued = run_issue_token(IssueTokenInput(registered), auth_adapter)
        assert issued.token_raw is not None

        verified = run_verify_token(VerifyTokenInput(issued.token_raw), profile_repo, auth_adapter)

        assert verified.success
        assert verified.profile == registered

    def test_claims(self, registered, auth_adapter) -> None:
        issued = run_issue_token(IssueTokenInput(registered), auth_adapter, ttl_minutes=60)

        payload = auth_adapter.decode_token(issued.token_raw or "")
        assert payload is not None
        assert payload["type"] == "access"
        assert payload["phone_number"] == "0812345678"
        assert payload["email"] == "som@farm.th"

    def test_unknown_token(self, profile_repo, auth_adapter) -> None:
        out = run_verify_token(VerifyTokenInput("garbage"), profile_repo, auth_adapter)

        assert out.error_code == "invalid_token"

    def test_refresh_token_rejected(self, profile_repo, auth_adapter) -> None:
        token = auth_adapter.create_token(uuid4(), 60, {"type": "refresh"})

        out = run_verify_token(VerifyTokenInput(token), profile_repo, auth_adapter)

        assert out.error_code == "invalid_token"

    def test_deleted_profile(self, profile_repo, auth_adapter) -> None:
        token = auth_adapter.create_token(uuid4(), 60, {"type": "access"})

        out = run_verify_token(VerifyTokenInput(token), profile_repo, auth_adapter)

        assert not out.success


class TestDispatcher:
    def test_login_via_run(self, registered, profile_repo, auth_adapter) -> None:
        out = run(
            LoginInput("0812345678", GOOD_PASSWORD),
            profile_repo=profile_repo,
            auth_adapter=auth_adapter,
        )

        assert out.success
