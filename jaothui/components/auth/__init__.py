"""
Auth component - registration, phone-number login and access tokens.
"""

from .component import (
    PasswordPolicy,
    is_valid_email,
    normalize_phone_number,
    run,
    run_issue_token,
    run_login,
    run_register,
    run_verify_token,
    validate_password,
)
from .models import (
    AuthOutput,
    IssueTokenInput,
    LoginInput,
    RegisterInput,
    VerifyTokenInput,
)
from .ports import AuthAdapterPort, PasswordPolicyPort, ProfileRepoPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_issue_token",
    "run_login",
    "run_register",
    "run_verify_token",
    # Models
    "AuthOutput",
    "IssueTokenInput",
    "LoginInput",
    "RegisterInput",
    "VerifyTokenInput",
    # Ports
    "AuthAdapterPort",
    "PasswordPolicyPort",
    "ProfileRepoPort",
    "TimePort",
    # Validation
    "PasswordPolicy",
    "is_valid_email",
    "normalize_phone_number",
    "validate_password",
]
