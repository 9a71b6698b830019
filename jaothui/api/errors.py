"""Maps component error codes to HTTP responses."""

from typing import Any

from fastapi import HTTPException, status

STATUS_BY_CODE: dict[str, int] = {
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "invalid_farm_id": status.HTTP_400_BAD_REQUEST,
    "animal_type_not_found": status.HTTP_400_BAD_REQUEST,
    "not_an_image": status.HTTP_400_BAD_REQUEST,
    "dangerous_extension": status.HTTP_400_BAD_REQUEST,
    "empty_file": status.HTTP_400_BAD_REQUEST,
    "unsupported_type": status.HTTP_400_BAD_REQUEST,
    "type_mismatch": status.HTTP_400_BAD_REQUEST,
    "file_too_large": status.HTTP_400_BAD_REQUEST,
    "invalid_transition": status.HTTP_400_BAD_REQUEST,
    "invalid_credentials": status.HTTP_401_UNAUTHORIZED,
    "invalid_token": status.HTTP_401_UNAUTHORIZED,
    "farm_access_denied": status.HTTP_403_FORBIDDEN,
    "animal_not_found": status.HTTP_404_NOT_FOUND,
    "schedule_not_found": status.HTTP_404_NOT_FOUND,
    "phone_taken": status.HTTP_409_CONFLICT,
    "email_taken": status.HTTP_409_CONFLICT,
    "microchip_in_use": status.HTTP_409_CONFLICT,
    "duplicate_microchip": status.HTTP_409_CONFLICT,
    "farm_already_owned": status.HTTP_409_CONFLICT,
    "generation_exhausted": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_detail(message: str, code: str, details: list[Any] | None = None) -> dict[str, Any]:
    detail: dict[str, Any] = {"error": message, "code": code}
    if details:
        detail["details"] = details
    return detail


def raise_for_errors(errors: list[Any]) -> None:
    """Raise HTTPException for the first error; the rest go into `details`."""
    if not errors:
        return

    first = errors[0]
    status_code = STATUS_BY_CODE.get(first.code, status.HTTP_400_BAD_REQUEST)
    headers = {"Retry-After": "1"} if first.code == "generation_exhausted" else None
    details = [
        {"code": e.code, "message": e.message, "field": getattr(e, "field", None)}
        for e in errors
    ]
    raise HTTPException(
        status_code=status_code,
        detail=error_detail(first.message, first.code, details),
        headers=headers,
    )
