"""
Uploads component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UploadValidationError:
    """Upload validation error."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class ValidateUploadInput:
    """Input for validating an uploaded image."""

    filename: str
    content_type: str
    data: bytes
    user_id: str | None = None


@dataclass(frozen=True)
class ValidatedUpload:
    """An upload that passed every check, ready to store."""

    sanitized_filename: str
    storage_name: str
    mime_type: str
    size_bytes: int


@dataclass(frozen=True)
class UploadOutput:
    upload: ValidatedUpload | None = None
    errors: list[UploadValidationError] = field(default_factory=list)
    success: bool = True
