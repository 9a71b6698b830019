"""
Uploads component - image upload validation.
"""

from .component import (
    IMAGE_SIGNATURES,
    MIME_EXTENSIONS,
    UploadConfig,
    detect_image_type,
    generate_storage_name,
    max_size_for,
    run,
    run_validate_upload,
    sanitize_filename,
)
from .models import (
    UploadOutput,
    UploadValidationError,
    ValidatedUpload,
    ValidateUploadInput,
)
from .ports import RulesPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_validate_upload",
    # Models
    "UploadOutput",
    "UploadValidationError",
    "ValidatedUpload",
    "ValidateUploadInput",
    # Ports
    "RulesPort",
    "TimePort",
    # Helpers
    "IMAGE_SIGNATURES",
    "MIME_EXTENSIONS",
    "UploadConfig",
    "detect_image_type",
    "generate_storage_name",
    "max_size_for",
    "sanitize_filename",
]
