"""
Uploads component - image upload validation.

Invariants:
- The declared content type must be an image/* type
- The stored bytes must carry a known image signature matching the declared type
- Filenames never carry path separators, control characters or a
  dangerous extension
- Stored names are generated, never taken from the client
"""

from __future__ import annotations

import random
import re
import string
from dataclasses import dataclass, field
from datetime import UTC, datetime

from .models import (
    UploadOutput,
    UploadValidationError,
    ValidatedUpload,
    ValidateUploadInput,
)
from .ports import RulesPort, TimePort

MB = 1024 * 1024

JPEG_MARKERS = (0xDB, 0xE0, 0xE1, 0xE2, 0xE3, 0xE8, 0xEE)

# Each signature is a list of (offset, bytes) parts; webp is "RIFF" then "WEBP" at 8.
IMAGE_SIGNATURES: dict[str, list[list[tuple[int, bytes]]]] = {
    "image/jpeg": [[(0, b"\xff\xd8\xff" + bytes([marker]))] for marker in JPEG_MARKERS],
    "image/png": [[(0, b"\x89PNG\r\n\x1a\n")]],
    "image/gif": [[(0, b"GIF87a")], [(0, b"GIF89a")]],
    "image/webp": [[(0, b"RIFF"), (8, b"WEBP")]],
    "image/bmp": [[(0, b"BM")]],
}

MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
}

DEFAULT_DANGEROUS_EXTENSIONS = (
    ".exe", ".scr", ".bat", ".cmd", ".com", ".pif", ".vbs", ".js", ".jar",
    ".php", ".asp", ".aspx", ".jsp", ".py", ".pl", ".rb", ".sh", ".ps1",
    ".html", ".htm", ".svg", ".xml", ".xhtml",
)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x80-\x9f]")
_PATH_SEPARATORS = re.compile(r"[/\\]")
_RANDOM_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(frozen=True)
class UploadConfig:
    """Upload limits from rules."""

    max_bytes_by_mime: dict[str, int] = field(
        default_factory=lambda: {
            "image/jpeg": 10 * MB,
            "image/png": 10 * MB,
            "image/webp": 10 * MB,
            "image/gif": 5 * MB,
            "image/bmp": 5 * MB,
        }
    )
    default_max_bytes: int = 5 * MB
    dangerous_extensions: tuple[str, ...] = DEFAULT_DANGEROUS_EXTENSIONS
    max_filename_length: int = 255


def _build_config(rules: RulesPort | None) -> UploadConfig:
    if rules is None:
        return UploadConfig()

    return UploadConfig(
        max_bytes_by_mime=dict(rules.get_max_bytes_by_mime()),
        default_max_bytes=rules.get_default_max_bytes(),
        dangerous_extensions=tuple(e.lower() for e in rules.get_dangerous_extensions()),
        max_filename_length=rules.get_max_filename_length(),
    )


# --- Detection ---


def detect_image_type(data: bytes) -> str | None:
    """Return the image MIME type whose signature `data` starts with."""
    for mime_type, signatures in IMAGE_SIGNATURES.items():
        for parts in signatures:
            if all(data[offset : offset + len(sig)] == sig for offset, sig in parts):
                return mime_type
    return None


def max_size_for(mime_type: str, config: UploadConfig) -> int:
    return config.max_bytes_by_mime.get(mime_type, config.default_max_bytes)


# --- Filenames ---


def sanitize_filename(
    filename: str,
    config: UploadConfig,
    now: datetime | None = None,
) -> tuple[str | None, list[UploadValidationError]]:
    """
    Strip separators and control characters; reject dangerous extensions.

    An empty result becomes upload_<epoch-ms>.jpg. Long names are cut to
    max_filename_length, keeping the extension.
    """
    sanitized = _PATH_SEPARATORS.sub("", filename)
    sanitized = _CONTROL_CHARS.sub("", sanitized)

    lowered = sanitized.lower()
    for ext in config.dangerous_extensions:
        if lowered.endswith(ext):
            return None, [
                UploadValidationError(
                    code="dangerous_extension",
                    message=f"นามสกุลไฟล์ {ext} ไม่ได้รับอนุญาต",
                    field="filename",
                )
            ]

    if not sanitized.strip():
        now = now or datetime.now(UTC)
        sanitized = f"upload_{_epoch_ms(now)}.jpg"

    limit = config.max_filename_length
    if len(sanitized) > limit:
        dot = sanitized.rfind(".")
        ext = sanitized[dot:] if dot > 0 and len(sanitized) - dot < limit else ""
        sanitized = sanitized[: limit - len(ext)] + ext

    return sanitized, []


def _epoch_ms(now: datetime) -> int:
    return int(now.timestamp()) * 1000 + now.microsecond // 1000


def generate_storage_name(
    mime_type: str,
    user_id: str | None,
    now: datetime,
    rng: random.Random,
) -> str:
    """<user-prefix>_<epoch-ms>_<random6><ext>; the extension follows the detected type."""
    prefix = user_id[:8] if user_id else "user"
    suffix = "".join(rng.choice(_RANDOM_ALPHABET) for _ in range(6))
    extension = MIME_EXTENSIONS.get(mime_type, ".jpg")
    return f"{prefix}_{_epoch_ms(now)}_{suffix}{extension}"


# --- Component Entry Points ---


def run_validate_upload(
    inp: ValidateUploadInput,
    *,
    time_port: TimePort | None = None,
    rules: RulesPort | None = None,
    rng: random.Random | None = None,
) -> UploadOutput:
    """
    Validate an uploaded image and assign its storage name.

    Checks, in order: declared type, filename, emptiness, signature,
    declared/detected match, size limit for the detected type.
    """
    config = _build_config(rules)
    now = time_port.now_utc() if time_port is not None else datetime.now(UTC)

    if not inp.content_type.startswith("image/"):
        return _fail("not_an_image", "กรุณาอัปโหลดไฟล์รูปภาพเท่านั้น", "content_type")

    sanitized, errors = sanitize_filename(inp.filename, config, now)
    if sanitized is None:
        return UploadOutput(errors=errors, success=False)

    size = len(inp.data)
    if size == 0:
        return _fail("empty_file", "ไฟล์ว่างเปล่า กรุณาเลือกไฟล์ที่ถูกต้อง", "file")

    detected = detect_image_type(inp.data)
    if detected is None:
        return _fail(
            "unsupported_type",
            "ประเภทไฟล์ไม่ได้รับอนุญาต กรุณาอัปโหลดไฟล์รูปภาพเท่านั้น",
            "file",
        )

    if detected != inp.content_type:
        return _fail("type_mismatch", "ประเภทไฟล์ไม่ตรงกับเนื้อหาภายในไฟล์", "content_type")

    max_size = max_size_for(detected, config)
    if size > max_size:
        return _fail(
            "file_too_large",
            f"ขนาดไฟล์เกิน {round(max_size / MB)}MB กรุณาเลือกไฟล์ที่มีขนาดเล็กกว่า",
            "file",
        )

    storage_name = generate_storage_name(
        detected, inp.user_id, now, rng if rng is not None else random.SystemRandom()
    )
    return UploadOutput(
        upload=ValidatedUpload(
            sanitized_filename=sanitized,
            storage_name=storage_name,
            mime_type=detected,
            size_bytes=size,
        )
    )


def _fail(code: str, message: str, field_name: str) -> UploadOutput:
    return UploadOutput(
        errors=[UploadValidationError(code=code, message=message, field=field_name)],
        success=False,
    )


def run(
    inp: ValidateUploadInput,
    *,
    time_port: TimePort | None = None,
    rules: RulesPort | None = None,
    rng: random.Random | None = None,
) -> UploadOutput:
    """Main entry point for the uploads component."""
    if isinstance(inp, ValidateUploadInput):
        return run_validate_upload(inp, time_port=time_port, rules=rules, rng=rng)
    raise ValueError(f"Unknown input type: {type(inp)}")
