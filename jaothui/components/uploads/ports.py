"""
Uploads component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class TimePort(Protocol):
    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


class RulesPort(Protocol):
    """Port for upload rules configuration."""

    def get_max_bytes_by_mime(self) -> dict[str, int]:
        ...

    def get_default_max_bytes(self) -> int:
        ...

    def get_dangerous_extensions(self) -> list[str]:
        ...

    def get_max_filename_length(self) -> int:
        ...
