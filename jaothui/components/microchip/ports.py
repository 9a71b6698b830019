"""
Microchip component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class UniquenessCheckPort(Protocol):
    """Answers whether an animal already carries the given microchip."""

    def microchip_exists(self, microchip: str) -> bool:
        """Return True if the microchip is assigned to a persisted animal."""
        ...


class TimePort(Protocol):
    """Time source for the timestamp segment."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


class RulesPort(Protocol):
    """Port for microchip rules configuration."""

    def get_prefix(self) -> str:
        ...

    def get_max_attempts(self) -> int:
        """Get the number of candidates drawn before giving up."""
        ...

    def get_on_exhausted(self) -> str:
        """Get the exhaustion policy: "fail" or "bypass"."""
        ...

    def get_batch_max(self) -> int:
        ...
