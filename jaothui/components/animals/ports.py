"""
Animals component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from jaothui.domain.entities import Animal, AnimalType


class DuplicateMicrochipError(Exception):
    """Raised by AnimalRepoPort.save when the microchip is already stored."""

    def __init__(self, microchip: str) -> None:
        super().__init__(f"Microchip already exists: {microchip}")
        self.microchip = microchip


class AnimalRepoPort(Protocol):
    """Repository interface for animals.

    Also satisfies the microchip component's UniquenessCheckPort.
    """

    def get_by_id(self, animal_id: UUID) -> Animal | None:
        ...

    def microchip_exists(self, microchip: str) -> bool:
        ...

    def save(self, animal: Animal) -> Animal:
        """Insert or update; raises DuplicateMicrochipError on a taken microchip."""
        ...


class AnimalTypeLookupPort(Protocol):
    def get_by_id(self, animal_type_id: UUID) -> AnimalType | None:
        ...


class FileStorePort(Protocol):
    def save(self, name: str, data: bytes) -> str:
        """Save bytes and return the path relative to the store root."""
        ...

    def delete(self, path: str) -> None:
        ...


class TimePort(Protocol):
    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
