"""
Animals component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from jaothui.domain.entities import Animal

# --- Validation Error ---


@dataclass(frozen=True)
class AnimalValidationError:
    """Animal operation error."""

    code: str
    message: str
    field: str | None = None
    retryable: bool = False


# --- Input Models ---


@dataclass(frozen=True)
class RegisterAnimalInput:
    """Input for registering an animal on a farm.

    A missing microchip is generated; a supplied one must be unused.
    """

    actor_id: UUID
    farm_id: UUID
    animal_type_id: UUID
    name: str
    microchip: str | None = None
    birth_date: date | None = None
    weight: float | None = None
    height: float | None = None
    color: str | None = None
    father_name: str | None = None
    mother_name: str | None = None


@dataclass(frozen=True)
class GenerateFarmMicrochipInput:
    """Input for issuing a short-format microchip for a farm."""

    actor_id: UUID
    farm_id: UUID


@dataclass(frozen=True)
class AttachPhotoInput:
    animal_id: UUID
    actor_id: UUID
    filename: str
    content_type: str
    data: bytes


# --- Output Models ---


@dataclass(frozen=True)
class AnimalOutput:
    """Output for register and photo operations."""

    animal: Animal | None
    errors: list[AnimalValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class FarmMicrochipOutput:
    microchip: str | None
    errors: list[AnimalValidationError] = field(default_factory=list)
    success: bool = True
