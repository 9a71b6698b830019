"""
Farms component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from jaothui.domain.entities import Animal, Farm


@dataclass(frozen=True)
class FarmValidationError:
    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class CreateFarmInput:
    actor_id: UUID
    name: str
    province: str


@dataclass(frozen=True)
class ListFarmsInput:
    actor_id: UUID


@dataclass(frozen=True)
class ListFarmAnimalsInput:
    actor_id: UUID
    farm_id: UUID


# --- Output Models ---


@dataclass(frozen=True)
class FarmSummary:
    farm: Farm
    is_owner: bool


@dataclass(frozen=True)
class FarmOutput:
    farm: Farm | None
    errors: list[FarmValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class FarmListOutput:
    farms: tuple[FarmSummary, ...] = ()
    success: bool = True


@dataclass(frozen=True)
class FarmAnimalsOutput:
    farm: Farm | None = None
    animals: tuple[Animal, ...] = ()
    errors: list[FarmValidationError] = field(default_factory=list)
    success: bool = True
