"""
Schedules component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from jaothui.components.recurrence import OccurrenceResult
from jaothui.domain.entities import Activity, ActivitySchedule

# --- Validation Error ---


@dataclass(frozen=True)
class ScheduleValidationError:
    """Schedule operation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class CreateScheduleInput:
    """Input for creating a schedule (and its recurring occurrences)."""

    animal_id: UUID
    actor_id: UUID
    title: str
    scheduled_date: datetime
    description: str | None = None
    notes: str | None = None
    status: str = "PENDING"
    is_recurring: bool = False
    recurrence_type: str | None = None


@dataclass(frozen=True)
class UpdateStatusInput:
    schedule_id: UUID
    actor_id: UUID
    status: str


@dataclass(frozen=True)
class ListAnimalHistoryInput:
    """Schedules and recorded activities of one animal."""

    animal_id: UUID
    actor_id: UUID


@dataclass(frozen=True)
class ConvertToActivityInput:
    """Input for converting a schedule into a completed activity."""

    schedule_id: UUID
    actor_id: UUID
    notes: str | None = None
    activity_date: datetime | None = None


# --- Output Models ---


@dataclass(frozen=True)
class ScheduleOutput:
    """Output for create and status operations."""

    schedule: ActivitySchedule | None
    additional_occurrences: int = 0
    occurrence_results: tuple[OccurrenceResult, ...] = ()
    errors: list[ScheduleValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ActivityOutput:
    """Output for convert-to-activity."""

    activity: Activity | None
    schedule: ActivitySchedule | None = None
    errors: list[ScheduleValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class AnimalHistoryOutput:
    schedules: tuple[ActivitySchedule, ...] = ()
    activities: tuple[Activity, ...] = ()
    errors: list[ScheduleValidationError] = field(default_factory=list)
    success: bool = True
