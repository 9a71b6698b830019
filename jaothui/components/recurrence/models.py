"""
Recurrence component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from jaothui.domain.entities import ActivitySchedule

# --- Validation Error ---


@dataclass(frozen=True)
class RecurrenceValidationError:
    code: str
    message: str
    schedule_id: UUID | None = None


# --- Per-occurrence result ---


@dataclass(frozen=True)
class OccurrenceResult:
    """Outcome of creating one occurrence; error is set on failure."""

    source_schedule_id: UUID
    scheduled_date: datetime | None
    schedule_id: UUID | None = None
    title: str | None = None
    error: str | None = None

    @property
    def created(self) -> bool:
        return self.schedule_id is not None and self.error is None


# --- Input Models ---


@dataclass(frozen=True)
class NextOccurrenceInput:
    """Input for projecting a single step."""

    base_date: datetime
    unit: str


@dataclass(frozen=True)
class MaterializeInput:
    """Input for pre-creating future occurrences of a new recurring schedule."""

    base: ActivitySchedule


@dataclass(frozen=True)
class ProcessRecurringInput:
    """Input for the periodic backfill run (no parameters; time comes from TimePort)."""


# --- Output Models ---


@dataclass(frozen=True)
class NextOccurrenceOutput:
    next_date: datetime
    advanced: bool
    errors: list[RecurrenceValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class MaterializeOutput:
    """Output for pre-materialization."""

    created: tuple[ActivitySchedule, ...]
    results: tuple[OccurrenceResult, ...] = ()
    errors: list[RecurrenceValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ProcessRecurringOutput:
    """Aggregate summary of a backfill run."""

    processed: int
    created: int
    total: int
    results: tuple[OccurrenceResult, ...] = ()
    errors: list[RecurrenceValidationError] = field(default_factory=list)
    success: bool = True
