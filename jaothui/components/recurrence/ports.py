"""
Recurrence component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from jaothui.domain.entities import ActivitySchedule


class OccurrenceRepoPort(Protocol):
    """Repository interface for schedule occurrences."""

    def save(self, schedule: ActivitySchedule) -> ActivitySchedule:
        """Insert or update a schedule."""
        ...

    def list_recurring_due(
        self,
        due_before: datetime,
        statuses: tuple[str, ...],
    ) -> list[ActivitySchedule]:
        """List recurring schedules with a unit, a matching status and
        scheduled_date <= due_before."""
        ...

    def find_near(
        self,
        animal_id: UUID,
        title: str,
        start: datetime,
        end: datetime,
    ) -> ActivitySchedule | None:
        """Find a schedule for the animal and title within [start, end]."""
        ...


class OwnerLookupPort(Protocol):
    """Resolves the farm owner responsible for an animal."""

    def get_owner_id_for_animal(self, animal_id: UUID) -> UUID | None:
        ...


class TimePort(Protocol):
    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


class RulesPort(Protocol):
    """Port for recurrence rules configuration."""

    def get_max_additional_occurrences(self) -> int:
        ...

    def get_creation_horizon_months(self) -> int:
        ...

    def get_backfill_horizon_months(self) -> int:
        ...

    def get_backfill_due_window_days(self) -> int:
        ...

    def get_dedupe_tolerance_hours(self) -> int:
        ...
