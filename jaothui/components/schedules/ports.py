"""
Schedules component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from jaothui.domain.entities import Activity, ActivitySchedule, Animal


class ScheduleRepoPort(Protocol):
    """Repository interface for activity schedules.

    Also satisfies the recurrence component's OccurrenceRepoPort.
    """

    def get_by_id(self, schedule_id: UUID) -> ActivitySchedule | None:
        ...

    def save(self, schedule: ActivitySchedule) -> ActivitySchedule:
        ...

    def list_by_animal(self, animal_id: UUID) -> list[ActivitySchedule]:
        ...

    def list_recurring_due(
        self,
        due_before: datetime,
        statuses: tuple[str, ...],
    ) -> list[ActivitySchedule]:
        ...

    def find_near(
        self,
        animal_id: UUID,
        title: str,
        start: datetime,
        end: datetime,
    ) -> ActivitySchedule | None:
        ...

    def complete_with_activity(
        self,
        schedule: ActivitySchedule,
        activity: Activity,
    ) -> tuple[ActivitySchedule, Activity]:
        """Insert the activity and update the schedule in one transaction."""
        ...


class ActivityListPort(Protocol):
    def list_by_animal(self, animal_id: UUID) -> list[Activity]:
        ...


class AnimalLookupPort(Protocol):
    def get_by_id(self, animal_id: UUID) -> Animal | None:
        ...


class TimePort(Protocol):
    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
