"""
ScheduleService - activity schedules for animals.

Key behaviors:
- Input limits: title 1..100, description <= 500, notes <= 1000 characters
- A recurring schedule must name a known recurrence unit
- Only owners and members of the animal's farm may act on its schedules
- COMPLETED and CANCELLED are terminal; a terminal schedule keeps its status
- Converting to an activity is a terminal action that records a COMPLETED
  activity and completes the schedule in one transaction
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from jaothui.components.recurrence import RECURRENCE_STEPS
from jaothui.domain.entities import (
    SCHEDULE_STATUSES,
    TERMINAL_STATUSES,
    Activity,
    ActivitySchedule,
    Animal,
)
from jaothui.domain.policy import FarmLookupPort, check_farm_access

from .ports import ActivityListPort, AnimalLookupPort, ScheduleRepoPort, TimePort

logger = logging.getLogger(__name__)

TITLE_MAX = 100
DESCRIPTION_MAX = 500
NOTES_MAX = 1000

ACTIVITY_NOTES_TEMPLATE = "สร้างจากกำหนดการ: {title}"


@dataclass
class ScheduleError:
    """Schedule operation error."""

    code: str
    message: str
    field: str | None = None


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def validate_schedule_fields(
    title: str,
    description: str | None,
    notes: str | None,
    status: str,
    is_recurring: bool,
    recurrence_type: str | None,
) -> list[ScheduleError]:
    errors: list[ScheduleError] = []

    stripped = title.strip()
    if not stripped:
        errors.append(ScheduleError("validation_error", "กรุณาระบุชื่อกิจกรรม", "title"))
    elif len(stripped) > TITLE_MAX:
        errors.append(
            ScheduleError("validation_error", "ชื่อกิจกรรมต้องไม่เกิน 100 ตัวอักษร", "title")
        )

    if description is not None and len(description) > DESCRIPTION_MAX:
        errors.append(
            ScheduleError("validation_error", "รายละเอียดต้องไม่เกิน 500 ตัวอักษร", "description")
        )

    if notes is not None and len(notes) > NOTES_MAX:
        errors.append(
            ScheduleError("validation_error", "หมายเหตุต้องไม่เกิน 1000 ตัวอักษร", "notes")
        )

    if status not in SCHEDULE_STATUSES:
        errors.append(ScheduleError("validation_error", "สถานะไม่ถูกต้อง", "status"))

    if is_recurring:
        if not recurrence_type:
            errors.append(
                ScheduleError(
                    "validation_error", "กรุณาเลือกประเภทการทำซ้ำ", "recurrence_type"
                )
            )
        elif recurrence_type not in RECURRENCE_STEPS:
            errors.append(
                ScheduleError("validation_error", "ประเภทการทำซ้ำไม่ถูกต้อง", "recurrence_type")
            )

    return errors


class ScheduleService:
    """Creates schedules, moves them between statuses, converts them to activities."""

    def __init__(
        self,
        repo: ScheduleRepoPort,
        animals: AnimalLookupPort,
        farms: FarmLookupPort,
        time_port: TimePort | None = None,
    ) -> None:
        self._repo = repo
        self._animals = animals
        self._farms = farms
        self._time = time_port

    def _now(self) -> datetime:
        if self._time is not None:
            return self._time.now_utc()
        return datetime.now(UTC)

    def _authorized_animal(
        self, animal_id: UUID, actor_id: UUID
    ) -> tuple[Animal | None, list[ScheduleError]]:
        animal = self._animals.get_by_id(animal_id)
        if animal is None:
            return None, [ScheduleError("animal_not_found", "ไม่พบสัตว์")]

        access = check_farm_access(animal.farm_id, actor_id, self._farms)
        if not access.allowed:
            logger.info("Profile %s denied access to farm %s", actor_id, animal.farm_id)
            return None, [ScheduleError("farm_access_denied", "ไม่มีสิทธิ์เข้าถึงฟาร์มนี้")]

        return animal, []

    def _authorized_schedule(
        self, schedule_id: UUID, actor_id: UUID
    ) -> tuple[ActivitySchedule | None, list[ScheduleError]]:
        schedule = self._repo.get_by_id(schedule_id)
        if schedule is None:
            return None, [ScheduleError("schedule_not_found", "ไม่พบกำหนดการ")]

        _, errors = self._authorized_animal(schedule.animal_id, actor_id)
        if errors:
            return None, errors
        return schedule, []

    def create(
        self,
        animal_id: UUID,
        actor_id: UUID,
        title: str,
        scheduled_date: datetime,
        description: str | None = None,
        notes: str | None = None,
        status: str = "PENDING",
        is_recurring: bool = False,
        recurrence_type: str | None = None,
    ) -> tuple[ActivitySchedule | None, list[ScheduleError]]:
        errors = validate_schedule_fields(
            title, description, notes, status, is_recurring, recurrence_type
        )
        if errors:
            return None, errors

        _, errors = self._authorized_animal(animal_id, actor_id)
        if errors:
            return None, errors

        now = self._now()
        schedule = ActivitySchedule(
            animal_id=animal_id,
            title=title.strip(),
            description=description,
            notes=notes,
            scheduled_date=ensure_utc(scheduled_date),
            status=status,
            is_recurring=is_recurring,
            recurrence_type=recurrence_type if is_recurring else None,
            created_at=now,
            updated_at=now,
        )
        saved = self._repo.save(schedule)
        logger.info("Created schedule %s for animal %s", saved.id, animal_id)
        return saved, []

    def history(
        self, animal_id: UUID, actor_id: UUID, activities: ActivityListPort
    ) -> tuple[tuple[list[ActivitySchedule], list[Activity]] | None, list[ScheduleError]]:
        """Schedules by date and activities newest first."""
        animal, errors = self._authorized_animal(animal_id, actor_id)
        if animal is None:
            return None, errors
        return (self._repo.list_by_animal(animal_id), activities.list_by_animal(animal_id)), []

    def update_status(
        self,
        schedule_id: UUID,
        actor_id: UUID,
        status: str,
    ) -> tuple[ActivitySchedule | None, list[ScheduleError]]:
        if status not in SCHEDULE_STATUSES:
            return None, [ScheduleError("validation_error", "สถานะไม่ถูกต้อง", "status")]

        schedule, errors = self._authorized_schedule(schedule_id, actor_id)
        if schedule is None:
            return None, errors

        if schedule.status == status:
            return schedule, []

        if schedule.status in TERMINAL_STATUSES:
            return None, [
                ScheduleError(
                    "invalid_transition",
                    f"ไม่สามารถเปลี่ยนสถานะจาก {schedule.status} เป็น {status}",
                    "status",
                )
            ]

        updated = schedule.model_copy(update={"status": status, "updated_at": self._now()})
        return self._repo.save(updated), []

    def convert_to_activity(
        self,
        schedule_id: UUID,
        actor_id: UUID,
        notes: str | None = None,
        activity_date: datetime | None = None,
    ) -> tuple[tuple[ActivitySchedule, Activity] | None, list[ScheduleError]]:
        if notes is not None and len(notes) > NOTES_MAX:
            return None, [
                ScheduleError("validation_error", "หมายเหตุต้องไม่เกิน 1000 ตัวอักษร", "notes")
            ]

        schedule, errors = self._authorized_schedule(schedule_id, actor_id)
        if schedule is None:
            return None, errors

        if schedule.status == "COMPLETED":
            return None, [ScheduleError("invalid_transition", "กำหนดการนี้เสร็จสิ้นแล้ว")]
        if schedule.status == "CANCELLED":
            return None, [ScheduleError("invalid_transition", "กำหนดการนี้ถูกยกเลิกแล้ว")]

        now = self._now()
        activity = Activity(
            animal_id=schedule.animal_id,
            title=schedule.title,
            description=schedule.description,
            notes=notes or ACTIVITY_NOTES_TEMPLATE.format(title=schedule.title),
            activity_date=ensure_utc(activity_date) if activity_date else now,
            status="COMPLETED",
            created_at=now,
            updated_at=now,
        )
        completed = schedule.model_copy(update={"status": "COMPLETED", "updated_at": now})

        saved_schedule, saved_activity = self._repo.complete_with_activity(completed, activity)
        logger.info("Converted schedule %s to activity %s", schedule_id, saved_activity.id)
        return (saved_schedule, saved_activity), []
