"""
Recurrence projection and backfill for activity schedules.

Key behaviors:
- Units: daily, weekly, monthly, quarterly, yearly. Calendar arithmetic uses
  dateutil.relativedelta, so month ends clamp (Jan 31 + 1 month = Feb 28/29)
- Unknown units do not advance: next_occurrence returns the base date
- Pre-materialization creates at most max_additional_occurrences rows and
  never beyond now + creation horizon
- Backfill tops up schedules due within the trigger window, skips dates past
  the backfill horizon and dates already covered within the dedupe tolerance
- A failed insert is logged and collected; it never aborts the batch
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

from dateutil.relativedelta import relativedelta

from jaothui.domain.entities import ACTIVE_STATUSES, ActivitySchedule

from .models import OccurrenceResult
from .ports import OccurrenceRepoPort, OwnerLookupPort, TimePort

logger = logging.getLogger(__name__)

RECURRENCE_STEPS: dict[str, relativedelta] = {
    "daily": relativedelta(days=1),
    "weekly": relativedelta(days=7),
    "monthly": relativedelta(months=1),
    "quarterly": relativedelta(months=3),
    "yearly": relativedelta(years=1),
}


# --- Configuration ---


@dataclass(frozen=True)
class RecurrenceConfig:
    """Recurrence configuration from rules."""

    max_additional_occurrences: int = 5
    creation_horizon_months: int = 24
    backfill_horizon_months: int = 6
    backfill_due_window_days: int = 2
    dedupe_tolerance_hours: int = 24


DEFAULT_CONFIG = RecurrenceConfig()


# --- Projection ---


def next_occurrence(base: datetime, unit: str | None) -> datetime:
    """
    Project one step forward from `base`.

    Returns `base` unchanged for an unrecognized unit.
    """
    step = RECURRENCE_STEPS.get(unit or "")
    if step is None:
        logger.warning("Unrecognized recurrence unit %r; date not advanced", unit)
        return base
    return base + step


def project_dates(
    base: datetime,
    unit: str | None,
    horizon: datetime,
    limit: int,
) -> list[datetime]:
    """Up to `limit` strictly increasing dates after `base`, none beyond `horizon`."""
    dates: list[datetime] = []
    current = base
    while len(dates) < limit:
        nxt = next_occurrence(current, unit)
        if nxt <= current:
            logger.warning("Recurrence %r does not advance from %s; stopping", unit, current)
            break
        if nxt > horizon:
            break
        dates.append(nxt)
        current = nxt
    return dates


def make_occurrence(source: ActivitySchedule, scheduled_date: datetime) -> ActivitySchedule:
    """New PENDING recurring occurrence copying the source's content."""
    return ActivitySchedule(
        animal_id=source.animal_id,
        title=source.title,
        description=source.description,
        notes=source.notes,
        scheduled_date=scheduled_date,
        status="PENDING",
        is_recurring=True,
        recurrence_type=source.recurrence_type,
    )


# --- Service ---


class RecurrenceService:
    """Creates future occurrences through the occurrence repository."""

    def __init__(
        self,
        repo: OccurrenceRepoPort,
        time_port: TimePort | None = None,
        config: RecurrenceConfig = DEFAULT_CONFIG,
        owners: OwnerLookupPort | None = None,
    ) -> None:
        self._repo = repo
        self._time = time_port
        self._config = config
        self._owners = owners

    def _now(self) -> datetime:
        if self._time is not None:
            return self._time.now_utc()
        return datetime.now(UTC)

    def _insert(
        self, source: ActivitySchedule, when: datetime
    ) -> tuple[ActivitySchedule | None, OccurrenceResult]:
        try:
            saved = self._repo.save(make_occurrence(source, when))
        except Exception as e:
            logger.exception(
                "Failed to create occurrence of schedule %s at %s", source.id, when.isoformat()
            )
            return None, OccurrenceResult(
                source_schedule_id=source.id,
                scheduled_date=when,
                title=source.title,
                error=str(e) or type(e).__name__,
            )

        return saved, OccurrenceResult(
            source_schedule_id=source.id,
            scheduled_date=when,
            schedule_id=saved.id,
            title=source.title,
        )

    def materialize(
        self, base: ActivitySchedule
    ) -> tuple[list[ActivitySchedule], list[OccurrenceResult]]:
        """
        Pre-create future occurrences after a recurring schedule is created.

        Stops after max_additional_occurrences steps, at the first date past
        now + creation horizon, or when the unit does not advance the date.
        """
        if not base.is_recurring or not base.recurrence_type:
            return [], []

        horizon = self._now() + relativedelta(months=self._config.creation_horizon_months)
        created: list[ActivitySchedule] = []
        results: list[OccurrenceResult] = []
        dates = project_dates(
            base.scheduled_date,
            base.recurrence_type,
            horizon,
            self._config.max_additional_occurrences,
        )
        for nxt in dates:
            saved, result = self._insert(base, nxt)
            if saved is not None:
                created.append(saved)
            results.append(result)

        return created, results

    def process_recurring(self) -> tuple[int, int, int, list[OccurrenceResult]]:
        """
        Backfill the next occurrence of every due recurring schedule.

        Returns:
            (processed, created, total, results). processed counts schedules
            that were created or already covered; total counts schedules
            examined.
        """
        now = self._now()
        due_before = now + timedelta(days=self._config.backfill_due_window_days)
        horizon = now + relativedelta(months=self._config.backfill_horizon_months)
        tolerance = timedelta(hours=self._config.dedupe_tolerance_hours)

        due = self._repo.list_recurring_due(due_before, ACTIVE_STATUSES)
        logger.info("Backfill: %d recurring schedules due before %s", len(due), due_before)

        processed = 0
        created_by_source: Counter[UUID] = Counter()
        results: list[OccurrenceResult] = []

        for schedule in due:
            if not schedule.recurrence_type:
                continue

            nxt = next_occurrence(schedule.scheduled_date, schedule.recurrence_type)
            if nxt > horizon:
                continue

            try:
                existing = self._repo.find_near(
                    schedule.animal_id, schedule.title, nxt - tolerance, nxt + tolerance
                )
            except Exception as e:
                logger.exception("Backfill lookup failed for schedule %s", schedule.id)
                results.append(
                    OccurrenceResult(
                        source_schedule_id=schedule.id,
                        scheduled_date=nxt,
                        title=schedule.title,
                        error=str(e) or type(e).__name__,
                    )
                )
                continue

            if existing is None:
                _, result = self._insert(schedule, nxt)
                results.append(result)
                if not result.created:
                    continue
                created_by_source[schedule.id] += 1

            processed += 1

        created = sum(created_by_source.values())
        if created:
            self._log_owner_summaries(due, created_by_source)

        logger.info(
            "Backfill finished: processed=%d created=%d total=%d", processed, created, len(due)
        )
        return processed, created, len(due), results

    def _log_owner_summaries(
        self,
        due: list[ActivitySchedule],
        created_by_source: Counter[UUID],
    ) -> None:
        if self._owners is None:
            return

        per_owner: Counter[UUID] = Counter()
        for schedule in due:
            count = created_by_source.get(schedule.id, 0)
            if not count:
                continue
            owner_id = self._owners.get_owner_id_for_animal(schedule.animal_id)
            if owner_id is not None:
                per_owner[owner_id] += count

        for owner_id, count in per_owner.items():
            logger.info("Owner %s: %d new recurring schedules", owner_id, count)
