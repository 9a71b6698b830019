"""
Invariants checked against real SQLite storage.

Microchips stay unique, recurrence never over-creates and backfill is
safe to run repeatedly.
"""

import random
from datetime import UTC, datetime, timedelta
from uuid import UUID

import pytest
from dateutil.relativedelta import relativedelta

from jaothui.adapters.sqlite.repos import (
    SQLiteAnimalRepo,
    SQLiteFarmRepo,
    SQLiteProfileRepo,
    SQLiteScheduleRepo,
)
from jaothui.components.microchip import GenerateMicrochipInput, run_generate
from jaothui.components.recurrence import (
    MaterializeInput,
    ProcessRecurringInput,
    run_materialize,
    run_process_recurring,
)
from jaothui.components.schedules import UpdateStatusInput, run_update_status
from jaothui.domain.entities import ActivitySchedule, Animal, Farm, Profile

NOW = datetime(2025, 3, 1, 8, 0, tzinfo=UTC)
BUFFALO_TYPE_ID = UUID("6f1c2a10-0005-4000-8000-000000000005")


class FixedClock:
    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def now_utc(self) -> datetime:
        return self.now


class CountingChecker:
    """Every candidate is taken; counts how often it was asked."""

    def __init__(self) -> None:
        self.calls = 0

    def microchip_exists(self, microchip: str) -> bool:
        self.calls += 1
        return True


@pytest.fixture
def owner(db_path):
    return SQLiteProfileRepo(db_path).save(Profile(phone_number="0812345678", password_hash="h"))


@pytest.fixture
def farm(db_path, owner):
    return SQLiteFarmRepo(db_path).save(Farm(name="ฟาร์มควายไทย", owner_id=owner.id))


@pytest.fixture
def animal(db_path, farm):
    return SQLiteAnimalRepo(db_path).save(
        Animal(
            name="ทองคำ",
            microchip="THREGRESSION0000001",
            animal_type_id=BUFFALO_TYPE_ID,
            farm_id=farm.id,
        )
    )


def _recurring(animal, when, unit="daily", title="ให้อาหารเสริม"):
    return ActivitySchedule(
        animal_id=animal.id,
        title=title,
        scheduled_date=when,
        is_recurring=True,
        recurrence_type=unit,
    )


# --- Microchips ---


def test_generated_microchips_unique(db_path, farm):
    repo = SQLiteAnimalRepo(db_path)
    rng = random.Random(7)
    clock = FixedClock()

    seen = set()
    for i in range(30):
        out = run_generate(
            GenerateMicrochipInput(farm_id=str(farm.id)),
            checker=repo,
            time_port=clock,
            rng=rng,
        )
        assert out.microchip is not None
        assert out.microchip not in seen
        seen.add(out.microchip)
        repo.save(
            Animal(
                name=f"ควาย {i}",
                microchip=out.microchip,
                animal_type_id=BUFFALO_TYPE_ID,
                farm_id=farm.id,
            )
        )

    assert len(repo.list_by_farm(farm.id)) == 30


def test_generation_attempts_bounded(farm):
    checker = CountingChecker()

    out = run_generate(GenerateMicrochipInput(farm_id=str(farm.id)), checker=checker)

    assert out.microchip is None
    assert out.errors[0].code == "generation_exhausted"
    assert checker.calls == 10


# --- Recurrence ---


def test_materialize_capped(db_path, animal):
    repo = SQLiteScheduleRepo(db_path)
    base = repo.save(_recurring(animal, NOW))

    out = run_materialize(MaterializeInput(base=base), repo=repo, time_port=FixedClock())

    assert len(out.created) == 5
    assert len(repo.list_by_animal(animal.id)) == 6


def test_materialize_respects_horizon(db_path, animal):
    repo = SQLiteScheduleRepo(db_path)
    base = repo.save(_recurring(animal, NOW, unit="yearly"))

    out = run_materialize(MaterializeInput(base=base), repo=repo, time_port=FixedClock())

    horizon = NOW + relativedelta(months=24)
    assert [s.scheduled_date for s in out.created] == [
        NOW + relativedelta(years=1),
        NOW + relativedelta(years=2),
    ]
    assert all(s.scheduled_date <= horizon for s in out.created)


def test_backfill_idempotent(db_path, animal):
    repo = SQLiteScheduleRepo(db_path)
    repo.save(_recurring(animal, NOW - timedelta(days=1), unit="weekly"))
    repo.save(_recurring(animal, NOW, unit="monthly", title="ถ่ายพยาธิ"))
    clock = FixedClock()

    first = run_process_recurring(ProcessRecurringInput(), repo=repo, time_port=clock)
    second = run_process_recurring(ProcessRecurringInput(), repo=repo, time_port=clock)

    assert (first.created, first.total) == (2, 2)
    assert (second.created, second.processed) == (0, 2)
    assert len(repo.list_by_animal(animal.id)) == 4


def test_terminal_status_immutable(db_path, animal, owner):
    repo = SQLiteScheduleRepo(db_path)
    schedule = repo.save(
        ActivitySchedule(animal_id=animal.id, title="ฉีดวัคซีน", scheduled_date=NOW)
    )
    deps = {
        "repo": repo,
        "animals": SQLiteAnimalRepo(db_path),
        "farms": SQLiteFarmRepo(db_path),
        "time_port": FixedClock(),
    }

    done = run_update_status(
        UpdateStatusInput(schedule_id=schedule.id, actor_id=owner.id, status="COMPLETED"), **deps
    )
    reopened = run_update_status(
        UpdateStatusInput(schedule_id=schedule.id, actor_id=owner.id, status="PENDING"), **deps
    )

    assert done.success
    assert reopened.errors[0].code == "invalid_transition"
    stored = repo.get_by_id(schedule.id)
    assert stored is not None
    assert stored.status == "COMPLETED"
