"""Seed a local database with a demo farmer, farm, animals and schedules."""

import logging
import os
from datetime import UTC, datetime, timedelta
from pathlib import Path
from uuid import UUID

from jaothui.adapters.auth.crypto import Argon2AuthAdapter
from jaothui.adapters.clock import SystemClock
from jaothui.adapters.sqlite.migrator import SQLiteMigrator
from jaothui.adapters.sqlite.repos import (
    SQLiteAnimalRepo,
    SQLiteAnimalTypeRepo,
    SQLiteFarmRepo,
    SQLiteProfileRepo,
    SQLiteScheduleRepo,
)
from jaothui.components import animals, auth, farms, schedules

logger = logging.getLogger("seed_db")

DEMO_PHONE = "0812345678"
DEMO_PASSWORD = "Jaothui#2024"
BUFFALO_TYPE_ID = UUID("6f1c2a10-0005-4000-8000-000000000005")
DEMO_ANIMALS = [
    {"name": "ทองคำ", "color": "ดำ", "weight": 520.0},
    {"name": "เงินยวง", "color": "เผือก", "weight": 480.0},
]


def seed(data_dir: str | None = None, migrations_dir: str = "migrations") -> dict[str, int]:
    """Idempotent: a second run finds the demo profile and stops."""
    data_path = Path(data_dir or os.environ.get("JAOTHUI_DATA_DIR", "./data"))
    data_path.mkdir(parents=True, exist_ok=True)
    db_path = str(data_path / "jaothui.db")
    logger.info("Seeding %s", db_path)

    SQLiteMigrator(db_path, migrations_dir).run_migrations()

    profiles = SQLiteProfileRepo(db_path)
    if profiles.get_by_phone(DEMO_PHONE):
        logger.info("Demo profile %s already exists", DEMO_PHONE)
        return {"profiles": 0, "animals": 0, "schedules": 0}

    clock = SystemClock()
    registered = auth.run_register(
        auth.RegisterInput(
            phone_number=DEMO_PHONE,
            password=DEMO_PASSWORD,
            first_name="สมชาย",
            last_name="ใจดี",
        ),
        profiles,
        Argon2AuthAdapter(),
        clock,
    )
    if registered.profile is None:
        raise RuntimeError(f"Demo profile not created: {registered.error}")
    owner = registered.profile

    farm_repo = SQLiteFarmRepo(db_path)
    created_farm = farms.run_create_farm(
        farms.CreateFarmInput(actor_id=owner.id, name="ฟาร์มควายไทยสาธิต", province="สุพรรณบุรี"),
        repo=farm_repo,
        time_port=clock,
    )
    if created_farm.farm is None:
        raise RuntimeError(f"Demo farm not created: {created_farm.errors}")
    farm = created_farm.farm

    animal_repo = SQLiteAnimalRepo(db_path)
    type_repo = SQLiteAnimalTypeRepo(db_path)
    schedule_repo = SQLiteScheduleRepo(db_path)
    counts = {"profiles": 1, "animals": 0, "schedules": 0}
    start = datetime.now(UTC).replace(hour=2, minute=0, second=0, microsecond=0) + timedelta(days=1)

    for fields in DEMO_ANIMALS:
        created = animals.run_register(
            animals.RegisterAnimalInput(
                actor_id=owner.id,
                farm_id=farm.id,
                animal_type_id=BUFFALO_TYPE_ID,
                **fields,
            ),
            repo=animal_repo,
            animal_types=type_repo,
            farms=farm_repo,
            time_port=clock,
        )
        if created.animal is None:
            raise RuntimeError(f"Demo animal not created: {created.errors}")
        counts["animals"] += 1
        logger.info("Created %s with microchip %s", created.animal.name, created.animal.microchip)

        schedule = schedules.run_create(
            schedules.CreateScheduleInput(
                animal_id=created.animal.id,
                actor_id=owner.id,
                title="ถ่ายพยาธิ",
                scheduled_date=start,
                is_recurring=True,
                recurrence_type="monthly",
            ),
            repo=schedule_repo,
            animals=animal_repo,
            farms=farm_repo,
            time_port=clock,
        )
        counts["schedules"] += 1 + schedule.additional_occurrences

    logger.info("Log in with %s / %s", DEMO_PHONE, DEMO_PASSWORD)
    return counts


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    seed()
