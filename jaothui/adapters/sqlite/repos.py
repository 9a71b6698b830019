import sqlite3
from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID

from jaothui.components.animals.ports import DuplicateMicrochipError
from jaothui.domain.entities import (
    Activity,
    ActivitySchedule,
    Animal,
    AnimalType,
    Farm,
    FarmMember,
    Profile,
)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def to_db_datetime(value: datetime) -> str:
    """UTC, fixed width, so stored values compare correctly as text."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def from_db_datetime(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


class _SQLiteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


class SQLiteProfileRepo(_SQLiteRepo):
    def save(self, profile: Profile) -> Profile:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO profiles (
                    id, phone_number, email, first_name, last_name,
                    password_hash, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    phone_number=excluded.phone_number,
                    email=excluded.email,
                    first_name=excluded.first_name,
                    last_name=excluded.last_name,
                    password_hash=excluded.password_hash,
                    updated_at=excluded.updated_at
            """,
                (
                    str(profile.id),
                    profile.phone_number,
                    profile.email,
                    profile.first_name,
                    profile.last_name,
                    profile.password_hash,
                    to_db_datetime(profile.created_at),
                    to_db_datetime(profile.updated_at),
                ),
            )
            conn.commit()
            return profile
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_phone(self, phone_number: str) -> Profile | None:
        return self._get_one("SELECT * FROM profiles WHERE phone_number = ?", phone_number)

    def get_by_email(self, email: str) -> Profile | None:
        return self._get_one("SELECT * FROM profiles WHERE email = ?", email)

    def get_by_id(self, profile_id: UUID) -> Profile | None:
        return self._get_one("SELECT * FROM profiles WHERE id = ?", str(profile_id))

    def _get_one(self, sql: str, value: str) -> Profile | None:
        conn = self._get_conn()
        try:
            row = conn.execute(sql, (value,)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Profile:
        return Profile(
            id=UUID(row["id"]),
            phone_number=row["phone_number"],
            email=row["email"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            password_hash=row["password_hash"],
            created_at=from_db_datetime(row["created_at"]),
            updated_at=from_db_datetime(row["updated_at"]),
        )


class SQLiteFarmRepo(_SQLiteRepo):
    def save(self, farm: Farm) -> Farm:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO farms (id, name, province, owner_id, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name=excluded.name,
                    province=excluded.province,
                    owner_id=excluded.owner_id,
                    updated_at=excluded.updated_at
            """,
                (
                    str(farm.id),
                    farm.name,
                    farm.province,
                    str(farm.owner_id),
                    to_db_datetime(farm.created_at),
                    to_db_datetime(farm.updated_at),
                ),
            )
            conn.commit()
            return farm
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, farm_id: UUID) -> Farm | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM farms WHERE id = ?", (str(farm_id),)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def add_member(self, member: FarmMember) -> FarmMember:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO farm_members (id, farm_id, profile_id, role, created_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(farm_id, profile_id) DO UPDATE SET role=excluded.role
            """,
                (
                    str(member.id),
                    str(member.farm_id),
                    str(member.profile_id),
                    member.role,
                    to_db_datetime(member.created_at),
                ),
            )
            conn.commit()
            return member
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def is_member(self, farm_id: UUID, profile_id: UUID) -> bool:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT 1 AS found FROM farm_members WHERE farm_id = ? AND profile_id = ?",
                (str(farm_id), str(profile_id)),
            ).fetchone()
            return row is not None
        finally:
            conn.close()

    def list_for_profile(self, profile_id: UUID) -> list[Farm]:
        """Owned farms first, then farms the profile is a member of; newest first."""
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT f.*, f.owner_id = ? AS owned FROM farms f
                WHERE f.owner_id = ?
                   OR f.id IN (SELECT farm_id FROM farm_members WHERE profile_id = ?)
                ORDER BY owned DESC, f.created_at DESC
            """,
                (str(profile_id), str(profile_id), str(profile_id)),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Farm:
        return Farm(
            id=UUID(row["id"]),
            name=row["name"],
            province=row["province"],
            owner_id=UUID(row["owner_id"]),
            created_at=from_db_datetime(row["created_at"]),
            updated_at=from_db_datetime(row["updated_at"]),
        )


class SQLiteAnimalTypeRepo(_SQLiteRepo):
    def get_by_id(self, animal_type_id: UUID) -> AnimalType | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM animal_types WHERE id = ?", (str(animal_type_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_all(self) -> list[AnimalType]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM animal_types ORDER BY name").fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> AnimalType:
        return AnimalType(id=UUID(row["id"]), name=row["name"], description=row["description"])


class SQLiteAnimalRepo(_SQLiteRepo):
    def save(self, animal: Animal) -> Animal:
        """Upsert; a microchip held by another animal raises DuplicateMicrochipError."""
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO animals (
                    id, name, microchip, animal_type_id, farm_id, birth_date,
                    weight, height, color, father_name, mother_name, photo_url,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name=excluded.name,
                    animal_type_id=excluded.animal_type_id,
                    birth_date=excluded.birth_date,
                    weight=excluded.weight,
                    height=excluded.height,
                    color=excluded.color,
                    father_name=excluded.father_name,
                    mother_name=excluded.mother_name,
                    photo_url=excluded.photo_url,
                    updated_at=excluded.updated_at
            """,
                (
                    str(animal.id),
                    animal.name,
                    animal.microchip,
                    str(animal.animal_type_id),
                    str(animal.farm_id),
                    animal.birth_date.isoformat() if animal.birth_date else None,
                    animal.weight,
                    animal.height,
                    animal.color,
                    animal.father_name,
                    animal.mother_name,
                    animal.photo_url,
                    to_db_datetime(animal.created_at),
                    to_db_datetime(animal.updated_at),
                ),
            )
            conn.commit()
            return animal
        except sqlite3.IntegrityError as e:
            conn.rollback()
            if "animals.microchip" in str(e):
                raise DuplicateMicrochipError(animal.microchip) from e
            raise
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, animal_id: UUID) -> Animal | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM animals WHERE id = ?", (str(animal_id),)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def microchip_exists(self, microchip: str) -> bool:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT 1 AS found FROM animals WHERE microchip = ?", (microchip,)
            ).fetchone()
            return row is not None
        finally:
            conn.close()

    def list_by_farm(self, farm_id: UUID) -> list[Animal]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM animals WHERE farm_id = ? ORDER BY created_at DESC",
                (str(farm_id),),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def get_owner_id_for_animal(self, animal_id: UUID) -> UUID | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                """
                SELECT f.owner_id FROM animals a
                JOIN farms f ON f.id = a.farm_id
                WHERE a.id = ?
            """,
                (str(animal_id),),
            ).fetchone()
            return UUID(row["owner_id"]) if row else None
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Animal:
        return Animal(
            id=UUID(row["id"]),
            name=row["name"],
            microchip=row["microchip"],
            animal_type_id=UUID(row["animal_type_id"]),
            farm_id=UUID(row["farm_id"]),
            birth_date=date.fromisoformat(row["birth_date"]) if row["birth_date"] else None,
            weight=row["weight"],
            height=row["height"],
            color=row["color"],
            father_name=row["father_name"],
            mother_name=row["mother_name"],
            photo_url=row["photo_url"],
            created_at=from_db_datetime(row["created_at"]),
            updated_at=from_db_datetime(row["updated_at"]),
        )


_UPSERT_SCHEDULE = """
    INSERT INTO activity_schedules (
        id, animal_id, title, description, notes, scheduled_date, status,
        is_recurring, recurrence_type, created_at, updated_at
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(id) DO UPDATE SET
        title=excluded.title,
        description=excluded.description,
        notes=excluded.notes,
        scheduled_date=excluded.scheduled_date,
        status=excluded.status,
        is_recurring=excluded.is_recurring,
        recurrence_type=excluded.recurrence_type,
        updated_at=excluded.updated_at
"""


def _schedule_params(schedule: ActivitySchedule) -> tuple[Any, ...]:
    return (
        str(schedule.id),
        str(schedule.animal_id),
        schedule.title,
        schedule.description,
        schedule.notes,
        to_db_datetime(schedule.scheduled_date),
        schedule.status,
        1 if schedule.is_recurring else 0,
        schedule.recurrence_type,
        to_db_datetime(schedule.created_at),
        to_db_datetime(schedule.updated_at),
    )


class SQLiteScheduleRepo(_SQLiteRepo):
    def save(self, schedule: ActivitySchedule) -> ActivitySchedule:
        conn = self._get_conn()
        try:
            conn.execute(_UPSERT_SCHEDULE, _schedule_params(schedule))
            conn.commit()
            return schedule
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, schedule_id: UUID) -> ActivitySchedule | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM activity_schedules WHERE id = ?", (str(schedule_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_by_animal(self, animal_id: UUID) -> list[ActivitySchedule]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM activity_schedules WHERE animal_id = ? ORDER BY scheduled_date",
                (str(animal_id),),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def list_recurring_due(
        self, due_before: datetime, statuses: tuple[str, ...]
    ) -> list[ActivitySchedule]:
        if not statuses:
            return []
        placeholders = ", ".join("?" for _ in statuses)
        conn = self._get_conn()
        try:
            rows = conn.execute(
                f"""
                SELECT * FROM activity_schedules
                WHERE is_recurring = 1
                  AND recurrence_type IS NOT NULL
                  AND status IN ({placeholders})
                  AND scheduled_date <= ?
                ORDER BY scheduled_date
            """,
                (*statuses, to_db_datetime(due_before)),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def find_near(
        self, animal_id: UUID, title: str, start: datetime, end: datetime
    ) -> ActivitySchedule | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                """
                SELECT * FROM activity_schedules
                WHERE animal_id = ? AND title = ?
                  AND scheduled_date >= ? AND scheduled_date <= ?
                ORDER BY scheduled_date
                LIMIT 1
            """,
                (str(animal_id), title, to_db_datetime(start), to_db_datetime(end)),
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def complete_with_activity(
        self, schedule: ActivitySchedule, activity: Activity
    ) -> tuple[ActivitySchedule, Activity]:
        conn = self._get_conn()
        try:
            conn.execute(_UPSERT_SCHEDULE, _schedule_params(schedule))
            SQLiteActivityRepo.insert(conn, activity)
            conn.commit()
            return schedule, activity
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> ActivitySchedule:
        return ActivitySchedule(
            id=UUID(row["id"]),
            animal_id=UUID(row["animal_id"]),
            title=row["title"],
            description=row["description"],
            notes=row["notes"],
            scheduled_date=from_db_datetime(row["scheduled_date"]),
            status=row["status"],
            is_recurring=bool(row["is_recurring"]),
            recurrence_type=row["recurrence_type"],
            created_at=from_db_datetime(row["created_at"]),
            updated_at=from_db_datetime(row["updated_at"]),
        )


class SQLiteActivityRepo(_SQLiteRepo):
    @staticmethod
    def insert(conn: sqlite3.Connection, activity: Activity) -> None:
        conn.execute(
            """
            INSERT INTO activities (
                id, animal_id, title, description, notes, activity_date,
                status, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                str(activity.id),
                str(activity.animal_id),
                activity.title,
                activity.description,
                activity.notes,
                to_db_datetime(activity.activity_date),
                activity.status,
                to_db_datetime(activity.created_at),
                to_db_datetime(activity.updated_at),
            ),
        )

    def get_by_id(self, activity_id: UUID) -> Activity | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM activities WHERE id = ?", (str(activity_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_by_animal(self, animal_id: UUID) -> list[Activity]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM activities WHERE animal_id = ? ORDER BY activity_date DESC",
                (str(animal_id),),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Activity:
        return Activity(
            id=UUID(row["id"]),
            animal_id=UUID(row["animal_id"]),
            title=row["title"],
            description=row["description"],
            notes=row["notes"],
            activity_date=from_db_datetime(row["activity_date"]),
            status=row["status"],
            created_at=from_db_datetime(row["created_at"]),
            updated_at=from_db_datetime(row["updated_at"]),
        )
