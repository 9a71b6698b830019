from datetime import UTC, date, datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
ScheduleStatus = Literal["PENDING", "IN_PROGRESS", "COMPLETED", "CANCELLED"]
RecurrenceType = Literal["daily", "weekly", "monthly", "quarterly", "yearly"]
MemberRole = Literal["MEMBER", "MANAGER"]

SCHEDULE_STATUSES: tuple[str, ...] = ("PENDING", "IN_PROGRESS", "COMPLETED", "CANCELLED")
TERMINAL_STATUSES: tuple[str, ...] = ("COMPLETED", "CANCELLED")
ACTIVE_STATUSES: tuple[str, ...] = ("PENDING", "IN_PROGRESS")


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- Profiles ---

class Profile(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    phone_number: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    password_hash: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

# --- Farms ---

class Farm(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    province: str | None = None
    owner_id: UUID
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

class FarmMember(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    farm_id: UUID
    profile_id: UUID
    role: MemberRole = "MEMBER"
    created_at: datetime = Field(default_factory=_utcnow)

# --- Animals ---

class AnimalType(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str | None = None

class Animal(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    microchip: str
    animal_type_id: UUID
    farm_id: UUID
    birth_date: date | None = None
    weight: float | None = None
    height: float | None = None
    color: str | None = None
    father_name: str | None = None
    mother_name: str | None = None
    photo_url: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

# --- Schedules & Activities ---

class ActivitySchedule(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    animal_id: UUID
    title: str
    description: str | None = None
    notes: str | None = None
    scheduled_date: datetime
    status: ScheduleStatus = "PENDING"
    is_recurring: bool = False
    # Stored as free text: rows written before unit validation may hold anything.
    recurrence_type: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

class Activity(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    animal_id: UUID
    title: str
    description: str | None = None
    notes: str | None = None
    activity_date: datetime
    status: ScheduleStatus = "COMPLETED"
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
