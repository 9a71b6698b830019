from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from jaothui.domain.entities import Activity, ActivitySchedule, Animal, Farm, Profile

# --- Shared Enums/Types ---
ScheduleStatus = Literal["PENDING", "IN_PROGRESS", "COMPLETED", "CANCELLED"]
RecurrenceType = Literal["daily", "weekly", "monthly", "quarterly", "yearly"]


# --- Auth ---
class RegisterRequest(BaseModel):
    phone_number: str = Field(min_length=1)
    password: str = Field(min_length=1)
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class LoginRequest(BaseModel):
    phone_number: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ProfileResponse(BaseModel):
    id: UUID
    phone_number: str
    email: str | None
    first_name: str | None
    last_name: str | None
    created_at: datetime

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            phone_number=profile.phone_number,
            email=profile.email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            created_at=profile.created_at,
        )


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    profile: ProfileResponse


# --- Farms ---
class FarmCreateRequest(BaseModel):
    name: str
    province: str


class FarmResponse(BaseModel):
    id: UUID
    name: str
    province: str | None
    owner_id: UUID
    is_owner: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, farm: Farm, is_owner: bool) -> "FarmResponse":
        return cls(is_owner=is_owner, **farm.model_dump(exclude={"updated_at"}))


# --- Animals ---
class AnimalCreateRequest(BaseModel):
    farm_id: UUID
    animal_type_id: UUID
    name: str
    microchip: str | None = None
    birth_date: date | None = None
    weight: float | None = None
    height: float | None = None
    color: str | None = None
    father_name: str | None = None
    mother_name: str | None = None


class AnimalResponse(BaseModel):
    id: UUID
    name: str
    microchip: str
    animal_type_id: UUID
    farm_id: UUID
    birth_date: date | None
    weight: float | None
    height: float | None
    color: str | None
    father_name: str | None
    mother_name: str | None
    photo_url: str | None
    created_at: datetime

    @classmethod
    def from_entity(cls, animal: Animal) -> "AnimalResponse":
        return cls(**animal.model_dump(exclude={"updated_at"}))


class AnimalCreateResponse(BaseModel):
    message: str
    animal_id: UUID
    microchip: str
    animal: AnimalResponse


class GenerateMicrochipRequest(BaseModel):
    farm_id: UUID


class MicrochipResponse(BaseModel):
    microchip: str


# --- Schedules ---
class ScheduleCreateRequest(BaseModel):
    animal_id: UUID
    title: str
    scheduled_date: datetime
    description: str | None = None
    notes: str | None = None
    status: ScheduleStatus = "PENDING"
    is_recurring: bool = False
    recurrence_type: RecurrenceType | None = None


class ScheduleResponse(BaseModel):
    id: UUID
    animal_id: UUID
    title: str
    description: str | None
    notes: str | None
    scheduled_date: datetime
    status: str
    is_recurring: bool
    recurrence_type: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, schedule: ActivitySchedule) -> "ScheduleResponse":
        return cls(**schedule.model_dump())


class ScheduleCreateResponse(BaseModel):
    message: str
    schedule: ScheduleResponse
    additional_occurrences: int


class StatusUpdateRequest(BaseModel):
    status: ScheduleStatus


class ConvertToActivityRequest(BaseModel):
    notes: str | None = None
    activity_date: datetime | None = None


class ActivityResponse(BaseModel):
    id: UUID
    animal_id: UUID
    title: str
    description: str | None
    notes: str | None
    activity_date: datetime
    status: str
    created_at: datetime

    @classmethod
    def from_entity(cls, activity: Activity) -> "ActivityResponse":
        return cls(**activity.model_dump(exclude={"updated_at"}))


class ConvertToActivityResponse(BaseModel):
    message: str
    activity: ActivityResponse
    schedule: ScheduleResponse


class OccurrenceResultModel(BaseModel):
    source_schedule_id: UUID
    scheduled_date: datetime | None
    schedule_id: UUID | None
    error: str | None


class ProcessRecurringResponse(BaseModel):
    success: bool
    message: str
    processed: int
    created: int
    total: int
    results: list[OccurrenceResultModel]


class AnimalHistoryResponse(BaseModel):
    schedules: list[ScheduleResponse]
    activities: list[ActivityResponse]
