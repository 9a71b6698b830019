"""
AnimalService - animal registration and photos.

Key behaviors:
- Only owners and members of a farm may register or change its animals
- The animal type must exist
- A supplied microchip must be well formed and unused; the repository's
  unique constraint still guards the insert
- Photos live in the file store under animals/; photo_url points at the
  public /uploads/ mount
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from jaothui.domain.entities import Animal
from jaothui.domain.policy import FarmLookupPort, check_farm_access

from .ports import (
    AnimalRepoPort,
    AnimalTypeLookupPort,
    DuplicateMicrochipError,
    FileStorePort,
    TimePort,
)

logger = logging.getLogger(__name__)

NAME_MAX = 100
COLOR_MAX = 50
PARENT_NAME_MAX = 100

# Owners may enter codes read from existing implants, not only generated ones.
MANUAL_MICROCHIP_RE = re.compile(r"^[A-Za-z0-9-]{4,50}$")

PHOTO_URL_PREFIX = "/uploads/"
PHOTO_DIRECTORY = "animals"

MICROCHIP_IN_USE_MESSAGE = "ไมโครชิปนี้มีการใช้งานแล้ว กรุณาใช้ไมโครชิปอื่น"
DUPLICATE_MICROCHIP_MESSAGE = "เลขไมโครชิปซ้ำกัน กรุณาลองใหม่อีกครั้ง"


@dataclass
class AnimalError:
    """Animal operation error."""

    code: str
    message: str
    field: str | None = None


def validate_animal_fields(
    name: str,
    birth_date: date | None,
    weight: float | None,
    height: float | None,
    color: str | None,
    father_name: str | None,
    mother_name: str | None,
    today: date,
) -> list[AnimalError]:
    errors: list[AnimalError] = []

    stripped = name.strip()
    if not stripped:
        errors.append(AnimalError("validation_error", "กรุณาระบุชื่อสัตว์", "name"))
    elif len(stripped) > NAME_MAX:
        errors.append(AnimalError("validation_error", "ชื่อสัตว์ต้องไม่เกิน 100 ตัวอักษร", "name"))

    if birth_date is not None and birth_date > today:
        errors.append(
            AnimalError("validation_error", "วันเกิดต้องไม่เป็นวันในอนาคต", "birth_date")
        )

    if weight is not None and weight <= 0:
        errors.append(AnimalError("validation_error", "น้ำหนักต้องมากกว่า 0", "weight"))

    if height is not None and height <= 0:
        errors.append(AnimalError("validation_error", "ส่วนสูงต้องมากกว่า 0", "height"))

    if color is not None and len(color) > COLOR_MAX:
        errors.append(AnimalError("validation_error", "สีต้องไม่เกิน 50 ตัวอักษร", "color"))

    for field_name, value in (("father_name", father_name), ("mother_name", mother_name)):
        if value is not None and len(value) > PARENT_NAME_MAX:
            errors.append(
                AnimalError("validation_error", "ชื่อพ่อแม่พันธุ์ต้องไม่เกิน 100 ตัวอักษร", field_name)
            )

    return errors


def photo_url_for(stored_path: str) -> str:
    return PHOTO_URL_PREFIX + stored_path


def stored_path_for(photo_url: str | None) -> str | None:
    """Inverse of photo_url_for; None for URLs outside the upload mount."""
    if not photo_url or not photo_url.startswith(PHOTO_URL_PREFIX):
        return None
    return photo_url[len(PHOTO_URL_PREFIX):]


class AnimalService:
    """Registers animals on farms and keeps their photos."""

    def __init__(
        self,
        repo: AnimalRepoPort,
        farms: FarmLookupPort,
        animal_types: AnimalTypeLookupPort | None = None,
        time_port: TimePort | None = None,
    ) -> None:
        self._repo = repo
        self._types = animal_types
        self._farms = farms
        self._time = time_port

    def _now(self) -> datetime:
        if self._time is not None:
            return self._time.now_utc()
        return datetime.now(UTC)

    def check_farm(self, farm_id: UUID, actor_id: UUID) -> list[AnimalError]:
        access = check_farm_access(farm_id, actor_id, self._farms)
        if access.allowed:
            return []
        logger.info("Profile %s denied access to farm %s", actor_id, farm_id)
        return [AnimalError("farm_access_denied", "ไม่พบฟาร์มหรือคุณไม่มีสิทธิ์เข้าถึง")]

    def check_registration(
        self,
        actor_id: UUID,
        farm_id: UUID,
        animal_type_id: UUID,
        name: str,
        microchip: str | None,
        birth_date: date | None = None,
        weight: float | None = None,
        height: float | None = None,
        color: str | None = None,
        father_name: str | None = None,
        mother_name: str | None = None,
    ) -> list[AnimalError]:
        """Everything that must hold before a microchip is generated or an insert runs."""
        errors = validate_animal_fields(
            name,
            birth_date,
            weight,
            height,
            color,
            father_name,
            mother_name,
            today=self._now().date(),
        )
        if microchip is not None and not MANUAL_MICROCHIP_RE.match(microchip):
            errors.append(
                AnimalError("validation_error", "รูปแบบไมโครชิปไม่ถูกต้อง", "microchip")
            )
        if errors:
            return errors

        errors = self.check_farm(farm_id, actor_id)
        if errors:
            return errors

        if self._types is None:
            raise ValueError("AnimalTypeLookupPort is required for registration")
        if self._types.get_by_id(animal_type_id) is None:
            return [
                AnimalError("animal_type_not_found", "ไม่พบประเภทสัตว์ที่เลือก", "animal_type_id")
            ]

        if microchip is not None and self._repo.microchip_exists(microchip):
            return [AnimalError("microchip_in_use", MICROCHIP_IN_USE_MESSAGE, "microchip")]

        return []

    def create(
        self,
        farm_id: UUID,
        animal_type_id: UUID,
        name: str,
        microchip: str,
        birth_date: date | None = None,
        weight: float | None = None,
        height: float | None = None,
        color: str | None = None,
        father_name: str | None = None,
        mother_name: str | None = None,
    ) -> tuple[Animal | None, list[AnimalError]]:
        now = self._now()
        animal = Animal(
            name=name.strip(),
            microchip=microchip,
            animal_type_id=animal_type_id,
            farm_id=farm_id,
            birth_date=birth_date,
            weight=weight,
            height=height,
            color=color,
            father_name=father_name,
            mother_name=mother_name,
            created_at=now,
            updated_at=now,
        )
        try:
            saved = self._repo.save(animal)
        except DuplicateMicrochipError:
            logger.warning("Microchip %s taken between check and insert", microchip)
            return None, [
                AnimalError("duplicate_microchip", DUPLICATE_MICROCHIP_MESSAGE, "microchip")
            ]

        logger.info("Registered animal %s on farm %s (%s)", saved.id, farm_id, microchip)
        return saved, []

    def authorized_animal(
        self, animal_id: UUID, actor_id: UUID
    ) -> tuple[Animal | None, list[AnimalError]]:
        animal = self._repo.get_by_id(animal_id)
        if animal is None:
            return None, [AnimalError("animal_not_found", "ไม่พบสัตว์")]

        errors = self.check_farm(animal.farm_id, actor_id)
        if errors:
            return None, errors
        return animal, []

    def set_photo(
        self, animal: Animal, storage_name: str, data: bytes, store: FileStorePort
    ) -> Animal:
        """Store the photo bytes, point the animal at them and drop the old file."""
        stored_path = store.save(f"{PHOTO_DIRECTORY}/{storage_name}", data)
        previous = stored_path_for(animal.photo_url)

        updated = animal.model_copy(
            update={"photo_url": photo_url_for(stored_path), "updated_at": self._now()}
        )
        try:
            saved = self._repo.save(updated)
        except Exception:
            store.delete(stored_path)
            raise

        if previous is not None and previous != stored_path:
            store.delete(previous)
        logger.info("Stored photo %s for animal %s", stored_path, animal.id)
        return saved
