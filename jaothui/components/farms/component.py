"""
Farms component - creating a farm and listing what a profile can reach.

Invariants:
- A profile owns at most one farm
- Animals are listed only for the farm's owner and members
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from jaothui.domain.entities import Farm
from jaothui.domain.policy import check_farm_access

from .models import (
    CreateFarmInput,
    FarmAnimalsOutput,
    FarmListOutput,
    FarmOutput,
    FarmSummary,
    FarmValidationError,
    ListFarmAnimalsInput,
    ListFarmsInput,
)
from .ports import FarmAnimalsPort, FarmRepoPort, TimePort

logger = logging.getLogger(__name__)

NAME_MAX = 100
PROVINCE_MAX = 100


def validate_farm_fields(name: str, province: str) -> list[FarmValidationError]:
    errors = []
    if not name.strip():
        errors.append(FarmValidationError("validation_error", "กรุณากรอกชื่อฟาร์ม", "name"))
    elif len(name.strip()) > NAME_MAX:
        errors.append(
            FarmValidationError("validation_error", "ชื่อฟาร์มต้องไม่เกิน 100 ตัวอักษร", "name")
        )
    if not province.strip():
        errors.append(FarmValidationError("validation_error", "กรุณากรอกจังหวัด", "province"))
    elif len(province.strip()) > PROVINCE_MAX:
        errors.append(
            FarmValidationError("validation_error", "จังหวัดต้องไม่เกิน 100 ตัวอักษร", "province")
        )
    return errors


def run_create_farm(
    inp: CreateFarmInput,
    *,
    repo: FarmRepoPort,
    time_port: TimePort | None = None,
) -> FarmOutput:
    errors = validate_farm_fields(inp.name, inp.province)
    if errors:
        return FarmOutput(farm=None, errors=errors, success=False)

    if any(f.owner_id == inp.actor_id for f in repo.list_for_profile(inp.actor_id)):
        return FarmOutput(
            farm=None,
            errors=[
                FarmValidationError(
                    "farm_already_owned",
                    "คุณเป็นเจ้าของฟาร์มอยู่แล้ว ไม่สามารถสร้างฟาร์มใหม่ได้",
                )
            ],
            success=False,
        )

    now = time_port.now_utc() if time_port is not None else datetime.now(UTC)
    farm = repo.save(
        Farm(
            name=inp.name.strip(),
            province=inp.province.strip(),
            owner_id=inp.actor_id,
            created_at=now,
            updated_at=now,
        )
    )
    logger.info("Profile %s created farm %s", inp.actor_id, farm.id)
    return FarmOutput(farm=farm)


def run_list_farms(inp: ListFarmsInput, *, repo: FarmRepoPort) -> FarmListOutput:
    return FarmListOutput(
        farms=tuple(
            FarmSummary(farm=f, is_owner=f.owner_id == inp.actor_id)
            for f in repo.list_for_profile(inp.actor_id)
        )
    )


def run_list_farm_animals(
    inp: ListFarmAnimalsInput,
    *,
    repo: FarmRepoPort,
    animals: FarmAnimalsPort,
) -> FarmAnimalsOutput:
    access = check_farm_access(inp.farm_id, inp.actor_id, repo)
    if not access.allowed:
        return FarmAnimalsOutput(
            errors=[
                FarmValidationError("farm_access_denied", "ไม่พบฟาร์มหรือคุณไม่มีสิทธิ์เข้าถึง")
            ],
            success=False,
        )
    return FarmAnimalsOutput(farm=access.farm, animals=tuple(animals.list_by_farm(inp.farm_id)))


def run(
    inp: CreateFarmInput | ListFarmsInput | ListFarmAnimalsInput,
    *,
    repo: FarmRepoPort,
    animals: FarmAnimalsPort | None = None,
    time_port: TimePort | None = None,
) -> FarmOutput | FarmListOutput | FarmAnimalsOutput:
    if isinstance(inp, CreateFarmInput):
        return run_create_farm(inp, repo=repo, time_port=time_port)
    elif isinstance(inp, ListFarmsInput):
        return run_list_farms(inp, repo=repo)
    elif isinstance(inp, ListFarmAnimalsInput):
        assert animals is not None
        return run_list_farm_animals(inp, repo=repo, animals=animals)
    raise ValueError(f"Unknown input type: {type(inp)}")
