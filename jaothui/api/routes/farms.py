"""Farm creation and the farms and animals a profile can reach."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from jaothui.adapters.clock import SystemClock
from jaothui.adapters.sqlite.repos import SQLiteAnimalRepo, SQLiteFarmRepo
from jaothui.api.deps import get_animal_repo, get_clock, get_current_profile, get_farm_repo
from jaothui.api.errors import raise_for_errors
from jaothui.api.schemas import AnimalResponse, FarmCreateRequest, FarmResponse
from jaothui.components.farms import (
    CreateFarmInput,
    ListFarmAnimalsInput,
    ListFarmsInput,
    run_create_farm,
    run_list_farm_animals,
    run_list_farms,
)
from jaothui.domain.entities import Profile

router = APIRouter()


@router.get("", response_model=list[FarmResponse])
def list_farms(
    current_profile: Profile = Depends(get_current_profile),
    farm_repo: SQLiteFarmRepo = Depends(get_farm_repo),
) -> list[FarmResponse]:
    """Farms the profile owns, then farms it is a member of."""
    result = run_list_farms(ListFarmsInput(actor_id=current_profile.id), repo=farm_repo)
    return [FarmResponse.from_entity(s.farm, s.is_owner) for s in result.farms]


@router.post("", response_model=FarmResponse, status_code=status.HTTP_201_CREATED)
def create_farm(
    data: FarmCreateRequest,
    current_profile: Profile = Depends(get_current_profile),
    farm_repo: SQLiteFarmRepo = Depends(get_farm_repo),
    clock: SystemClock = Depends(get_clock),
) -> FarmResponse:
    result = run_create_farm(
        CreateFarmInput(actor_id=current_profile.id, name=data.name, province=data.province),
        repo=farm_repo,
        time_port=clock,
    )
    raise_for_errors(result.errors)
    assert result.farm is not None
    return FarmResponse.from_entity(result.farm, is_owner=True)


@router.get("/{farm_id}/animals", response_model=list[AnimalResponse])
def list_farm_animals(
    farm_id: UUID,
    current_profile: Profile = Depends(get_current_profile),
    farm_repo: SQLiteFarmRepo = Depends(get_farm_repo),
    animal_repo: SQLiteAnimalRepo = Depends(get_animal_repo),
) -> list[AnimalResponse]:
    result = run_list_farm_animals(
        ListFarmAnimalsInput(actor_id=current_profile.id, farm_id=farm_id),
        repo=farm_repo,
        animals=animal_repo,
    )
    raise_for_errors(result.errors)
    return [AnimalResponse.from_entity(a) for a in result.animals]
