"""Animal registration, farm microchips and photos."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from jaothui.adapters.clock import SystemClock
from jaothui.adapters.fs.filestore import FileSystemStore
from jaothui.adapters.sqlite.repos import SQLiteAnimalRepo, SQLiteAnimalTypeRepo, SQLiteFarmRepo
from jaothui.api.deps import (
    RATE_LIMITED_MESSAGE,
    MicrochipRulesAdapter,
    UploadRulesAdapter,
    get_animal_repo,
    get_animal_type_repo,
    get_clock,
    get_current_profile,
    get_farm_repo,
    get_file_store,
    get_microchip_rules,
    get_rate_limiter,
    get_upload_rules,
)
from jaothui.api.errors import error_detail, raise_for_errors
from jaothui.api.schemas import (
    AnimalCreateRequest,
    AnimalCreateResponse,
    AnimalResponse,
    GenerateMicrochipRequest,
    MicrochipResponse,
)
from jaothui.app_shell.rate_limit import RateLimiter
from jaothui.components.animals import (
    AttachPhotoInput,
    GenerateFarmMicrochipInput,
    RegisterAnimalInput,
    run_attach_photo,
    run_generate_farm_microchip,
    run_register,
)
from jaothui.domain.entities import AnimalType, Profile

router = APIRouter()


@router.get("/types", response_model=list[AnimalType])
def list_animal_types(
    type_repo: SQLiteAnimalTypeRepo = Depends(get_animal_type_repo),
) -> list[AnimalType]:
    return type_repo.list_all()


@router.post("", response_model=AnimalCreateResponse, status_code=status.HTTP_201_CREATED)
def create_animal(
    data: AnimalCreateRequest,
    current_profile: Profile = Depends(get_current_profile),
    animal_repo: SQLiteAnimalRepo = Depends(get_animal_repo),
    type_repo: SQLiteAnimalTypeRepo = Depends(get_animal_type_repo),
    farm_repo: SQLiteFarmRepo = Depends(get_farm_repo),
    clock: SystemClock = Depends(get_clock),
    microchip_rules: MicrochipRulesAdapter = Depends(get_microchip_rules),
) -> AnimalCreateResponse:
    """Register an animal; a microchip is generated when none is given."""
    result = run_register(
        RegisterAnimalInput(
            actor_id=current_profile.id,
            farm_id=data.farm_id,
            animal_type_id=data.animal_type_id,
            name=data.name,
            microchip=data.microchip,
            birth_date=data.birth_date,
            weight=data.weight,
            height=data.height,
            color=data.color,
            father_name=data.father_name,
            mother_name=data.mother_name,
        ),
        repo=animal_repo,
        animal_types=type_repo,
        farms=farm_repo,
        time_port=clock,
        microchip_rules=microchip_rules,
    )
    raise_for_errors(result.errors)
    assert result.animal is not None

    return AnimalCreateResponse(
        message="เพิ่มสัตว์เลี้ยงสำเร็จ",
        animal_id=result.animal.id,
        microchip=result.animal.microchip,
        animal=AnimalResponse.from_entity(result.animal),
    )


@router.post("/generate-microchip", response_model=MicrochipResponse)
def generate_microchip(
    data: GenerateMicrochipRequest,
    current_profile: Profile = Depends(get_current_profile),
    animal_repo: SQLiteAnimalRepo = Depends(get_animal_repo),
    farm_repo: SQLiteFarmRepo = Depends(get_farm_repo),
    clock: SystemClock = Depends(get_clock),
    microchip_rules: MicrochipRulesAdapter = Depends(get_microchip_rules),
) -> MicrochipResponse:
    """Issue an unused short-format microchip for the form to prefill."""
    result = run_generate_farm_microchip(
        GenerateFarmMicrochipInput(actor_id=current_profile.id, farm_id=data.farm_id),
        repo=animal_repo,
        farms=farm_repo,
        time_port=clock,
        microchip_rules=microchip_rules,
    )
    raise_for_errors(result.errors)
    assert result.microchip is not None
    return MicrochipResponse(microchip=result.microchip)


@router.post("/{animal_id}/photo", response_model=AnimalResponse)
def upload_photo(
    animal_id: UUID,
    file: UploadFile = File(...),
    current_profile: Profile = Depends(get_current_profile),
    animal_repo: SQLiteAnimalRepo = Depends(get_animal_repo),
    farm_repo: SQLiteFarmRepo = Depends(get_farm_repo),
    file_store: FileSystemStore = Depends(get_file_store),
    clock: SystemClock = Depends(get_clock),
    upload_rules: UploadRulesAdapter = Depends(get_upload_rules),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> AnimalResponse:
    """Replace an animal's photo with a validated image."""
    if not limiter.check_upload(str(current_profile.id)):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=error_detail(RATE_LIMITED_MESSAGE, "rate_limited"),
        )

    content = file.file.read()
    result = run_attach_photo(
        AttachPhotoInput(
            animal_id=animal_id,
            actor_id=current_profile.id,
            filename=file.filename or "",
            content_type=file.content_type or "",
            data=content,
        ),
        repo=animal_repo,
        farms=farm_repo,
        file_store=file_store,
        time_port=clock,
        upload_rules=upload_rules,
    )
    raise_for_errors(result.errors)
    assert result.animal is not None
    return AnimalResponse.from_entity(result.animal)
