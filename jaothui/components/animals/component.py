"""
Animals component - animal registration, farm microchips and photos.

Invariants:
- Only farm owners and members register or change a farm's animals
- Every stored animal has a microchip: supplied and unused, or generated
- A microchip taken between check and insert is reported, never overwritten
"""

from __future__ import annotations

import random

from jaothui.components.microchip import GenerateMicrochipInput, run_generate
from jaothui.components.microchip import RulesPort as MicrochipRulesPort
from jaothui.components.uploads import ValidateUploadInput, run_validate_upload
from jaothui.components.uploads import RulesPort as UploadRulesPort
from jaothui.domain.policy import FarmLookupPort

from ._impl import AnimalError as LegacyError
from ._impl import AnimalService
from .models import (
    AnimalOutput,
    AnimalValidationError,
    AttachPhotoInput,
    FarmMicrochipOutput,
    GenerateFarmMicrochipInput,
    RegisterAnimalInput,
)
from .ports import AnimalRepoPort, AnimalTypeLookupPort, FileStorePort, TimePort


def _convert_errors(legacy_errors: list[LegacyError]) -> list[AnimalValidationError]:
    return [
        AnimalValidationError(code=e.code, message=e.message, field=e.field)
        for e in legacy_errors
    ]


def _generation_errors(errors) -> list[AnimalValidationError]:
    return [
        AnimalValidationError(
            code=e.code, message=e.message, field="microchip", retryable=e.retryable
        )
        for e in errors
    ]


# --- Component Entry Points ---


def run_register(
    inp: RegisterAnimalInput,
    *,
    repo: AnimalRepoPort,
    animal_types: AnimalTypeLookupPort,
    farms: FarmLookupPort,
    time_port: TimePort | None = None,
    microchip_rules: MicrochipRulesPort | None = None,
    rng: random.Random | None = None,
) -> AnimalOutput:
    """
    Register an animal, generating its microchip when none is supplied.

    Args:
        inp: Animal fields plus the acting profile.
        repo: Animal repository (also the microchip uniqueness check).
        animal_types: Animal type lookup.
        farms: Farm lookup port for the access check.
        time_port: Optional time port.
        microchip_rules: Optional microchip generator rules.
        rng: Optional random source for generation.

    Returns:
        AnimalOutput with the stored animal, or errors. A generation failure
        carries a retryable "generation_exhausted" error.
    """
    service = AnimalService(repo=repo, farms=farms, animal_types=animal_types, time_port=time_port)
    microchip = inp.microchip.strip() if inp.microchip and inp.microchip.strip() else None

    legacy_errors = service.check_registration(
        actor_id=inp.actor_id,
        farm_id=inp.farm_id,
        animal_type_id=inp.animal_type_id,
        name=inp.name,
        microchip=microchip,
        birth_date=inp.birth_date,
        weight=inp.weight,
        height=inp.height,
        color=inp.color,
        father_name=inp.father_name,
        mother_name=inp.mother_name,
    )
    if legacy_errors:
        return AnimalOutput(animal=None, errors=_convert_errors(legacy_errors), success=False)

    if microchip is None:
        generated = run_generate(
            GenerateMicrochipInput(farm_id=str(inp.farm_id)),
            checker=repo,
            time_port=time_port,
            rules=microchip_rules,
            rng=rng,
        )
        if generated.microchip is None:
            return AnimalOutput(
                animal=None, errors=_generation_errors(generated.errors), success=False
            )
        microchip = generated.microchip

    animal, legacy_errors = service.create(
        farm_id=inp.farm_id,
        animal_type_id=inp.animal_type_id,
        name=inp.name,
        microchip=microchip,
        birth_date=inp.birth_date,
        weight=inp.weight,
        height=inp.height,
        color=inp.color,
        father_name=inp.father_name,
        mother_name=inp.mother_name,
    )
    errors = _convert_errors(legacy_errors)
    return AnimalOutput(animal=animal, errors=errors, success=len(errors) == 0)


def run_generate_farm_microchip(
    inp: GenerateFarmMicrochipInput,
    *,
    repo: AnimalRepoPort,
    farms: FarmLookupPort,
    time_port: TimePort | None = None,
    microchip_rules: MicrochipRulesPort | None = None,
    rng: random.Random | None = None,
) -> FarmMicrochipOutput:
    """Issue an unused short-format microchip for a farm the actor can access."""
    service = AnimalService(repo=repo, farms=farms, time_port=time_port)
    legacy_errors = service.check_farm(inp.farm_id, inp.actor_id)
    if legacy_errors:
        return FarmMicrochipOutput(
            microchip=None, errors=_convert_errors(legacy_errors), success=False
        )

    generated = run_generate(
        GenerateMicrochipInput(farm_id=str(inp.farm_id), format="short"),
        checker=repo,
        time_port=time_port,
        rules=microchip_rules,
        rng=rng,
    )
    if generated.microchip is None:
        return FarmMicrochipOutput(
            microchip=None, errors=_generation_errors(generated.errors), success=False
        )
    return FarmMicrochipOutput(microchip=generated.microchip)


def run_attach_photo(
    inp: AttachPhotoInput,
    *,
    repo: AnimalRepoPort,
    farms: FarmLookupPort,
    file_store: FileStorePort,
    time_port: TimePort | None = None,
    upload_rules: UploadRulesPort | None = None,
    rng: random.Random | None = None,
) -> AnimalOutput:
    """
    Validate an uploaded image and make it the animal's photo.

    Upload errors (type, signature, size) are passed through with their codes.
    """
    service = AnimalService(repo=repo, farms=farms, time_port=time_port)
    animal, legacy_errors = service.authorized_animal(inp.animal_id, inp.actor_id)
    if animal is None:
        return AnimalOutput(animal=None, errors=_convert_errors(legacy_errors), success=False)

    validated = run_validate_upload(
        ValidateUploadInput(
            filename=inp.filename,
            content_type=inp.content_type,
            data=inp.data,
            user_id=str(inp.actor_id),
        ),
        time_port=time_port,
        rules=upload_rules,
        rng=rng,
    )
    if validated.upload is None:
        return AnimalOutput(
            animal=None,
            errors=[
                AnimalValidationError(code=e.code, message=e.message, field=e.field)
                for e in validated.errors
            ],
            success=False,
        )

    saved = service.set_photo(animal, validated.upload.storage_name, inp.data, file_store)
    return AnimalOutput(animal=saved)


def run(
    inp: RegisterAnimalInput | GenerateFarmMicrochipInput | AttachPhotoInput,
    *,
    repo: AnimalRepoPort,
    farms: FarmLookupPort,
    animal_types: AnimalTypeLookupPort | None = None,
    file_store: FileStorePort | None = None,
    time_port: TimePort | None = None,
    microchip_rules: MicrochipRulesPort | None = None,
    upload_rules: UploadRulesPort | None = None,
    rng: random.Random | None = None,
) -> AnimalOutput | FarmMicrochipOutput:
    """
    Main entry point for the animals component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, RegisterAnimalInput):
        if animal_types is None:
            raise ValueError("AnimalTypeLookupPort is required for registration")
        return run_register(
            inp,
            repo=repo,
            animal_types=animal_types,
            farms=farms,
            time_port=time_port,
            microchip_rules=microchip_rules,
            rng=rng,
        )
    elif isinstance(inp, GenerateFarmMicrochipInput):
        return run_generate_farm_microchip(
            inp,
            repo=repo,
            farms=farms,
            time_port=time_port,
            microchip_rules=microchip_rules,
            rng=rng,
        )
    elif isinstance(inp, AttachPhotoInput):
        if file_store is None:
            raise ValueError("FileStorePort is required for photos")
        return run_attach_photo(
            inp,
            repo=repo,
            farms=farms,
            file_store=file_store,
            time_port=time_port,
            upload_rules=upload_rules,
            rng=rng,
        )
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
