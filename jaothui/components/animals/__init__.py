"""
Animals component - animal registration, farm microchips and photos.
"""

from ._impl import (
    DUPLICATE_MICROCHIP_MESSAGE,
    MICROCHIP_IN_USE_MESSAGE,
    AnimalService,
    photo_url_for,
    validate_animal_fields,
)
from .component import (
    run,
    run_attach_photo,
    run_generate_farm_microchip,
    run_register,
)
from .models import (
    AnimalOutput,
    AnimalValidationError,
    AttachPhotoInput,
    FarmMicrochipOutput,
    GenerateFarmMicrochipInput,
    RegisterAnimalInput,
)
from .ports import (
    AnimalRepoPort,
    AnimalTypeLookupPort,
    DuplicateMicrochipError,
    FileStorePort,
    TimePort,
)

__all__ = [
    # Entry points
    "run",
    "run_attach_photo",
    "run_generate_farm_microchip",
    "run_register",
    # Input models
    "AttachPhotoInput",
    "GenerateFarmMicrochipInput",
    "RegisterAnimalInput",
    # Output models
    "AnimalOutput",
    "AnimalValidationError",
    "FarmMicrochipOutput",
    # Ports
    "AnimalRepoPort",
    "AnimalTypeLookupPort",
    "DuplicateMicrochipError",
    "FileStorePort",
    "TimePort",
    # Service
    "DUPLICATE_MICROCHIP_MESSAGE",
    "MICROCHIP_IN_USE_MESSAGE",
    "AnimalService",
    "photo_url_for",
    "validate_animal_fields",
]
