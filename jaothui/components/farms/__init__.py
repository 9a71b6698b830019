"""
Farms component - farm creation, a profile's farms and a farm's animals.
"""

from .component import (
    run,
    run_create_farm,
    run_list_farm_animals,
    run_list_farms,
    validate_farm_fields,
)
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

__all__ = [
    # Entry points
    "run",
    "run_create_farm",
    "run_list_farm_animals",
    "run_list_farms",
    # Models
    "CreateFarmInput",
    "FarmAnimalsOutput",
    "FarmListOutput",
    "FarmOutput",
    "FarmSummary",
    "FarmValidationError",
    "ListFarmAnimalsInput",
    "ListFarmsInput",
    # Ports
    "FarmAnimalsPort",
    "FarmRepoPort",
    "TimePort",
    # Validation
    "validate_farm_fields",
]
