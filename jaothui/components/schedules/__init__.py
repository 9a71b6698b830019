"""
Schedules component - activity schedules, status changes and conversion.
"""

from ._impl import (
    ACTIVITY_NOTES_TEMPLATE,
    ScheduleError,
    ScheduleService,
    ensure_utc,
    validate_schedule_fields,
)
from .component import (
    run,
    run_convert_to_activity,
    run_create,
    run_list_history,
    run_update_status,
)
from .models import (
    ActivityOutput,
    AnimalHistoryOutput,
    ConvertToActivityInput,
    CreateScheduleInput,
    ListAnimalHistoryInput,
    ScheduleOutput,
    ScheduleValidationError,
    UpdateStatusInput,
)
from .ports import ActivityListPort, AnimalLookupPort, ScheduleRepoPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_convert_to_activity",
    "run_create",
    "run_list_history",
    "run_update_status",
    # Input models
    "ConvertToActivityInput",
    "CreateScheduleInput",
    "ListAnimalHistoryInput",
    "UpdateStatusInput",
    # Output models
    "ActivityOutput",
    "AnimalHistoryOutput",
    "ScheduleOutput",
    "ScheduleValidationError",
    # Ports
    "ActivityListPort",
    "AnimalLookupPort",
    "ScheduleRepoPort",
    "TimePort",
    # Service
    "ACTIVITY_NOTES_TEMPLATE",
    "ScheduleError",
    "ScheduleService",
    "ensure_utc",
    "validate_schedule_fields",
]
