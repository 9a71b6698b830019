"""
Recurrence component - projection and materialization of recurring schedules.
"""

from ._impl import (
    RECURRENCE_STEPS,
    RecurrenceConfig,
    RecurrenceService,
    make_occurrence,
    next_occurrence,
    project_dates,
)
from .component import (
    run,
    run_materialize,
    run_next_occurrence,
    run_process_recurring,
)
from .models import (
    MaterializeInput,
    MaterializeOutput,
    NextOccurrenceInput,
    NextOccurrenceOutput,
    OccurrenceResult,
    ProcessRecurringInput,
    ProcessRecurringOutput,
    RecurrenceValidationError,
)
from .ports import OccurrenceRepoPort, OwnerLookupPort, RulesPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_materialize",
    "run_next_occurrence",
    "run_process_recurring",
    # Input models
    "MaterializeInput",
    "NextOccurrenceInput",
    "ProcessRecurringInput",
    # Output models
    "MaterializeOutput",
    "NextOccurrenceOutput",
    "OccurrenceResult",
    "ProcessRecurringOutput",
    "RecurrenceValidationError",
    # Ports
    "OccurrenceRepoPort",
    "OwnerLookupPort",
    "RulesPort",
    "TimePort",
    # Projection
    "RECURRENCE_STEPS",
    "RecurrenceConfig",
    "RecurrenceService",
    "make_occurrence",
    "next_occurrence",
    "project_dates",
]
