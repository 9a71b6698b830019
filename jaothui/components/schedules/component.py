"""
Schedules component - activity schedules, status changes and conversion.

Invariants:
- Only farm owners and members act on an animal's schedules
- A new recurring schedule gets its future occurrences pre-created
- COMPLETED and CANCELLED schedules never change status again
"""

from __future__ import annotations

from jaothui.components.recurrence import MaterializeInput, run_materialize
from jaothui.components.recurrence import RulesPort as RecurrenceRulesPort
from jaothui.domain.policy import FarmLookupPort

from ._impl import ScheduleError as LegacyError
from ._impl import ScheduleService
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


def _convert_errors(legacy_errors: list[LegacyError]) -> list[ScheduleValidationError]:
    return [
        ScheduleValidationError(code=e.code, message=e.message, field=e.field)
        for e in legacy_errors
    ]


def _create_service(
    repo: ScheduleRepoPort,
    animals: AnimalLookupPort,
    farms: FarmLookupPort,
    time_port: TimePort | None,
) -> ScheduleService:
    return ScheduleService(repo=repo, animals=animals, farms=farms, time_port=time_port)


# --- Component Entry Points ---


def run_create(
    inp: CreateScheduleInput,
    *,
    repo: ScheduleRepoPort,
    animals: AnimalLookupPort,
    farms: FarmLookupPort,
    time_port: TimePort | None = None,
    recurrence_rules: RecurrenceRulesPort | None = None,
) -> ScheduleOutput:
    """
    Create a schedule; recurring schedules also get their next occurrences.

    Args:
        inp: Schedule fields plus the acting profile.
        repo: Schedule repository port.
        animals: Animal lookup port.
        farms: Farm lookup port for the access check.
        time_port: Optional time port.
        recurrence_rules: Optional recurrence rules (cap and horizon).

    Returns:
        ScheduleOutput with the base schedule and the number of additional
        occurrences created. Occurrence failures do not fail the output.
    """
    service = _create_service(repo, animals, farms, time_port)
    schedule, legacy_errors = service.create(
        animal_id=inp.animal_id,
        actor_id=inp.actor_id,
        title=inp.title,
        scheduled_date=inp.scheduled_date,
        description=inp.description,
        notes=inp.notes,
        status=inp.status,
        is_recurring=inp.is_recurring,
        recurrence_type=inp.recurrence_type,
    )

    if schedule is None:
        return ScheduleOutput(
            schedule=None,
            errors=_convert_errors(legacy_errors),
            success=False,
        )

    if not schedule.is_recurring:
        return ScheduleOutput(schedule=schedule)

    materialized = run_materialize(
        MaterializeInput(base=schedule),
        repo=repo,
        time_port=time_port,
        rules=recurrence_rules,
    )
    return ScheduleOutput(
        schedule=schedule,
        additional_occurrences=len(materialized.created),
        occurrence_results=materialized.results,
    )


def run_update_status(
    inp: UpdateStatusInput,
    *,
    repo: ScheduleRepoPort,
    animals: AnimalLookupPort,
    farms: FarmLookupPort,
    time_port: TimePort | None = None,
) -> ScheduleOutput:
    """Move a schedule to a new status."""
    service = _create_service(repo, animals, farms, time_port)
    schedule, legacy_errors = service.update_status(inp.schedule_id, inp.actor_id, inp.status)

    errors = _convert_errors(legacy_errors)
    return ScheduleOutput(schedule=schedule, errors=errors, success=len(errors) == 0)


def run_convert_to_activity(
    inp: ConvertToActivityInput,
    *,
    repo: ScheduleRepoPort,
    animals: AnimalLookupPort,
    farms: FarmLookupPort,
    time_port: TimePort | None = None,
) -> ActivityOutput:
    """
    Record a COMPLETED activity from a schedule and complete the schedule.

    Schedules already COMPLETED or CANCELLED are rejected with
    "invalid_transition".
    """
    service = _create_service(repo, animals, farms, time_port)
    converted, legacy_errors = service.convert_to_activity(
        inp.schedule_id,
        inp.actor_id,
        notes=inp.notes,
        activity_date=inp.activity_date,
    )

    if converted is None:
        return ActivityOutput(
            activity=None,
            errors=_convert_errors(legacy_errors),
            success=False,
        )

    schedule, activity = converted
    return ActivityOutput(activity=activity, schedule=schedule)


def run_list_history(
    inp: ListAnimalHistoryInput,
    *,
    repo: ScheduleRepoPort,
    activities: ActivityListPort,
    animals: AnimalLookupPort,
    farms: FarmLookupPort,
) -> AnimalHistoryOutput:
    """An animal's schedules and completed activities, for farm owners and members."""
    service = _create_service(repo, animals, farms, None)
    history, legacy_errors = service.history(inp.animal_id, inp.actor_id, activities)

    if history is None:
        return AnimalHistoryOutput(errors=_convert_errors(legacy_errors), success=False)

    schedules, done = history
    return AnimalHistoryOutput(schedules=tuple(schedules), activities=tuple(done))

def run(
    inp: CreateScheduleInput | UpdateStatusInput | ConvertToActivityInput | ListAnimalHistoryInput,
    *,
    repo: ScheduleRepoPort,
    animals: AnimalLookupPort,
    farms: FarmLookupPort,
    time_port: TimePort | None = None,
    recurrence_rules: RecurrenceRulesPort | None = None,
    activities: ActivityListPort | None = None,
) -> ScheduleOutput | ActivityOutput | AnimalHistoryOutput:
    """
    Main entry point for the schedules component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, CreateScheduleInput):
        return run_create(
            inp,
            repo=repo,
            animals=animals,
            farms=farms,
            time_port=time_port,
            recurrence_rules=recurrence_rules,
        )
    elif isinstance(inp, UpdateStatusInput):
        return run_update_status(
            inp, repo=repo, animals=animals, farms=farms, time_port=time_port
        )
    elif isinstance(inp, ConvertToActivityInput):
        return run_convert_to_activity(
            inp, repo=repo, animals=animals, farms=farms, time_port=time_port
        )
    elif isinstance(inp, ListAnimalHistoryInput):
        assert activities is not None
        return run_list_history(
            inp, repo=repo, activities=activities, animals=animals, farms=farms
        )
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
