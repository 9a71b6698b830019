"""
Recurrence component - projection and materialization of recurring schedules.

Invariants:
- Occurrences are generated strictly forward from their base date
- Creation never goes beyond now + creation horizon (2 years by default)
- Backfill never goes beyond now + backfill horizon (6 months by default)
- One failed occurrence never aborts the rest of a run
"""

from __future__ import annotations

from ._impl import RecurrenceConfig, RecurrenceService, next_occurrence
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


def _build_config(rules: RulesPort | None) -> RecurrenceConfig:
    """Build recurrence config from rules port."""
    if rules is None:
        return RecurrenceConfig()

    return RecurrenceConfig(
        max_additional_occurrences=rules.get_max_additional_occurrences(),
        creation_horizon_months=rules.get_creation_horizon_months(),
        backfill_horizon_months=rules.get_backfill_horizon_months(),
        backfill_due_window_days=rules.get_backfill_due_window_days(),
        dedupe_tolerance_hours=rules.get_dedupe_tolerance_hours(),
    )


def _result_errors(results: list[OccurrenceResult]) -> list[RecurrenceValidationError]:
    return [
        RecurrenceValidationError(
            code="occurrence_creation_failed",
            message=r.error or "",
            schedule_id=r.source_schedule_id,
        )
        for r in results
        if r.error is not None
    ]


# --- Component Entry Points ---


def run_next_occurrence(inp: NextOccurrenceInput) -> NextOccurrenceOutput:
    """Project one step; `advanced` is False for an unrecognized unit."""
    nxt = next_occurrence(inp.base_date, inp.unit)
    return NextOccurrenceOutput(next_date=nxt, advanced=nxt > inp.base_date)


def run_materialize(
    inp: MaterializeInput,
    *,
    repo: OccurrenceRepoPort,
    time_port: TimePort | None = None,
    rules: RulesPort | None = None,
) -> MaterializeOutput:
    """
    Pre-create future occurrences of a newly created recurring schedule.

    Args:
        inp: Input carrying the persisted base schedule.
        repo: Occurrence repository port.
        time_port: Optional time port for the creation horizon.
        rules: Optional rules port for configuration.

    Returns:
        MaterializeOutput with the created occurrences.
        Failed occurrences appear in `errors`; success stays True because
        the base schedule is unaffected.
    """
    service = RecurrenceService(repo=repo, time_port=time_port, config=_build_config(rules))
    created, results = service.materialize(inp.base)

    return MaterializeOutput(
        created=tuple(created),
        results=tuple(results),
        errors=_result_errors(results),
        success=True,
    )


def run_process_recurring(
    inp: ProcessRecurringInput,
    *,
    repo: OccurrenceRepoPort,
    time_port: TimePort | None = None,
    rules: RulesPort | None = None,
    owners: OwnerLookupPort | None = None,
) -> ProcessRecurringOutput:
    """
    Periodic backfill of recurring schedules.

    Args:
        inp: Backfill input (no parameters).
        repo: Occurrence repository port.
        time_port: Optional time port for the due window and horizon.
        rules: Optional rules port for configuration.
        owners: Optional owner lookup for per-owner summary logs.

    Returns:
        ProcessRecurringOutput with processed/created/total counts.
    """
    service = RecurrenceService(
        repo=repo,
        time_port=time_port,
        config=_build_config(rules),
        owners=owners,
    )
    processed, created, total, results = service.process_recurring()

    return ProcessRecurringOutput(
        processed=processed,
        created=created,
        total=total,
        results=tuple(results),
        errors=_result_errors(results),
        success=True,
    )


def run(
    inp: NextOccurrenceInput | MaterializeInput | ProcessRecurringInput,
    *,
    repo: OccurrenceRepoPort | None = None,
    time_port: TimePort | None = None,
    rules: RulesPort | None = None,
    owners: OwnerLookupPort | None = None,
) -> NextOccurrenceOutput | MaterializeOutput | ProcessRecurringOutput:
    """
    Main entry point for the recurrence component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, NextOccurrenceInput):
        return run_next_occurrence(inp)

    if repo is None:
        raise ValueError("OccurrenceRepoPort is required for materialize operations")

    if isinstance(inp, MaterializeInput):
        return run_materialize(inp, repo=repo, time_port=time_port, rules=rules)
    elif isinstance(inp, ProcessRecurringInput):
        return run_process_recurring(
            inp, repo=repo, time_port=time_port, rules=rules, owners=owners
        )
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
