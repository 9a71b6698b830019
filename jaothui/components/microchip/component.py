"""
Microchip component - unique animal identifier generation.

Invariants:
- A returned microchip was absent from persisted animals when checked
- At most max_attempts uniqueness checks per generation
- Exhaustion is reported as a retryable error, never as an unchecked code
  (unless rules select the "bypass" policy)
"""

from __future__ import annotations

import random

from ._impl import (
    GenerationExhaustedError,
    MicrochipConfig,
    generate_many,
    generate_microchip,
    generate_short_microchip,
    parse_microchip,
)
from .models import (
    GenerateBatchInput,
    GenerateMicrochipInput,
    MicrochipBatchOutput,
    MicrochipOutput,
    MicrochipValidationError,
    ValidateMicrochipInput,
    ValidateMicrochipOutput,
)
from .ports import RulesPort, TimePort, UniquenessCheckPort

EXHAUSTED_MESSAGE = "ไม่สามารถสร้างไมโครชิปที่ไม่ซ้ำได้ กรุณาลองใหม่อีกครั้ง"
INVALID_FARM_MESSAGE = "ไม่พบรหัสฟาร์ม"


def _build_config(rules: RulesPort | None) -> MicrochipConfig:
    """Build generator config from rules port."""
    if rules is None:
        return MicrochipConfig()

    on_exhausted = "bypass" if rules.get_on_exhausted() == "bypass" else "fail"
    return MicrochipConfig(
        prefix=rules.get_prefix(),
        max_attempts=rules.get_max_attempts(),
        on_exhausted=on_exhausted,
        batch_max=rules.get_batch_max(),
    )


def _exhausted_error() -> MicrochipValidationError:
    return MicrochipValidationError(
        code="generation_exhausted",
        message=EXHAUSTED_MESSAGE,
        retryable=True,
    )


def _invalid_farm_error() -> MicrochipValidationError:
    return MicrochipValidationError(code="invalid_farm_id", message=INVALID_FARM_MESSAGE)


# --- Component Entry Points ---


def run_generate(
    inp: GenerateMicrochipInput,
    *,
    checker: UniquenessCheckPort,
    time_port: TimePort | None = None,
    rules: RulesPort | None = None,
    rng: random.Random | None = None,
) -> MicrochipOutput:
    """
    Generate one microchip for a farm.

    Args:
        inp: Input containing farm_id and the requested format.
        checker: Uniqueness check against persisted animals.
        time_port: Optional time port for the timestamp segment.
        rules: Optional rules port for configuration.
        rng: Optional random source (tests pass a seeded Random).

    Returns:
        MicrochipOutput with the code, or a retryable
        "generation_exhausted" error.
    """
    if not inp.farm_id.strip():
        return MicrochipOutput(microchip=None, errors=[_invalid_farm_error()], success=False)

    config = _build_config(rules)
    generator = generate_short_microchip if inp.format == "short" else generate_microchip

    try:
        code = generator(inp.farm_id, checker, config=config, clock=time_port, rng=rng)
    except GenerationExhaustedError:
        return MicrochipOutput(microchip=None, errors=[_exhausted_error()], success=False)

    return MicrochipOutput(microchip=code)


def run_generate_batch(
    inp: GenerateBatchInput,
    *,
    checker: UniquenessCheckPort,
    time_port: TimePort | None = None,
    rules: RulesPort | None = None,
    rng: random.Random | None = None,
) -> MicrochipBatchOutput:
    """Generate several distinct microchips for one farm."""
    if not inp.farm_id.strip():
        return MicrochipBatchOutput(microchips=(), errors=[_invalid_farm_error()], success=False)

    config = _build_config(rules)
    if inp.count < 1 or inp.count > config.batch_max:
        return MicrochipBatchOutput(
            microchips=(),
            errors=[
                MicrochipValidationError(
                    code="invalid_count",
                    message=f"จำนวนต้องอยู่ระหว่าง 1 ถึง {config.batch_max}",
                )
            ],
            success=False,
        )

    try:
        codes = generate_many(
            inp.farm_id, inp.count, checker, config=config, clock=time_port, rng=rng
        )
    except GenerationExhaustedError:
        return MicrochipBatchOutput(microchips=(), errors=[_exhausted_error()], success=False)

    return MicrochipBatchOutput(microchips=tuple(codes))


def run_validate(
    inp: ValidateMicrochipInput,
    *,
    rules: RulesPort | None = None,
) -> ValidateMicrochipOutput:
    """Check a microchip against the primary format and split its segments."""
    config = _build_config(rules)
    parsed = parse_microchip(inp.microchip, config.prefix)
    if parsed is None:
        return ValidateMicrochipOutput(valid=False)

    return ValidateMicrochipOutput(
        valid=True,
        farm_segment=parsed.farm_segment,
        timestamp=parsed.timestamp,
        random=parsed.random,
    )


def run(
    inp: GenerateMicrochipInput | GenerateBatchInput | ValidateMicrochipInput,
    *,
    checker: UniquenessCheckPort | None = None,
    time_port: TimePort | None = None,
    rules: RulesPort | None = None,
    rng: random.Random | None = None,
) -> MicrochipOutput | MicrochipBatchOutput | ValidateMicrochipOutput:
    """
    Main entry point for the microchip component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ValidateMicrochipInput):
        return run_validate(inp, rules=rules)

    if checker is None:
        raise ValueError("UniquenessCheckPort is required for generation")

    if isinstance(inp, GenerateMicrochipInput):
        return run_generate(inp, checker=checker, time_port=time_port, rules=rules, rng=rng)
    elif isinstance(inp, GenerateBatchInput):
        return run_generate_batch(
            inp, checker=checker, time_port=time_port, rules=rules, rng=rng
        )
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
