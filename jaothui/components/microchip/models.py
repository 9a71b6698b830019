"""
Microchip component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

MicrochipFormat = Literal["primary", "short"]


# --- Validation Error ---


@dataclass(frozen=True)
class MicrochipValidationError:
    """Microchip generation error."""

    code: str
    message: str
    retryable: bool = False


# --- Input Models ---


@dataclass(frozen=True)
class GenerateMicrochipInput:
    """Input for generating a single microchip for a farm."""

    farm_id: str
    format: MicrochipFormat = "primary"


@dataclass(frozen=True)
class GenerateBatchInput:
    """Input for generating several distinct microchips for one farm."""

    farm_id: str
    count: int


@dataclass(frozen=True)
class ValidateMicrochipInput:
    microchip: str


# --- Output Models ---


@dataclass(frozen=True)
class MicrochipOutput:
    """Output for single generation."""

    microchip: str | None
    errors: list[MicrochipValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class MicrochipBatchOutput:
    """Output for batch generation."""

    microchips: tuple[str, ...]
    errors: list[MicrochipValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ValidateMicrochipOutput:
    """Output for format validation; segments are set when valid."""

    valid: bool
    farm_segment: str | None = None
    timestamp: str | None = None
    random: str | None = None
    errors: list[MicrochipValidationError] = field(default_factory=list)
    success: bool = True
