"""
Microchip component - unique animal identifier generation.
"""

from ._impl import (
    DEFAULT_CONFIG,
    GenerationExhaustedError,
    MicrochipConfig,
    ParsedMicrochip,
    build_microchip,
    build_short_microchip,
    generate_many,
    generate_microchip,
    generate_short_microchip,
    normalize_farm_segment,
    parse_microchip,
    validate_microchip_format,
)
from .component import (
    EXHAUSTED_MESSAGE,
    run,
    run_generate,
    run_generate_batch,
    run_validate,
)
from .models import (
    GenerateBatchInput,
    GenerateMicrochipInput,
    MicrochipBatchOutput,
    MicrochipFormat,
    MicrochipOutput,
    MicrochipValidationError,
    ValidateMicrochipInput,
    ValidateMicrochipOutput,
)
from .ports import RulesPort, TimePort, UniquenessCheckPort

__all__ = [
    # Entry points
    "run",
    "run_generate",
    "run_generate_batch",
    "run_validate",
    # Input models
    "GenerateBatchInput",
    "GenerateMicrochipInput",
    "ValidateMicrochipInput",
    # Output models
    "MicrochipBatchOutput",
    "MicrochipFormat",
    "MicrochipOutput",
    "MicrochipValidationError",
    "ValidateMicrochipOutput",
    # Ports
    "RulesPort",
    "TimePort",
    "UniquenessCheckPort",
    # Generator
    "DEFAULT_CONFIG",
    "EXHAUSTED_MESSAGE",
    "GenerationExhaustedError",
    "MicrochipConfig",
    "ParsedMicrochip",
    "build_microchip",
    "build_short_microchip",
    "generate_many",
    "generate_microchip",
    "generate_short_microchip",
    "normalize_farm_segment",
    "parse_microchip",
    "validate_microchip_format",
]
