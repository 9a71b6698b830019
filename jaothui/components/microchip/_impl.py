"""
Microchip generation - collision-checked animal identifiers.

Primary format (20 characters):
    TH + farm segment (6) + epoch-millisecond tail (8) + random number (4)

Alternate format, issued by the standalone "generate microchip" endpoint:
    TH + last 4 characters of the farm id + epoch-millisecond tail (6)
       + 4 uppercase base-36 characters

Key behaviors:
- Each candidate is checked against persisted animals before it is returned
- Collisions trigger a fresh draw (new timestamp and random segment)
- The number of draws is bounded; exhaustion raises GenerationExhaustedError
  unless the configuration opts into bypass
- The generator never reserves a code; the animals.microchip UNIQUE
  constraint is the final arbiter for concurrent inserts
"""

from __future__ import annotations

import logging
import random
import re
import string
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Literal

from .ports import TimePort, UniquenessCheckPort

logger = logging.getLogger(__name__)

FARM_SEGMENT_LENGTH = 6
TIMESTAMP_DIGITS = 8
SHORT_TIMESTAMP_DIGITS = 6
SHORT_FARM_TAIL = 4
SHORT_RANDOM_LENGTH = 4

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")
_BASE36 = string.digits + string.ascii_uppercase


# --- Configuration ---


@dataclass(frozen=True)
class MicrochipConfig:
    """Generator configuration from rules."""

    prefix: str = "TH"
    max_attempts: int = 10
    on_exhausted: Literal["fail", "bypass"] = "fail"
    batch_max: int = 100


DEFAULT_CONFIG = MicrochipConfig()


# --- Errors ---


class GenerationExhaustedError(Exception):
    """No unused microchip was found within the attempt bound."""

    def __init__(self, attempts: int, last_candidate: str | None = None) -> None:
        super().__init__(f"Failed to generate unique microchip after {attempts} attempts")
        self.attempts = attempts
        self.last_candidate = last_candidate


# --- Segments ---


def normalize_farm_segment(farm_id: str, length: int = FARM_SEGMENT_LENGTH) -> str:
    """
    Strip separators, uppercase, and fit the farm id to `length` characters.

    Short ids are right-padded with "0".
    """
    cleaned = _NON_ALNUM.sub("", farm_id).upper()
    return cleaned[:length].ljust(length, "0")


def timestamp_segment(now: datetime, digits: int = TIMESTAMP_DIGITS) -> str:
    """Last `digits` digits of the epoch milliseconds of `now`."""
    millis = int(now.timestamp()) * 1000 + now.microsecond // 1000
    return str(millis)[-digits:].zfill(digits)


def random_segment(rng: random.Random) -> str:
    """Four-digit number in 1000..9999."""
    return str(rng.randint(1000, 9999))


def build_microchip(
    farm_id: str,
    now: datetime,
    rng: random.Random,
    prefix: str = "TH",
) -> str:
    return f"{prefix}{normalize_farm_segment(farm_id)}{timestamp_segment(now)}{random_segment(rng)}"


def build_short_microchip(
    farm_id: str,
    now: datetime,
    rng: random.Random,
    prefix: str = "TH",
) -> str:
    random_part = "".join(rng.choice(_BASE36) for _ in range(SHORT_RANDOM_LENGTH))
    return (
        f"{prefix}{farm_id[-SHORT_FARM_TAIL:]}"
        f"{timestamp_segment(now, SHORT_TIMESTAMP_DIGITS)}{random_part}"
    )


# --- Format helpers ---


def microchip_pattern(prefix: str = "TH") -> re.Pattern[str]:
    return re.compile(rf"^{re.escape(prefix)}[A-Z0-9]{{6}}\d{{8}}\d{{4}}$")


def validate_microchip_format(microchip: str, prefix: str = "TH") -> bool:
    """True when `microchip` has the primary 20-character format."""
    return bool(microchip_pattern(prefix).match(microchip))


@dataclass(frozen=True)
class ParsedMicrochip:
    farm_segment: str
    timestamp: str
    random: str


def parse_microchip(microchip: str, prefix: str = "TH") -> ParsedMicrochip | None:
    """Split a primary-format microchip into its segments; None if invalid."""
    if not validate_microchip_format(microchip, prefix):
        return None

    start = len(prefix)
    farm_end = start + FARM_SEGMENT_LENGTH
    ts_end = farm_end + TIMESTAMP_DIGITS
    return ParsedMicrochip(
        farm_segment=microchip[start:farm_end],
        timestamp=microchip[farm_end:ts_end],
        random=microchip[ts_end:],
    )


# --- Generation ---


def _generate(
    builder_name: str,
    farm_id: str,
    checker: UniquenessCheckPort,
    config: MicrochipConfig,
    clock: TimePort | None,
    rng: random.Random | None,
) -> str:
    rng = rng if rng is not None else random.SystemRandom()
    builder = build_short_microchip if builder_name == "short" else build_microchip

    candidate: str | None = None
    for attempt in range(1, config.max_attempts + 1):
        now = clock.now_utc() if clock is not None else datetime.now(UTC)
        candidate = builder(farm_id, now, rng, config.prefix)

        if not checker.microchip_exists(candidate):
            return candidate

        logger.debug("Microchip collision on attempt %d: %s", attempt, candidate)

    if config.on_exhausted == "bypass" and candidate is not None:
        logger.warning(
            "Microchip uniqueness not confirmed after %d attempts; "
            "deferring to the database constraint (%s)",
            config.max_attempts,
            candidate,
        )
        return candidate

    logger.warning(
        "Microchip generation exhausted after %d attempts for farm %s",
        config.max_attempts,
        farm_id,
    )
    raise GenerationExhaustedError(config.max_attempts, candidate)


def generate_microchip(
    farm_id: str,
    checker: UniquenessCheckPort,
    *,
    config: MicrochipConfig = DEFAULT_CONFIG,
    clock: TimePort | None = None,
    rng: random.Random | None = None,
) -> str:
    """
    Generate a primary-format microchip not yet used by any animal.

    Raises:
        GenerationExhaustedError: every candidate collided and the
            configuration does not allow bypass.
    """
    return _generate("primary", farm_id, checker, config, clock, rng)


def generate_short_microchip(
    farm_id: str,
    checker: UniquenessCheckPort,
    *,
    config: MicrochipConfig = DEFAULT_CONFIG,
    clock: TimePort | None = None,
    rng: random.Random | None = None,
) -> str:
    """Generate an alternate-format microchip (see module docstring)."""
    return _generate("short", farm_id, checker, config, clock, rng)


class _BatchChecker:
    """Treats codes already issued in the current batch as taken."""

    def __init__(self, checker: UniquenessCheckPort) -> None:
        self._checker = checker
        self.issued: set[str] = set()

    def microchip_exists(self, microchip: str) -> bool:
        return microchip in self.issued or self._checker.microchip_exists(microchip)


def generate_many(
    farm_id: str,
    count: int,
    checker: UniquenessCheckPort,
    *,
    config: MicrochipConfig = DEFAULT_CONFIG,
    clock: TimePort | None = None,
    rng: random.Random | None = None,
) -> list[str]:
    """Generate `count` distinct microchips for one farm."""
    if count <= 0 or count > config.batch_max:
        raise ValueError(f"Count must be between 1 and {config.batch_max}")

    batch = _BatchChecker(checker)
    codes: list[str] = []
    for _ in range(count):
        code = generate_microchip(farm_id, batch, config=config, clock=clock, rng=rng)
        batch.issued.add(code)
        codes.append(code)
    return codes
