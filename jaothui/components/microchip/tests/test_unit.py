"""
Microchip component unit tests.

Tests for generation, collision retry, exhaustion and format helpers.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from jaothui.components.microchip import (
    EXHAUSTED_MESSAGE,
    GenerateBatchInput,
    GenerateMicrochipInput,
    GenerationExhaustedError,
    MicrochipBatchOutput,
    MicrochipConfig,
    MicrochipOutput,
    ValidateMicrochipInput,
    ValidateMicrochipOutput,
    generate_many,
    generate_microchip,
    normalize_farm_segment,
    parse_microchip,
    run,
    run_generate,
    run_generate_batch,
    run_validate,
    validate_microchip_format,
)

FARM_ID = "f47ac10b-58cc-4372-a567-0e02b2c3d479"
# 2024-06-15T12:00:00Z is 1718452800000 ms since the epoch.
FIXED_NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


# --- Mock Implementations ---


@dataclass
class MockTimePort:
    """Mock time port for deterministic testing."""

    fixed_time: datetime = FIXED_NOW

    def now_utc(self) -> datetime:
        return self.fixed_time


@dataclass
class ScriptedChecker:
    """Answers collisions from a script, then reports free."""

    collisions: list[bool] = field(default_factory=list)
    checked: list[str] = field(default_factory=list)

    def microchip_exists(self, microchip: str) -> bool:
        self.checked.append(microchip)
        if self.collisions:
            return self.collisions.pop(0)
        return False


@dataclass
class AlwaysTakenChecker:
    checked: list[str] = field(default_factory=list)

    def microchip_exists(self, microchip: str) -> bool:
        self.checked.append(microchip)
        return True


@dataclass
class MockRulesPort:
    prefix: str = "TH"
    max_attempts: int = 10
    on_exhausted: str = "fail"
    batch_max: int = 100

    def get_prefix(self) -> str:
        return self.prefix

    def get_max_attempts(self) -> int:
        return self.max_attempts

    def get_on_exhausted(self) -> str:
        return self.on_exhausted

    def get_batch_max(self) -> int:
        return self.batch_max


# --- Fixtures ---


@pytest.fixture
def time_port() -> MockTimePort:
    return MockTimePort()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


# --- Format ---


class TestMicrochipFormat:
    def test_has_twenty_characters_with_prefix(self, time_port, rng) -> None:
        code = generate_microchip(FARM_ID, ScriptedChecker(), clock=time_port, rng=rng)

        assert len(code) == 20
        assert code.startswith("TH")
        assert validate_microchip_format(code)

    def test_farm_segment_strips_hyphens_and_uppercases(self, time_port, rng) -> None:
        code = generate_microchip(FARM_ID, ScriptedChecker(), clock=time_port, rng=rng)

        assert code[2:8] == "F47AC1"

    def test_timestamp_segment_is_last_eight_millisecond_digits(
        self, time_port, rng
    ) -> None:
        code = generate_microchip(FARM_ID, ScriptedChecker(), clock=time_port, rng=rng)

        assert code[8:16] == "52800000"

    def test_timestamp_segment_includes_milliseconds(self, rng) -> None:
        clock = MockTimePort(datetime(2024, 6, 15, 12, 0, 0, 123456, tzinfo=UTC))

        code = generate_microchip(FARM_ID, ScriptedChecker(), clock=clock, rng=rng)

        assert code[8:16] == "52800123"

    def test_random_segment_in_range(self, time_port) -> None:
        for seed in range(50):
            code = generate_microchip(
                FARM_ID, ScriptedChecker(), clock=time_port, rng=random.Random(seed)
            )
            assert 1000 <= int(code[16:]) <= 9999

    def test_short_farm_id_is_padded(self) -> None:
        assert normalize_farm_segment("ab-1") == "AB1000"

    def test_non_alphanumeric_characters_removed(self) -> None:
        assert normalize_farm_segment("ฟาร์ม_12 x") == "12X000"


# --- Collision retry ---


class TestCollisionRetry:
    def test_first_free_candidate_returned_after_three_collisions(
        self, time_port, rng
    ) -> None:
        checker = ScriptedChecker(collisions=[True, True, True, False])

        code = generate_microchip(FARM_ID, checker, clock=time_port, rng=rng)

        assert len(checker.checked) == 4
        assert code == checker.checked[-1]

    def test_exhaustion_raises_after_max_attempts(self, time_port, rng) -> None:
        checker = AlwaysTakenChecker()

        with pytest.raises(GenerationExhaustedError) as exc_info:
            generate_microchip(FARM_ID, checker, clock=time_port, rng=rng)

        assert len(checker.checked) == 10
        assert exc_info.value.attempts == 10
        assert exc_info.value.last_candidate == checker.checked[-1]

    def test_max_attempts_from_config(self, time_port, rng) -> None:
        checker = AlwaysTakenChecker()

        with pytest.raises(GenerationExhaustedError):
            generate_microchip(
                FARM_ID,
                checker,
                config=MicrochipConfig(max_attempts=3),
                clock=time_port,
                rng=rng,
            )

        assert len(checker.checked) == 3

    def test_bypass_returns_last_candidate(self, time_port, rng) -> None:
        checker = AlwaysTakenChecker()

        code = generate_microchip(
            FARM_ID,
            checker,
            config=MicrochipConfig(on_exhausted="bypass"),
            clock=time_port,
            rng=rng,
        )

        assert code == checker.checked[-1]
        assert len(checker.checked) == 10


# --- Batch ---


class TestGenerateMany:
    def test_codes_are_distinct_within_batch(self, time_port, rng) -> None:
        codes = generate_many(FARM_ID, 5, ScriptedChecker(), clock=time_port, rng=rng)

        assert len(codes) == 5
        assert len(set(codes)) == 5

    @pytest.mark.parametrize("count", [0, 101])
    def test_count_out_of_range(self, count: int) -> None:
        with pytest.raises(ValueError):
            generate_many(FARM_ID, count, ScriptedChecker())


# --- Parsing ---


class TestParseMicrochip:
    def test_valid_code_split_into_segments(self) -> None:
        parsed = parse_microchip("THF47AC1528000001234")

        assert parsed is not None
        assert parsed.farm_segment == "F47AC1"
        assert parsed.timestamp == "52800000"
        assert parsed.random == "1234"

    @pytest.mark.parametrize(
        "code",
        ["", "XXF47AC1528000001234", "THf47ac1528000001234", "THF47AC15280000012345"],
    )
    def test_invalid_code_returns_none(self, code: str) -> None:
        assert parse_microchip(code) is None


# --- Component entry points ---


class TestRunGenerate:
    def test_success(self, time_port, rng) -> None:
        result = run_generate(
            GenerateMicrochipInput(farm_id=FARM_ID),
            checker=ScriptedChecker(),
            time_port=time_port,
            rng=rng,
        )

        assert result.success
        assert result.microchip is not None
        assert result.microchip.startswith("THF47AC1")

    def test_exhaustion_is_retryable_error(self, time_port, rng) -> None:
        result = run_generate(
            GenerateMicrochipInput(farm_id=FARM_ID),
            checker=AlwaysTakenChecker(),
            time_port=time_port,
            rng=rng,
        )

        assert not result.success
        assert result.microchip is None
        assert result.errors[0].code == "generation_exhausted"
        assert result.errors[0].retryable is True
        assert result.errors[0].message == EXHAUSTED_MESSAGE

    def test_rules_port_limits_attempts(self, time_port, rng) -> None:
        checker = AlwaysTakenChecker()

        result = run_generate(
            GenerateMicrochipInput(farm_id=FARM_ID),
            checker=checker,
            time_port=time_port,
            rules=MockRulesPort(max_attempts=2),
            rng=rng,
        )

        assert not result.success
        assert len(checker.checked) == 2

    def test_blank_farm_id_rejected(self) -> None:
        checker = ScriptedChecker()

        result = run_generate(GenerateMicrochipInput(farm_id="  "), checker=checker)

        assert not result.success
        assert result.errors[0].code == "invalid_farm_id"
        assert checker.checked == []

    def test_short_format(self, time_port, rng) -> None:
        result = run_generate(
            GenerateMicrochipInput(farm_id=FARM_ID, format="short"),
            checker=ScriptedChecker(),
            time_port=time_port,
            rng=rng,
        )

        assert result.success
        assert result.microchip is not None
        assert len(result.microchip) == 16
        assert result.microchip.startswith("THd479800000")
        assert result.microchip[12:].isalnum()
        assert result.microchip[12:] == result.microchip[12:].upper()


class TestRunGenerateBatch:
    def test_success(self, time_port, rng) -> None:
        result = run_generate_batch(
            GenerateBatchInput(farm_id=FARM_ID, count=3),
            checker=ScriptedChecker(),
            time_port=time_port,
            rng=rng,
        )

        assert result.success
        assert len(result.microchips) == 3

    def test_count_above_rules_limit(self) -> None:
        result = run_generate_batch(
            GenerateBatchInput(farm_id=FARM_ID, count=11),
            checker=ScriptedChecker(),
            rules=MockRulesPort(batch_max=10),
        )

        assert not result.success
        assert result.errors[0].code == "invalid_count"


class TestRunValidate:
    def test_valid(self) -> None:
        result = run_validate(ValidateMicrochipInput(microchip="THF47AC1528000001234"))

        assert result.valid
        assert result.farm_segment == "F47AC1"

    def test_invalid(self) -> None:
        result = run_validate(ValidateMicrochipInput(microchip="TH123"))

        assert not result.valid
        assert result.farm_segment is None


class TestRunDispatcher:
    def test_dispatches_by_input_type(self, time_port, rng) -> None:
        checker = ScriptedChecker()

        single = run(
            GenerateMicrochipInput(farm_id=FARM_ID),
            checker=checker,
            time_port=time_port,
            rng=rng,
        )
        batch = run(
            GenerateBatchInput(farm_id=FARM_ID, count=2),
            checker=checker,
            time_port=time_port,
            rng=rng,
        )
        validated = run(ValidateMicrochipInput(microchip="TH123"))

        assert isinstance(single, MicrochipOutput)
        assert isinstance(batch, MicrochipBatchOutput)
        assert isinstance(validated, ValidateMicrochipOutput)

    def test_generation_requires_checker(self) -> None:
        with pytest.raises(ValueError):
            run(GenerateMicrochipInput(farm_id=FARM_ID))
