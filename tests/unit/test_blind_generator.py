"""
Тесты для Blind Structure Generator

Проверяет:
1. Стартовый big blind = floor(stack / depth) после округления
2. Строгое возрастание big blind на всех уровнях
3. Активацию ante с ante_start_level
4. Подстановку default коэффициента для невалидного increase_rate
5. Политики остановки и предел числа уровней
6. Детерминизм
"""

import pytest

from src.blinds import (
    BlindGeneratorConfig,
    BlindStructureGenerator,
    StoppingPolicy,
    generate_blind_structure,
)
from src.core.domain import DEFAULT_CHIP_INVENTORY, ChipInventory, InvalidConfiguration
from src.core.math import RoundingPolicy


@pytest.fixture
def generator() -> BlindStructureGenerator:
    return BlindStructureGenerator(DEFAULT_CHIP_INVENTORY)


def assert_strictly_increasing(structure) -> None:
    big_blinds = [level.big_blind for level in structure.levels]
    for previous, current in zip(big_blinds, big_blinds[1:]):
        assert current > previous


# =============================================================================
# STARTING LEVELS
# =============================================================================


class TestStartingLevels:
    """Тесты первых уровней (стек 10000, глубина 50, коэффициент 1.25)"""

    def test_first_level(self, generator: BlindStructureGenerator) -> None:
        structure = generator.generate(10000, starting_depth_bb=50, increase_rate=1.25)

        first = structure.level_at(1)
        assert first.big_blind == 200
        assert first.small_blind == 100
        assert first.ante == 0

    def test_second_level_rounded_to_chip_payable(
        self, generator: BlindStructureGenerator
    ) -> None:
        """250 → 300 (кратное 100, ровно 20 %)"""
        structure = generator.generate(10000)
        assert structure.level_at(2).big_blind == 300
        assert structure.level_at(2).small_blind == 150

    def test_ante_activation(self, generator: BlindStructureGenerator) -> None:
        structure = generator.generate(10000, ante_start_level=6)

        assert structure.level_at(5).ante == 0
        assert structure.level_at(6).ante == structure.level_at(6).big_blind
        for level in structure.levels:
            if level.level < 6:
                assert level.ante == 0
            else:
                assert level.ante == level.big_blind

    def test_ante_from_first_level(self, generator: BlindStructureGenerator) -> None:
        structure = generator.generate(10000, ante_start_level=1)
        assert all(level.ante == level.big_blind for level in structure.levels)

    def test_small_stack_starts_at_smallest_denomination(
        self, generator: BlindStructureGenerator
    ) -> None:
        structure = generator.generate(100)

        assert structure.level_at(1).big_blind == 5
        assert structure.level_at(1).small_blind == 5

    def test_floor_policy_first_levels(self) -> None:
        config = BlindGeneratorConfig(rounding_policy=RoundingPolicy.FLOOR_TWO_SIGNIFICANT)
        structure = BlindStructureGenerator(DEFAULT_CHIP_INVENTORY, config=config).generate(10000)

        assert structure.level_at(1).big_blind == 200
        assert structure.level_at(2).big_blind == 250
        assert structure.level_at(2).small_blind == 120


# =============================================================================
# MONOTONICITY
# =============================================================================


class TestMonotonicity:
    """Строгое возрастание big blind"""

    @pytest.mark.parametrize("policy", list(RoundingPolicy))
    @pytest.mark.parametrize("rate", [1.05, 1.1, 1.25, 1.5, 2.0])
    @pytest.mark.parametrize("stack", [100, 1000, 2300, 10000, 50000])
    def test_big_blind_strictly_increases(
        self, policy: RoundingPolicy, rate: float, stack: int
    ) -> None:
        config = BlindGeneratorConfig(rounding_policy=policy)
        structure = BlindStructureGenerator(DEFAULT_CHIP_INVENTORY, config=config).generate(
            stack, increase_rate=rate
        )
        assert_strictly_increasing(structure)

    def test_blinds_are_chip_payable(self, generator: BlindStructureGenerator) -> None:
        structure = generator.generate(25000, increase_rate=1.3)
        for level in structure.levels:
            assert level.big_blind % 5 == 0
            assert level.small_blind % 5 == 0
            assert 0 < level.small_blind <= level.big_blind

    def test_coarse_inventory_bumps_by_base_unit(self) -> None:
        inventory = ChipInventory(chips={25: 100, 100: 100})
        structure = BlindStructureGenerator(inventory).generate(1000, increase_rate=1.05)

        assert_strictly_increasing(structure)
        assert all(level.big_blind % 25 == 0 for level in structure.levels)


# =============================================================================
# INCREASE RATE
# =============================================================================


class TestIncreaseRate:
    """Подстановка default коэффициента скорости"""

    def test_rate_one_substituted_for_normal(self, generator: BlindStructureGenerator) -> None:
        structure = generator.generate(10000, speed="normal", increase_rate=1.0)

        assert structure.increase_rate == 1.25
        assert_strictly_increasing(structure)

    @pytest.mark.parametrize(
        "speed,rate,expected",
        [
            ("turbo", float("nan"), 1.4),
            ("slow", 0.5, 1.2),
            ("normal", float("inf"), 1.25),
            ("unknown", None, 1.25),
        ],
    )
    def test_invalid_rate_resolution(
        self, generator: BlindStructureGenerator, speed: str, rate: float, expected: float
    ) -> None:
        assert generator.resolve_increase_rate(rate, speed) == (expected, True)

    def test_valid_rate_kept(self, generator: BlindStructureGenerator) -> None:
        assert generator.resolve_increase_rate(1.33, "turbo") == (1.33, False)


# =============================================================================
# STOPPING POLICY
# =============================================================================


class TestStoppingPolicy:
    """Политики остановки генерации"""

    def test_double_stack(self, generator: BlindStructureGenerator) -> None:
        structure = generator.generate(10000, increase_rate=1.25)

        threshold = 2 * 10000
        assert structure.levels[-1].big_blind * 1.25 >= threshold
        assert structure.levels[-2].big_blind * 1.25 < threshold

    def test_half_stack_capped(self) -> None:
        config = BlindGeneratorConfig(stopping_policy=StoppingPolicy.HALF_STACK_CAPPED)
        structure = BlindStructureGenerator(DEFAULT_CHIP_INVENTORY, config=config).generate(
            10000, increase_rate=1.25
        )

        assert structure.num_levels <= 50
        assert structure.levels[-1].big_blind * 1.25 >= 5000
        assert structure.levels[-2].big_blind * 1.25 < 5000

    def test_half_stack_level_cap(self) -> None:
        config = BlindGeneratorConfig(stopping_policy=StoppingPolicy.HALF_STACK_CAPPED)
        structure = BlindStructureGenerator(DEFAULT_CHIP_INVENTORY, config=config).generate(
            1_000_000, increase_rate=1.01
        )
        assert structure.num_levels == 50

    def test_max_levels_bound(self) -> None:
        config = BlindGeneratorConfig(max_levels=5)
        structure = BlindStructureGenerator(DEFAULT_CHIP_INVENTORY, config=config).generate(10000)
        assert structure.num_levels == 5

    def test_stopping_bounds(self, generator: BlindStructureGenerator) -> None:
        assert generator.stopping_bounds(2300) == (4600.0, 500)

    def test_invalid_max_levels(self) -> None:
        with pytest.raises(InvalidConfiguration, match="max_levels"):
            BlindStructureGenerator(DEFAULT_CHIP_INVENTORY, config=BlindGeneratorConfig(max_levels=0))


# =============================================================================
# TIMING AND VALIDATION
# =============================================================================


class TestTimingAndValidation:
    """Тайминг скорости и валидация входа"""

    def test_speed_timing_passed_through(self, generator: BlindStructureGenerator) -> None:
        structure = generator.generate(10000, speed="turbo")

        assert structure.speed == "turbo"
        assert structure.level_minutes == 10
        assert structure.break_frequency == 6
        assert structure.break_minutes == 10
        assert structure.estimated_duration_minutes == structure.num_levels * 10

    def test_unknown_speed_uses_normal(self, generator: BlindStructureGenerator) -> None:
        structure = generator.generate(10000, speed="ludicrous")

        assert structure.speed == "normal"
        assert structure.level_minutes == 20

    @pytest.mark.parametrize(
        "kwargs,match",
        [
            ({"starting_stack": 0}, "starting_stack"),
            ({"starting_stack": -100}, "starting_stack"),
            ({"starting_stack": 10000, "starting_depth_bb": 0}, "starting_depth_bb"),
            ({"starting_stack": 10000, "ante_start_level": 0}, "ante_start_level"),
        ],
    )
    def test_invalid_inputs(
        self, generator: BlindStructureGenerator, kwargs: dict, match: str
    ) -> None:
        with pytest.raises(InvalidConfiguration, match=match):
            generator.generate(**kwargs)

    def test_deterministic(self) -> None:
        first = generate_blind_structure(DEFAULT_CHIP_INVENTORY, 2300, increase_rate=1.3)
        second = generate_blind_structure(DEFAULT_CHIP_INVENTORY, 2300, increase_rate=1.3)
        assert first == second
