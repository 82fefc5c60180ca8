"""
Тесты для модуля Blind Rounding

Проверяет обе политики округления блайндов:
1. NEAREST_CHIP_PAYABLE — ближайшее значение, оплачиваемое фишками
2. FLOOR_TWO_SIGNIFICANT — floor до двух значащих цифр
3. Диспетчер round_blind
"""

import pytest

from src.core.math.blind_rounding import (
    CHIP_PAYABLE_TOLERANCE,
    RoundingPolicy,
    floor_to_chip_payable_two_significant,
    floor_to_two_significant,
    round_blind,
    round_to_chip_payable,
)

STANDARD = [5, 10, 25, 100, 500, 1000]


class TestRoundToChipPayable:
    """Тесты для round_to_chip_payable"""

    def test_clean_value_unchanged(self) -> None:
        assert round_to_chip_payable(200, STANDARD) == 200

    def test_prefers_larger_denomination_multiple(self) -> None:
        """46 → 50 (кратное 25 в пределах 20 %)"""
        assert round_to_chip_payable(46, STANDARD) == 50

    def test_falls_back_to_smaller_denomination(self) -> None:
        """23: кратное 25 больше значения не рассматривается → 20"""
        assert round_to_chip_payable(23, STANDARD) == 20

    def test_equidistant_goes_up(self) -> None:
        """250 равноудалено от 200 и 300 → 300 (ровно 20 %)"""
        assert round_to_chip_payable(250, STANDARD) == 300

    def test_float_after_rate(self) -> None:
        """375.0 (300 × 1.25) → 400"""
        assert round_to_chip_payable(300 * 1.25, STANDARD) == 400

    def test_never_below_smallest(self) -> None:
        assert round_to_chip_payable(2, [5, 10, 25]) == 5

    def test_zero_and_negative(self) -> None:
        assert round_to_chip_payable(0, STANDARD) == 0
        assert round_to_chip_payable(-10, STANDARD) == 0

    def test_result_is_multiple_of_base_unit(self) -> None:
        for value in range(1, 3000, 7):
            assert round_to_chip_payable(value, STANDARD) % 5 == 0

    def test_nan_rejected(self) -> None:
        with pytest.raises(ValueError):
            round_to_chip_payable(float("nan"), STANDARD)

    def test_empty_denominations_rejected(self) -> None:
        with pytest.raises(ValueError, match="denominations"):
            round_to_chip_payable(100, [])

    def test_tolerance_constant(self) -> None:
        assert CHIP_PAYABLE_TOLERANCE == 0.2


class TestFloorToTwoSignificant:
    """Тесты для floor_to_two_significant"""

    @pytest.mark.parametrize(
        "value,expected",
        [(1234, 1200), (312, 310), (31, 30), (99, 90), (10, 10), (7, 7), (199.9, 190)],
    )
    def test_values(self, value: float, expected: int) -> None:
        assert floor_to_two_significant(value) == expected

    def test_zero(self) -> None:
        assert floor_to_two_significant(0) == 0


class TestFloorToChipPayableTwoSignificant:
    """Тесты для floor_to_chip_payable_two_significant"""

    def test_floors_to_base_unit(self) -> None:
        """1234 → 1200 (кратно 25)"""
        assert floor_to_chip_payable_two_significant(1234, [25, 100]) == 1200

    def test_two_significant_then_base_unit(self) -> None:
        """460 → 460 → 450 при base unit 25"""
        assert floor_to_chip_payable_two_significant(460, [25, 100]) == 450

    def test_never_below_smallest(self) -> None:
        assert floor_to_chip_payable_two_significant(3, [5, 10, 25]) == 5


class TestRoundBlind:
    """Тесты для диспетчера round_blind"""

    def test_default_policy_is_nearest(self) -> None:
        assert round_blind(46, STANDARD) == 50

    def test_floor_policy(self) -> None:
        assert round_blind(46, STANDARD, RoundingPolicy.FLOOR_TWO_SIGNIFICANT) == 40

    def test_policies_are_named_strings(self) -> None:
        assert RoundingPolicy("NEAREST_CHIP_PAYABLE") is RoundingPolicy.NEAREST_CHIP_PAYABLE
        assert RoundingPolicy.FLOOR_TWO_SIGNIFICANT.value == "FLOOR_TWO_SIGNIFICANT"
