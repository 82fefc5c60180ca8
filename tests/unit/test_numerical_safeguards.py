"""
Тесты для модуля Numerical Safeguards

Проверяет:
1. Base unit (GCD номиналов) и кратность
2. Округление вниз до шага, round-half-up, floor/ceil с epsilon
3. NaN/Inf санитизацию
4. Валидацию целочисленных параметров
"""


import math

import pytest

from src.core.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_ABS,
    base_unit,
    ceil_safe,
    floor_safe,
    floor_to_increment,
    is_multiple_of,
    is_valid_float,
    round_half_up,
    sanitize_float,
    validate_non_negative_int,
    validate_positive_int,
)

# =============================================================================
# BASE UNIT
# =============================================================================


class TestBaseUnit:
    """Тесты для base_unit"""

    def test_standard_set(self) -> None:
        """Стандартный набор → 5"""
        assert base_unit([5, 10, 25, 100, 500, 1000]) == 5

    def test_large_denominations_only(self) -> None:
        """Без мелких номиналов base unit растёт"""
        assert base_unit([25, 100, 500]) == 25

    def test_coprime_denominations(self) -> None:
        """Взаимно простые номиналы → 1"""
        assert base_unit([2, 5]) == 1

    def test_single_denomination(self) -> None:
        assert base_unit([100]) == 100

    def test_empty_is_one(self) -> None:
        """Пустой набор → 1"""
        assert base_unit([]) == 1

    def test_accepts_mapping_keys(self) -> None:
        """Итерация по dict даёт номиналы"""
        assert base_unit({10: 3, 25: 4}) == 5


class TestIsMultipleOf:
    """Тесты для is_multiple_of"""

    def test_multiple(self) -> None:
        assert is_multiple_of(2300, 5) is True

    def test_not_multiple(self) -> None:
        assert is_multiple_of(2302, 5) is False

    def test_zero_is_multiple(self) -> None:
        assert is_multiple_of(0, 25) is True

    def test_non_positive_unit_rejected(self) -> None:
        with pytest.raises(ValueError, match="unit must be positive"):
            is_multiple_of(10, 0)


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


class TestFloorToIncrement:
    """Тесты для floor_to_increment"""

    def test_floor_to_ten(self) -> None:
        assert floor_to_increment(2355, 10) == 2350

    def test_floor_to_hundred(self) -> None:
        assert floor_to_increment(2350, 100) == 2300

    def test_exact_multiple_unchanged(self) -> None:
        assert floor_to_increment(2200, 100) == 2200

    def test_below_increment_is_zero(self) -> None:
        assert floor_to_increment(7, 10) == 0

    def test_invalid_increment(self) -> None:
        with pytest.raises(ValueError, match="increment must be positive"):
            floor_to_increment(100, 0)


class TestRoundHalfUp:
    """Тесты для round_half_up"""

    def test_half_rounds_up(self) -> None:
        """2.5 → 3 (не banker's rounding)"""
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1

    def test_below_half_rounds_down(self) -> None:
        assert round_half_up(2.4) == 2

    def test_float_noise_near_half(self) -> None:
        """Ошибка представления float не ломает половину"""
        assert round_half_up(2.4999999999999996) == 3

    def test_nan_rejected(self) -> None:
        with pytest.raises(ValueError, match="valid float"):
            round_half_up(float("nan"))


class TestFloorCeilSafe:
    """Тесты для floor_safe / ceil_safe"""

    def test_floor_absorbs_representation_error(self) -> None:
        assert floor_safe(199.99999999999997) == 200

    def test_floor_regular(self) -> None:
        assert floor_safe(199.5) == 199

    def test_ceil_absorbs_representation_error(self) -> None:
        assert ceil_safe(200.00000000000003) == 200

    def test_ceil_regular(self) -> None:
        assert ceil_safe(200.5) == 201

    def test_inf_rejected(self) -> None:
        with pytest.raises(ValueError):
            floor_safe(float("inf"))
        with pytest.raises(ValueError):
            ceil_safe(float("-inf"))

    def test_epsilon_is_tiny(self) -> None:
        assert 0 < EPS_FLOAT_COMPARE_ABS < 1e-6


# =============================================================================
# NaN/Inf САНИТИЗАЦИЯ
# =============================================================================


class TestFloatSanitization:
    """Тесты для is_valid_float / sanitize_float"""

    def test_valid_float(self) -> None:
        assert is_valid_float(1.25) is True
        assert is_valid_float(0) is True

    def test_invalid_floats(self) -> None:
        assert is_valid_float(float("nan")) is False
        assert is_valid_float(float("inf")) is False
        assert is_valid_float(-math.inf) is False

    def test_non_numeric_is_invalid(self) -> None:
        assert is_valid_float("abc") is False
        assert is_valid_float(None) is False

    def test_sanitize_keeps_valid(self) -> None:
        assert sanitize_float(1.4, fallback=1.25) == 1.4

    def test_sanitize_replaces_invalid(self) -> None:
        assert sanitize_float(float("nan"), fallback=1.25) == 1.25
        assert sanitize_float(float("inf"), fallback=0.0) == 0.0
        assert sanitize_float(None, fallback=0.0) == 0.0


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


class TestIntValidation:
    """Тесты для validate_positive_int / validate_non_negative_int"""

    def test_positive_ok(self) -> None:
        validate_positive_int(1, "players")

    @pytest.mark.parametrize("value", [0, -1])
    def test_positive_rejects_non_positive(self, value: int) -> None:
        with pytest.raises(ValueError, match="players must be positive"):
            validate_positive_int(value, "players")

    @pytest.mark.parametrize("value", [1.0, "3", True])
    def test_positive_rejects_non_int(self, value: object) -> None:
        with pytest.raises(ValueError, match="must be an integer"):
            validate_positive_int(value, "players")

    def test_non_negative_accepts_zero(self) -> None:
        validate_non_negative_int(0, "reentries")

    def test_non_negative_rejects_negative(self) -> None:
        with pytest.raises(ValueError, match="reentries must be non-negative"):
            validate_non_negative_int(-1, "reentries")
