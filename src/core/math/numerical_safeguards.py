"""
Numerical Safeguards — Integer Chip Math Primitives

Модуль обеспечивает численную устойчивость всех расчётов с фишками:
- Base unit (GCD всех номиналов) и кратность значений
- Округление вниз до шага (increment) без float-накопления
- Round-half-up для float → int (детерминированно, без banker's rounding)
- NaN/Inf санитизация для коэффициентов прогрессии блайндов
- Валидация целочисленных параметров

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все значения фишек — целые числа; float допускается только как
   промежуточный результат умножения на коэффициент и сразу округляется
2. NaN/Inf никогда не пропагируют (заменяются на fallback)
3. Float никогда не сравниваются на равенство
4. Все операции детерминированы и воспроизводимы
"""

import math
from functools import reduce
from typing import Final, Iterable

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Epsilon для сравнения float (абсолютная толерантность)
# Используется при округлении, чтобы 199.99999999997 не превращалось в 199
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-9


# =============================================================================
# BASE UNIT
# =============================================================================


def base_unit(denominations: Iterable[int]) -> int:
    """
    Base unit набора номиналов — GCD всех номиналов.

    Любая сумма, набираемая фишками, кратна base unit.

    Args:
        denominations: Номиналы фишек (положительные целые)

    Returns:
        GCD номиналов; 1 для пустого набора

    Examples:
        >>> base_unit([5, 10, 25, 100, 500, 1000])
        5
        >>> base_unit([25, 100])
        25
        >>> base_unit([])
        1
    """
    values = [int(d) for d in denominations]
    if not values:
        return 1
    return reduce(math.gcd, values)


def is_multiple_of(value: int, unit: int) -> bool:
    """
    Проверка кратности value по unit.

    Examples:
        >>> is_multiple_of(2300, 5)
        True
        >>> is_multiple_of(2302, 5)
        False
    """
    if unit <= 0:
        raise ValueError(f"unit must be positive, got {unit}")
    return value % unit == 0


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


def floor_to_increment(value: int, increment: int) -> int:
    """
    Округление вниз до ближайшего кратного increment.

    Args:
        value: Исходное значение (целое, >= 0)
        increment: Шаг округления (> 0)

    Returns:
        Наибольшее кратное increment, не превышающее value

    Examples:
        >>> floor_to_increment(2355, 10)
        2350
        >>> floor_to_increment(2350, 100)
        2300
        >>> floor_to_increment(7, 10)
        0
    """
    if increment <= 0:
        raise ValueError(f"increment must be positive, got {increment}")
    return (int(value) // increment) * increment


def round_half_up(value: float) -> int:
    """
    Округление float до ближайшего целого, половина — вверх.

    В отличие от встроенного round() не использует banker's rounding,
    поэтому round_half_up(2.5) == 3. Малая epsilon-поправка защищает от
    значений вида 2.4999999999999996, полученных умножением на коэффициент.

    Examples:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(2.4)
        2
        >>> round_half_up(9.2)
        9
    """
    if not is_valid_float(value):
        raise ValueError(f"value must be a valid float (not NaN/Inf), got {value}")
    return int(math.floor(value + 0.5 + EPS_FLOAT_COMPARE_ABS))


def floor_safe(value: float) -> int:
    """
    math.floor с epsilon-защитой от ошибок представления float.

    Examples:
        >>> floor_safe(199.99999999999997)
        200
        >>> floor_safe(199.5)
        199
    """
    if not is_valid_float(value):
        raise ValueError(f"value must be a valid float (not NaN/Inf), got {value}")
    return int(math.floor(value + EPS_FLOAT_COMPARE_ABS))


def ceil_safe(value: float) -> int:
    """
    math.ceil с epsilon-защитой от ошибок представления float.

    Examples:
        >>> ceil_safe(200.00000000000003)
        200
        >>> ceil_safe(200.5)
        201
    """
    if not is_valid_float(value):
        raise ValueError(f"value must be a valid float (not NaN/Inf), got {value}")
    return int(math.ceil(value - EPS_FLOAT_COMPARE_ABS))


# =============================================================================
# NaN/Inf САНИТИЗАЦИЯ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, что значение является валидным конечным числом.

    Examples:
        >>> is_valid_float(1.25)
        True
        >>> is_valid_float(float('nan'))
        False
        >>> is_valid_float(float('inf'))
        False
    """
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def sanitize_float(value: float, fallback: float) -> float:
    """
    Замена NaN/Inf (и нечисловых значений) на fallback.

    Examples:
        >>> sanitize_float(1.4, fallback=1.25)
        1.4
        >>> sanitize_float(float('nan'), fallback=1.25)
        1.25
        >>> sanitize_float("abc", fallback=1.25)
        1.25
    """
    if not is_valid_float(value):
        return fallback
    return float(value)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_positive_int(value: int, name: str) -> None:
    """
    Валидация, что значение — положительное целое.

    Raises:
        ValueError: Если value не int или value <= 0
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")


def validate_non_negative_int(value: int, name: str) -> None:
    """
    Валидация, что значение — неотрицательное целое.

    Raises:
        ValueError: Если value не int или value < 0
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
