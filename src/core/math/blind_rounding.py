"""
Blind Rounding — Стратегии округления значений блайндов

Две политики округления, выбираемые явно (RoundingPolicy):

NEAREST_CHIP_PAYABLE (default):
    1. Округление до ближайшего кратного base unit (half-up)
    2. Для номиналов по убыванию, не превышающих значение: ближайшее кратное
       номинала; если оно в пределах CHIP_PAYABLE_TOLERANCE (20 %) от
       значения — берётся оно (предпочтение 25/50 вместо 23/46)
    3. Результат не ниже минимального номинала

FLOOR_TWO_SIGNIFICANT:
    1. Floor до двух значащих цифр (1234 → 1200, 312 → 310, 31 → 30)
    2. Floor до кратного base unit
    3. Результат не ниже минимального номинала

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Результат — целое число, кратное base unit (или 0 для value <= 0)
2. Результат > 0 для value > 0
3. Детерминизм: одинаковый вход → одинаковый выход
"""

from enum import Enum
from typing import Final, Sequence

from src.core.math.numerical_safeguards import (
    base_unit,
    ceil_safe,
    floor_safe,
    is_valid_float,
    round_half_up,
)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Допустимое относительное отклонение при "притягивании" к кратному номинала
CHIP_PAYABLE_TOLERANCE: Final[float] = 0.2


class RoundingPolicy(str, Enum):
    """Политика округления блайндов."""

    NEAREST_CHIP_PAYABLE = "NEAREST_CHIP_PAYABLE"
    FLOOR_TWO_SIGNIFICANT = "FLOOR_TWO_SIGNIFICANT"


# =============================================================================
# NEAREST CHIP-PAYABLE
# =============================================================================


def round_to_chip_payable(value: float, denominations: Sequence[int]) -> int:
    """
    Округление до ближайшего значения, оплачиваемого фишками набора.

    Args:
        value: Исходное значение блайнда (может быть float после умножения)
        denominations: Номиналы фишек

    Returns:
        Целое значение, кратное base unit

    Examples:
        >>> round_to_chip_payable(200, [5, 10, 25, 100, 500, 1000])
        200
        >>> round_to_chip_payable(46, [5, 10, 25, 100, 500, 1000])
        50
        >>> round_to_chip_payable(23, [5, 10, 25, 100, 500, 1000])
        20
        >>> round_to_chip_payable(2, [5, 10, 25])
        5
    """
    if not is_valid_float(value):
        raise ValueError(f"value must be a valid float (not NaN/Inf), got {value}")
    if value <= 0:
        return 0
    if not denominations:
        raise ValueError("denominations cannot be empty")

    unit = base_unit(denominations)
    smallest = min(denominations)

    rounded = round_half_up(value / unit) * unit

    for denom in sorted(denominations, reverse=True):
        if denom > value:
            continue
        lower = floor_safe(value / denom) * denom
        upper = ceil_safe(value / denom) * denom
        # Равноудалённость → верхнее кратное
        candidate = lower if (value - lower) < (upper - value) else upper
        if abs(candidate - value) / value <= CHIP_PAYABLE_TOLERANCE:
            rounded = candidate
            break

    if rounded < smallest:
        rounded = smallest

    return int(rounded)


# =============================================================================
# FLOOR TWO SIGNIFICANT DIGITS
# =============================================================================


def floor_to_two_significant(value: float) -> int:
    """
    Floor до двух значащих цифр; для значений >= 10 результат кратен 10.

    Examples:
        >>> floor_to_two_significant(1234)
        1200
        >>> floor_to_two_significant(312)
        310
        >>> floor_to_two_significant(31)
        30
        >>> floor_to_two_significant(7)
        7
    """
    if not is_valid_float(value):
        raise ValueError(f"value must be a valid float (not NaN/Inf), got {value}")
    if value <= 0:
        return 0

    integer = floor_safe(value)
    if integer < 10:
        return integer

    digits = len(str(integer))
    step = 10 ** max(digits - 2, 1)
    return (integer // step) * step


def floor_to_chip_payable_two_significant(value: float, denominations: Sequence[int]) -> int:
    """
    Floor до двух значащих цифр, затем до кратного base unit.

    Examples:
        >>> floor_to_chip_payable_two_significant(46, [5, 10, 25])
        40
        >>> floor_to_chip_payable_two_significant(3, [5, 10, 25])
        5
        >>> floor_to_chip_payable_two_significant(1234, [25, 100])
        1200
    """
    if not is_valid_float(value):
        raise ValueError(f"value must be a valid float (not NaN/Inf), got {value}")
    if value <= 0:
        return 0
    if not denominations:
        raise ValueError("denominations cannot be empty")

    unit = base_unit(denominations)
    smallest = min(denominations)

    floored = (floor_to_two_significant(value) // unit) * unit
    return max(floored, smallest)


# =============================================================================
# DISPATCH
# =============================================================================


def round_blind(
    value: float,
    denominations: Sequence[int],
    policy: RoundingPolicy = RoundingPolicy.NEAREST_CHIP_PAYABLE,
) -> int:
    """
    Округление блайнда по выбранной политике.

    Args:
        value: Исходное значение
        denominations: Номиналы фишек
        policy: RoundingPolicy

    Returns:
        Целое значение блайнда
    """
    if policy == RoundingPolicy.FLOOR_TWO_SIGNIFICANT:
        return floor_to_chip_payable_two_significant(value, denominations)
    return round_to_chip_payable(value, denominations)
