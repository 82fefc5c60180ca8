"""Minimum Liquidity Estimator — минимум мелких фишек для оплаты блайндов

По первым K уровням структуры оценивает, сколько фишек каждого номинала
нужно игроку, чтобы платить блайнды до того, как он накопит достаточно
стоимости для размена на крупные фишки.

Алгоритм:
1. Для каждого из первых K уровней small blind, big blind и ante
   раскладываются на номиналы независимо (decompose_amount)
2. По каждому номиналу берётся максимум по всем уровням и компонентам
3. Для нижних N номиналов (buffered_denomination_count) количество
   умножается на buffer_multiplier: блайнд платится многократно
"""

from dataclasses import dataclass
from typing import Final, Iterable, Sequence

from src.core.domain.blind_structure import BlindLevel, BlindStructure
from src.core.logging_config import get_logger
from src.core.math.numerical_safeguards import base_unit

logger = get_logger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_EARLY_LEVELS: Final[int] = 12
DEFAULT_BUFFER_MULTIPLIER: Final[int] = 6
DEFAULT_BUFFERED_DENOMINATION_COUNT: Final[int] = 3


@dataclass(frozen=True)
class LiquidityConfig:
    """Конфигурация Minimum Liquidity Estimator."""

    early_levels: int = DEFAULT_EARLY_LEVELS  # K: сколько уровней смотреть
    buffer_multiplier: int = DEFAULT_BUFFER_MULTIPLIER  # запас на повторные платежи
    buffered_denomination_count: int = DEFAULT_BUFFERED_DENOMINATION_COUNT


# =============================================================================
# DECOMPOSITION
# =============================================================================


def decompose_amount(amount: int, denominations: Iterable[int]) -> dict[int, int]:
    """
    Каноническое разложение суммы на фишки с предпочтением base unit.

    1. amount кратен base unit → только фишки base unit
    2. Иначе: максимум фишек base unit, затем остаток жадно от крупных
       номиналов к мелким, непокрытый остаток — ещё фишки base unit

    Если GCD сам не является номиналом (например, 2 и 5), его роль играет
    минимальный номинал.

    Examples:
        >>> decompose_amount(30, [5, 10, 25])
        {5: 6}
        >>> decompose_amount(0, [5, 10, 25])
        {}
        >>> decompose_amount(7, [5, 10])
        {5: 2}
        >>> decompose_amount(27, [2, 5])
        {2: 14}
    """
    if amount <= 0:
        return {}

    denoms = sorted(set(denominations))
    if not denoms:
        return {}

    unit = base_unit(denoms)
    if unit not in denoms:
        unit = denoms[0]

    if amount % unit == 0:
        return {unit: amount // unit}

    chips: dict[int, int] = {}
    remaining = amount

    base_count = remaining // unit
    if base_count > 0:
        chips[unit] = base_count
        remaining -= base_count * unit

    for denom in reversed(denoms):
        if remaining <= 0:
            break
        if denom <= unit:
            continue
        count = remaining // denom
        if count > 0:
            chips[denom] = count
            remaining -= count * denom

    if remaining > 0:
        # ceil(remaining / unit)
        chips[unit] = chips.get(unit, 0) + -(-remaining // unit)

    return chips


# =============================================================================
# ESTIMATOR
# =============================================================================


class MinimumLiquidityEstimator:
    """Оценка liquidity floor по ранним уровням структуры блайндов."""

    def __init__(self, config: LiquidityConfig | None = None):
        self.config = config or LiquidityConfig()

    def estimate(
        self, levels: Sequence[BlindLevel], denominations: Iterable[int]
    ) -> dict[int, int]:
        """Минимальное количество фишек по номиналам.

        Args:
            levels: уровни структуры (используются первые early_levels)
            denominations: номиналы набора

        Returns:
            номинал → минимум фишек (только номиналы с ненулевым минимумом)
        """
        denoms = sorted(set(denominations))
        required: dict[int, int] = {}

        for level in list(levels)[: self.config.early_levels]:
            for amount in level.amounts():
                for denom, count in decompose_amount(amount, denoms).items():
                    required[denom] = max(required.get(denom, 0), count)

        buffered = set(denoms[: self.config.buffered_denomination_count])
        for denom in list(required):
            if denom in buffered:
                required[denom] *= self.config.buffer_multiplier

        logger.debug(
            "min_liquidity_estimated",
            levels_inspected=min(len(levels), self.config.early_levels),
            min_chips=required,
        )

        return required

    def estimate_for_structure(
        self, structure: BlindStructure, denominations: Iterable[int]
    ) -> dict[int, int]:
        return self.estimate(structure.early_levels(self.config.early_levels), denominations)


def estimate_min_liquidity(
    levels: Sequence[BlindLevel],
    denominations: Iterable[int],
    config: LiquidityConfig | None = None,
) -> dict[int, int]:
    """MinimumLiquidityEstimator.estimate без явного создания оценщика."""
    return MinimumLiquidityEstimator(config).estimate(levels, denominations)
