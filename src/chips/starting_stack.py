"""
Starting Stack — Выбор стартового стека по числу игроков и re-entry

Выбирает "чистый" и гарантированно распределяемый стек:

    achievable   = max_achievable_stack (Capacity Calculator)
    theoretical  = floor(Σ d·inventory[d] / max_entries)   (без учёта cap)
    stack        = floor_100(min(achievable, theoretical))
    stack        = floor до кратного base unit
    stack        = max(smallest_denomination, min(stack, achievable))

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. stack <= max_achievable_stack (кроме вырожденного набора, где cap = 0
   и стек поднимается до минимального номинала)
2. stack кратен base unit набора
3. stack >= минимального номинала

Если потолок минимального номинала на вход равен 0, точная сумма
недостижима: решатель вернёт residual < 0, selector пишет warning.
"""

from typing import Final

from src.core.domain.chip_inventory import ChipInventory
from src.chips.capacity import compute_capacity, compute_max_entries
from src.core.logging_config import get_logger
from src.core.math.numerical_safeguards import floor_to_increment

logger = get_logger(__name__)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Шаг "чистого" стартового стека
STARTING_STACK_INCREMENT: Final[int] = 100


def theoretical_stack_per_entry(inventory: ChipInventory, max_entries: int) -> int:
    """
    Теоретический стек на вход без учёта потолков по номиналам.

    Examples:
        >>> from src.core.domain.chip_inventory import DEFAULT_CHIP_INVENTORY
        >>> theoretical_stack_per_entry(DEFAULT_CHIP_INVENTORY, 16)
        3234
    """
    return inventory.total_value // max_entries


def select_starting_stack(
    inventory: ChipInventory,
    players: int,
    reentries: int = 0,
    increment: int = STARTING_STACK_INCREMENT,
) -> int:
    """
    Выбор стартового стека.

    Args:
        inventory: Набор фишек
        players: Максимум игроков (>= 1)
        reentries: Максимум re-entry на игрока (>= 0)
        increment: Шаг "чистого" стека (default: 100)

    Returns:
        Стартовый стек. Если потолок минимального номинала на вход равен 0,
        возвращается минимальный номинал, и решатель даст residual < 0

    Raises:
        InvalidConfiguration: players < 1 или reentries < 0

    Examples:
        >>> from src.core.domain.chip_inventory import DEFAULT_CHIP_INVENTORY
        >>> select_starting_stack(DEFAULT_CHIP_INVENTORY, 16, 0)
        2300
        >>> select_starting_stack(DEFAULT_CHIP_INVENTORY, 10, 1)
        2200
    """
    max_entries = compute_max_entries(players, reentries)
    profile = compute_capacity(inventory, max_entries)

    achievable = profile.max_achievable_stack
    theoretical = theoretical_stack_per_entry(inventory, max_entries)

    stack = floor_to_increment(min(achievable, theoretical), increment)
    stack = min(stack, achievable)
    stack = floor_to_increment(stack, inventory.base_unit)

    smallest = inventory.smallest_denomination
    if stack >= smallest:
        return stack

    if profile.per_entry_cap[smallest] == 0:
        logger.warning(
            "starting_stack_exceeds_capacity",
            max_entries=max_entries,
            raw_capacity_value=profile.raw_capacity_value,
            starting_stack=smallest,
        )
    return smallest
