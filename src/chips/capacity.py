"""
Capacity — Потолок фишек на вход и максимальный достижимый стек

Конечный физический набор фишек делится поровну между max_entries
одновременными входами (players × (reentries + 1)).

ФОРМУЛЫ:
    per_entry_cap[d] = floor(inventory[d] / max_entries)
    max_achievable_stack = floor_10(Σ_d per_entry_cap[d] · d)

Округление вниз до ACHIEVABLE_STACK_INCREMENT оставляет запас на
неидеальность решателя распределения.
"""

from typing import Final, NamedTuple

from src.core.domain.chip_inventory import ChipInventory, InvalidConfiguration
from src.core.math.numerical_safeguards import (
    floor_to_increment,
    validate_non_negative_int,
    validate_positive_int,
)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Шаг округления вниз максимального достижимого стека
ACHIEVABLE_STACK_INCREMENT: Final[int] = 10


# =============================================================================
# MAX ENTRIES
# =============================================================================


def _require(validator, value: object, name: str) -> None:
    try:
        validator(value, name)
    except ValueError as e:
        raise InvalidConfiguration(str(e)) from e


def compute_max_entries(players: int, reentries: int = 0) -> int:
    """
    Граница одновременности: players × (reentries + 1).

    Raises:
        InvalidConfiguration: players < 1 или reentries < 0

    Examples:
        >>> compute_max_entries(16, 0)
        16
        >>> compute_max_entries(10, 1)
        20
    """
    _require(validate_positive_int, players, "players")
    _require(validate_non_negative_int, reentries, "reentries")
    return players * (reentries + 1)


# =============================================================================
# CAPACITY
# =============================================================================


class CapacityProfile(NamedTuple):
    """Результат Capacity Calculator."""

    per_entry_cap: dict[int, int]  # номинал → максимум фишек на вход
    max_achievable_stack: int  # Σ cap·d, округлённая вниз до 10
    raw_capacity_value: int  # Σ cap·d без округления
    max_entries: int


def compute_capacity(inventory: ChipInventory, max_entries: int) -> CapacityProfile:
    """
    Потолок фишек на вход и максимальный достижимый стек.

    Args:
        inventory: Набор фишек
        max_entries: Число одновременных входов (>= 1)

    Returns:
        CapacityProfile

    Raises:
        InvalidConfiguration: max_entries < 1

    Examples:
        >>> from src.core.domain.chip_inventory import DEFAULT_CHIP_INVENTORY
        >>> profile = compute_capacity(DEFAULT_CHIP_INVENTORY, 16)
        >>> profile.per_entry_cap
        {5: 9, 10: 6, 25: 6, 100: 6, 500: 1, 1000: 1}
        >>> profile.max_achievable_stack
        2350
    """
    _require(validate_positive_int, max_entries, "max_entries")

    per_entry_cap = {
        denom: inventory.count(denom) // max_entries for denom in inventory.denominations
    }
    raw_value = sum(denom * count for denom, count in per_entry_cap.items())

    return CapacityProfile(
        per_entry_cap=per_entry_cap,
        max_achievable_stack=floor_to_increment(raw_value, ACHIEVABLE_STACK_INCREMENT),
        raw_capacity_value=raw_value,
        max_entries=max_entries,
    )


def compute_capacity_for_players(
    inventory: ChipInventory, players: int, reentries: int = 0
) -> CapacityProfile:
    """compute_capacity с max_entries = players × (reentries + 1)."""
    return compute_capacity(inventory, compute_max_entries(players, reentries))
