"""
Domain models and value objects.

Contains fundamental domain entities: ChipInventory, BlindLevel,
BlindStructure, SpeedProfile, ChipDistribution.
"""

from src.core.domain.blind_structure import BlindLevel, BlindStructure
from src.core.domain.chip_inventory import (
    DEFAULT_CHIP_INVENTORY,
    ChipInventory,
    InvalidConfiguration,
    load_chip_inventory,
)
from src.core.domain.distribution import ChipDistribution
from src.core.domain.speed import DEFAULT_SPEED_TABLE, Speed, SpeedProfile, SpeedTable

__all__ = [
    # Chip inventory
    "ChipInventory",
    "DEFAULT_CHIP_INVENTORY",
    "InvalidConfiguration",
    "load_chip_inventory",
    # Blind structure
    "BlindLevel",
    "BlindStructure",
    # Speed
    "Speed",
    "SpeedProfile",
    "SpeedTable",
    "DEFAULT_SPEED_TABLE",
    # Distribution
    "ChipDistribution",
]
