"""
Contract Validation Module

Валидация JSON контрактов: набор фишек, структура блайндов,
распределение фишек и план турнира.
"""

from .validators import (
    BlindStructureValidator,
    ChipDistributionValidator,
    ChipInventoryValidator,
    ContractValidator,
    SchemaLoader,
    TournamentPlanValidator,
    validate_blind_structure,
    validate_chip_distribution,
    validate_chip_inventory,
    validate_tournament_plan,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "ChipInventoryValidator",
    "BlindStructureValidator",
    "ChipDistributionValidator",
    "TournamentPlanValidator",
    # Functions
    "validate_chip_inventory",
    "validate_blind_structure",
    "validate_chip_distribution",
    "validate_tournament_plan",
]
