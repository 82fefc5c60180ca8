"""
Blind structure generation.
"""

from src.blinds.generator import (
    BlindGeneratorConfig,
    BlindStructureGenerator,
    StoppingPolicy,
    generate_blind_structure,
)

__all__ = [
    "BlindGeneratorConfig",
    "BlindStructureGenerator",
    "StoppingPolicy",
    "generate_blind_structure",
]
