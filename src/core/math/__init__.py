"""
Core math modules.

Целочисленные примитивы и стратегии округления блайндов.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Constants
    EPS_FLOAT_COMPARE_ABS,
    # Base unit
    base_unit,
    is_multiple_of,
    # Rounding
    ceil_safe,
    floor_safe,
    floor_to_increment,
    round_half_up,
    # NaN/Inf sanitization
    is_valid_float,
    sanitize_float,
    # Validation
    validate_non_negative_int,
    validate_positive_int,
)

# Blind Rounding
from src.core.math.blind_rounding import (
    CHIP_PAYABLE_TOLERANCE,
    RoundingPolicy,
    floor_to_chip_payable_two_significant,
    floor_to_two_significant,
    round_blind,
    round_to_chip_payable,
)

__all__ = [
    # Numerical Safeguards: Constants
    "EPS_FLOAT_COMPARE_ABS",
    # Numerical Safeguards: Base unit
    "base_unit",
    "is_multiple_of",
    # Numerical Safeguards: Rounding
    "ceil_safe",
    "floor_safe",
    "floor_to_increment",
    "round_half_up",
    # Numerical Safeguards: NaN/Inf sanitization
    "is_valid_float",
    "sanitize_float",
    # Numerical Safeguards: Validation
    "validate_non_negative_int",
    "validate_positive_int",
    # Blind Rounding
    "CHIP_PAYABLE_TOLERANCE",
    "RoundingPolicy",
    "floor_to_chip_payable_two_significant",
    "floor_to_two_significant",
    "round_blind",
    "round_to_chip_payable",
]
