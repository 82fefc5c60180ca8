"""
Chip allocation.

Capacity Calculator, Starting-Stack Selector, Minimum-Liquidity Estimator
и Chip Distribution Solver.
"""

from src.chips.capacity import (
    ACHIEVABLE_STACK_INCREMENT,
    CapacityProfile,
    compute_capacity,
    compute_capacity_for_players,
    compute_max_entries,
)
from src.chips.liquidity import (
    LiquidityConfig,
    MinimumLiquidityEstimator,
    decompose_amount,
    estimate_min_liquidity,
)
from src.chips.solver import (
    ChipDistributionSolver,
    SolverConfig,
    SolverState,
    find_exact_combination,
    solve_chip_distribution,
)
from src.chips.starting_stack import (
    STARTING_STACK_INCREMENT,
    select_starting_stack,
    theoretical_stack_per_entry,
)

__all__ = [
    # Capacity
    "ACHIEVABLE_STACK_INCREMENT",
    "CapacityProfile",
    "compute_capacity",
    "compute_capacity_for_players",
    "compute_max_entries",
    # Starting stack
    "STARTING_STACK_INCREMENT",
    "select_starting_stack",
    "theoretical_stack_per_entry",
    # Liquidity
    "LiquidityConfig",
    "MinimumLiquidityEstimator",
    "decompose_amount",
    "estimate_min_liquidity",
    # Solver
    "ChipDistributionSolver",
    "SolverConfig",
    "SolverState",
    "find_exact_combination",
    "solve_chip_distribution",
]
