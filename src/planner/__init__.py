"""
Tournament planning.
"""

from src.planner.tournament_plan import (
    PREVIEW_STARTING_STACK,
    PlanRequest,
    TournamentPlan,
    TournamentPlanner,
)

__all__ = [
    "PREVIEW_STARTING_STACK",
    "PlanRequest",
    "TournamentPlan",
    "TournamentPlanner",
]
