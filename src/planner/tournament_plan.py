"""Tournament Planner — связка компонентов ядра для одного запроса

Порядок вызовов:
1. Capacity Calculator + Starting-Stack Selector (только players/reentries)
2. Blind Structure Generator (стартовый стек + параметры прогрессии)
3. Minimum-Liquidity Estimator (ранние уровни структуры)
4. Chip Distribution Solver (capacity ceiling + liquidity floor)

Планировщик не хранит состояния между запросами: набор фишек и таблица
скоростей — неизменяемые входы конструктора.
"""

from typing import Any, Final

from pydantic import BaseModel, Field, ValidationError

from src.blinds.generator import (
    DEFAULT_ANTE_START_LEVEL,
    DEFAULT_INCREASE_RATE,
    DEFAULT_STARTING_DEPTH_BB,
    BlindGeneratorConfig,
    BlindStructureGenerator,
)
from src.chips.capacity import compute_capacity, compute_max_entries
from src.chips.liquidity import LiquidityConfig, MinimumLiquidityEstimator
from src.chips.solver import ChipDistributionSolver, SolverConfig
from src.chips.starting_stack import select_starting_stack
from src.core.domain.blind_structure import BlindStructure
from src.core.domain.chip_inventory import (
    DEFAULT_CHIP_INVENTORY,
    ChipInventory,
    InvalidConfiguration,
)
from src.core.domain.distribution import ChipDistribution
from src.core.domain.speed import DEFAULT_SPEED_TABLE, Speed, SpeedTable
from src.core.logging_config import get_logger

logger = get_logger(__name__)


# Стек для предпросмотра структуры без турнира
PREVIEW_STARTING_STACK: Final[int] = 10_000


# =============================================================================
# REQUEST / RESULT
# =============================================================================


class PlanRequest(BaseModel):
    """Параметры запроса на план турнира."""

    players: int = Field(..., ge=1, description="Максимум игроков")
    reentries: int = Field(default=0, ge=0, description="Максимум re-entry на игрока")
    starting_stack: int | None = Field(
        default=None, gt=0, description="Явный стек; None → Starting-Stack Selector"
    )
    speed: str = Field(default=Speed.NORMAL.value)
    starting_depth_bb: int = Field(default=DEFAULT_STARTING_DEPTH_BB, gt=0)
    increase_rate: float = Field(default=DEFAULT_INCREASE_RATE)
    ante_start_level: int = Field(default=DEFAULT_ANTE_START_LEVEL, ge=1)
    entry_price: float = Field(default=0.0, ge=0.0, description="Стоимость входа")

    model_config = {"frozen": True}

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise InvalidConfiguration(f"Invalid plan request: {e}") from e

    @property
    def max_entries(self) -> int:
        return compute_max_entries(self.players, self.reentries)


class TournamentPlan(BaseModel):
    """Результат планирования: стек, структура блайндов, распределение фишек."""

    starting_stack: int = Field(..., gt=0)
    stack_selected: bool = Field(..., description="Стек выбран селектором, а не задан явно")
    max_entries: int = Field(..., ge=1)
    blind_structure: BlindStructure
    distribution: ChipDistribution
    min_chips: dict[int, int] = Field(default_factory=dict)
    estimated_duration_minutes: int = Field(..., ge=0)
    prize_pool: float = Field(..., ge=0.0)

    model_config = {"frozen": True}

    def to_contract(self) -> dict[str, Any]:
        """JSON-представление (contracts/schema/tournament_plan.json)."""
        return {
            "starting_stack": self.starting_stack,
            "stack_selected": self.stack_selected,
            "max_entries": self.max_entries,
            "estimated_duration_minutes": self.estimated_duration_minutes,
            "prize_pool": self.prize_pool,
            "min_chips": {str(denom): count for denom, count in sorted(self.min_chips.items())},
            "blind_structure": self.blind_structure.to_contract(),
            "distribution": self.distribution.to_contract(),
        }


# =============================================================================
# PLANNER
# =============================================================================


class TournamentPlanner:
    """Планировщик турнира поверх неизменяемого набора фишек."""

    def __init__(
        self,
        inventory: ChipInventory = DEFAULT_CHIP_INVENTORY,
        speed_table: SpeedTable = DEFAULT_SPEED_TABLE,
        generator_config: BlindGeneratorConfig | None = None,
        liquidity_config: LiquidityConfig | None = None,
        solver_config: SolverConfig | None = None,
    ):
        self.inventory = inventory
        self.generator = BlindStructureGenerator(
            inventory, speed_table=speed_table, config=generator_config
        )
        self.estimator = MinimumLiquidityEstimator(liquidity_config)
        self.solver = ChipDistributionSolver(solver_config)

    def plan(self, request: PlanRequest) -> TournamentPlan:
        """
        Полный план турнира для запроса.

        Raises:
            InvalidConfiguration: структурно невалидные параметры запроса

        Невыполнимый стек (явный стек больше capacity) не является ошибкой:
        distribution.residual показывает расхождение.
        """
        max_entries = request.max_entries
        capacity = compute_capacity(self.inventory, max_entries)

        if request.starting_stack is None:
            starting_stack = select_starting_stack(
                self.inventory, request.players, request.reentries
            )
            stack_selected = True
        else:
            starting_stack = request.starting_stack
            stack_selected = False

        structure = self.generator.generate(
            starting_stack,
            speed=request.speed,
            starting_depth_bb=request.starting_depth_bb,
            increase_rate=request.increase_rate,
            ante_start_level=request.ante_start_level,
        )

        min_chips = self.estimator.estimate_for_structure(
            structure, self.inventory.denominations
        )
        distribution = self.solver.solve(starting_stack, capacity.per_entry_cap, min_chips)

        plan = TournamentPlan(
            starting_stack=starting_stack,
            stack_selected=stack_selected,
            max_entries=max_entries,
            blind_structure=structure,
            distribution=distribution,
            min_chips=min_chips,
            estimated_duration_minutes=structure.estimated_duration_minutes,
            prize_pool=max_entries * request.entry_price,
        )

        logger.info(
            "tournament_plan_created",
            players=request.players,
            reentries=request.reentries,
            max_entries=max_entries,
            starting_stack=starting_stack,
            levels=structure.num_levels,
            residual=distribution.residual,
        )

        return plan

    def preview_blinds(
        self,
        starting_stack: int = PREVIEW_STARTING_STACK,
        speed: str | Speed | None = Speed.NORMAL,
        starting_depth_bb: int = DEFAULT_STARTING_DEPTH_BB,
        increase_rate: float | None = DEFAULT_INCREASE_RATE,
        ante_start_level: int = DEFAULT_ANTE_START_LEVEL,
    ) -> BlindStructure:
        """Структура блайндов без распределения фишек."""
        return self.generator.generate(
            starting_stack,
            speed=speed,
            starting_depth_bb=starting_depth_bb,
            increase_rate=increase_rate,
            ante_start_level=ante_start_level,
        )
