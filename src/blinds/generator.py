"""Blind Structure Generator — генерация расписания уровней блайндов

Строит монотонно возрастающее расписание (small blind, big blind, ante)
по стартовому стеку и параметрам прогрессии.

Алгоритм:
1. initial_bb = floor(starting_stack / starting_depth_bb)
2. increase_rate <= 1 (или NaN/Inf) → default коэффициент скорости
3. Цикл (ограничен max_levels):
   a. bb = round_blind(raw_bb) по RoundingPolicy
   b. bb <= previous_bb → bb = следующее кратное base unit после previous_bb
   c. small_blind = round_blind(bb / 2)
   d. ante = bb начиная с ante_start_level, иначе 0
   e. raw_bb = bb × increase_rate (округление на следующей итерации)
   f. Остановка по StoppingPolicy относительно starting_stack

Инварианты:
- big_blind строго возрастает
- ante ∈ {0, big_blind}
- цикл всегда завершается (max_levels)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Final

from src.core.domain.blind_structure import BlindLevel, BlindStructure
from src.core.domain.chip_inventory import ChipInventory, InvalidConfiguration
from src.core.domain.speed import DEFAULT_SPEED_TABLE, Speed, SpeedTable
from src.core.logging_config import get_logger
from src.core.math.blind_rounding import RoundingPolicy, round_blind
from src.core.math.numerical_safeguards import floor_safe, is_valid_float, sanitize_float

logger = get_logger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Жёсткий предел числа уровней (гарантия завершения)
MAX_LEVELS_DEFAULT: Final[int] = 500

# Предел уровней для HALF_STACK_CAPPED
CAPPED_POLICY_MAX_LEVELS: Final[int] = 50

DEFAULT_STARTING_DEPTH_BB: Final[int] = 50
DEFAULT_INCREASE_RATE: Final[float] = 1.25
DEFAULT_ANTE_START_LEVEL: Final[int] = 6


class StoppingPolicy(str, Enum):
    """Когда прекращать генерацию уровней.

    DOUBLE_STACK: raw big blind >= 2 × starting_stack
    HALF_STACK_CAPPED: raw big blind >= 0.5 × starting_stack или 50 уровней
    """

    DOUBLE_STACK = "DOUBLE_STACK"
    HALF_STACK_CAPPED = "HALF_STACK_CAPPED"


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class BlindGeneratorConfig:
    """Конфигурация генератора блайндов."""

    rounding_policy: RoundingPolicy = RoundingPolicy.NEAREST_CHIP_PAYABLE
    stopping_policy: StoppingPolicy = StoppingPolicy.DOUBLE_STACK

    # Множители порога остановки относительно starting_stack
    double_stack_multiplier: float = 2.0
    half_stack_multiplier: float = 0.5

    max_levels: int = MAX_LEVELS_DEFAULT
    capped_policy_max_levels: int = CAPPED_POLICY_MAX_LEVELS


# =============================================================================
# GENERATOR
# =============================================================================


class BlindStructureGenerator:
    """Генератор структуры блайндов для заданного набора фишек.

    Набор фишек определяет base unit и допустимые значения блайндов;
    таблица скоростей — тайминг и default коэффициенты роста.
    """

    def __init__(
        self,
        inventory: ChipInventory,
        speed_table: SpeedTable = DEFAULT_SPEED_TABLE,
        config: BlindGeneratorConfig | None = None,
    ):
        self.inventory = inventory
        self.speed_table = speed_table
        self.config = config or BlindGeneratorConfig()

        if self.config.max_levels < 1:
            raise InvalidConfiguration(
                f"max_levels must be >= 1, got {self.config.max_levels}"
            )

    def resolve_increase_rate(
        self, increase_rate: float | None, speed: str | Speed | None
    ) -> tuple[float, bool]:
        """Применяемый коэффициент роста.

        Returns:
            (rate, substituted): substituted=True если запрошенный коэффициент
            невалиден (NaN/Inf/<= 1) и подставлен default скорости
        """
        rate = sanitize_float(increase_rate, fallback=0.0)
        if rate > 1.0:
            return rate, False

        return self.speed_table.resolve(speed).default_increase_rate, True

    def stopping_bounds(self, starting_stack: int) -> tuple[float, int]:
        """(порог raw big blind, максимум уровней) для текущей политики."""
        if self.config.stopping_policy == StoppingPolicy.HALF_STACK_CAPPED:
            return (
                starting_stack * self.config.half_stack_multiplier,
                min(self.config.max_levels, self.config.capped_policy_max_levels),
            )
        return (
            starting_stack * self.config.double_stack_multiplier,
            self.config.max_levels,
        )

    def generate(
        self,
        starting_stack: int,
        speed: str | Speed | None = Speed.NORMAL,
        starting_depth_bb: int = DEFAULT_STARTING_DEPTH_BB,
        increase_rate: float | None = DEFAULT_INCREASE_RATE,
        ante_start_level: int = DEFAULT_ANTE_START_LEVEL,
    ) -> BlindStructure:
        """Генерация структуры блайндов.

        Args:
            starting_stack: стартовый стек (> 0)
            speed: имя скорости (неизвестное → fallback таблицы)
            starting_depth_bb: глубина стартового стека в big blinds (> 0)
            increase_rate: коэффициент роста big blind между уровнями
            ante_start_level: уровень, с которого действует BB ante (>= 1)

        Returns:
            BlindStructure

        Raises:
            InvalidConfiguration: неположительные стек/глубина или
                ante_start_level < 1
        """
        self._validate_inputs(starting_stack, starting_depth_bb, ante_start_level)

        speed_name = self.speed_table.resolve_name(speed)
        profile = self.speed_table.resolve(speed_name)

        rate, substituted = self.resolve_increase_rate(increase_rate, speed_name)
        if substituted:
            logger.warning(
                "increase_rate_substituted",
                requested=increase_rate,
                applied=rate,
                speed=speed_name,
            )

        denominations = self.inventory.denominations
        unit = self.inventory.base_unit
        smallest = self.inventory.smallest_denomination
        policy = self.config.rounding_policy
        threshold, level_cap = self.stopping_bounds(starting_stack)

        levels: list[BlindLevel] = []
        previous_bb = 0
        raw_bb: float = floor_safe(starting_stack / starting_depth_bb)

        while len(levels) < level_cap and (not levels or raw_bb < threshold):
            big_blind = max(round_blind(raw_bb, denominations, policy), smallest)

            if levels and big_blind <= previous_bb:
                big_blind = (previous_bb // unit) * unit + unit

            small_blind = min(round_blind(big_blind / 2, denominations, policy), big_blind)

            level_number = len(levels) + 1
            ante = big_blind if level_number >= ante_start_level else 0

            levels.append(
                BlindLevel(
                    level=level_number,
                    small_blind=small_blind,
                    big_blind=big_blind,
                    ante=ante,
                )
            )

            previous_bb = big_blind
            raw_bb = big_blind * rate

        if len(levels) >= level_cap and raw_bb < threshold:
            logger.debug(
                "blind_structure_level_cap_reached",
                level_cap=level_cap,
                last_big_blind=previous_bb,
            )

        logger.debug(
            "blind_structure_generated",
            starting_stack=starting_stack,
            speed=speed_name,
            increase_rate=rate,
            levels=len(levels),
            rounding_policy=policy.value,
            stopping_policy=self.config.stopping_policy.value,
        )

        return BlindStructure(
            speed=speed_name,
            starting_stack=starting_stack,
            increase_rate=rate,
            level_minutes=profile.level_minutes,
            break_frequency=profile.break_frequency,
            break_minutes=profile.break_minutes,
            levels=tuple(levels),
        )

    @staticmethod
    def _validate_inputs(
        starting_stack: int, starting_depth_bb: int, ante_start_level: int
    ) -> None:
        if isinstance(starting_stack, bool) or not isinstance(starting_stack, int):
            raise InvalidConfiguration(f"starting_stack must be an integer, got {starting_stack!r}")
        if starting_stack <= 0:
            raise InvalidConfiguration(f"starting_stack must be positive, got {starting_stack}")
        if not is_valid_float(starting_depth_bb) or starting_depth_bb <= 0:
            raise InvalidConfiguration(
                f"starting_depth_bb must be positive, got {starting_depth_bb!r}"
            )
        if isinstance(ante_start_level, bool) or not isinstance(ante_start_level, int):
            raise InvalidConfiguration(
                f"ante_start_level must be an integer, got {ante_start_level!r}"
            )
        if ante_start_level < 1:
            raise InvalidConfiguration(
                f"ante_start_level must be >= 1, got {ante_start_level}"
            )


def generate_blind_structure(
    inventory: ChipInventory,
    starting_stack: int,
    speed: str | Speed | None = Speed.NORMAL,
    starting_depth_bb: int = DEFAULT_STARTING_DEPTH_BB,
    increase_rate: float | None = DEFAULT_INCREASE_RATE,
    ante_start_level: int = DEFAULT_ANTE_START_LEVEL,
    speed_table: SpeedTable = DEFAULT_SPEED_TABLE,
    config: BlindGeneratorConfig | None = None,
) -> BlindStructure:
    """Генерация структуры блайндов без явного создания генератора."""
    generator = BlindStructureGenerator(inventory, speed_table=speed_table, config=config)
    return generator.generate(
        starting_stack,
        speed=speed,
        starting_depth_bb=starting_depth_bb,
        increase_rate=increase_rate,
        ante_start_level=ante_start_level,
    )
