"""Chip Distribution Solver — точное распределение фишек на один вход

Разбивает целевой стек на фишки так, что:
- Σ denom·count == target_stack (когда это достижимо)
- count[d] <= per_entry_cap[d] для всех d (жёсткий потолок)
- count[d] >= min(min_chips[d], per_entry_cap[d]) (liquidity floor,
  best-effort: ослабляется только если иначе точная сумма недостижима)

Фазы (каждая — ограниченный локальный ремонт состояния предыдущей):
1. Seed: count[d] = per_entry_cap[d] (максимальный разброс)
2. Liquidity top-up: count[d] поднимается до floor[d] (в пределах cap);
   floor > cap фиксируется как capacity exhaustion
3. Reduce: если сумма больше цели — точное снятие избытка ограниченным
   поиском (крупные номиналы первыми), уровни ограничений:
     a. floors + резерв одной фишки каждого номинала в игре
     b. только floors
     c. floors оценки ликвидности без default floor base unit
     d. без floors (liquidity_relaxed)
   Если точного снятия нет — снятие до суммы чуть ниже цели
4. Grow: если сумма меньше цели — до max_grow_passes проходов:
     a. прямое добавление фишек без перебора
     b. swap: +1 крупная фишка, −мелкие ровно на перебор
     c. тонкий swap: −1 фишка, +несколько более мелких ровно на gap
   Проход без строгого уменьшения |gap| завершает цикл
5. Finalize: последняя попытка добрать малый остаток; возвращается лучшее
   достигнутое распределение (минимальный |residual|)

Ненулевой residual — наблюдаемый результат для патологических наборов,
а не ошибка.
"""

from dataclasses import dataclass, field
from math import gcd
from typing import Final, Mapping

from src.core.domain.chip_inventory import InvalidConfiguration
from src.core.domain.distribution import ChipDistribution
from src.core.logging_config import get_logger
from src.core.math.numerical_safeguards import base_unit, is_multiple_of

logger = get_logger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

MAX_GROW_PASSES_DEFAULT: Final[int] = 200

# Минимум фишек base unit, если оценка ликвидности их не требует
DEFAULT_BASE_UNIT_FLOOR: Final[int] = 10

# Бюджет узлов ограниченного поиска точной комбинации
SEARCH_NODE_BUDGET_DEFAULT: Final[int] = 20_000

# "Малый" остаток для финального добора (в base units)
FINAL_TOP_UP_UNITS: Final[int] = 5


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class SolverConfig:
    """Конфигурация Chip Distribution Solver."""

    max_grow_passes: int = MAX_GROW_PASSES_DEFAULT
    default_base_unit_floor: int = DEFAULT_BASE_UNIT_FLOOR
    reserve_per_denomination: int = 1
    search_node_budget: int = SEARCH_NODE_BUDGET_DEFAULT
    final_top_up_units: int = FINAL_TOP_UP_UNITS
    allow_liquidity_relaxation: bool = True


# =============================================================================
# STATE
# =============================================================================


@dataclass
class SolverState:
    """Рабочее состояние решателя (мутабельное, локальное для одного вызова)."""

    target: int
    caps: dict[int, int]
    counts: dict[int, int]
    # floors с default floor base unit; required_floors только из оценки ликвидности
    floors: dict[int, int] = field(default_factory=dict)
    required_floors: dict[int, int] = field(default_factory=dict)
    clamped: list[int] = field(default_factory=list)
    liquidity_relaxed: bool = False
    passes: int = 0

    # Лучшее достигнутое: (|residual|, counts, liquidity_relaxed)
    best: tuple[int, dict[int, int], bool] = field(init=False)

    def __post_init__(self) -> None:
        self.best = (abs(self.gap), dict(self.counts), self.liquidity_relaxed)

    @property
    def denominations(self) -> list[int]:
        return sorted(self.caps)

    @property
    def unit(self) -> int:
        return base_unit(self.caps)

    @property
    def total(self) -> int:
        return sum(denom * count for denom, count in self.counts.items())

    @property
    def gap(self) -> int:
        """target − total: > 0 недобор, < 0 перебор."""
        return self.target - self.total

    def addable(self, denom: int) -> int:
        return max(0, self.caps[denom] - self.counts[denom])

    def removable(
        self, denom: int, floors: Mapping[int, int] | None = None, reserve: int = 0
    ) -> int:
        floors = self.floors if floors is None else floors
        held = self.counts[denom]
        keep = max(floors.get(denom, 0), reserve if held > 0 else 0)
        return max(0, held - keep)

    def add(self, denom: int, count: int) -> None:
        self.counts[denom] += count

    def remove(self, denom: int, count: int) -> None:
        self.counts[denom] -= count

    def record_best(self) -> None:
        score = abs(self.gap)
        if score < self.best[0]:
            self.best = (score, dict(self.counts), self.liquidity_relaxed)


# =============================================================================
# EXACT COMBINATION SEARCH
# =============================================================================


class _SearchBudgetExceeded(Exception):
    pass


def find_exact_combination(
    amount: int,
    limits: Mapping[int, int],
    node_budget: int = SEARCH_NODE_BUDGET_DEFAULT,
) -> dict[int, int] | None:
    """
    Ограниченный поиск: количества r[d] ∈ [0, limits[d]] с Σ r[d]·d == amount.

    Номиналы перебираются от крупных к мелким, количества — от больших к
    меньшим, поэтому первое найденное решение совпадает с жадным, если
    жадное точно. Неуспешные состояния мемоизируются.

    Args:
        amount: Требуемая сумма (>= 0)
        limits: номинал → максимум фишек
        node_budget: Максимум вызовов поиска

    Returns:
        номинал → количество (только > 0) или None, если решения нет
        (или бюджет исчерпан)

    Examples:
        >>> find_exact_combination(55, {100: 5, 25: 5, 10: 5})
        {10: 3, 25: 1}
        >>> find_exact_combination(5, {10: 3, 25: 2}) is None
        True
        >>> find_exact_combination(0, {10: 3})
        {}
    """
    if amount < 0:
        return None
    if amount == 0:
        return {}

    denoms = sorted((d for d, limit in limits.items() if limit > 0), reverse=True)
    if not denoms:
        return None

    # Суффиксные суммы и GCD для отсечений
    suffix_value = [0] * (len(denoms) + 1)
    suffix_gcd = [0] * (len(denoms) + 1)
    for i in range(len(denoms) - 1, -1, -1):
        suffix_value[i] = suffix_value[i + 1] + denoms[i] * limits[denoms[i]]
        suffix_gcd[i] = gcd(suffix_gcd[i + 1], denoms[i])

    failed: set[tuple[int, int]] = set()
    calls = 0

    def search(index: int, remaining: int) -> dict[int, int] | None:
        nonlocal calls
        if remaining == 0:
            return {}
        if index >= len(denoms) or (index, remaining) in failed:
            return None

        calls += 1
        if calls > node_budget:
            raise _SearchBudgetExceeded

        if remaining > suffix_value[index] or remaining % suffix_gcd[index] != 0:
            failed.add((index, remaining))
            return None

        denom = denoms[index]
        top = min(limits[denom], remaining // denom)
        for count in range(top, -1, -1):
            found = search(index + 1, remaining - count * denom)
            if found is not None:
                if count:
                    found[denom] = count
                return found

        failed.add((index, remaining))
        return None

    try:
        return search(0, amount)
    except _SearchBudgetExceeded:
        logger.debug("exact_search_budget_exceeded", amount=amount, budget=node_budget)
        return None


# =============================================================================
# SOLVER
# =============================================================================


class ChipDistributionSolver:
    """Chip Distribution Solver: фазовый ремонт к точной сумме.

    Чистая функция входов: никакого общего состояния между вызовами,
    одинаковый вход → одинаковый выход.
    """

    def __init__(self, config: SolverConfig | None = None):
        self.config = config or SolverConfig()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def solve(
        self,
        target_stack: int,
        per_entry_cap: Mapping[int, int],
        min_chips: Mapping[int, int] | None = None,
    ) -> ChipDistribution:
        """Распределение target_stack по номиналам.

        Args:
            target_stack: целевой стек на вход
            per_entry_cap: номинал → потолок фишек на вход
            min_chips: номинал → liquidity floor (Minimum Liquidity Estimator)

        Returns:
            ChipDistribution (residual != 0 если цель недостижима)

        Raises:
            InvalidConfiguration: пустой/некорректный per_entry_cap или
                отрицательный target_stack
        """
        self._validate_inputs(target_stack, per_entry_cap)

        state = self.seed(target_stack, per_entry_cap)
        self.top_up(state, min_chips or {})

        if state.gap < 0:
            self.reduce(state)
        if state.gap > 0:
            self.grow(state)
        self.finalize(state)

        return self._build_result(state)

    # -------------------------------------------------------------------------
    # Phase 1: Seed
    # -------------------------------------------------------------------------

    def seed(self, target_stack: int, per_entry_cap: Mapping[int, int]) -> SolverState:
        caps = {int(denom): int(cap) for denom, cap in sorted(per_entry_cap.items())}
        state = SolverState(target=target_stack, caps=caps, counts=dict(caps))
        state.record_best()
        logger.debug("solver_seeded", target=target_stack, seed_total=state.total)
        return state

    # -------------------------------------------------------------------------
    # Phase 2: Liquidity top-up
    # -------------------------------------------------------------------------

    def top_up(self, state: SolverState, min_chips: Mapping[int, int]) -> None:
        floors: dict[int, int] = {}
        for denom in state.denominations:
            wanted = int(min_chips.get(denom, 0))
            if wanted > state.caps[denom]:
                state.clamped.append(denom)
            floors[denom] = min(wanted, state.caps[denom])

        state.required_floors = dict(floors)

        unit = state.unit
        if unit in state.caps and floors.get(unit, 0) == 0:
            floors[unit] = min(self.config.default_base_unit_floor, state.caps[unit])

        state.floors = floors

        for denom, floor in floors.items():
            if floor > state.counts[denom]:
                state.add(denom, min(floor, state.caps[denom]) - state.counts[denom])

        if state.clamped:
            logger.warning(
                "liquidity_floor_exceeds_capacity",
                denominations=state.clamped,
                caps={d: state.caps[d] for d in state.clamped},
            )
        state.record_best()

    # -------------------------------------------------------------------------
    # Phase 3: Reduce
    # -------------------------------------------------------------------------

    def reduce(self, state: SolverState) -> None:
        """Точное снятие избытка; если невозможно — снятие чуть ниже цели."""
        no_floors = {denom: 0 for denom in state.denominations}
        tiers: list[tuple[Mapping[int, int], int, bool]] = [
            (state.floors, self.config.reserve_per_denomination, False),
            (state.floors, 0, False),
        ]
        if state.required_floors != state.floors:
            tiers.append((state.required_floors, 0, False))
        if self.config.allow_liquidity_relaxation:
            tiers.append((no_floors, 0, True))

        excess = -state.gap
        for floors, reserve, relaxes in tiers:
            limits = {
                denom: state.removable(denom, floors, reserve)
                for denom in state.denominations
            }
            removal = find_exact_combination(excess, limits, self.config.search_node_budget)
            if removal is None:
                continue

            for denom, count in removal.items():
                state.remove(denom, count)
            if relaxes:
                state.liquidity_relaxed = True
                logger.warning(
                    "liquidity_floors_relaxed",
                    target=state.target,
                    floors=dict(state.required_floors),
                )
            state.record_best()
            logger.debug("solver_reduced_exactly", removed=removal, reserve=reserve)
            return

        self._strip_below_target(state, tiers)
        state.record_best()

    def _strip_below_target(
        self, state: SolverState, tiers: list[tuple[Mapping[int, int], int, bool]]
    ) -> None:
        desc = sorted(state.denominations, reverse=True)

        for floors, _reserve, relaxes in tiers[1:]:
            if state.gap >= 0:
                return

            # Жадно, не уходя ниже цели
            for denom in desc:
                excess = -state.gap
                count = min(state.removable(denom, floors), excess // denom)
                if count > 0:
                    state.remove(denom, count)
                    if relaxes:
                        state.liquidity_relaxed = True
            state.record_best()

            # Одна наименьшая фишка, переводящая сумму ниже цели
            if state.gap < 0:
                for denom in sorted(state.denominations):
                    if state.removable(denom, floors) > 0:
                        state.remove(denom, 1)
                        if relaxes:
                            state.liquidity_relaxed = True
                        break

        logger.debug("solver_stripped_below_target", gap=state.gap)

    # -------------------------------------------------------------------------
    # Phase 4: Grow
    # -------------------------------------------------------------------------

    def grow(self, state: SolverState) -> None:
        """Ограниченные проходы добора; каждый проход строго уменьшает |gap|."""
        for _ in range(self.config.max_grow_passes):
            if state.gap <= 0:
                break

            gap_before = abs(state.gap)

            moved = self._add_direct(state)
            if state.gap > 0 and not moved:
                moved = self._swap_up(state)
            if state.gap > 0 and not moved:
                self._swap_down(state)

            state.passes += 1
            state.record_best()

            if abs(state.gap) >= gap_before:
                break

        logger.debug("solver_grow_finished", passes=state.passes, gap=state.gap)

    def _add_direct(self, state: SolverState) -> bool:
        """(a) Добавление целых фишек от крупных к мелким без перебора."""
        moved = False
        for denom in sorted(state.denominations, reverse=True):
            count = min(state.addable(denom), state.gap // denom)
            if count > 0:
                state.add(denom, count)
                moved = True
        return moved

    def _swap_up(self, state: SolverState) -> bool:
        """(b) +1 фишка, которая даёт перебор; снятие мелких ровно на перебор."""
        gap = state.gap
        for denom in sorted(state.denominations, reverse=True):
            if denom <= gap or state.addable(denom) == 0:
                continue

            limits = {
                smaller: state.removable(smaller)
                for smaller in state.denominations
                if smaller < denom
            }
            removal = find_exact_combination(
                denom - gap, limits, self.config.search_node_budget
            )
            if removal is None:
                continue

            state.add(denom, 1)
            for smaller, count in removal.items():
                state.remove(smaller, count)
            return True
        return False

    def _swap_down(self, state: SolverState) -> bool:
        """(c) −1 фишка, +несколько более мелких ровно на gap."""
        gap = state.gap
        for larger in sorted(state.denominations):
            if state.removable(larger) == 0:
                continue
            for smaller in sorted((d for d in state.denominations if d < larger), reverse=True):
                value = larger + gap
                if not is_multiple_of(value, smaller):
                    continue
                count = value // smaller
                if count <= state.addable(smaller):
                    state.remove(larger, 1)
                    state.add(smaller, count)
                    return True
        return False

    # -------------------------------------------------------------------------
    # Phase 5: Finalize
    # -------------------------------------------------------------------------

    def finalize(self, state: SolverState) -> None:
        gap = state.gap
        if 0 < gap <= self.config.final_top_up_units * state.unit:
            for denom in state.denominations:
                count = min(state.addable(denom), state.gap // denom)
                if count > 0:
                    state.add(denom, count)
        state.record_best()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _build_result(self, state: SolverState) -> ChipDistribution:
        _score, counts, relaxed = state.best
        total = sum(denom * count for denom, count in counts.items())
        residual = total - state.target

        if residual != 0:
            logger.warning(
                "chip_distribution_inexact",
                target=state.target,
                total=total,
                residual=residual,
            )

        return ChipDistribution(
            counts={denom: count for denom, count in counts.items() if count > 0},
            target_stack=state.target,
            total=total,
            residual=residual,
            per_entry_cap=dict(state.caps),
            clamped_denominations=tuple(state.clamped),
            liquidity_relaxed=relaxed,
            passes=state.passes,
        )

    @staticmethod
    def _validate_inputs(target_stack: int, per_entry_cap: Mapping[int, int]) -> None:
        if isinstance(target_stack, bool) or not isinstance(target_stack, int):
            raise InvalidConfiguration(f"target_stack must be an integer, got {target_stack!r}")
        if target_stack < 0:
            raise InvalidConfiguration(f"target_stack must be non-negative, got {target_stack}")
        if not per_entry_cap:
            raise InvalidConfiguration("per_entry_cap cannot be empty")
        for denom, cap in per_entry_cap.items():
            if int(denom) <= 0:
                raise InvalidConfiguration(f"denomination must be positive, got {denom}")
            if int(cap) < 0:
                raise InvalidConfiguration(f"cap for {denom} must be non-negative, got {cap}")


def solve_chip_distribution(
    target_stack: int,
    per_entry_cap: Mapping[int, int],
    min_chips: Mapping[int, int] | None = None,
    config: SolverConfig | None = None,
) -> ChipDistribution:
    """ChipDistributionSolver.solve без явного создания решателя."""
    return ChipDistributionSolver(config).solve(target_stack, per_entry_cap, min_chips)
