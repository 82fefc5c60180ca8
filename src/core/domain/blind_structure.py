"""
BlindStructure — Модель структуры блайндов

Immutable Pydantic модели уровня блайндов и всей структуры.
Полная совместимость с JSON Schema (contracts/schema/blind_structure.json).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. big_blind > 0 на каждом уровне
2. ante ∈ {0, big_blind} (big blind ante)
3. big_blind строго возрастает от уровня к уровню
4. Уровни пронумерованы 1..N без пропусков
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# BLIND LEVEL
# =============================================================================


class BlindLevel(BaseModel):
    """Один уровень блайндов."""

    level: int = Field(..., ge=1, description="Номер уровня (с 1)")
    small_blind: int = Field(..., ge=0, description="Small blind")
    big_blind: int = Field(..., gt=0, description="Big blind")
    ante: int = Field(default=0, ge=0, description="Big blind ante (0 или big_blind)")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_amounts(self) -> "BlindLevel":
        if self.ante not in (0, self.big_blind):
            raise ValueError(
                f"ante must be 0 or equal to big_blind ({self.big_blind}), got {self.ante}"
            )
        if self.small_blind > self.big_blind:
            raise ValueError(
                f"small_blind ({self.small_blind}) exceeds big_blind ({self.big_blind})"
            )
        return self

    @property
    def has_ante(self) -> bool:
        return self.ante > 0

    def amounts(self) -> tuple[int, int, int]:
        """(small_blind, big_blind, ante)."""
        return (self.small_blind, self.big_blind, self.ante)

    def to_contract(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "small_blind": self.small_blind,
            "big_blind": self.big_blind,
            "ante": self.ante,
        }


# =============================================================================
# BLIND STRUCTURE
# =============================================================================


class BlindStructure(BaseModel):
    """
    Упорядоченная последовательность уровней + тайминг скорости.

    Тайминг (level_minutes, break_frequency, break_minutes) принадлежит
    внешней конфигурации скорости и передаётся как есть.
    """

    speed: str = Field(..., description="Имя скорости")
    starting_stack: int = Field(..., gt=0, description="Стартовый стек")
    increase_rate: float = Field(..., gt=1.0, description="Применённый коэффициент роста")
    level_minutes: int = Field(..., gt=0)
    break_frequency: int = Field(..., gt=0)
    break_minutes: int = Field(..., ge=0)
    levels: tuple[BlindLevel, ...] = Field(..., min_length=1)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_levels(self) -> "BlindStructure":
        for index, level in enumerate(self.levels, start=1):
            if level.level != index:
                raise ValueError(f"levels must be numbered 1..N, got {level.level} at {index}")
        for previous, current in zip(self.levels, self.levels[1:]):
            if current.big_blind <= previous.big_blind:
                raise ValueError(
                    f"big_blind must strictly increase: level {current.level} "
                    f"({current.big_blind}) <= level {previous.level} ({previous.big_blind})"
                )
        return self

    @property
    def num_levels(self) -> int:
        return len(self.levels)

    @property
    def estimated_duration_minutes(self) -> int:
        """Длительность игры всех уровней (без перерывов)."""
        return self.num_levels * self.level_minutes

    def level_at(self, level_number: int) -> BlindLevel:
        """
        Уровень по номеру (с 1).

        Номер вне диапазона → первый уровень (как у табло турнира
        до старта часов).
        """
        if 1 <= level_number <= self.num_levels:
            return self.levels[level_number - 1]
        return self.levels[0]

    def next_level(self, level_number: int) -> BlindLevel | None:
        """Следующий уровень после level_number; None после последнего."""
        if 0 <= level_number < self.num_levels:
            return self.levels[level_number]
        return None

    def early_levels(self, count: int) -> tuple[BlindLevel, ...]:
        """Первые count уровней."""
        return self.levels[: max(count, 0)]

    def to_contract(self) -> dict[str, Any]:
        return {
            "speed": self.speed,
            "starting_stack": self.starting_stack,
            "increase_rate": self.increase_rate,
            "level_minutes": self.level_minutes,
            "break_frequency": self.break_frequency,
            "break_minutes": self.break_minutes,
            "levels": [level.to_contract() for level in self.levels],
        }
