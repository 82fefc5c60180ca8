"""
ChipDistribution — Распределение фишек на один вход (entry)

Immutable Pydantic модель результата Chip Distribution Solver.
Полная совместимость с JSON Schema (contracts/schema/chip_distribution.json).

Политика "best-effort exact": решатель всегда возвращает пригодное
распределение. Неточность сигнализируется через residual, а не исключением:
- residual == 0 → сумма ровно равна target_stack
- residual > 0 → перебор (распределение дороже целевого стека)
- residual < 0 → недобор (целевой стек недостижим в рамках capacity)
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator


class ChipDistribution(BaseModel):
    """Распределение номинал → количество для одного входа."""

    counts: dict[int, int] = Field(..., description="Номинал → количество (только > 0)")
    target_stack: int = Field(..., ge=0, description="Целевой стартовый стек")
    total: int = Field(..., ge=0, description="Фактическая сумма распределения")
    residual: int = Field(..., description="total - target_stack")
    per_entry_cap: dict[int, int] = Field(..., description="Потолок фишек на вход")

    # Диагностика
    clamped_denominations: tuple[int, ...] = Field(
        default=(), description="Номиналы, где liquidity floor > capacity (clamp)"
    )
    liquidity_relaxed: bool = Field(
        default=False, description="Liquidity floors ослаблены ради точности суммы"
    )
    passes: int = Field(default=0, ge=0, description="Число проходов фазы роста")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_consistency(self) -> "ChipDistribution":
        computed = sum(denom * count for denom, count in self.counts.items())
        if computed != self.total:
            raise ValueError(f"total {self.total} does not match counts sum {computed}")
        if self.residual != self.total - self.target_stack:
            raise ValueError(
                f"residual {self.residual} != total - target_stack "
                f"({self.total} - {self.target_stack})"
            )
        for denom, count in self.counts.items():
            if count <= 0:
                raise ValueError(f"counts must hold positive values only, got {denom}: {count}")
            if count > self.per_entry_cap.get(denom, 0):
                raise ValueError(
                    f"count {count} of {denom} exceeds per-entry cap "
                    f"{self.per_entry_cap.get(denom, 0)}"
                )
        return self

    @property
    def is_exact(self) -> bool:
        return self.residual == 0

    @property
    def num_chips(self) -> int:
        return sum(self.counts.values())

    def count(self, denomination: int) -> int:
        return self.counts.get(denomination, 0)

    def to_contract(self) -> dict[str, Any]:
        return {
            "counts": {str(denom): count for denom, count in sorted(self.counts.items())},
            "target_stack": self.target_stack,
            "total": self.total,
            "residual": self.residual,
            "is_exact": self.is_exact,
            "clamped_denominations": list(self.clamped_denominations),
            "liquidity_relaxed": self.liquidity_relaxed,
        }
