"""
ChipInventory — Физический набор фишек

Immutable Pydantic модель: номинал → общее количество фишек в наборе.
Полная совместимость с JSON Schema (contracts/schema/chip_inventory.json).

Набор фишек — константа оператора с временем жизни процесса; модель
передаётся явно во все расчёты (никакого глобального состояния).
"""

import json
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator

from src.core.math.numerical_safeguards import base_unit


# =============================================================================
# EXCEPTIONS
# =============================================================================


class InvalidConfiguration(ValueError):
    """
    Структурно невалидная конфигурация.

    Пустой или некорректный набор фишек, неположительные номиналы,
    max_entries < 1 и т.п. Выбрасывается ДО начала генерации/распределения.
    """


# =============================================================================
# CHIP INVENTORY
# =============================================================================


class ChipInventory(BaseModel):
    """
    Набор фишек: номинал → общее физическое количество.

    Инварианты:
    - хотя бы один номинал
    - все номиналы положительные и различные
    - все количества неотрицательные
    """

    chips: dict[int, int] = Field(
        ..., min_length=1, description="Номинал → количество фишек в наборе"
    )

    model_config = {"frozen": True}

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise InvalidConfiguration(f"Invalid chip inventory: {e}") from e

    @field_validator("chips")
    @classmethod
    def _check_chips(cls, value: dict[int, int]) -> dict[int, int]:
        for denom, count in value.items():
            if denom <= 0:
                raise ValueError(f"denomination must be positive, got {denom}")
            if count < 0:
                raise ValueError(f"count for {denom} must be non-negative, got {count}")
        return dict(sorted(value.items()))

    # -------------------------------------------------------------------------
    # Конструкторы
    # -------------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, mapping: Mapping[Any, Any]) -> "ChipInventory":
        """
        Построение из произвольного mapping (в т.ч. JSON с ключами-строками).

        Args:
            mapping: {"5": 150, "10": 100, ...} или {5: 150, ...}

        Raises:
            InvalidConfiguration: Если ключи не приводятся к int,
                номиналы дублируются после приведения или данные невалидны
        """
        if not isinstance(mapping, Mapping):
            raise InvalidConfiguration(
                f"chip inventory must be a mapping, got {type(mapping).__name__}"
            )

        chips: dict[int, int] = {}
        for raw_denom, raw_count in mapping.items():
            try:
                denom = int(raw_denom)
                count = int(raw_count)
            except (TypeError, ValueError) as e:
                raise InvalidConfiguration(
                    f"Invalid chip inventory entry {raw_denom!r}: {raw_count!r}"
                ) from e
            if denom in chips:
                raise InvalidConfiguration(f"Duplicate denomination: {denom}")
            chips[denom] = count

        return cls(chips=chips)

    # -------------------------------------------------------------------------
    # Производные значения
    # -------------------------------------------------------------------------

    @property
    def denominations(self) -> tuple[int, ...]:
        """Номиналы по возрастанию."""
        return tuple(sorted(self.chips))

    @property
    def denominations_desc(self) -> tuple[int, ...]:
        """Номиналы по убыванию."""
        return tuple(sorted(self.chips, reverse=True))

    @property
    def base_unit(self) -> int:
        """GCD всех номиналов."""
        return base_unit(self.chips)

    @property
    def smallest_denomination(self) -> int:
        return min(self.chips)

    @property
    def total_value(self) -> int:
        """Суммарная стоимость всего набора."""
        return sum(denom * count for denom, count in self.chips.items())

    def count(self, denomination: int) -> int:
        """Количество фишек номинала (0 если номинала нет в наборе)."""
        return self.chips.get(denomination, 0)

    def as_dict(self) -> dict[int, int]:
        """Копия mapping номинал → количество."""
        return dict(self.chips)

    def to_contract(self) -> dict[str, Any]:
        """JSON-представление (contracts/schema/chip_inventory.json)."""
        return {"chips": {str(denom): count for denom, count in self.chips.items()}}


# =============================================================================
# DEFAULTS
# =============================================================================

# Стандартный кейс на 500 фишек
DEFAULT_CHIP_INVENTORY = ChipInventory(
    chips={5: 150, 10: 100, 25: 100, 100: 100, 500: 25, 1000: 25}
)


def load_chip_inventory(path: str | Path) -> ChipInventory:
    """
    Загрузка набора фишек из JSON-файла с проверкой контракта.

    Args:
        path: Путь к JSON вида {"chips": {"5": 150, ...}}

    Raises:
        InvalidConfiguration: Если файл не соответствует контракту
        FileNotFoundError: Если файла нет
    """
    # Импорт здесь: валидаторы загружают схемы при импорте
    from src.core.contracts import ChipInventoryValidator

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    validator = ChipInventoryValidator()
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        raise InvalidConfiguration(
            f"Chip inventory contract violation in {path}: {errors[0].message}"
        )

    return ChipInventory.from_mapping(data["chips"])
