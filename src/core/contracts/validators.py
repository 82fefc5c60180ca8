"""
JSON Schema Contract Validators

Модуль для валидации JSON данных согласно формальным JSON Schema контрактам.
Использует библиотеку jsonschema для проверки соответствия данных схемам.

Схемы:
- chip_inventory.json (набор фишек оператора)
- blind_structure.json (структура блайндов)
- chip_distribution.json (распределение фишек на вход)
- tournament_plan.json (полный план турнира)
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Автоматически находит схемы в contracts/schema/ относительно корня проекта.
    """

    def __init__(self, schema_dir: Path | None = None):
        # Корень проекта: 4 уровня вверх от этого файла
        self._schema_dir = schema_dir or (
            Path(__file__).parent.parent.parent.parent / "contracts" / "schema"
        )
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'chip_inventory')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Meta-validation самой схемы
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """Итератор по всем ошибкам валидации (ValidationError)."""
        return self.validator.iter_errors(data)


class ChipInventoryValidator(ContractValidator):
    """Валидатор для chip_inventory контракта."""

    def __init__(self):
        super().__init__("chip_inventory")


class BlindStructureValidator(ContractValidator):
    """Валидатор для blind_structure контракта."""

    def __init__(self):
        super().__init__("blind_structure")


class ChipDistributionValidator(ContractValidator):
    """Валидатор для chip_distribution контракта."""

    def __init__(self):
        super().__init__("chip_distribution")


class TournamentPlanValidator(ContractValidator):
    """Валидатор для tournament_plan контракта."""

    def __init__(self):
        super().__init__("tournament_plan")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_chip_inventory(data: Dict[str, Any]) -> None:
    """
    Валидация chip_inventory данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    ChipInventoryValidator().validate(data)


def validate_blind_structure(data: Dict[str, Any]) -> None:
    """
    Валидация blind_structure данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    BlindStructureValidator().validate(data)


def validate_chip_distribution(data: Dict[str, Any]) -> None:
    """
    Валидация chip_distribution данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    ChipDistributionValidator().validate(data)


def validate_tournament_plan(data: Dict[str, Any]) -> None:
    """
    Валидация tournament_plan данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    TournamentPlanValidator().validate(data)
