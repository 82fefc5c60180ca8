"""
Speed — Конфигурация скорости турнира

Immutable Pydantic модели таблицы скоростей. Тайминг (длительность уровня,
частота и длительность перерывов) только передаётся дальше в BlindStructure;
коэффициент роста по умолчанию используется генератором блайндов, если
запрошенный коэффициент невалиден.
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class Speed(str, Enum):
    """Стандартные скорости турнира."""

    TURBO = "turbo"
    NORMAL = "normal"
    SLOW = "slow"


class SpeedProfile(BaseModel):
    """Параметры одной скорости."""

    level_minutes: int = Field(..., gt=0, description="Длительность уровня (мин)")
    break_frequency: int = Field(..., gt=0, description="Перерыв каждые N уровней")
    break_minutes: int = Field(..., ge=0, description="Длительность перерыва (мин)")
    default_increase_rate: float = Field(
        ..., gt=1.0, description="Коэффициент роста блайндов по умолчанию"
    )

    model_config = {"frozen": True}


class SpeedTable(BaseModel):
    """
    Таблица скоростей: имя → SpeedProfile.

    Неизвестное имя скорости разрешается в fallback (по умолчанию "normal").
    """

    profiles: dict[str, SpeedProfile] = Field(..., min_length=1)
    fallback: str = Field(default=Speed.NORMAL.value)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_fallback(self) -> "SpeedTable":
        if self.fallback not in self.profiles:
            raise ValueError(f"fallback speed {self.fallback!r} is not in profiles")
        return self

    def resolve_name(self, speed: str | Speed | None) -> str:
        """Нормализованное имя скорости (fallback для неизвестных)."""
        name = speed.value if isinstance(speed, Speed) else speed
        if name in self.profiles:
            return name
        return self.fallback

    def resolve(self, speed: str | Speed | None) -> SpeedProfile:
        return self.profiles[self.resolve_name(speed)]


DEFAULT_SPEED_TABLE = SpeedTable(
    profiles={
        Speed.TURBO.value: SpeedProfile(
            level_minutes=10, break_frequency=6, break_minutes=10, default_increase_rate=1.4
        ),
        Speed.NORMAL.value: SpeedProfile(
            level_minutes=20, break_frequency=4, break_minutes=15, default_increase_rate=1.25
        ),
        Speed.SLOW.value: SpeedProfile(
            level_minutes=30, break_frequency=3, break_minutes=20, default_increase_rate=1.2
        ),
    }
)
