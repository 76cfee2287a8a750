"""Domain models for caffeine intake."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class BeverageType(StrEnum):
    """Beverage classification tags."""

    COFFEE = "coffee"
    TEA = "tea"
    ENERGY_DRINK = "energyDrink"
    SODA = "soda"
    CUSTOM = "custom"


@dataclass(frozen=True)
class IntakeEvent:
    """A single logged consumption of caffeine."""

    id: UUID
    timestamp: datetime
    amount_mg: float
    beverage_name: str
    beverage_type: BeverageType
    volume_ml: float
    custom_beverage: bool = False


@dataclass(frozen=True)
class BeveragePreset:
    """Quick-add beverage with typical caffeine content."""

    name: str
    beverage_type: BeverageType
    amount_mg: float
    volume_ml: float
