"""Beverage catalog and nutrition lookup models."""

from dataclasses import dataclass

from caffeine_tracker.domain.intake import BeverageType


@dataclass(frozen=True)
class CatalogBeverage:
    """Beverage from the bundled caffeine catalog."""

    name: str
    caffeine_mg: int
    serving_size: str
    serving_size_ml: float
    beverage_type: BeverageType


@dataclass(frozen=True)
class BeverageProduct:
    """Product returned by a nutrition lookup."""

    food_name: str
    brand_name: str | None
    serving_qty: float
    serving_unit: str
    serving_weight_g: float | None
    caffeine_mg: float | None
    photo_url: str | None
    upc: str | None
