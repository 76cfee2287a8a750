"""Caffeine product lookup backed by Nutritionix."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from caffeine_tracker.domain.products import BeverageProduct
from caffeine_tracker.services.cache import Cache

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_logger = logging.getLogger(__name__)


class ProductNotFoundError(LookupError):
    """Raised when a product cannot be resolved."""


class NutritionixClient(Protocol):
    """Interface for Nutritionix API interactions."""

    async def search_instant(self, query: str) -> dict[str, object]:
        """Search common and branded foods by free text."""

    async def search_item(self, upc: str) -> dict[str, object]:
        """Look up a branded item by UPC barcode."""

    async def natural_nutrients(self, query: str) -> dict[str, object]:
        """Return detailed nutrients for a natural-language query."""


@dataclass
class ProductLookupService:
    """Searches products and resolves barcodes with caching."""

    client: NutritionixClient
    cache: Cache
    search_ttl_seconds: int = 3600
    barcode_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 10) -> list[BeverageProduct]:
        """Return common and branded matches for ``query``."""
        cache_key = f"nutritionix:search:{query.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self._call_with_retry(
            lambda: self.client.search_instant(query), action="search"
        )
        rows = [*_rows(payload, "common"), *_rows(payload, "branded")]
        products = [_parse_product(row) for row in rows[:limit]]
        self.cache.set(cache_key, products, ttl_seconds=self.search_ttl_seconds)
        _logger.debug("Product search: query=%s results=%s", query, len(products))
        return products

    async def lookup_barcode(self, upc: str) -> BeverageProduct:
        """Resolve a UPC and fetch its detailed nutrients, including caffeine."""
        cache_key = f"nutritionix:upc:{upc}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, BeverageProduct):
            return cached

        item_payload = await self._call_with_retry(
            lambda: self.client.search_item(upc), action=f"search_item:{upc}"
        )
        foods = _rows(item_payload, "foods")
        if not foods:
            raise ProductNotFoundError(f"No product for barcode {upc}")
        item = _parse_product(foods[0])

        query = f"{item.brand_name or ''} {item.food_name}".strip()
        nutrients_payload = await self._call_with_retry(
            lambda: self.client.natural_nutrients(query),
            action=f"natural_nutrients:{upc}",
        )
        detailed = _rows(nutrients_payload, "foods")
        if not detailed:
            raise ProductNotFoundError(f"No nutrient data for {query!r}")
        product = _parse_product({**detailed[0], "upc": detailed[0].get("upc") or upc})
        self.cache.set(cache_key, product, ttl_seconds=self.barcode_ttl_seconds)
        return product

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except ProductNotFoundError:
                raise
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Nutritionix %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _rows(payload: dict[str, object], key: str) -> list[dict[str, object]]:
    rows = payload.get(key)
    return rows if isinstance(rows, list) else []


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)


def _parse_product(row: dict[str, object]) -> BeverageProduct:
    photo = row.get("photo")
    return BeverageProduct(
        food_name=str(row.get("food_name", "")),
        brand_name=row.get("brand_name"),
        serving_qty=float(row.get("serving_qty") or 1.0),
        serving_unit=str(row.get("serving_unit") or "serving"),
        serving_weight_g=_optional_float(row.get("serving_weight_grams")),
        caffeine_mg=_optional_float(row.get("nf_caffeine")),
        photo_url=photo.get("full") if isinstance(photo, dict) else None,
        upc=row.get("upc"),
    )
