"""Beverage catalog loaded from a caffeine content CSV."""

import csv
import io
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from caffeine_tracker.domain.intake import BeverageType
from caffeine_tracker.domain.products import CatalogBeverage

ML_PER_OZ = 29.5735
ML_PER_CUP = 236.588

_MIN_COLUMNS = 4
_NUMBER = re.compile(r"\d+(?:\.\d+)?")

_logger = logging.getLogger(__name__)


@dataclass
class BeverageCatalog:
    """Searchable list of beverages with known caffeine content."""

    beverages: list[CatalogBeverage] = field(default_factory=list)

    @classmethod
    def from_csv_text(cls, content: str) -> "BeverageCatalog":
        """Parse ``name,serving size,caffeine mg,type`` rows (header skipped)."""
        beverages = []
        reader = csv.reader(io.StringIO(content))
        next(reader, None)
        for columns in reader:
            if len(columns) < _MIN_COLUMNS:
                continue
            serving_size = columns[1].strip()
            beverages.append(
                CatalogBeverage(
                    name=columns[0].strip(),
                    caffeine_mg=_parse_int(columns[2]),
                    serving_size=serving_size,
                    serving_size_ml=parse_serving_size(serving_size),
                    beverage_type=beverage_type_from_label(columns[3]),
                )
            )
        return cls(beverages=beverages)

    @classmethod
    def from_path(cls, path: str | Path) -> "BeverageCatalog":
        """Load the catalog from a CSV file."""
        catalog = cls.from_csv_text(Path(path).read_text(encoding="utf-8"))
        _logger.info("Loaded %s beverages from %s", len(catalog.beverages), path)
        return catalog

    def search(self, query: str, limit: int | None = None) -> list[CatalogBeverage]:
        """Return beverages whose name contains ``query``, case-insensitively."""
        needle = query.strip().lower()
        if not needle:
            return []
        matches = [b for b in self.beverages if needle in b.name.lower()]
        return matches if limit is None else matches[:limit]


def parse_serving_size(size: str) -> float:
    """Convert a serving size such as ``8 oz`` or ``1 cup`` to milliliters."""
    cleaned = size.lower().replace(" ", "")
    match = _NUMBER.search(cleaned)
    if match is None:
        return 0.0
    value = float(match.group())
    if "oz" in cleaned:
        return value * ML_PER_OZ
    if "cup" in cleaned:
        return value * ML_PER_CUP
    return value


def beverage_type_from_label(label: str) -> BeverageType:
    """Map a free-form category label to a ``BeverageType``."""
    lowered = label.strip().lower()
    if "coffee" in lowered:
        return BeverageType.COFFEE
    if "tea" in lowered:
        return BeverageType.TEA
    if "energy" in lowered:
        return BeverageType.ENERGY_DRINK
    if "soda" in lowered:
        return BeverageType.SODA
    return BeverageType.CUSTOM


def _parse_int(raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        return 0
