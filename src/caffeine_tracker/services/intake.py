"""Caffeine intake logging service."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from caffeine_tracker.domain.intake import BeveragePreset, BeverageType, IntakeEvent

PRESETS: dict[str, BeveragePreset] = {
    "coffee": BeveragePreset("Coffee", BeverageType.COFFEE, 95.0, 240.0),
    "espresso": BeveragePreset("Espresso", BeverageType.COFFEE, 63.0, 30.0),
    "green_tea": BeveragePreset("Green Tea", BeverageType.TEA, 28.0, 240.0),
    "red_bull": BeveragePreset("Red Bull", BeverageType.ENERGY_DRINK, 80.0, 250.0),
    "cola": BeveragePreset("Cola", BeverageType.SODA, 34.0, 355.0),
}

_DEFAULT_ICON = "cup.and.saucer.fill"
_TYPE_ICONS = {
    BeverageType.COFFEE: "cup.and.saucer.fill",
    BeverageType.TEA: "leaf.fill",
    BeverageType.ENERGY_DRINK: "bolt.fill",
    BeverageType.SODA: "bubbles.and.sparkles.fill",
}
_NAME_ICONS = (
    (("coffee",), "cup.and.saucer.fill"),
    (("tea",), "leaf.fill"),
    (("energy", "monster", "red bull"), "bolt.fill"),
    (("cola", "soda", "pepsi"), "bubbles.and.sparkles.fill"),
)

_logger = logging.getLogger(__name__)


class IntakeRepository(Protocol):
    """Persistence interface for intake events."""

    def create_intake(self, user_id: UUID, event: IntakeEvent) -> IntakeEvent:
        """Persist an intake event and return the stored record."""

    def delete_intake(self, user_id: UUID, intake_id: UUID) -> bool:
        """Delete an intake event, returning False when it did not exist."""

    def list_intakes(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[IntakeEvent]:
        """Return intake events with ``start <= timestamp < end``."""


@dataclass
class IntakeService:
    """Validates and records caffeine intake."""

    repository: IntakeRepository

    def log_intake(  # noqa: PLR0913
        self,
        user_id: UUID,
        *,
        amount_mg: float,
        beverage_name: str,
        beverage_type: BeverageType,
        volume_ml: float,
        timestamp: datetime | None = None,
        intake_id: UUID | None = None,
    ) -> IntakeEvent:
        """Validate and persist a new intake event."""
        if amount_mg < 0:
            raise ValueError("amount_mg must be non-negative")
        if volume_ml < 0:
            raise ValueError("volume_ml must be non-negative")
        resolved_timestamp = timestamp or datetime.now(tz=UTC)
        if resolved_timestamp.tzinfo is None:
            raise ValueError("timestamp must be timezone-aware")
        event = IntakeEvent(
            id=intake_id or uuid4(),
            timestamp=resolved_timestamp,
            amount_mg=amount_mg,
            beverage_name=beverage_name.strip(),
            beverage_type=beverage_type,
            volume_ml=volume_ml,
            custom_beverage=beverage_type is BeverageType.CUSTOM,
        )
        stored = self.repository.create_intake(user_id, event)
        _logger.info(
            "Logged intake: user=%s amount_mg=%s type=%s",
            user_id,
            stored.amount_mg,
            stored.beverage_type,
        )
        return stored

    def log_preset(
        self, user_id: UUID, preset_key: str, timestamp: datetime | None = None
    ) -> IntakeEvent:
        """Log one of the quick-add presets."""
        preset = PRESETS[preset_key]
        return self.log_intake(
            user_id,
            amount_mg=preset.amount_mg,
            beverage_name=preset.name,
            beverage_type=preset.beverage_type,
            volume_ml=preset.volume_ml,
            timestamp=timestamp,
        )

    def delete_intake(self, user_id: UUID, intake_id: UUID) -> bool:
        """Delete an intake event."""
        return self.repository.delete_intake(user_id, intake_id)

    def list_intakes(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[IntakeEvent]:
        """Return intake events in the range ordered by timestamp."""
        events = self.repository.list_intakes(user_id, start, end)
        return sorted(events, key=lambda event: event.timestamp)


def icon_for(beverage_type: BeverageType, name: str = "") -> str:
    """Return the symbol name used to display a beverage."""
    if beverage_type in _TYPE_ICONS:
        return _TYPE_ICONS[beverage_type]
    lowered = name.lower()
    for keywords, icon in _NAME_ICONS:
        if any(keyword in lowered for keyword in keywords):
            return icon
    return _DEFAULT_ICON
