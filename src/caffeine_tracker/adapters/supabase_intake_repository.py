"""Supabase repository for caffeine intake events."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from caffeine_tracker.domain.intake import BeverageType, IntakeEvent
from caffeine_tracker.services.intake import IntakeRepository

_COLUMNS = (
    "id, consumed_at, caffeine_mg, beverage_name, beverage_type, volume_ml, "
    "custom_beverage"
)


@dataclass
class SupabaseIntakeRepository(IntakeRepository):
    """Supabase implementation for intake events."""

    client: Client

    def create_intake(self, user_id: UUID, event: IntakeEvent) -> IntakeEvent:
        """Insert an intake row and return the stored event."""
        response = (
            self.client.table("caffeine_entries")
            .insert(
                {
                    "id": str(event.id),
                    "user_id": str(user_id),
                    "consumed_at": event.timestamp.isoformat(),
                    "caffeine_mg": event.amount_mg,
                    "beverage_name": event.beverage_name,
                    "beverage_type": event.beverage_type.value,
                    "volume_ml": event.volume_ml,
                    "custom_beverage": event.custom_beverage,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create caffeine entry")
        return _parse_row(response.data[0])

    def delete_intake(self, user_id: UUID, intake_id: UUID) -> bool:
        """Delete an intake row owned by the user."""
        response = (
            self.client.table("caffeine_entries")
            .delete()
            .eq("id", str(intake_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)

    def list_intakes(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[IntakeEvent]:
        """Return intake rows in the time range."""
        response = (
            self.client.table("caffeine_entries")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("consumed_at", start.isoformat())
            .lt("consumed_at", end.isoformat())
            .order("consumed_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> IntakeEvent:
    raw_type = str(row.get("beverage_type") or BeverageType.CUSTOM.value)
    try:
        beverage_type = BeverageType(raw_type)
    except ValueError:
        beverage_type = BeverageType.CUSTOM
    return IntakeEvent(
        id=UUID(str(row["id"])),
        timestamp=datetime.fromisoformat(str(row["consumed_at"])),
        amount_mg=float(row.get("caffeine_mg") or 0.0),
        beverage_name=str(row.get("beverage_name") or ""),
        beverage_type=beverage_type,
        volume_ml=float(row.get("volume_ml") or 0.0),
        custom_beverage=bool(row.get("custom_beverage", False)),
    )
