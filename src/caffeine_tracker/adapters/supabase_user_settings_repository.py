"""Supabase repository for user settings."""

from dataclasses import dataclass
from datetime import UTC, datetime, time
from uuid import UUID

from supabase import Client

from caffeine_tracker.services.user_settings import UserSettingsRepository


@dataclass
class SupabaseUserSettingsRepository(UserSettingsRepository):
    """Supabase implementation for user settings."""

    client: Client

    def get_timezone(self, user_id: UUID) -> str | None:
        """Return the stored timezone for a user."""
        row = self._get_row(user_id, "timezone")
        return row.get("timezone") if row else None

    def set_timezone(self, user_id: UUID, timezone_name: str) -> None:
        """Update the user's timezone."""
        self._upsert(user_id, {"timezone": timezone_name})

    def get_bedtime(self, user_id: UUID) -> time | None:
        """Return the stored bedtime for a user."""
        row = self._get_row(user_id, "bed_time")
        raw = row.get("bed_time") if row else None
        if not raw:
            return None
        return time.fromisoformat(str(raw))

    def set_bedtime(self, user_id: UUID, bedtime: time) -> None:
        """Update the user's bedtime."""
        self._upsert(user_id, {"bed_time": bedtime.isoformat(timespec="minutes")})

    def _get_row(self, user_id: UUID, columns: str) -> dict[str, object] | None:
        response = (
            self.client.table("user_settings")
            .select(columns)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0]

    def _upsert(self, user_id: UUID, values: dict[str, object]) -> None:
        self.client.table("user_settings").upsert(
            {
                "user_id": str(user_id),
                **values,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()
