"""Supabase-backed health data for synced sleep, heart rate and activity."""

import asyncio
from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from caffeine_tracker.domain.sleep import SleepSample
from caffeine_tracker.domain.summary import DailyActivity
from caffeine_tracker.services.activity import ActivityProvider
from caffeine_tracker.services.sleep import HealthDataProvider


@dataclass
class SupabaseHealthRepository(HealthDataProvider, ActivityProvider):
    """Reads samples and daily totals uploaded from the device's health store."""

    client: Client

    async def fetch_sleep_samples(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[SleepSample]:
        """Return sleep samples starting within the window."""
        return await asyncio.to_thread(self._select_sleep, user_id, start, end)

    async def average_heart_rate(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> float | None:
        """Return the mean heart rate measured within the window."""
        values = await asyncio.to_thread(self._select_heart_rate, user_id, start, end)
        if not values:
            return None
        return sum(values) / len(values)

    async def fetch_daily_activity(
        self, user_id: UUID, start_day: date, end_day: date
    ) -> list[DailyActivity]:
        """Return step and active energy totals per day."""
        return await asyncio.to_thread(
            self._select_activity, user_id, start_day, end_day
        )

    def _select_sleep(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[SleepSample]:
        response = (
            self.client.table("sleep_samples")
            .select("start_at, end_at, value")
            .eq("user_id", str(user_id))
            .gte("start_at", start.isoformat())
            .lt("start_at", end.isoformat())
            .order("start_at", desc=False)
            .execute()
        )
        return [
            SleepSample(
                start=datetime.fromisoformat(str(row["start_at"])),
                end=datetime.fromisoformat(str(row["end_at"])),
                value=int(row.get("value") or 0),
            )
            for row in response.data or []
        ]

    def _select_heart_rate(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[float]:
        response = (
            self.client.table("heart_rate_samples")
            .select("bpm")
            .eq("user_id", str(user_id))
            .gte("measured_at", start.isoformat())
            .lt("measured_at", end.isoformat())
            .execute()
        )
        return [
            float(row["bpm"]) for row in response.data or [] if row.get("bpm") is not None
        ]

    def _select_activity(
        self, user_id: UUID, start_day: date, end_day: date
    ) -> list[DailyActivity]:
        response = (
            self.client.table("daily_activity")
            .select("day, steps, active_calories")
            .eq("user_id", str(user_id))
            .gte("day", start_day.isoformat())
            .lte("day", end_day.isoformat())
            .order("day", desc=False)
            .execute()
        )
        return [
            DailyActivity(
                day=date.fromisoformat(str(row["day"])),
                steps=int(row.get("steps") or 0),
                calories=float(row.get("active_calories") or 0.0),
            )
            for row in response.data or []
        ]
