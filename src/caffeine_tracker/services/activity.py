"""Daily activity retrieval for insight prompts."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from caffeine_tracker.domain.summary import DailyActivity

_logger = logging.getLogger(__name__)


class ActivityProvider(Protocol):
    """Interface for the external store of daily step and energy totals."""

    async def fetch_daily_activity(
        self, user_id: UUID, start_day: date, end_day: date
    ) -> list[DailyActivity]:
        """Return activity rows for days in ``[start_day, end_day]``."""


@dataclass
class ActivityService:
    """Loads daily activity; a provider failure yields no activity."""

    provider: ActivityProvider

    async def fetch_activity(
        self, user_id: UUID, start_day: date, end_day: date
    ) -> list[DailyActivity]:
        """Return activity ordered by day, or an empty list if unavailable."""
        try:
            rows = await self.provider.fetch_daily_activity(user_id, start_day, end_day)
        except Exception as exc:
            _logger.warning(
                "Failed to fetch activity for %s..%s: %s", start_day, end_day, exc
            )
            return []
        return sorted(
            (row for row in rows if start_day <= row.day <= end_day),
            key=lambda row: row.day,
        )
