"""User settings service."""

from dataclasses import dataclass
from datetime import time
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from caffeine_tracker.config import DEFAULT_BEDTIME


class UserSettingsRepository(Protocol):
    """Persistence interface for user settings."""

    def get_timezone(self, user_id: UUID) -> str | None:
        """Return the user's timezone if set."""

    def set_timezone(self, user_id: UUID, timezone: str) -> None:
        """Update the user's timezone."""

    def get_bedtime(self, user_id: UUID) -> time | None:
        """Return the user's preferred bedtime if set."""

    def set_bedtime(self, user_id: UUID, bedtime: time) -> None:
        """Update the user's preferred bedtime."""


@dataclass
class UserSettingsService:
    """Service for user settings."""

    repository: UserSettingsRepository
    default_bedtime: time = DEFAULT_BEDTIME

    def get_timezone(self, user_id: UUID) -> str:
        """Return the user timezone or UTC if unset."""
        return self.repository.get_timezone(user_id) or "UTC"

    def get_zone(self, user_id: UUID) -> ZoneInfo:
        """Return the user's timezone as a ``ZoneInfo``."""
        return ZoneInfo(self.get_timezone(user_id))

    def set_timezone(self, user_id: UUID, timezone: str) -> None:
        """Validate and persist a user's timezone."""
        try:
            ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {timezone}") from exc
        self.repository.set_timezone(user_id, timezone)

    def get_bedtime(self, user_id: UUID) -> time:
        """Return the stored bedtime, or the configured default."""
        return self.repository.get_bedtime(user_id) or self.default_bedtime

    def set_bedtime(self, user_id: UUID, bedtime: time) -> None:
        """Persist the user's bedtime preference."""
        self.repository.set_bedtime(user_id, bedtime.replace(second=0, microsecond=0))
