"""Sleep domain models."""

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta


@dataclass(frozen=True)
class SleepSample:
    """Raw, possibly fragmented observation of a sleep state."""

    start: datetime
    end: datetime
    value: int


@dataclass(frozen=True)
class SleepSession:
    """Merged contiguous sleep period."""

    start: datetime
    end: datetime
    value: int
    heart_rate: float | None = None

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def duration_hours(self) -> float:
        return self.duration.total_seconds() / 3600

    def with_heart_rate(self, heart_rate: float | None) -> "SleepSession":
        """Return a copy with the average heart rate attached."""
        return replace(self, heart_rate=heart_rate)


@dataclass(frozen=True)
class SleepFetchResult:
    """Sessions gathered for a date range plus the days that failed to load."""

    sessions: list[SleepSession]
    failed_days: list[date]

    @property
    def complete(self) -> bool:
        return not self.failed_days
