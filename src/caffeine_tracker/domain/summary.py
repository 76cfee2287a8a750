"""Derived daily and time-series views."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class DecayPoint:
    """Estimated residual caffeine at one instant."""

    at: datetime
    amount_mg: float


@dataclass(frozen=True)
class DailySummary:
    """Caffeine and sleep aggregate for one local calendar day."""

    day: date
    total_mg: float
    intake_count: int
    last_intake_at: datetime | None
    last_intake_mg: float | None
    bedtime_level_mg: float | None
    sleep_hours: float | None
    sleep_start: datetime | None
    sleep_end: datetime | None
    sleep_heart_rate: float | None


@dataclass(frozen=True)
class DailyActivity:
    """Activity metrics for a day, supplied by the health provider."""

    day: date
    steps: int
    calories: float


@dataclass(frozen=True)
class DailyReport:
    """Daily summaries for a range, with the days whose sleep data is missing."""

    summaries: list[DailySummary]
    incomplete_days: list[date]
