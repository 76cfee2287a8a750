"""Request and response models for the HTTP API."""

from datetime import date, datetime, time
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field

from caffeine_tracker.domain.intake import BeverageType


class IntakeCreate(BaseModel):
    """Payload for logging a beverage."""

    amount_mg: float = Field(ge=0)
    beverage_name: str = Field(min_length=1)
    beverage_type: BeverageType = BeverageType.CUSTOM
    volume_ml: float = Field(default=0.0, ge=0)
    timestamp: AwareDatetime | None = None


class IntakeOut(BaseModel):
    """Logged intake event."""

    id: UUID
    timestamp: datetime
    amount_mg: float
    beverage_name: str
    beverage_type: BeverageType
    volume_ml: float
    custom_beverage: bool
    icon: str


class SettingsUpdate(BaseModel):
    """Payload for updating user preferences."""

    timezone: str | None = None
    bedtime: time | None = None


class SettingsOut(BaseModel):
    """Current user preferences."""

    timezone: str
    bedtime: time


class DecayPointOut(BaseModel):
    """One sample of the decay curve."""

    at: datetime
    amount_mg: float


class DailySummaryOut(BaseModel):
    """Daily caffeine and sleep aggregate."""

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


class DailyReportOut(BaseModel):
    """Summaries for a date range."""

    summaries: list[DailySummaryOut]
    incomplete_days: list[date]


class InsightRequest(BaseModel):
    """Options for generating insights."""

    user_name: str = "User"
