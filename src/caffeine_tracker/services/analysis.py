"""Orchestrates data loading for summaries, decay curves and insights."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from uuid import UUID

from caffeine_tracker.domain.insights import WeeklyAnalysis
from caffeine_tracker.domain.intake import IntakeEvent
from caffeine_tracker.domain.summary import DailyReport, DecayPoint
from caffeine_tracker.services.activity import ActivityService
from caffeine_tracker.services.daily import build_daily_summaries
from caffeine_tracker.services.decay import DEFAULT_STEP_MINUTES, series
from caffeine_tracker.services.insights import InsightService
from caffeine_tracker.services.intake import IntakeService
from caffeine_tracker.services.sleep import SleepService
from caffeine_tracker.services.user_settings import UserSettingsService

# Doses older than this are below 0.2% of their amount and are not loaded.
DECAY_LOOKBACK = timedelta(hours=48)
WEEK_DAYS = 7

_logger = logging.getLogger(__name__)


@dataclass
class AnalysisService:
    """Loads a user's data and feeds it to the pure computations."""

    intake_service: IntakeService
    sleep_service: SleepService
    user_settings_service: UserSettingsService
    insight_service: InsightService
    activity_service: ActivityService

    async def daily_report(self, user_id: UUID, start: date, end: date) -> DailyReport:
        """Return one summary per day in ``[start, end]`` in the user's timezone."""
        tz = self.user_settings_service.get_zone(user_id)
        bedtime = self.user_settings_service.get_bedtime(user_id)
        range_start, range_end = _local_range(start, end, tz)
        events = self.intake_service.list_intakes(user_id, range_start, range_end)
        sleep = await self.sleep_service.fetch_sessions(user_id, start, end, tz)
        if not sleep.complete:
            _logger.info(
                "Daily report for %s missing sleep on %s", user_id, sleep.failed_days
            )
        summaries = build_daily_summaries(
            events, sleep.sessions, start, end, tz, reference=bedtime
        )
        return DailyReport(summaries=summaries, incomplete_days=sleep.failed_days)

    def decay_curve(
        self,
        user_id: UUID,
        start: datetime,
        end: datetime,
        step_minutes: int = DEFAULT_STEP_MINUTES,
        now: datetime | None = None,
    ) -> list[DecayPoint]:
        """Return the residual curve, projecting past ``now`` without new intake."""
        as_of = now or datetime.now(tz=UTC)
        events = self.intake_service.list_intakes(
            user_id, start - DECAY_LOOKBACK, max(end, as_of) + timedelta(seconds=1)
        )
        return list(series(events, start, end, step_minutes, as_of=as_of))

    async def weekly_insight(
        self, user_id: UUID, user_name: str, today: date | None = None
    ) -> WeeklyAnalysis:
        """Analyze the seven days ending on ``today``."""
        tz = self.user_settings_service.get_zone(user_id)
        end = today or datetime.now(tz=tz).date()
        start = end - timedelta(days=WEEK_DAYS - 1)
        range_start, range_end = _local_range(start, end, tz)
        events = self.intake_service.list_intakes(user_id, range_start, range_end)
        sleep = await self.sleep_service.fetch_sessions(user_id, start, end, tz)
        sessions = [
            replace(s, start=s.start.astimezone(tz), end=s.end.astimezone(tz))
            for s in sleep.sessions
        ]
        activity = await self.activity_service.fetch_activity(user_id, start, end)
        return await self.insight_service.analyze_week(
            user_name, _localize_events(events, tz), sessions, activity
        )

    async def daily_insight(
        self, user_id: UUID, user_name: str, day: date | None = None
    ) -> str:
        """Return a short text summary of one day's intake."""
        tz = self.user_settings_service.get_zone(user_id)
        target = day or datetime.now(tz=tz).date()
        range_start, range_end = _local_range(target, target, tz)
        events = self.intake_service.list_intakes(user_id, range_start, range_end)
        return await self.insight_service.daily_summary(
            user_name, _localize_events(events, tz)
        )


def _local_range(start: date, end: date, tz: tzinfo) -> tuple[datetime, datetime]:
    range_start = datetime.combine(start, time.min, tz)
    range_end = datetime.combine(end + timedelta(days=1), time.min, tz)
    return range_start.astimezone(UTC), range_end.astimezone(UTC)


def _localize_events(events: list[IntakeEvent], tz: tzinfo) -> list[IntakeEvent]:
    return [replace(e, timestamp=e.timestamp.astimezone(tz)) for e in events]
