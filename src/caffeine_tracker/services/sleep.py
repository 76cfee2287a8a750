"""Sleep session reconstruction and retrieval."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Protocol
from uuid import UUID

from caffeine_tracker.domain.sleep import SleepFetchResult, SleepSample, SleepSession

GAP_TOLERANCE = timedelta(minutes=45)
MIN_SESSION_DURATION = timedelta(minutes=30)

# Samples are fetched from noon the day before to noon the day after, so a
# night that crosses midnight is always seen whole by the day it starts on.
_WINDOW_ANCHOR = time(12, 0)

_logger = logging.getLogger(__name__)


class HealthDataProvider(Protocol):
    """Interface for the external health data store."""

    async def fetch_sleep_samples(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[SleepSample]:
        """Return raw sleep samples starting within the window."""

    async def average_heart_rate(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> float | None:
        """Return the mean heart rate over the window, if any was recorded."""


def merge_sleep_samples(samples: Iterable[SleepSample]) -> list[SleepSession]:
    """Merge raw samples into sessions.

    Samples whose gap to the running session is at most ``GAP_TOLERANCE``
    are fused; the merged state is the maximum of the parts. Sessions
    shorter than ``MIN_SESSION_DURATION`` are discarded. Samples ending
    before they start are dropped up front.
    """
    valid = []
    for sample in samples:
        if sample.end < sample.start:
            _logger.debug(
                "Dropping sleep sample ending before it starts: %s > %s",
                sample.start,
                sample.end,
            )
            continue
        valid.append(sample)
    if not valid:
        return []

    ordered = sorted(valid, key=lambda sample: sample.start)
    sessions: list[SleepSession] = []
    first = ordered[0]
    current = SleepSession(start=first.start, end=first.end, value=first.value)
    for sample in ordered[1:]:
        if sample.start - current.end <= GAP_TOLERANCE:
            current = SleepSession(
                start=current.start,
                end=max(current.end, sample.end),
                value=max(current.value, sample.value),
            )
            continue
        if current.duration >= MIN_SESSION_DURATION:
            sessions.append(current)
        current = SleepSession(start=sample.start, end=sample.end, value=sample.value)

    if current.duration >= MIN_SESSION_DURATION:
        sessions.append(current)
    return sessions


@dataclass
class SleepService:
    """Fetches samples per day and turns them into sessions."""

    provider: HealthDataProvider

    async def fetch_sessions(
        self, user_id: UUID, start_day: date, end_day: date, tz: tzinfo
    ) -> SleepFetchResult:
        """Return sessions that start on each day in the inclusive range.

        A day whose samples cannot be fetched is logged and reported in
        ``failed_days``; the remaining days are still returned.
        """
        sessions: list[SleepSession] = []
        failed_days: list[date] = []
        day = start_day
        while day <= end_day:
            try:
                day_sessions = await self._sessions_for_day(user_id, day, tz)
            except Exception as exc:
                _logger.warning("Failed to fetch sleep for %s: %s", day, exc)
                failed_days.append(day)
            else:
                sessions.extend(day_sessions)
            day += timedelta(days=1)
        return SleepFetchResult(sessions=sessions, failed_days=failed_days)

    async def _sessions_for_day(
        self, user_id: UUID, day: date, tz: tzinfo
    ) -> list[SleepSession]:
        window_start = datetime.combine(day - timedelta(days=1), _WINDOW_ANCHOR, tz)
        window_end = datetime.combine(day + timedelta(days=1), _WINDOW_ANCHOR, tz)
        samples = await self.provider.fetch_sleep_samples(
            user_id, window_start, window_end
        )
        result = []
        for session in merge_sleep_samples(samples):
            if session.start.astimezone(tz).date() != day:
                continue
            result.append(await self._attach_heart_rate(user_id, session))
        return result

    async def _attach_heart_rate(
        self, user_id: UUID, session: SleepSession
    ) -> SleepSession:
        try:
            heart_rate = await self.provider.average_heart_rate(
                user_id, session.start, session.end
            )
        except Exception as exc:
            _logger.warning(
                "Failed to fetch heart rate for session at %s: %s", session.start, exc
            )
            heart_rate = None
        return session.with_heart_rate(heart_rate)
