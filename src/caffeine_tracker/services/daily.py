"""Per-day aggregation of caffeine intake and sleep."""

from collections.abc import Iterable
from datetime import date, time, timedelta, tzinfo

from caffeine_tracker.config import DEFAULT_BEDTIME
from caffeine_tracker.domain.intake import IntakeEvent
from caffeine_tracker.domain.sleep import SleepSession
from caffeine_tracker.domain.summary import DailySummary
from caffeine_tracker.services.decay import estimated_level_at_reference_time


def build_daily_summaries(  # noqa: PLR0913
    events: Iterable[IntakeEvent],
    sessions: Iterable[SleepSession],
    start: date,
    end: date,
    tz: tzinfo,
    reference: time = DEFAULT_BEDTIME,
) -> list[DailySummary]:
    """Return one summary per local calendar day in ``[start, end]``.

    Sleep sessions belong to the day on which they start, so a night from
    23:30 to 07:00 is reported with the evening it began.
    """
    events_by_day: dict[date, list[IntakeEvent]] = {}
    for event in events:
        events_by_day.setdefault(event.timestamp.astimezone(tz).date(), []).append(
            event
        )
    sessions_by_day: dict[date, list[SleepSession]] = {}
    for session in sessions:
        sessions_by_day.setdefault(session.start.astimezone(tz).date(), []).append(
            session
        )

    summaries = []
    day = start
    while day <= end:
        summaries.append(
            _summarize_day(
                day,
                events_by_day.get(day, []),
                sessions_by_day.get(day, []),
                tz,
                reference,
            )
        )
        day += timedelta(days=1)
    return summaries


def _summarize_day(
    day: date,
    events: list[IntakeEvent],
    sessions: list[SleepSession],
    tz: tzinfo,
    reference: time,
) -> DailySummary:
    last = max(events, key=lambda event: event.timestamp) if events else None
    heart_rates = [s.heart_rate for s in sessions if s.heart_rate is not None]
    return DailySummary(
        day=day,
        total_mg=sum(event.amount_mg for event in events),
        intake_count=len(events),
        last_intake_at=last.timestamp if last else None,
        last_intake_mg=last.amount_mg if last else None,
        bedtime_level_mg=estimated_level_at_reference_time(events, day, tz, reference),
        sleep_hours=(
            sum(session.duration_hours for session in sessions) if sessions else None
        ),
        sleep_start=min(s.start for s in sessions) if sessions else None,
        sleep_end=max(s.end for s in sessions) if sessions else None,
        sleep_heart_rate=(
            sum(heart_rates) / len(heart_rates) if heart_rates else None
        ),
    )
