"""Caffeine blood-level estimation.

Single-compartment first-order elimination: every intake is an instantaneous
bolus whose residual halves every ``HALF_LIFE``. Doses superpose linearly.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from caffeine_tracker.config import DEFAULT_BEDTIME
from caffeine_tracker.domain.intake import IntakeEvent
from caffeine_tracker.domain.summary import DecayPoint

HALF_LIFE = timedelta(hours=5)
DEFAULT_STEP_MINUTES = 30


def residual_at(events: Iterable[IntakeEvent], at: datetime) -> float:
    """Return the estimated caffeine (mg) still in the body at ``at``.

    Events after ``at`` have not been administered and contribute nothing.
    Negative amounts are clamped to zero.
    """
    total = 0.0
    instant = at.astimezone(UTC)
    for event in events:
        if event.timestamp.astimezone(UTC) > instant:
            continue
        total += _contribution(event, instant)
    return total


def series(
    events: Iterable[IntakeEvent],
    start: datetime,
    end: datetime,
    step_minutes: int = DEFAULT_STEP_MINUTES,
    as_of: datetime | None = None,
) -> "DecaySeries":
    """Return evenly spaced residual estimates from ``start`` to ``end``.

    ``as_of`` drops intake logged after that instant so that projections
    past "now" never assume future consumption.
    """
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")
    selected = tuple(
        event
        for event in events
        if as_of is None or event.timestamp.astimezone(UTC) <= as_of.astimezone(UTC)
    )
    return DecaySeries(
        events=selected,
        start=start,
        end=end,
        step=timedelta(minutes=step_minutes),
    )


def estimated_level_at_reference_time(
    events: Iterable[IntakeEvent],
    day: date,
    tz: tzinfo,
    reference: time = DEFAULT_BEDTIME,
) -> float | None:
    """Return the residual at ``reference`` o'clock on ``day`` in ``tz``.

    Returns ``None`` when no event falls on ``day``: a level is only
    reported for days with a last intake.
    """
    materialized = list(events)
    if not any(event.timestamp.astimezone(tz).date() == day for event in materialized):
        return None
    at = datetime.combine(day, reference, tzinfo=tz)
    return residual_at(materialized, at)


@dataclass(frozen=True)
class DecaySeries:
    """Restartable, lazily evaluated decay curve."""

    events: tuple[IntakeEvent, ...]
    start: datetime
    end: datetime
    step: timedelta

    def __iter__(self) -> Iterator[DecayPoint]:
        # Step in UTC so spacing stays even across DST transitions.
        current = self.start.astimezone(UTC)
        end = self.end.astimezone(UTC)
        while current <= end:
            yield DecayPoint(
                at=current.astimezone(self.start.tzinfo),
                amount_mg=residual_at(self.events, current),
            )
            current += self.step


def _contribution(event: IntakeEvent, at: datetime) -> float:
    amount = max(event.amount_mg, 0.0)
    elapsed = (at - event.timestamp.astimezone(UTC)) / HALF_LIFE
    return amount * 0.5**elapsed
