"""Wellness insights generated by a text model."""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from pydantic import ValidationError

from caffeine_tracker.domain.insights import WeeklyAnalysis
from caffeine_tracker.domain.intake import IntakeEvent
from caffeine_tracker.domain.sleep import SleepSession
from caffeine_tracker.domain.summary import DailyActivity

DAILY_LIMIT_MG = 400
FALLBACK_DAILY_SUMMARY = "Unable to generate summary"

WEEKLY_INSTRUCTIONS = (
    "You are a friendly and helpful assistant analyzing caffeine consumption "
    "and sleep patterns. Address the user directly. Respond in JSON with the "
    'structure {"summary": string, "insights": [string], '
    '"recommendations": [string], "scores": {"sleepQuality": number, '
    '"caffeineBalance": number, "physicalActivity": number, "overall": number}}.'
)
DAILY_INSTRUCTIONS = (
    "You are a friendly assistant providing brief, personalized caffeine "
    "consumption summaries."
)

_SCORE_KEYS = ("sleepQuality", "caffeineBalance", "physicalActivity", "overall")

WEEKLY_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "summary": {"type": "string"},
        "insights": {"type": "array", "items": {"type": "string"}},
        "recommendations": {"type": "array", "items": {"type": "string"}},
        "scores": {
            "type": "object",
            "properties": {key: {"type": "integer"} for key in _SCORE_KEYS},
            "required": list(_SCORE_KEYS),
            "additionalProperties": False,
        },
    },
    "required": ["summary", "insights", "recommendations", "scores"],
    "additionalProperties": False,
}

_DATETIME_FORMAT = "%b %d, %Y at %H:%M"
_DATE_FORMAT = "%b %d, %Y"

_logger = logging.getLogger(__name__)


class InsightFormatError(RuntimeError):
    """Raised when the model output cannot be parsed as an analysis."""


class InsightClient(Protocol):
    """Interface for the remote text-generation model."""

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        prompt: str,
        schema: dict[str, object] | None = None,
    ) -> str:
        """Return the model's text output."""


@dataclass
class InsightService:
    """Builds prompts from tracked data and parses the model's answers."""

    client: InsightClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze_week(
        self,
        user_name: str,
        events: Sequence[IntakeEvent],
        sessions: Sequence[SleepSession],
        activity: Sequence[DailyActivity] = (),
    ) -> WeeklyAnalysis:
        """Return a structured weekly analysis."""
        prompt = build_weekly_prompt(user_name, events, sessions, activity)
        output = await self.client.complete(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            instructions=WEEKLY_INSTRUCTIONS,
            prompt=prompt,
            schema=WEEKLY_SCHEMA,
        )
        return parse_weekly_analysis(output)

    async def daily_summary(self, user_name: str, events: Sequence[IntakeEvent]) -> str:
        """Return a short conversational summary of the day's intake."""
        output = await self.client.complete(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            instructions=DAILY_INSTRUCTIONS,
            prompt=build_daily_prompt(user_name, events),
        )
        return output.strip() or FALLBACK_DAILY_SUMMARY


def build_weekly_prompt(
    user_name: str,
    events: Sequence[IntakeEvent],
    sessions: Sequence[SleepSession],
    activity: Sequence[DailyActivity] = (),
) -> str:
    """Compose the weekly analysis prompt from tracked data."""
    caffeine_lines = "\n".join(
        f"Caffeine: {event.amount_mg:g}mg at {_format_datetime(event.timestamp)}"
        for event in events
    )
    sleep_lines = "\n".join(_format_session(session) for session in sessions)
    activity_lines = "\n".join(
        f"Activity on {metric.day.strftime(_DATE_FORMAT)}: Steps: {metric.steps}, "
        f"Calories burned: {int(metric.calories)} kcal"
        for metric in activity
    )
    return f"""Analyze the following health data for {user_name}:

Caffeine Consumption:
{caffeine_lines or "No caffeine logged."}

Sleep Patterns:
{sleep_lines or "No sleep recorded."}

Daily Activity:
{activity_lines or "No activity recorded."}

Please provide a personalized analysis for {user_name}:
1. A summary of the relationship between caffeine consumption patterns,
   sleep quality and duration, physical activity and heart rate during sleep.
2. Three key insights about patterns and correlations.
3. Three specific recommendations covering caffeine timing, sleep quality
   and daily activity.
4. Scores (0-100) for sleep quality, caffeine balance, physical activity and
   overall wellness."""


def build_daily_prompt(user_name: str, events: Sequence[IntakeEvent]) -> str:
    """Compose the short daily summary prompt."""
    total = sum(event.amount_mg for event in events)
    last = max(events, key=lambda event: event.timestamp) if events else None
    last_time = last.timestamp.strftime("%H:%M") if last else "None"
    return f"""Generate a brief, friendly daily caffeine summary for {user_name}.

Today's data:
- Total caffeine: {int(total)}mg
- Number of drinks: {len(events)}
- Last intake: {last_time}

Please provide a concise, personalized summary (max 150 characters) that includes:
1. Total caffeine intake
2. Comparison to the daily recommended limit ({DAILY_LIMIT_MG}mg)
3. A friendly tip or observation"""


def parse_weekly_analysis(output: str) -> WeeklyAnalysis:
    """Parse model output into a ``WeeklyAnalysis``; missing scores become 0."""
    text = _strip_code_fence(output)
    try:
        return WeeklyAnalysis.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as exc:
        _logger.warning("Invalid insight response: %s", exc)
        raise InsightFormatError("Invalid insight response format") from exc


def _format_session(session: SleepSession) -> str:
    heart_rate = (
        f"{session.heart_rate:.0f} BPM" if session.heart_rate is not None else "n/a"
    )
    return (
        f"Sleep: {session.duration_hours:.2f} hours, heart rate: {heart_rate}, "
        f"from {_format_datetime(session.start)} to {_format_datetime(session.end)}"
    )


def _format_datetime(value: datetime) -> str:
    return value.strftime(_DATETIME_FORMAT)


def _strip_code_fence(output: str) -> str:
    text = output.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        text = text.removesuffix("```").strip()
    return text
