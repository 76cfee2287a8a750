"""Tests for insight generation."""

import asyncio
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from caffeine_tracker.domain.intake import BeverageType, IntakeEvent
from caffeine_tracker.domain.sleep import SleepSession
from caffeine_tracker.domain.summary import DailyActivity
from caffeine_tracker.services.insights import (
    FALLBACK_DAILY_SUMMARY,
    WEEKLY_SCHEMA,
    InsightFormatError,
    InsightService,
    build_daily_prompt,
    build_weekly_prompt,
    parse_weekly_analysis,
)
from tests.conftest import FakeInsightClient


def _event(hour: int, amount_mg: float) -> IntakeEvent:
    return IntakeEvent(
        id=uuid4(),
        timestamp=datetime(2026, 3, 2, hour, 15, tzinfo=UTC),
        amount_mg=amount_mg,
        beverage_name="Coffee",
        beverage_type=BeverageType.COFFEE,
        volume_ml=240,
    )


def _service(client: FakeInsightClient) -> InsightService:
    return InsightService(
        client=client, model="gpt-5.2", reasoning_effort="medium", store=False
    )


def test_weekly_prompt_contains_formatted_lines() -> None:
    session = SleepSession(
        start=datetime(2026, 3, 2, 23, 0, tzinfo=UTC),
        end=datetime(2026, 3, 3, 6, 30, tzinfo=UTC),
        value=3,
        heart_rate=57.4,
    )
    activity = [DailyActivity(day=session.start.date(), steps=8012, calories=2104.6)]

    prompt = build_weekly_prompt("Sam", [_event(8, 95)], [session], activity)

    assert "Analyze the following health data for Sam:" in prompt
    assert "Caffeine: 95mg at Mar 02, 2026 at 08:15" in prompt
    assert "Sleep: 7.50 hours, heart rate: 57 BPM" in prompt
    assert "Activity on Mar 02, 2026: Steps: 8012, Calories burned: 2104 kcal" in prompt


def test_weekly_prompt_marks_missing_sections() -> None:
    prompt = build_weekly_prompt("Sam", [], [])

    assert "No caffeine logged." in prompt
    assert "No sleep recorded." in prompt
    assert "No activity recorded." in prompt


def test_daily_prompt_reports_totals_and_last_intake() -> None:
    prompt = build_daily_prompt("Sam", [_event(8, 95.6), _event(14, 63)])

    assert "Total caffeine: 158mg" in prompt
    assert "Number of drinks: 2" in prompt
    assert "Last intake: 14:15" in prompt
    assert "(400mg)" in prompt
    assert "Last intake: None" in build_daily_prompt("Sam", [])


def test_analyze_week_parses_structured_output() -> None:
    client = FakeInsightClient()

    analysis = asyncio.run(_service(client).analyze_week("Sam", [_event(8, 95)], []))

    assert analysis.summary == "Steady week."
    assert analysis.scores.sleep_quality == 82
    assert analysis.scores.physical_activity == 64
    assert client.requests[0]["schema"] == WEEKLY_SCHEMA
    assert client.requests[0]["model"] == "gpt-5.2"


def test_missing_scores_default_to_zero_and_are_not_clamped() -> None:
    analysis = parse_weekly_analysis(
        '{"summary": "s", "insights": [], "recommendations": [], '
        '"scores": {"sleepQuality": 140}}'
    )

    assert analysis.scores.sleep_quality == 140
    assert analysis.scores.caffeine_balance == 0
    assert analysis.scores.overall == 0
    assert parse_weekly_analysis(
        '{"summary": "s", "insights": [], "recommendations": []}'
    ).scores.overall == 0


def test_code_fenced_json_is_accepted() -> None:
    analysis = parse_weekly_analysis(
        '```json\n{"summary": "ok", "insights": ["a"], "recommendations": ["b"]}\n```'
    )

    assert analysis.insights == ["a"]


@pytest.mark.parametrize(
    "output",
    ["not json", '{"summary": "missing lists"}', '{"summary": 1, "insights": "x"}'],
)
def test_invalid_output_raises_format_error(output: str) -> None:
    with pytest.raises(InsightFormatError):
        parse_weekly_analysis(output)


def test_daily_summary_returns_text_or_fallback() -> None:
    client = FakeInsightClient(output="  175mg so far, under the 400mg limit!  ")

    summary = asyncio.run(_service(client).daily_summary("Sam", [_event(8, 95)]))

    assert summary == "175mg so far, under the 400mg limit!"
    assert client.requests[0]["schema"] is None

    blank = FakeInsightClient(output="   ")
    assert asyncio.run(_service(blank).daily_summary("Sam", [])) == (
        FALLBACK_DAILY_SUMMARY
    )
