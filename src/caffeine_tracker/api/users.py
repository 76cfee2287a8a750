"""Per-user intake, settings and analysis endpoints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from caffeine_tracker.api.auth import require_api_token
from caffeine_tracker.api.schemas import (
    DailyReportOut,
    DailySummaryOut,
    DecayPointOut,
    InsightRequest,
    IntakeCreate,
    IntakeOut,
    SettingsOut,
    SettingsUpdate,
)
from caffeine_tracker.domain.insights import WeeklyAnalysis
from caffeine_tracker.services.decay import DEFAULT_STEP_MINUTES
from caffeine_tracker.services.insights import InsightFormatError
from caffeine_tracker.services.intake import icon_for

if TYPE_CHECKING:
    from caffeine_tracker.containers import AppContainer
    from caffeine_tracker.domain.intake import IntakeEvent

router = APIRouter(
    prefix="/users/{user_id}",
    tags=["users"],
    dependencies=[Depends(require_api_token)],
)

MAX_REPORT_DAYS = 92
PROJECTION = timedelta(hours=4)
DEFAULT_REPORT_DAYS = 7
MAX_DECAY_POINTS = 2000


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.post("/intakes", status_code=status.HTTP_201_CREATED)
async def create_intake(
    user_id: UUID, payload: IntakeCreate, request: Request
) -> IntakeOut:
    """Log a beverage."""
    event = _container(request).intake_service.log_intake(
        user_id,
        amount_mg=payload.amount_mg,
        beverage_name=payload.beverage_name,
        beverage_type=payload.beverage_type,
        volume_ml=payload.volume_ml,
        timestamp=payload.timestamp,
    )
    return _intake_out(event)


@router.post("/intakes/presets/{preset}", status_code=status.HTTP_201_CREATED)
async def create_preset_intake(user_id: UUID, preset: str, request: Request) -> IntakeOut:
    """Log one of the quick-add beverages."""
    try:
        event = _container(request).intake_service.log_preset(user_id, preset)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown preset: {preset}"
        ) from exc
    return _intake_out(event)


@router.get("/intakes")
async def list_intakes(
    user_id: UUID,
    request: Request,
    start: datetime | None = None,
    end: datetime | None = None,
) -> dict[str, list[IntakeOut]]:
    """Return intake events, today's by default."""
    container = _container(request)
    tz = container.user_settings_service.get_zone(user_id)
    today_start = datetime.combine(datetime.now(tz=tz).date(), time.min, tz)
    resolved_start = _as_aware(start, tz) if start else today_start
    resolved_end = _as_aware(end, tz) if end else today_start + timedelta(days=1)
    events = container.intake_service.list_intakes(
        user_id, resolved_start, resolved_end
    )
    return {"intakes": [_intake_out(event) for event in events]}


@router.delete("/intakes/{intake_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_intake(user_id: UUID, intake_id: UUID, request: Request) -> Response:
    """Delete a logged intake."""
    deleted = _container(request).intake_service.delete_intake(user_id, intake_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/settings")
async def get_settings(user_id: UUID, request: Request) -> SettingsOut:
    """Return the user's timezone and bedtime."""
    service = _container(request).user_settings_service
    return SettingsOut(
        timezone=service.get_timezone(user_id), bedtime=service.get_bedtime(user_id)
    )


@router.put("/settings")
async def update_settings(
    user_id: UUID, payload: SettingsUpdate, request: Request
) -> SettingsOut:
    """Update the user's timezone and/or bedtime."""
    service = _container(request).user_settings_service
    if payload.timezone is not None:
        try:
            service.set_timezone(user_id, payload.timezone)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
    if payload.bedtime is not None:
        service.set_bedtime(user_id, payload.bedtime)
    return SettingsOut(
        timezone=service.get_timezone(user_id), bedtime=service.get_bedtime(user_id)
    )


@router.get("/decay")
async def decay_curve(
    user_id: UUID,
    request: Request,
    start: datetime | None = None,
    end: datetime | None = None,
    step_minutes: int = DEFAULT_STEP_MINUTES,
) -> dict[str, list[DecayPointOut]]:
    """Return the residual caffeine curve; defaults to today plus a projection."""
    if step_minutes <= 0:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="step_minutes must be positive",
        )
    container = _container(request)
    tz = container.user_settings_service.get_zone(user_id)
    now = datetime.now(tz=UTC)
    resolved_start = (
        _as_aware(start, tz)
        if start
        else datetime.combine(now.astimezone(tz).date(), time.min, tz)
    )
    resolved_end = _as_aware(end, tz) if end else now + PROJECTION
    span = resolved_end.astimezone(UTC) - resolved_start.astimezone(UTC)
    if span // timedelta(minutes=step_minutes) + 1 > MAX_DECAY_POINTS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Curve is limited to {MAX_DECAY_POINTS} points",
        )
    points = container.analysis_service.decay_curve(
        user_id, resolved_start, resolved_end, step_minutes, now=now
    )
    return {
        "points": [DecayPointOut(at=p.at, amount_mg=p.amount_mg) for p in points]
    }


@router.get("/summaries")
async def daily_summaries(
    user_id: UUID,
    request: Request,
    start: date | None = None,
    end: date | None = None,
) -> DailyReportOut:
    """Return daily caffeine and sleep summaries, the last week by default."""
    container = _container(request)
    tz = container.user_settings_service.get_zone(user_id)
    resolved_end = end or datetime.now(tz=tz).date()
    resolved_start = start or resolved_end - timedelta(days=DEFAULT_REPORT_DAYS - 1)
    if (resolved_end - resolved_start).days >= MAX_REPORT_DAYS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Range is limited to {MAX_REPORT_DAYS} days",
        )
    report = await container.analysis_service.daily_report(
        user_id, resolved_start, resolved_end
    )
    return DailyReportOut(
        summaries=[DailySummaryOut(**asdict(s)) for s in report.summaries],
        incomplete_days=report.incomplete_days,
    )


@router.post("/insights/weekly")
async def weekly_insight(
    user_id: UUID, payload: InsightRequest, request: Request
) -> WeeklyAnalysis:
    """Generate the weekly AI analysis."""
    try:
        return await _container(request).analysis_service.weekly_insight(
            user_id, payload.user_name
        )
    except InsightFormatError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
        ) from exc


@router.get("/insights/daily")
async def daily_insight(
    user_id: UUID, request: Request, user_name: str = "User"
) -> dict[str, str]:
    """Generate a short summary of today's intake."""
    summary = await _container(request).analysis_service.daily_insight(
        user_id, user_name
    )
    return {"summary": summary}


def _as_aware(value: datetime, tz: tzinfo) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=tz)


def _intake_out(event: IntakeEvent) -> IntakeOut:
    return IntakeOut(
        **asdict(event), icon=icon_for(event.beverage_type, event.beverage_name)
    )
