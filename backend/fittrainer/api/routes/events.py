"""Calendar read endpoints."""
from __future__ import annotations

from typing import Any, Dict, Tuple

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from fittrainer.api.schemas.plan import CalendarEventsResponse
from fittrainer.core.errors import ValidationError, error_response
from fittrainer.observability.metrics import log_metric
from fittrainer.observability.tracing import trace
from fittrainer.services.date_math import parse_int_like
from fittrainer.services.event_projection import events_for_month
from fittrainer.services.plan_session import PlanSession, get_plan_session

router = APIRouter()

INVALID_MONTH = "Provide valid year (e.g., 2025) and month (1-12)."


def parse_year_month(year: str | None, month: str | None) -> Tuple[int, int]:
    """Validate year in [1900, 2100] and month in [1, 12]."""
    try:
        parsed_year = parse_int_like(year)
        parsed_month = parse_int_like(month)
    except ValueError as exc:
        raise ValidationError(INVALID_MONTH) from exc
    if not 1 <= parsed_month <= 12 or not 1900 <= parsed_year <= 2100:
        raise ValidationError(INVALID_MONTH)
    return parsed_year, parsed_month


@router.get("/api/events", response_model=None, tags=["events"])
def get_events(
    year: str | None = Query(None),
    month: str | None = Query(None),
    session: PlanSession = Depends(get_plan_session),
) -> Dict[str, Any] | JSONResponse:
    """Return the whole stored calendar; year/month are validated but do not narrow it."""
    try:
        parse_year_month(year, month)
    except ValidationError as exc:
        return error_response(exc, INVALID_MONTH)

    calendar = session.state.calendar
    if calendar is None:
        return {"calendar": []}
    return calendar.model_dump(mode="json", by_alias=True)


@router.get("/api/calendar-events", response_model=CalendarEventsResponse, tags=["events"])
def get_calendar_events(
    request: Request,
    year: str | None = Query(None),
    month: str | None = Query(None),
    session: PlanSession = Depends(get_plan_session),
) -> CalendarEventsResponse | JSONResponse:
    """Project the stored calendar into UI events that fall within one month."""
    try:
        parsed_year, parsed_month = parse_year_month(year, month)
    except ValidationError as exc:
        return error_response(exc, INVALID_MONTH)

    request_id = getattr(request.state, "request_id", None)
    calendar = session.state.calendar
    with trace("events.project", metadata={"year": parsed_year, "month": parsed_month}, request_id=request_id):
        events = events_for_month(calendar, parsed_year, parsed_month) if calendar else []

    log_metric("events.project.count", len(events), metadata={"year": parsed_year, "month": parsed_month})
    return CalendarEventsResponse(year=parsed_year, month=parsed_month, events=events)
