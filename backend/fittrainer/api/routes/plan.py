"""Plan generation and plan history endpoints."""
from __future__ import annotations

import logging
from time import perf_counter

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from fittrainer.api.schemas.history import PlanHistoryItem, PlanHistoryResponse
from fittrainer.api.schemas.plan import Calendar, UserProfile
from fittrainer.core.errors import PlanError, error_response
from fittrainer.db.deps import get_db
from fittrainer.observability.metrics import log_metric
from fittrainer.observability.tracing import trace
from fittrainer.services.plan_history import list_recent_actions
from fittrainer.services.plan_session import PlanSession, get_plan_session
from fittrainer.services.plan_synthesizer import synthesize_plan

logger = logging.getLogger(__name__)

router = APIRouter()

GENERATE_FAILED = "Failed to generate plan"


@router.post("/api/plan/generate", response_model=Calendar, tags=["plan"])
def generate_plan(
    payload: UserProfile,
    request: Request,
    session: PlanSession = Depends(get_plan_session),
    db: Session = Depends(get_db),
) -> Calendar | JSONResponse:
    """Replace the profile, generate a fresh calendar and reset the conversation."""
    request_id = getattr(request.state, "request_id", None)
    start = perf_counter()
    try:
        calendar = synthesize_plan(session, payload, db=db, request_id=request_id)
    except PlanError as exc:
        logger.exception("Plan generation failed: %s", exc.detail)
        log_metric("plan.generate.success", 0, metadata={"error": type(exc).__name__})
        return error_response(exc, GENERATE_FAILED)

    log_metric("plan.generate.success", 1)
    log_metric("plan.generate.latency_ms", (perf_counter() - start) * 1000)
    return calendar


@router.get("/api/plan/history", response_model=PlanHistoryResponse, tags=["plan"])
def plan_history(
    request: Request,
    limit: int = Query(20, ge=1, le=100),
    action_type: str | None = Query(None, description="Filter by action type"),
    db: Session = Depends(get_db),
) -> PlanHistoryResponse:
    request_id = getattr(request.state, "request_id", None)
    with trace("plan.history", metadata={"limit": limit, "action_type": action_type}, request_id=request_id):
        entries = list_recent_actions(db, limit=limit, action_type=action_type)

    log_metric("plan.history.count", len(entries))
    items = [
        PlanHistoryItem(
            id=entry.id,
            created_at=entry.created_at.isoformat() if entry.created_at else "",
            action_type=entry.action_type,
            reason=entry.reason,
            payload=entry.action_payload or {},
        )
        for entry in entries
    ]
    return PlanHistoryResponse(items=items, request_id=request_id or "")
