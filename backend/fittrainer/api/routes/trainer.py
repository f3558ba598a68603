"""Conversational plan override endpoint."""
from __future__ import annotations

import logging
from time import perf_counter

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from fittrainer.api.schemas.plan import TrainerRequest, TrainerResponse
from fittrainer.core.errors import EmptyInstructionError, PlanError, error_response
from fittrainer.db.deps import get_db
from fittrainer.observability.metrics import log_metric
from fittrainer.services.override_reconciler import apply_override
from fittrainer.services.plan_session import PlanSession, get_plan_session

logger = logging.getLogger(__name__)

router = APIRouter()

UPDATE_FAILED = "Failed to update plan"


@router.post("/api/fitTrAIner", response_model=TrainerResponse, tags=["trainer"])
def fit_trainer(
    payload: TrainerRequest,
    request: Request,
    session: PlanSession = Depends(get_plan_session),
    db: Session = Depends(get_db),
) -> TrainerResponse | JSONResponse:
    """Apply a free-text override to the plan and return the conversation so far."""
    request_id = getattr(request.state, "request_id", None)
    start = perf_counter()
    try:
        messages = apply_override(session, payload.input, db=db, request_id=request_id)
    except EmptyInstructionError as exc:
        logger.info("Rejected blank override input")
        return error_response(exc, UPDATE_FAILED)
    except PlanError as exc:
        logger.exception("Plan override failed: %s", exc.detail)
        log_metric("plan.override.success", 0, metadata={"error": type(exc).__name__})
        return error_response(exc, UPDATE_FAILED)

    log_metric("plan.override.success", 1)
    log_metric("plan.override.latency_ms", (perf_counter() - start) * 1000)
    return TrainerResponse(messages=messages)
