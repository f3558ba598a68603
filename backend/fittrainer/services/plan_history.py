"""Persistence helpers for the plan action log."""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fittrainer.core.errors import PersistenceError
from fittrainer.db.models.plan_action_log import PlanActionLog

logger = logging.getLogger(__name__)

PLAN_GENERATED = "plan_generated"
PLAN_OVERRIDE_APPLIED = "plan_override_applied"


def record_plan_action(
    db: Session,
    *,
    action_type: str,
    payload: Dict[str, Any],
    reason: str | None = None,
) -> PlanActionLog:
    """Commit one action log row; the caller swaps session state only after this succeeds."""
    entry = PlanActionLog(action_type=action_type, action_payload=payload, reason=reason)
    db.add(entry)
    try:
        db.commit()
        db.refresh(entry)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to record %s", action_type)
        cause = getattr(exc, "orig", None) or exc
        raise PersistenceError(f"Could not record {action_type}: {cause}") from exc
    return entry


def list_recent_actions(db: Session, *, limit: int = 20, action_type: str | None = None) -> List[PlanActionLog]:
    query = db.query(PlanActionLog)
    if action_type:
        query = query.filter(PlanActionLog.action_type == action_type)
    return query.order_by(desc(PlanActionLog.created_at), desc(PlanActionLog.id)).limit(limit).all()
