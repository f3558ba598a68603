"""Current user profile endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from fittrainer.api.schemas.plan import UserProfile
from fittrainer.services.plan_session import PlanSession, get_plan_session

router = APIRouter()


@router.get("/api/user", response_model=UserProfile, response_model_exclude_none=True, tags=["user"])
def get_user(session: PlanSession = Depends(get_plan_session)) -> UserProfile:
    return session.state.profile
