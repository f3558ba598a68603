"""LLM-backed 28-day workout and nutrition plan synthesis."""
from __future__ import annotations

import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from fittrainer.api.schemas.plan import Calendar, UserProfile
from fittrainer.core.config import settings
from fittrainer.observability.metrics import log_metric
from fittrainer.observability.tracing import trace
from fittrainer.services.date_math import format_date
from fittrainer.services.oracle_client import ensure_configured, request_completion
from fittrainer.services.plan_contract import build_response_format, parse_calendar
from fittrainer.services.plan_history import PLAN_GENERATED, record_plan_action
from fittrainer.services.plan_session import PlanSession

logger = logging.getLogger(__name__)

COACH_PERSONA = "You are a fitness coach and nutritionist."
FALLBACK_GOALS = "Build strength, Better shape / tone"


def with_start_date(profile: UserProfile) -> UserProfile:
    """Return the profile with startDate filled from DEFAULT_START_DATE when missing."""
    if profile.start_date:
        return profile
    return profile.model_copy(update={"start_date": format_date(settings.default_start_date)})


def describe_client(profile: UserProfile) -> List[str]:
    """Profile lines shared by the generation and override payloads."""
    rest_days = ", ".join(profile.rest_days)
    train_days = ", ".join(profile.train_days)
    goals = ", ".join(profile.goals) if profile.goals else FALLBACK_GOALS
    return [
        f"Client: {_show(profile.name)}, age {_show(profile.age)}, gender {_show(profile.gender)},",
        f"height {_show(profile.height_in)} inches, weight {_show(profile.weight_lb)}, "
        f"target weight {_show(profile.target_weight_lb)} lbs.",
        f"Activity level: {_show(profile.activity_level)}, {_show(profile.hours_per_week)} hours/week.",
        f"Rest days: {rest_days} Training days: {train_days}",
        f"Goals: {goals}.",
        f"StartDate: {profile.start_date}",
    ]


def build_generation_messages(profile: UserProfile) -> List[Dict[str, str]]:
    days = settings.plan_days
    user_prompt = "\n".join(
        [
            f"Create a {days}-day workout + nutrition plan as JSON. Start the first-day plan on the startDate.",
            *describe_client(profile),
            "Basic Guidelines:",
            f"- Calendar array must contain {days} elements.",
            "- Calculate day of the week correctly for each day. First day may or may not be a Monday. "
            "It depends on the StartDate",
            "- Use the client's rest/training days above.",
            "- Add specific workout items/exercises for each workout day. This should be detailed and have "
            "a mix of different workouts with different numbers of reps.",
            "- Meals should be detailed and goal-aligned. Include portion sizes and macronutrient information "
            "for each meal item that factor the current weight and target weight",
            "- Each week must contain a unique meal plan and workout schedule",
            f"- Plan MUST contain {days} days starting with today as the startDate.",
        ]
    )
    return [
        {"role": "system", "content": COACH_PERSONA},
        {"role": "user", "content": user_prompt},
    ]


def generate_calendar(profile: UserProfile, *, request_id: str | None = None) -> Calendar:
    """Ask the oracle for a fresh calendar; no session state is touched."""
    ensure_configured()
    messages = build_generation_messages(profile)
    text = request_completion(
        messages,
        build_response_format(settings.plan_calendar_min_items),
        request_id=request_id,
    )
    return parse_calendar(text, plan_days=settings.plan_days)


def synthesize_plan(
    session: PlanSession,
    profile: UserProfile,
    *,
    db: Session,
    request_id: str | None = None,
) -> Calendar:
    """
    Generate a new plan for ``profile`` and make it the current one.

    On success the profile and calendar are replaced and the conversation log
    is reset in one commit. Any ConfigurationError, OracleError or
    MalformedResponseError leaves the previous state as it was.
    """
    profile = with_start_date(profile)
    metadata = {
        "start_date": profile.start_date,
        "rest_days": len(profile.rest_days),
        "train_days": len(profile.train_days),
        "goals": len(profile.goals),
    }
    with trace("plan.generate", metadata=metadata, request_id=request_id) as plan_trace:
        with session.mutation():
            calendar = generate_calendar(profile, request_id=request_id)
            record_plan_action(
                db,
                action_type=PLAN_GENERATED,
                payload={
                    "start_date": calendar.meta.start_date,
                    "days": len(calendar.calendar),
                    "profile": profile.model_dump(mode="json", by_alias=True, exclude_none=True),
                    "request_id": request_id or "",
                },
                reason="New plan generated from profile",
            )
            session.commit(profile=profile, calendar=calendar, messages=())
        if plan_trace:
            plan_trace.update(metadata={"days": len(calendar.calendar)})

    rest_count = sum(1 for day in calendar.calendar if day.is_rest)
    logger.info("Generated %d-day plan starting %s (%d rest days)", len(calendar.calendar), calendar.meta.start_date, rest_count)
    log_metric("plan.generate.rest_days", rest_count)
    return calendar


def _show(value: object) -> str:
    if value is None:
        return "not specified"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
