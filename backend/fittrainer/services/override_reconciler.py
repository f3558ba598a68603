"""Merge free-text user overrides into the current calendar."""
from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from fittrainer.api.schemas.plan import Calendar, ChatMessage, UserProfile
from fittrainer.core.config import settings
from fittrainer.core.errors import EmptyInstructionError
from fittrainer.observability.metrics import log_metric
from fittrainer.observability.tracing import trace
from fittrainer.services.date_math import add_days, format_date, parse_date
from fittrainer.services.oracle_client import ensure_configured, request_completion
from fittrainer.services.plan_contract import build_response_format, parse_calendar
from fittrainer.services.plan_history import PLAN_OVERRIDE_APPLIED, record_plan_action
from fittrainer.services.plan_session import PlanSession
from fittrainer.services.plan_synthesizer import describe_client

logger = logging.getLogger(__name__)

PLANNER_PERSONA = "You are a fitness planner."
DEFAULT_ACKNOWLEDGEMENT = "Check the Updated schedule"
BLANK_INSTRUCTION_MESSAGE = "Override input must not be blank."


def is_blank(text: Optional[str]) -> bool:
    return not isinstance(text, str) or not text.strip()


def plan_today() -> date:
    """Today's date in the calendar timezone."""
    return datetime.now(ZoneInfo(settings.calendar_timezone)).date()


def build_override_messages(
    instruction: str,
    profile: UserProfile,
    calendar: Optional[Calendar],
    today: date,
) -> List[Dict[str, str]]:
    days = settings.plan_days
    user_prompt = "\n".join(
        [
            "Update the existing workout plan + nutrition plan as JSON. Start the first-day plan on the startDate.",
            *describe_client(profile),
            f"Today: {format_date(today)}",
            "Basic Guidelines:",
            f"- Calendar array must contain {days} elements.",
            "- Calculate day of the week correctly for each day. First day may or may not be a Monday. "
            "It depends on the StartDate",
            "- Use the client's rest/training days above.",
            "- Keep workouts durations-only (no clock times).",
            "- Meals should be realistic and goal-aligned. Include macronutrient information for each meal",
            f"- Plan must contain {days} days starting with today as the startDate",
            "- Each week must contain a unique mealplan and workout schedule.",
            "User Overrides:",
            "- Only update the schedule for the future dates/days",
            "- Days before today must be returned exactly as they currently stand",
            instruction,
        ]
    )
    current = calendar.model_dump(mode="json", by_alias=True) if calendar else {"calendar": []}
    return [
        {"role": "system", "content": PLANNER_PERSONA},
        {"role": "user", "content": user_prompt},
        {"role": "user", "content": f"Schedule currently stands as below:\n {json.dumps(current)}"},
    ]


def preserve_past_days(previous: Optional[Calendar], updated: Calendar, today: date) -> Tuple[Calendar, int]:
    """
    Restore any day before ``today`` that the oracle rewrote.

    Days are matched by their position-derived dates, so a shifted startDate
    still lines up. Past days that fall outside the new window are dropped.
    """
    if previous is None or not previous.calendar:
        return updated, 0

    previous_start = parse_date(previous.meta.start_date)
    updated_start = parse_date(updated.meta.start_date)
    days = list(updated.calendar)
    repaired = 0
    for index, previous_day in enumerate(previous.calendar):
        day_date = add_days(previous_start, index)
        if day_date >= today:
            break
        target = (day_date - updated_start).days
        if 0 <= target < len(days) and days[target] != previous_day:
            days[target] = previous_day
            repaired += 1

    if not repaired:
        return updated, 0
    return updated.model_copy(update={"calendar": days}), repaired


def apply_override(
    session: PlanSession,
    instruction: Optional[str],
    *,
    db: Session,
    request_id: str | None = None,
    today: date | None = None,
) -> List[ChatMessage]:
    """
    Apply a free-text instruction to the current calendar and return the conversation.

    The user turn and the assistant acknowledgement are committed together with
    the new calendar; a failure at any step keeps the previous calendar and log.
    """
    if is_blank(instruction):
        raise EmptyInstructionError(BLANK_INSTRUCTION_MESSAGE)

    today = today or plan_today()
    with trace("plan.override", metadata={"input_length": len(instruction)}, request_id=request_id) as override_trace:
        with session.mutation() as state:
            ensure_configured()
            messages = build_override_messages(instruction, state.profile, state.calendar, today)
            text = request_completion(
                messages,
                build_response_format(settings.plan_calendar_min_items),
                request_id=request_id,
            )
            updated = parse_calendar(text, plan_days=settings.plan_days)

            repaired = 0
            if settings.override_preserve_past_days:
                updated, repaired = preserve_past_days(state.calendar, updated, today)
            if repaired:
                logger.warning("Oracle rewrote %d past day(s); restored them from the previous plan", repaired)
                log_metric("plan.override.repaired_days", repaired)

            acknowledgement = updated.overrides_summary or DEFAULT_ACKNOWLEDGEMENT
            conversation = (
                *state.messages,
                ChatMessage(role="user", content=instruction),
                ChatMessage(role="assistant", content=acknowledgement),
            )
            record_plan_action(
                db,
                action_type=PLAN_OVERRIDE_APPLIED,
                payload={
                    "instruction": instruction,
                    "overrides_summary": updated.overrides_summary,
                    "repaired_days": repaired,
                    "start_date": updated.meta.start_date,
                    "request_id": request_id or "",
                },
                reason="User override applied",
            )
            session.commit(calendar=updated, messages=conversation)
        if override_trace:
            override_trace.update(metadata={"repaired_days": repaired, "turns": len(conversation)})

    return list(conversation)
