"""Structural contract between the generative oracle and stored calendars."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError

from fittrainer.api.schemas.plan import MEAL_NAMES, Calendar
from fittrainer.core.errors import MalformedResponseError
from fittrainer.services.date_math import add_days, format_date, parse_date

logger = logging.getLogger(__name__)

SCHEMA_NAME = "fitness_plan"


def _string_list() -> Dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "minItems": 0}


def build_response_format(min_items: int) -> Dict[str, Any]:
    """
    Return the strict ``json_schema`` response format handed to the oracle.

    Every object forbids undeclared keys and lists all of its keys as required;
    optional values are expressed as nullable types so the keys stay present.
    """
    day_schema = {
        "type": "object",
        "additionalProperties": False,
        "properties": {
            "date": {"type": "string", "format": "date"},
            "type": {"type": ["string", "null"], "enum": ["rest", "training", None]},
            "workout": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "duration": {"type": ["integer", "null"], "minimum": 5, "maximum": 180},
                    "items": _string_list(),
                },
                "required": ["duration", "items"],
            },
            "meals": {
                "type": "array",
                "items": {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "name": {"type": "string", "enum": list(MEAL_NAMES)},
                        "items": _string_list(),
                    },
                    "required": ["name", "items"],
                },
                "minItems": 3,
                "maxItems": 3,
            },
        },
        "required": ["date", "type", "workout", "meals"],
    }
    return {
        "type": "json_schema",
        "json_schema": {
            "name": SCHEMA_NAME,
            "strict": True,
            "schema": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "meta": {
                        "type": "object",
                        "additionalProperties": False,
                        "properties": {"startDate": {"type": "string", "format": "date"}},
                        "required": ["startDate"],
                    },
                    "calendar": {"type": "array", "minItems": min_items, "items": day_schema},
                    "overridesSummary": {"type": ["string", "null"]},
                },
                "required": ["meta", "calendar", "overridesSummary"],
            },
        },
    }


def extract_text(message: Any) -> str:
    """
    Pull the text payload out of a chat completion message.

    ``content`` is normally a string, but preview API versions return a list
    of typed parts; the first ``text`` part wins. Anything else yields "".
    """
    if message is None:
        return ""
    content = message.get("content") if isinstance(message, dict) else getattr(message, "content", None)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        for part in content:
            part_type = part.get("type") if isinstance(part, dict) else getattr(part, "type", None)
            if part_type == "text":
                text = part.get("text") if isinstance(part, dict) else getattr(part, "text", None)
                return text or ""
    return ""


def parse_calendar(text: str, *, plan_days: int) -> Calendar:
    """Parse oracle text into a Calendar, enforcing the exact plan length."""
    if not text or not text.strip():
        raise MalformedResponseError("Empty response from Azure OpenAI.")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"Oracle response is not valid JSON: {exc}") from exc
    try:
        calendar = Calendar.model_validate(payload)
    except PydanticValidationError as exc:
        raise MalformedResponseError(
            f"Oracle response violates the plan contract: {exc.error_count()} error(s); {_first_error(exc)}"
        ) from exc

    if len(calendar.calendar) != plan_days:
        raise MalformedResponseError(
            f"Calendar must contain exactly {plan_days} days, got {len(calendar.calendar)}."
        )
    _warn_on_date_drift(calendar)
    return calendar


def _first_error(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg', 'invalid')}"


def _warn_on_date_drift(calendar: Calendar) -> None:
    start = parse_date(calendar.meta.start_date)
    drifted = [
        index
        for index, day in enumerate(calendar.calendar)
        if day.date != format_date(add_days(start, index))
    ]
    if drifted:
        # Position in the array decides the day; the oracle's label is informational.
        logger.warning(
            "Calendar date labels disagree with their positions for %d day(s), first at index %d",
            len(drifted),
            drifted[0],
        )
