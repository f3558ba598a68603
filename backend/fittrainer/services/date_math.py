"""Calendar date helpers shared by plan synthesis and event projection."""
from __future__ import annotations

import calendar
import math
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Tuple

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")


def month_range(year: int, month: int) -> Tuple[datetime, datetime]:
    """Inclusive UTC range from the first instant to the last instant of a month."""
    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end = datetime.combine(date(year, month, last_day), time.max, tzinfo=timezone.utc)
    return start, end


def event_range(event: Any) -> Tuple[datetime, datetime]:
    """
    Return the UTC span covered by a calendar event.

    All-day events cover the whole UTC day(s) named by their start/end dates.
    Timed events use their literal instants; naive instants are read as UTC.
    A missing end collapses the event onto its start.
    """
    start_value = event.start
    end_value = event.end or event.start
    if event.all_day:
        start_day = _as_date(start_value)
        end_day = _as_date(end_value)
        return (
            datetime.combine(start_day, time.min, tzinfo=timezone.utc),
            datetime.combine(end_day, time.max, tzinfo=timezone.utc),
        )
    return _as_utc_instant(start_value), _as_utc_instant(end_value)


def overlaps_month(event: Any, year: int, month: int) -> bool:
    month_start, month_end = month_range(year, month)
    event_start, event_end = event_range(event)
    return event_end >= month_start and event_start <= month_end


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def add_minutes(instant: datetime, minutes: int) -> datetime:
    return instant + timedelta(minutes=minutes)


def format_date(value: date) -> str:
    """Render ``YYYY-MM-DD`` from the object's own calendar fields."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string."""
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value):
        raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}")
    return date.fromisoformat(value)


def parse_int_like(value: Any) -> int:
    """
    Read an integer from ints, floats (truncated toward zero) and strings with
    a leading integer such as ``"45"`` or ``"45 min"``.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not an integer-like value: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Not an integer-like value: {value!r}")
        return int(value)
    if isinstance(value, str):
        match = _INT_PREFIX_RE.match(value)
        if match:
            return int(match.group(1))
    raise ValueError(f"Not an integer-like value: {value!r}")


def clamp_int(value: Any, minimum: int, maximum: int) -> int:
    """Parse an integer-like value and clamp it into ``[minimum, maximum]``."""
    return max(minimum, min(maximum, parse_int_like(value)))


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_date(str(value)[:10])


def _as_utc_instant(value: Any) -> datetime:
    if isinstance(value, datetime):
        instant = value
    elif isinstance(value, date):
        instant = datetime.combine(value, time.min)
    else:
        instant = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)
