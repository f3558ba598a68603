"""Project a day-based plan into calendar UI events."""
from __future__ import annotations

from datetime import date, datetime, time
from itertools import count
from typing import List
from zoneinfo import ZoneInfo

from fittrainer.api.schemas.plan import Calendar, CalendarEvent, DayPlan
from fittrainer.core.config import settings
from fittrainer.services.date_math import add_days, add_minutes, clamp_int, format_date, overlaps_month, parse_date

WORKOUT_COLOR = "#22c55e"
MEAL_COLOR = "#f59e0b"
DEFAULT_WORKOUT_MINUTES = 60
MIN_WORKOUT_MINUTES = 5
MAX_WORKOUT_MINUTES = 180


def project(
    calendar: Calendar,
    start_date: date,
    *,
    workout_start: time | None = None,
    tz: str | None = None,
) -> List[CalendarEvent]:
    """Map day ``i`` of the calendar onto ``start_date + i`` and emit its events."""
    zone = ZoneInfo(tz or settings.calendar_timezone)
    start_time = workout_start or settings.workout_start_time
    ids = count(1)
    events: List[CalendarEvent] = []

    for index, day in enumerate(calendar.calendar):
        day_date = add_days(start_date, index)
        iso = format_date(day_date)
        if day.is_rest:
            events.append(
                CalendarEvent(
                    id=f"w-{next(ids)}",
                    title="Rest / Recovery",
                    all_day=True,
                    start=iso,
                    end=iso,
                    color=WORKOUT_COLOR,
                    type="workout",
                    meta={"day_type": "rest", "items": list(day.workout.items)},
                )
            )
        elif _has_workout(day):
            minutes = clamp_int(
                day.workout.duration if day.workout.duration is not None else DEFAULT_WORKOUT_MINUTES,
                MIN_WORKOUT_MINUTES,
                MAX_WORKOUT_MINUTES,
            )
            begins = datetime.combine(day_date, start_time, tzinfo=zone)
            events.append(
                CalendarEvent(
                    id=f"w-{next(ids)}",
                    title=_workout_title(day),
                    all_day=False,
                    start=begins.isoformat(),
                    end=add_minutes(begins, minutes).isoformat(),
                    color=WORKOUT_COLOR,
                    type="workout",
                    meta={"day_type": day.type, "duration": minutes, "items": list(day.workout.items)},
                )
            )

        events.append(
            CalendarEvent(
                id=f"m-{next(ids)}",
                title="Meal Plan",
                all_day=True,
                start=iso,
                end=iso,
                color=MEAL_COLOR,
                type="meal",
                meta={"meals": [meal.model_dump() for meal in day.meals]},
            )
        )
    return events


def events_for_month(calendar: Calendar, year: int, month: int) -> List[CalendarEvent]:
    """Projected events of ``calendar`` that intersect the given month."""
    start_date = parse_date(calendar.meta.start_date)
    return [event for event in project(calendar, start_date) if overlaps_month(event, year, month)]


def _has_workout(day: DayPlan) -> bool:
    return day.workout.duration is not None or bool(day.workout.items)


def _workout_title(day: DayPlan) -> str:
    if day.workout.items:
        return day.workout.items[0]
    return "Workout"
