"""Tests for projecting day plans into calendar events."""
from __future__ import annotations

from datetime import date, time

from fittrainer.api.schemas.plan import Calendar
from fittrainer.services.event_projection import MEAL_COLOR, WORKOUT_COLOR, project
from plan_factories import make_calendar


def _calendar(**overrides) -> Calendar:
    payload = make_calendar()
    for index, day in overrides.items():
        payload["calendar"][int(index.split("_")[1])].update(day)
    return Calendar.model_validate(payload)


def test_each_day_gets_one_meal_event_and_ids_increase():
    events = project(_calendar(), date(2025, 9, 1))

    meals = [event for event in events if event.type == "meal"]
    assert len(meals) == 28
    ids = [int(event.id.split("-")[1]) for event in events]
    assert ids == list(range(1, len(events) + 1))
    assert all(event.id.startswith("w-") for event in events if event.type == "workout")
    assert all(event.id.startswith("m-") for event in meals)
    assert meals[0].meta["meals"][0] == {"name": "Breakfast", "items": ["base breakfast day 1 (30g protein)"]}
    assert all(event.color == MEAL_COLOR and event.all_day for event in meals)


def test_training_day_is_a_timed_event_at_seven():
    events = project(_calendar(), date(2025, 9, 1), tz="UTC")

    workout = events[0]
    assert workout.type == "workout"
    assert workout.all_day is False
    assert workout.start == "2025-09-01T07:00:00+00:00"
    assert workout.end == "2025-09-01T07:45:00+00:00"
    assert workout.color == WORKOUT_COLOR
    assert workout.title == "base goblet squat 3x10 (day 1)"


def test_rest_day_is_all_day_recovery():
    events = project(_calendar(), date(2025, 9, 1))

    rest = [event for event in events if event.title == "Rest / Recovery"]
    assert len(rest) == 4
    assert rest[0].all_day is True
    assert rest[0].start == rest[0].end == "2025-09-02"


def test_index_decides_the_date_not_the_label():
    events = project(_calendar(), date(2026, 1, 30))

    meals = [event for event in events if event.type == "meal"]
    assert meals[0].start == "2026-01-30"
    assert meals[2].start == "2026-02-01"


def test_missing_duration_defaults_to_an_hour():
    calendar = _calendar(day_0={"workout": {"duration": None, "items": ["easy jog"]}})

    workout = project(calendar, date(2025, 9, 1), workout_start=time(18, 30), tz="UTC")[0]

    assert workout.start == "2025-09-01T18:30:00+00:00"
    assert workout.end == "2025-09-01T19:30:00+00:00"
    assert workout.meta["duration"] == 60


def test_day_without_workout_only_gets_meals():
    calendar = _calendar(day_0={"type": None, "workout": {"duration": None, "items": []}})

    events = project(calendar, date(2025, 9, 1))

    assert events[0].type == "meal"
    assert events[0].id == "m-1"


def test_local_timezone_is_kept_on_instants():
    events = project(_calendar(), date(2025, 9, 1), tz="America/New_York")

    assert events[0].start == "2025-09-01T07:00:00-04:00"
