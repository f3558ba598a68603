from __future__ import annotations

import pytest

from fittrainer.api.schemas.plan import Calendar
from plan_factories import make_calendar


def _store(plan_session, payload) -> Calendar:
    calendar = Calendar.model_validate(payload)
    with plan_session.mutation():
        plan_session.commit(calendar=calendar)
    return calendar


@pytest.mark.parametrize(
    "params",
    [
        {"year": 2025, "month": 13},
        {"year": 2025, "month": 0},
        {"year": 1899, "month": 5},
        {"year": 2101, "month": 5},
        {"year": "abc", "month": 5},
        {"year": 2025},
        {},
    ],
)
def test_events_rejects_bad_year_or_month(client, plan_session, params):
    before = plan_session.state

    response = client.get("/api/events", params=params)

    assert response.status_code == 400
    assert response.json()["error"] == "Provide valid year (e.g., 2025) and month (1-12)."
    assert plan_session.state is before


def test_events_before_any_plan_is_empty(client):
    response = client.get("/api/events", params={"year": 2025, "month": 9})

    assert response.status_code == 200
    assert response.json() == {"calendar": []}


def test_events_returns_full_calendar_regardless_of_month(client, plan_session):
    payload = make_calendar(start="2025-09-20")
    _store(plan_session, payload)

    september = client.get("/api/events", params={"year": "2025", "month": "9"}).json()
    unrelated = client.get("/api/events", params={"year": 1990, "month": 1}).json()

    assert september == payload
    assert unrelated == payload


def test_calendar_events_are_filtered_by_month(client, plan_session):
    _store(plan_session, make_calendar(start="2025-09-20"))

    september = client.get("/api/calendar-events", params={"year": 2025, "month": 9}).json()
    october = client.get("/api/calendar-events", params={"year": 2025, "month": 10}).json()

    september_meals = [event for event in september["events"] if event["type"] == "meal"]
    october_meals = [event for event in october["events"] if event["type"] == "meal"]
    # Sept 20..30 is 11 days; Oct 1..17 is the remaining 17.
    assert len(september_meals) == 11
    assert len(october_meals) == 17
    assert all(event["start"].startswith("2025-10") for event in october["events"])
    assert september["year"] == 2025 and september["month"] == 9


def test_calendar_events_without_plan(client):
    response = client.get("/api/calendar-events", params={"year": 2025, "month": 9})

    assert response.status_code == 200
    assert response.json()["events"] == []


def test_calendar_events_validates_month(client):
    response = client.get("/api/calendar-events", params={"year": 2025, "month": 13})

    assert response.status_code == 400
