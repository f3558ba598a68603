"""Regression tests for application route registration."""
from fittrainer.main import app


def test_plan_routes_registered() -> None:
    paths = app.openapi()["paths"]

    assert set(paths["/api/user"]) == {"get"}
    assert set(paths["/api/plan/generate"]) == {"post"}
    assert set(paths["/api/fitTrAIner"]) == {"post"}
    assert set(paths["/api/events"]) == {"get"}
    assert set(paths["/api/calendar-events"]) == {"get"}
    assert set(paths["/api/plan/history"]) == {"get"}
    assert set(paths["/health"]) == {"get"}
