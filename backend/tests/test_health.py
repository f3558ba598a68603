from fastapi.testclient import TestClient


def _get_client() -> TestClient:
    from fittrainer.main import app

    return TestClient(app)


def test_health_endpoint_returns_ok() -> None:
    client = _get_client()
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_request_id_generated_and_returned() -> None:
    client = _get_client()
    response = client.get("/health")

    assert response.headers.get("X-Request-Id")


def test_request_id_echoed_on_api_routes(client) -> None:
    req_id = "plan-request-42"
    response = client.get("/api/user", headers={"X-Request-Id": req_id})

    assert response.status_code == 200
    assert response.headers.get("X-Request-Id") == req_id


def test_default_profile_served_before_any_plan(client) -> None:
    profile = client.get("/api/user").json()

    assert profile["startDate"] == "2025-09-01"
    assert profile["name"] == "Hello World!"
    assert profile["restDays"] == ["Tuesday"]
    assert profile["trainDays"] == ["Sunday"]
    assert profile["goals"] == ["endurance"]
