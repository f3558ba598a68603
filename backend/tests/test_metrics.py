"""Tests for metrics and tracing helpers."""
from __future__ import annotations

from typing import Any, Dict

import pytest

from fittrainer.observability import client as opik_client
from fittrainer.observability import metrics
from fittrainer.observability import tracing


class _DummyTrace:
    def __init__(self, name: str, metadata: Dict[str, Any]):
        self.name = name
        self.metadata = metadata
        self.updates: list[Dict[str, Any]] = []
        self.ended = False

    def update(self, **kwargs: Any) -> None:
        self.updates.append(kwargs)

    def end(self) -> None:
        self.ended = True


class _DummyClient:
    def __init__(self):
        self.traces: list[_DummyTrace] = []

    def trace(self, name: str, metadata: Dict[str, Any] | None = None):
        trace = _DummyTrace(name, metadata or {})
        self.traces.append(trace)
        return trace


@pytest.fixture()
def dummy_client(monkeypatch) -> _DummyClient:
    client = _DummyClient()
    monkeypatch.setattr(opik_client, "get_opik_client", lambda: client)
    return client


def test_log_metric_closes_trace(dummy_client) -> None:
    metrics.log_metric("plan.generate.success", 1, metadata={"error": None})

    assert dummy_client.traces, "Metric call should record a trace"
    recorded = dummy_client.traces[0]
    assert recorded.name == "metric:plan.generate.success"
    assert recorded.metadata["value"] == 1
    assert recorded.ended is True


def test_trace_attaches_error_and_reraises(dummy_client) -> None:
    with pytest.raises(RuntimeError):
        with tracing.trace("plan.generate", metadata={"goals": 1}, request_id="req-1"):
            raise RuntimeError("oracle offline")

    recorded = dummy_client.traces[0]
    assert recorded.metadata == {"goals": 1, "request_id": "req-1"}
    assert recorded.updates[0]["error_info"]["message"] == "oracle offline"
    assert recorded.ended is True


def test_metrics_are_noops_when_opik_disabled(monkeypatch) -> None:
    monkeypatch.setattr(opik_client, "get_opik_client", lambda: None)

    metrics.log_metric("plan.history.count", 3)
    with tracing.trace("plan.history") as span:
        assert span is None
