from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fittrainer.core.config import settings
from fittrainer.db import Base
from fittrainer.db.deps import get_db
from fittrainer.main import app
from fittrainer.services.plan_session import PlanSession, get_plan_session
from plan_factories import make_calendar


class _Completions:
    def __init__(self, oracle: "StubOracle") -> None:
        self._oracle = oracle

    def create(self, **kwargs: Any) -> SimpleNamespace:
        self._oracle.calls.append(kwargs)
        reply = self._oracle.replies.pop(0) if self._oracle.replies else self._oracle.default_reply
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            reply = json.dumps(reply)
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason="stop")], usage=None)


class StubOracle:
    """Stands in for ``openai.AzureOpenAI``; records constructor and completion calls."""

    def __init__(self) -> None:
        self.clients: List[Dict[str, Any]] = []
        self.calls: List[Dict[str, Any]] = []
        self.replies: List[Any] = []
        self.default_reply: Any = make_calendar()

    def __call__(self, **kwargs: Any) -> SimpleNamespace:
        self.clients.append(kwargs)
        return SimpleNamespace(chat=SimpleNamespace(completions=_Completions(self)))


@pytest.fixture()
def oracle(monkeypatch) -> StubOracle:
    stub = StubOracle()
    monkeypatch.setattr("openai.AzureOpenAI", stub)
    monkeypatch.setattr(settings, "azure_openai_endpoint", "https://example.openai.azure.com")
    monkeypatch.setattr(settings, "azure_openai_deployment", "gpt-4o")
    monkeypatch.setattr(settings, "azure_openai_api_version", "2025-01-01-preview")
    monkeypatch.setattr(settings, "azure_openai_api_key", "test-key")
    return stub


@pytest.fixture()
def db_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture()
def plan_session() -> PlanSession:
    return PlanSession()


@pytest.fixture()
def client(db_session_factory, plan_session, monkeypatch):
    monkeypatch.setattr(settings, "database_auto_create", False)

    def override_get_db():
        db = db_session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_plan_session] = lambda: plan_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def unmigrated_db(client):
    """Point get_db at a database with no tables so action-log commits fail."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool, future=True)
    SessionWithoutSchema = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    def override_get_db():
        db = SessionWithoutSchema()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield
    engine.dispose()
