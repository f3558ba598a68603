"""Tests for startup validation of settings."""
import pytest
from pydantic import ValidationError as PydanticValidationError

from fittrainer.core.config import Settings


def test_unknown_calendar_timezone_fails_at_startup() -> None:
    with pytest.raises(PydanticValidationError, match="Mars/Olympus"):
        Settings(calendar_timezone="Mars/Olympus")


def test_known_calendar_timezone_is_accepted() -> None:
    assert Settings(calendar_timezone="America/New_York").calendar_timezone == "America/New_York"


def test_sqlite_schema_is_created_on_startup_by_default() -> None:
    assert Settings(database_url="sqlite:///./plans.db").create_schema_on_startup is True
    assert Settings(database_url="postgresql+psycopg2://localhost/plans").create_schema_on_startup is False


def test_explicit_auto_create_flag_wins() -> None:
    assert Settings(database_url="sqlite://", database_auto_create=False).create_schema_on_startup is False
    assert Settings(database_url="postgresql+psycopg2://localhost/plans", database_auto_create=True).create_schema_on_startup is True


def test_mutation_wait_must_be_positive() -> None:
    with pytest.raises(PydanticValidationError):
        Settings(plan_mutation_wait_seconds=0)
    assert Settings(plan_mutation_wait_seconds=None).plan_mutation_wait_seconds is None
