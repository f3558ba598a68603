"""Application configuration managed via environment variables."""
from datetime import date, time
from functools import lru_cache
from typing import Annotated
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "fitTrAIner Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "sqlite:///./fittrainer.db"
    static_dir: str | None = None
    cors_origins: list[str] = ["*"]

    azure_openai_endpoint: str | None = None
    azure_openai_deployment: str | None = None
    azure_openai_api_version: str | None = None
    azure_openai_api_key: str | None = None
    oracle_temperature: float = 0.7
    # None leaves the oracle call unbounded; there is no retry either way.
    oracle_timeout_seconds: float | None = None

    plan_days: int = Field(28, ge=1, le=31)
    plan_calendar_min_items: int = Field(28, ge=1)
    default_start_date: date = date(2025, 9, 1)
    calendar_timezone: str = "UTC"
    workout_start_time: time = time(7, 0)
    override_preserve_past_days: bool = True
    # How long a generate/override waits for the one in flight; None waits indefinitely.
    plan_mutation_wait_seconds: Annotated[float, Field(gt=0)] | None = 120.0
    # None creates the schema at startup only for SQLite URLs; Postgres goes through Alembic.
    database_auto_create: bool | None = None

    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "fittrainer"

    @field_validator("calendar_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"calendar_timezone {value!r} is not a known IANA zone") from exc
        return value

    @model_validator(mode="after")
    def _check_calendar_bounds(self) -> "Settings":
        if self.plan_calendar_min_items > self.plan_days:
            raise ValueError(
                f"plan_calendar_min_items ({self.plan_calendar_min_items}) "
                f"cannot exceed plan_days ({self.plan_days})"
            )
        return self

    @property
    def oracle_configured(self) -> bool:
        return all(
            (
                self.azure_openai_endpoint,
                self.azure_openai_deployment,
                self.azure_openai_api_version,
                self.azure_openai_api_key,
            )
        )

    @property
    def create_schema_on_startup(self) -> bool:
        if self.database_auto_create is not None:
            return self.database_auto_create
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
