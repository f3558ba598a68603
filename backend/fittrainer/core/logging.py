"""Logging setup for the API process."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any, Dict

from fittrainer.core.context import get_request_id

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"
ACCESS_FORMAT = "%(asctime)s | access | %(request_id)s | %(message)s"

# Both SDKs log whole request bodies at DEBUG, and the override prompt carries the full calendar.
QUIET_LOGGERS = ("openai", "httpx", "httpcore", "opik")


class RequestIdFilter(logging.Filter):
    """Stamp each record with the request id bound to the current context."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - minimal logic
        record.request_id = get_request_id() or "-"
        return True


def build_logging_config(log_level: str = "INFO") -> Dict[str, Any]:
    level = log_level.upper()
    loggers: Dict[str, Any] = {name: {"level": "WARNING"} for name in QUIET_LOGGERS}
    loggers["fittrainer"] = {"level": level}
    loggers["fittrainer.access"] = {"level": level, "handlers": ["access"], "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT},
            "access": {"format": ACCESS_FORMAT},
        },
        "filters": {
            "request_id": {"()": "fittrainer.core.logging.RequestIdFilter"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "filters": ["request_id"],
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "filters": ["request_id"],
            },
        },
        "loggers": loggers,
        "root": {"handlers": ["console"], "level": level},
    }


def configure_logging(*, log_level: str = "INFO") -> None:
    """Apply the logging config; later calls are ignored."""
    if getattr(configure_logging, "_configured", False):
        return

    dictConfig(build_logging_config(log_level))
    logging.getLogger(__name__).debug("Logging configured at %s", log_level)
    setattr(configure_logging, "_configured", True)
