import logging

from fittrainer.core.context import bind_request_id, reset_request_id
from fittrainer.core.logging import RequestIdFilter, build_logging_config


def test_sdk_loggers_are_quieted() -> None:
    config = build_logging_config("debug")

    assert config["root"]["level"] == "DEBUG"
    assert config["loggers"]["openai"] == {"level": "WARNING"}
    assert config["loggers"]["httpx"] == {"level": "WARNING"}
    assert config["loggers"]["fittrainer.access"]["propagate"] is False


def test_request_id_filter_uses_bound_id() -> None:
    record = logging.LogRecord("fittrainer", logging.INFO, __file__, 1, "hello", None, None)
    token = bind_request_id("req-7")
    try:
        RequestIdFilter().filter(record)
    finally:
        reset_request_id(token)

    assert record.request_id == "req-7"


def test_request_id_filter_defaults_to_dash() -> None:
    record = logging.LogRecord("fittrainer", logging.INFO, __file__, 1, "hello", None, None)

    RequestIdFilter().filter(record)

    assert record.request_id == "-"
