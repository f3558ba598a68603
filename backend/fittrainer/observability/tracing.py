"""Opik trace spans for plan generation, overrides and read endpoints."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional

from fittrainer.observability import client as opik_client

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from opik.api_objects.trace.trace_client import Trace

logger = logging.getLogger(__name__)


def _start(name: str, metadata: Dict[str, Any]) -> Optional["Trace"]:
    client = opik_client.get_opik_client()
    if not client:
        return None
    try:
        return client.trace(name=name, metadata=metadata or None)
    except Exception as exc:  # pragma: no cover - tracing must not break requests
        logger.debug("Unable to start Opik trace %s: %s", name, exc)
        return None


def _attach_error(span: "Trace", name: str, exc: BaseException) -> None:
    try:
        span.update(error_info={"exception_type": type(exc).__name__, "message": str(exc)})
    except Exception:  # pragma: no cover
        logger.debug("Failed to attach error info to Opik trace %s", name, exc_info=True)


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional["Trace"]]:
    """
    Open an Opik trace around a block of plan work.

    Yields None when Opik is disabled; exceptions raised inside the block are
    attached to the trace and re-raised unchanged.
    """
    span_metadata = dict(metadata or {})
    if request_id:
        span_metadata.setdefault("request_id", request_id)
    span = _start(name, span_metadata)

    try:
        yield span
    except Exception as exc:
        if span:
            _attach_error(span, name, exc)
        raise
    finally:
        if span:
            try:
                span.end()
            except Exception:  # pragma: no cover
                logger.debug("Failed to close Opik trace %s cleanly", name, exc_info=True)
