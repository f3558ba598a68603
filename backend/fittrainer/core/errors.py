"""Error taxonomy for plan synthesis and reconciliation."""
from __future__ import annotations

from fastapi import status
from fastapi.responses import JSONResponse


class PlanError(Exception):
    """Base class for failures surfaced to API callers as ``{error, detail}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ConfigurationError(PlanError):
    """The oracle endpoint or credentials are missing."""


class OracleError(PlanError):
    """Transport failure or non-success status from the oracle."""

    def __init__(self, detail: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(detail)
        self.oracle_status = status_code
        self.oracle_body = body


class MalformedResponseError(PlanError):
    """Empty, unparseable, or contract-violating oracle output."""


class PersistenceError(PlanError):
    """The plan action log could not be written."""


class PlanBusyError(PlanError):
    """Another generate or override held the plan for longer than the configured wait."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class EmptyInstructionError(PlanError):
    status_code = status.HTTP_400_BAD_REQUEST


class ValidationError(PlanError):
    """Bad query parameters."""

    status_code = status.HTTP_400_BAD_REQUEST


def error_response(exc: PlanError, failure: str) -> JSONResponse:
    """Render a PlanError as ``{error, detail}``; configuration and input errors name themselves."""
    if isinstance(exc, (ConfigurationError, EmptyInstructionError, ValidationError)):
        error = exc.detail
    else:
        error = failure
    return JSONResponse(status_code=exc.status_code, content={"error": error, "detail": exc.detail})
