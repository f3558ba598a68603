"""Azure OpenAI chat-completions boundary used for plan generation."""
from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Dict, List

import openai

from fittrainer.core.config import settings
from fittrainer.core.errors import ConfigurationError, OracleError
from fittrainer.observability.metrics import log_metric
from fittrainer.observability.tracing import trace
from fittrainer.services.plan_contract import extract_text

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Azure OpenAI is not configured. Check env vars."


def ensure_configured() -> None:
    """Fail before any network attempt when endpoint, deployment, version or key is missing."""
    if not settings.oracle_configured:
        raise ConfigurationError(NOT_CONFIGURED_MESSAGE)


def request_completion(
    messages: List[Dict[str, str]],
    response_format: Dict[str, Any],
    *,
    request_id: str | None = None,
) -> str:
    """
    Send one chat completion request and return the message text.

    The client is built with ``max_retries=0``: a failed call fails the request.
    ``ORACLE_TIMEOUT_SECONDS`` unset means no timeout is imposed.
    """
    ensure_configured()
    client = openai.AzureOpenAI(
        azure_endpoint=settings.azure_openai_endpoint,
        api_key=settings.azure_openai_api_key,
        api_version=settings.azure_openai_api_version,
        max_retries=0,
        timeout=settings.oracle_timeout_seconds,
    )
    metadata = {
        "deployment": settings.azure_openai_deployment,
        "message_count": len(messages),
        "prompt_chars": sum(len(message["content"]) for message in messages),
    }
    logger.debug("Oracle request: %s", metadata)
    start = perf_counter()

    with trace("oracle.chat_completion", metadata=metadata, request_id=request_id) as oracle_trace:
        try:
            completion = client.chat.completions.create(
                model=settings.azure_openai_deployment,
                messages=messages,
                temperature=settings.oracle_temperature,
                response_format=response_format,
            )
        except openai.APIStatusError as exc:
            body = exc.response.text if exc.response is not None else str(exc)
            log_metric("oracle.call.failure", 1, metadata={"status": exc.status_code})
            raise OracleError(
                f"Azure OpenAI error {exc.status_code}: {body}",
                status_code=exc.status_code,
                body=body,
            ) from exc
        except openai.APIError as exc:
            log_metric("oracle.call.failure", 1, metadata={"status": None})
            raise OracleError(f"Azure OpenAI request failed: {exc}") from exc

        latency_ms = (perf_counter() - start) * 1000
        choices = getattr(completion, "choices", None) or []
        choice = choices[0] if choices else None
        finish_reason = getattr(choice, "finish_reason", None)
        usage = getattr(completion, "usage", None)
        logger.info(
            "Oracle responded in %.0f ms (finish_reason=%s, usage=%s)",
            latency_ms,
            finish_reason,
            usage,
        )
        if oracle_trace:
            oracle_trace.update(metadata={"finish_reason": finish_reason, "latency_ms": round(latency_ms)})

    log_metric("oracle.call.latency_ms", latency_ms, metadata={"finish_reason": finish_reason})
    return extract_text(getattr(choice, "message", None))
