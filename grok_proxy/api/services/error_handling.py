"""Error result construction for the dispatcher.

Every error leaves the core as an ``ImmediateResult`` carrying the OpenAI
error envelope:

    {"error": {"message": "<text>", "type": "<error_type>", "code": "<code>"}}
"""

from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass
from typing import Any

import httpx

from grok_proxy.api.models import ImmediateResult
from grok_proxy.api.services.streaming import json_headers
from grok_proxy.core.errors import (
    ApiError,
    AuthenticationError,
    InvalidRequestError,
    ProxyError,
    ServerError,
    UnsupportedOperationError,
    error_body,
)

logger = logging.getLogger(__name__)

UPSTREAM_FALLBACK_MESSAGE = "Error from Grok API"
UPSTREAM_FALLBACK_CODE = "unknown_error"


@dataclass(frozen=True, slots=True)
class ErrorResponseBuilder:
    """Centralized builder for consistent error results."""

    @staticmethod
    def from_exception(exception: ProxyError) -> ImmediateResult:
        return ImmediateResult(
            status=exception.status_code,
            body=exception.to_body(),
            headers=json_headers(),
        )

    @staticmethod
    def missing_api_key() -> ImmediateResult:
        return ErrorResponseBuilder.from_exception(
            AuthenticationError(
                "Missing API key. Please provide it in the Authorization header "
                "or as GROK_API_KEY environment variable.",
                code="invalid_api_key",
            )
        )

    @staticmethod
    def invalid_request(message: str) -> ImmediateResult:
        return ErrorResponseBuilder.from_exception(InvalidRequestError(message))

    @staticmethod
    def not_found() -> ImmediateResult:
        return ImmediateResult(
            status=404,
            body=error_body("Not found", InvalidRequestError.error_type.value),
            headers=json_headers(),
        )

    @staticmethod
    def streaming_unsupported() -> ImmediateResult:
        return ErrorResponseBuilder.from_exception(
            UnsupportedOperationError("Streaming is not supported by this server.")
        )

    @staticmethod
    def internal_error(exception: Exception) -> ImmediateResult:
        """Build a 500 result for an uncaught exception."""
        _log_traceback()
        return ErrorResponseBuilder.from_exception(
            ServerError(str(exception) or exception.__class__.__name__)
        )


def upstream_api_error(status_code: int, payload: Any) -> ApiError:
    """Build an ``ApiError`` from a non-2xx upstream body (best-effort)."""
    error = payload.get("error") if isinstance(payload, dict) else None
    message = UPSTREAM_FALLBACK_MESSAGE
    code = UPSTREAM_FALLBACK_CODE
    if isinstance(error, dict):
        if isinstance(error.get("message"), str) and error["message"]:
            message = error["message"]
        if error.get("code") is not None:
            code = str(error["code"])
    elif isinstance(error, str) and error:
        message = error
    return ApiError(message, code=code, status_code=status_code)


async def read_upstream_error(response: httpx.Response) -> ApiError:
    """Read and close a failed upstream response, returning the mapped error."""
    try:
        await response.aread()
        payload = response.json()
    except (ValueError, httpx.HTTPError):
        payload = None
    finally:
        await response.aclose()
    return upstream_api_error(response.status_code, payload)


def _log_traceback(log: Any = logger) -> None:
    """Log full traceback for debugging."""
    log.error(traceback.format_exc())
