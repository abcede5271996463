"""Exception hierarchy for the translation core.

Every exception carries the HTTP status and OpenAI error ``type`` it maps to,
so the dispatcher can turn any of them into a uniform error result.
"""

from __future__ import annotations

from typing import Any

from grok_proxy.core.error_types import ErrorType


def error_body(message: str, error_type: str, code: str | None = None) -> dict[str, Any]:
    """Build the OpenAI error envelope."""
    error: dict[str, Any] = {"message": message, "type": error_type}
    if code is not None:
        error["code"] = code
    return {"error": error}


class ProxyError(Exception):
    """Base class for errors that map onto an HTTP error response."""

    status_code: int = 500
    error_type: ErrorType = ErrorType.SERVER_ERROR

    def __init__(
        self, message: str, *, code: str | None = None, status_code: int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> dict[str, Any]:
        return error_body(self.message, self.error_type.value, self.code)


class AuthenticationError(ProxyError):
    status_code = 401
    error_type = ErrorType.AUTHENTICATION_ERROR


class InvalidRequestError(ProxyError):
    status_code = 400
    error_type = ErrorType.INVALID_REQUEST_ERROR


class UnsupportedRouteError(InvalidRequestError):
    """Raised by the converters for a path that maps to no upstream operation."""


class ApiError(ProxyError):
    """Non-2xx reply from the upstream; the upstream status is forwarded."""

    error_type = ErrorType.API_ERROR


class UnsupportedOperationError(ProxyError):
    status_code = 400
    error_type = ErrorType.UNSUPPORTED_OPERATION


class ServerError(ProxyError):
    status_code = 500
    error_type = ErrorType.SERVER_ERROR


class StreamClosedError(RuntimeError):
    """Raised when a closed stream transcoder or producer is used again."""
