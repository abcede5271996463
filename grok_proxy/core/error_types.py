"""Error type enumeration for Grok Proxy.

The values are the ``type`` strings of the OpenAI error envelope returned to
callers: ``{"error": {"message": ..., "type": ..., "code": ...}}``.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type categories for error responses and log lines."""

    AUTHENTICATION_ERROR = "authentication_error"  # Missing credential
    INVALID_REQUEST_ERROR = "invalid_request_error"  # Unknown route or malformed body
    API_ERROR = "api_error"  # Non-2xx reply from the upstream
    UNSUPPORTED_OPERATION = "unsupported_operation"  # Streaming on a non-streaming host
    SERVER_ERROR = "server_error"  # Anything uncaught
