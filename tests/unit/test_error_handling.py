import httpx
import pytest

from grok_proxy.api.services.error_handling import (
    ErrorResponseBuilder,
    read_upstream_error,
    upstream_api_error,
)
from grok_proxy.core.errors import ApiError, InvalidRequestError, UnsupportedRouteError


def test_missing_api_key_result():
    result = ErrorResponseBuilder.missing_api_key()
    assert result.status == 401
    assert result.body["error"]["type"] == "authentication_error"
    assert result.body["error"]["code"] == "invalid_api_key"
    assert "GROK_API_KEY" in result.body["error"]["message"]
    assert result.headers["Access-Control-Allow-Origin"] == "*"


def test_from_exception_uses_exception_status_and_type():
    result = ErrorResponseBuilder.from_exception(UnsupportedRouteError("Unsupported endpoint: /v1/x"))
    assert result.status == 400
    assert result.body == {
        "error": {"message": "Unsupported endpoint: /v1/x", "type": "invalid_request_error"}
    }


def test_streaming_unsupported_result():
    result = ErrorResponseBuilder.streaming_unsupported()
    assert result.status == 400
    assert result.body["error"]["type"] == "unsupported_operation"


def test_internal_error_result():
    result = ErrorResponseBuilder.internal_error(RuntimeError("boom"))
    assert result.status == 500
    assert result.body["error"] == {"message": "boom", "type": "server_error"}


def test_not_found_result():
    result = ErrorResponseBuilder.not_found()
    assert result.status == 404
    assert result.body["error"]["message"] == "Not found"


class TestUpstreamApiError:
    def test_message_and_code_from_payload(self):
        error = upstream_api_error(
            429, {"error": {"message": "Rate limit exceeded", "code": "rate_limited"}}
        )
        assert isinstance(error, ApiError)
        assert error.status_code == 429
        assert error.to_body() == {
            "error": {"message": "Rate limit exceeded", "type": "api_error", "code": "rate_limited"}
        }

    @pytest.mark.parametrize("payload", [None, {}, {"error": {}}, "oops", {"error": {"message": ""}}])
    def test_generic_fallback(self, payload):
        error = upstream_api_error(502, payload)
        assert error.status_code == 502
        assert error.message == "Error from Grok API"
        assert error.code == "unknown_error"

    def test_string_error_is_used_as_message(self):
        assert upstream_api_error(400, {"error": "bad model"}).message == "bad model"

    def test_numeric_code_is_stringified(self):
        assert upstream_api_error(400, {"error": {"code": 1234}}).code == "1234"


@pytest.mark.asyncio
async def test_read_upstream_error_parses_json_body():
    response = httpx.Response(403, json={"error": {"message": "Forbidden", "code": "forbidden"}})
    error = await read_upstream_error(response)
    assert error.status_code == 403
    assert error.message == "Forbidden"
    assert error.code == "forbidden"


@pytest.mark.asyncio
async def test_read_upstream_error_tolerates_non_json_body():
    response = httpx.Response(503, text="<html>Service Unavailable</html>")
    error = await read_upstream_error(response)
    assert error.status_code == 503
    assert error.message == "Error from Grok API"


def test_invalid_request_error_defaults():
    error = InvalidRequestError("bad")
    assert error.status_code == 400
    assert error.code is None
