"""Request dispatcher: the single entry point every hosting adapter calls.

``Dispatcher.handle`` maps the inbound request, calls the Grok API and maps
the reply back, always returning a ``UniformResult``. No exception escapes it.
"""

from __future__ import annotations

import json
import time
import uuid
from collections.abc import Mapping
from typing import Any

import httpx

from grok_proxy.api.models import (
    ImmediateResult,
    InboundRequest,
    StreamingResult,
    StreamProducer,
    UniformResult,
    UpstreamRequest,
)
from grok_proxy.api.services.error_handling import ErrorResponseBuilder, read_upstream_error
from grok_proxy.api.services.streaming import json_headers, sse_headers
from grok_proxy.conversion.request_converter import convert_openai_to_grok
from grok_proxy.conversion.response_converter import (
    convert_grok_to_openai_response,
    models_listing,
)
from grok_proxy.conversion.routes import Route, upstream_path
from grok_proxy.conversion.sse_transcoder import SseTranscoder, transcode_stream
from grok_proxy.core.config import ProxyConfig
from grok_proxy.core.errors import ProxyError, UnsupportedRouteError
from grok_proxy.core.grok_client import GrokClient
from grok_proxy.core.logging import conversation_logger, correlation_context

BEARER_PREFIX = "Bearer "

# Sentinel for bodies that could not be decoded as JSON
_MALFORMED = object()


def extract_api_key(request: InboundRequest, fallback: str | None) -> str | None:
    """Credential from ``Authorization: Bearer``, then ``x-api-key``, then ``fallback``."""
    authorization = request.header("authorization")
    if authorization and authorization.startswith(BEARER_PREFIX):
        key = authorization[len(BEARER_PREFIX) :].strip()
        if key:
            return key
    api_key = request.header("x-api-key")
    if api_key and api_key.strip():
        return api_key.strip()
    return fallback or None


def parse_body(body: Any) -> Any:
    """Accept an already-parsed body, or raw JSON bytes/text from an adapter."""
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    if isinstance(body, str):
        return json.loads(body) if body.strip() else None
    return body


class Dispatcher:
    """Transport-agnostic request handler.

    Args:
        config: Upstream settings.
        http_client: Optional shared ``httpx.AsyncClient``; one is created
            (and owned) when omitted.
        supports_streaming: False for hosts that cannot stream; streaming
            requests are then rejected with ``unsupported_operation``.
    """

    def __init__(
        self,
        config: ProxyConfig,
        http_client: httpx.AsyncClient | None = None,
        *,
        supports_streaming: bool = True,
    ) -> None:
        self.config = config
        self.client = GrokClient(config, http_client)
        self.supports_streaming = supports_streaming

    async def aclose(self) -> None:
        await self.client.aclose()

    async def handle(
        self,
        method: str,
        path: str,
        headers: Mapping[str, str] | None,
        body: Any | None,
    ) -> UniformResult:
        request_id = str(uuid.uuid4())
        with correlation_context(request_id):
            start_time = time.time()
            try:
                result = await self._dispatch(method, path, headers, body)
            except ProxyError as e:
                conversation_logger.warning(f"❌ {e.error_type.value} | {e.message}")
                return ErrorResponseBuilder.from_exception(e)
            except Exception as e:
                conversation_logger.error(f"❌ ERROR | {path} | {e!r}")
                return ErrorResponseBuilder.internal_error(e)

            duration_ms = (time.time() - start_time) * 1000
            kind = "STREAM" if isinstance(result, StreamingResult) else "DONE"
            conversation_logger.info(
                f"✅ {kind} | {method} {path} | Status: {result.status} | {duration_ms:.0f}ms"
            )
            return result

    async def _dispatch(
        self,
        method: str,
        path: str,
        headers: Mapping[str, str] | None,
        body: Any | None,
    ) -> UniformResult:
        try:
            parsed_body = parse_body(body)
        except (UnicodeDecodeError, json.JSONDecodeError):
            parsed_body = _MALFORMED
        request = InboundRequest.build(method, path, headers, parsed_body)

        api_key = extract_api_key(request, self.config.fallback_api_key)
        if not api_key:
            return ErrorResponseBuilder.missing_api_key()

        if request.route is Route.MODELS:
            return ImmediateResult(
                status=200,
                body=models_listing(self.config.default_model),
                headers=json_headers(),
            )

        target = upstream_path(request.route)
        if target is None:
            raise UnsupportedRouteError(f"Unsupported endpoint: {path}")

        if not isinstance(request.body, dict):
            return ErrorResponseBuilder.invalid_request("Request body must be a JSON object")

        if request.wants_stream and not self.supports_streaming:
            return ErrorResponseBuilder.streaming_unsupported()

        conversation_logger.info(
            f"🚀 START | {request.route.value} | Model: {request.body.get('model')} | "
            f"Stream: {request.wants_stream}"
        )

        upstream = UpstreamRequest(
            url=self.config.upstream_url(target),
            body=convert_openai_to_grok(
                request.route,
                request.body,
                model_prefix=self.config.model_prefix,
                default_model=self.config.default_model,
            ),
            api_key=api_key,
        )

        if request.wants_stream:
            return await self._dispatch_streaming(request, upstream)
        return await self._dispatch_immediate(request, upstream)

    async def _dispatch_immediate(
        self, request: InboundRequest, upstream: UpstreamRequest
    ) -> ImmediateResult:
        response = await self.client.send(upstream)
        if not response.is_success:
            raise await read_upstream_error(response)

        openai_response = convert_grok_to_openai_response(
            request.route,
            response.json(),
            request.body.get("model"),
            default_model=self.config.default_model,
        )
        return ImmediateResult(status=200, body=openai_response, headers=json_headers())

    async def _dispatch_streaming(
        self, request: InboundRequest, upstream: UpstreamRequest
    ) -> StreamingResult:
        response = await self.client.open_stream(upstream)
        if not response.is_success:
            raise await read_upstream_error(response)

        model = request.body.get("model")
        transcoder = SseTranscoder(
            request.route,
            model if isinstance(model, str) and model else self.config.default_model,
        )
        producer = StreamProducer(
            transcode_stream(transcoder, response.aiter_bytes()),
            on_close=response.aclose,
        )
        return StreamingResult(status=200, producer=producer, headers=sse_headers())
