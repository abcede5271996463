"""HTTP client for the Grok API."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from grok_proxy.api.models import UpstreamRequest
from grok_proxy.core.config import ProxyConfig

logger = logging.getLogger(__name__)


def build_timeout(config: ProxyConfig) -> httpx.Timeout:
    return httpx.Timeout(config.request_timeout)


def build_streaming_timeout(config: ProxyConfig) -> httpx.Timeout:
    """Streaming reads are unlimited unless STREAMING_READ_TIMEOUT_SECONDS is set."""
    return httpx.Timeout(config.request_timeout, read=config.streaming_read_timeout)


class GrokClient:
    """Thin wrapper over ``httpx.AsyncClient`` for upstream calls.

    Responses are returned as-is; status handling belongs to the dispatcher.
    """

    def __init__(
        self,
        config: ProxyConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(timeout=build_timeout(config))

    def _build_request(self, upstream: UpstreamRequest, timeout: httpx.Timeout) -> httpx.Request:
        return self.client.build_request(
            "POST",
            upstream.url,
            json=upstream.body,
            headers=upstream.headers,
            timeout=timeout,
        )

    async def send(self, upstream: UpstreamRequest) -> httpx.Response:
        """Send a request and read the whole body."""
        start_time = time.time()
        logger.debug(f"📤 GROK REQUEST | {upstream.url} | Model: {upstream.body.get('model')}")

        response = await self.client.send(self._build_request(upstream, build_timeout(self.config)))

        duration_ms = (time.time() - start_time) * 1000
        logger.debug(f"📥 GROK RESPONSE | Status: {response.status_code} | {duration_ms:.0f}ms")
        return response

    async def open_stream(self, upstream: UpstreamRequest) -> httpx.Response:
        """Send a request and return once headers arrive; the caller must close it."""
        logger.debug(f"📤 GROK STREAM | {upstream.url} | Model: {upstream.body.get('model')}")
        return await self.client.send(
            self._build_request(upstream, build_streaming_timeout(self.config)), stream=True
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> GrokClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
