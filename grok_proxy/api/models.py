"""Transport-agnostic request and result types exchanged with hosting adapters."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from grok_proxy.conversion.routes import Route, route_from_path
from grok_proxy.core.errors import StreamClosedError


def normalize_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    """Lower-case header names so lookups are case-insensitive."""
    return {name.lower(): value for name, value in (headers or {}).items()}


@dataclass(frozen=True)
class InboundRequest:
    """One inbound call as seen by the dispatcher."""

    route: Route
    method: str
    headers: Mapping[str, str]
    body: Any | None = None

    @classmethod
    def build(
        cls, method: str, path: str, headers: Mapping[str, str] | None, body: Any | None
    ) -> InboundRequest:
        return cls(
            route=route_from_path(path),
            method=method.upper(),
            headers=normalize_headers(headers),
            body=body,
        )

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    @property
    def wants_stream(self) -> bool:
        return isinstance(self.body, dict) and bool(self.body.get("stream"))


@dataclass(frozen=True)
class UpstreamRequest:
    url: str
    body: dict[str, Any]
    api_key: str

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }


class StreamProducer:
    """One-shot async byte iterator backing a streaming result.

    ``on_close`` runs once the stream is exhausted, fails, or the consumer
    stops iterating early, releasing the upstream connection.
    """

    def __init__(self, frames: AsyncIterator[bytes], on_close: Any | None = None) -> None:
        self._frames = frames
        self._on_close = on_close
        self._consumed = False

    def __aiter__(self) -> AsyncIterator[bytes]:
        if self._consumed:
            raise StreamClosedError("Stream producer can only be consumed once")
        self._consumed = True
        return self._run()

    async def _run(self) -> AsyncIterator[bytes]:
        try:
            async for frame in self._frames:
                yield frame
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        """Release the upstream side. Safe to call more than once."""
        aclose = getattr(self._frames, "aclose", None)
        if aclose is not None:
            await aclose()
        if self._on_close is not None:
            on_close, self._on_close = self._on_close, None
            await on_close()


@dataclass(frozen=True)
class ImmediateResult:
    status: int
    body: Any
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class StreamingResult:
    status: int
    producer: StreamProducer
    headers: dict[str, str] = field(default_factory=dict)


UniformResult = Union[ImmediateResult, StreamingResult]
