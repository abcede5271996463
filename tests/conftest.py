"""Shared pytest configuration and fixtures for Grok Proxy tests."""

import json

import httpx
import pytest
import respx

from grok_proxy.core.config import ConfigSchema, ProxyConfig

GROK_TEST_BASE = "https://api.grok.test"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep developer .env / shell settings out of the tests."""
    for spec in ConfigSchema.all_specs():
        monkeypatch.delenv(spec.name, raising=False)


@pytest.fixture
def proxy_config():
    """Config pointing at the mocked upstream, with no fallback key."""
    return ProxyConfig(api_base=GROK_TEST_BASE)


@pytest.fixture
def mock_grok_api():
    """Mock Grok API endpoints with RESPX.

    Example:
        def test_chat(mock_grok_api, grok_chat_response):
            mock_grok_api.post("/v1/chat/completions").mock(
                return_value=httpx.Response(200, json=grok_chat_response)
            )
    """
    with respx.mock(base_url=GROK_TEST_BASE, assert_all_called=False) as respx_mock:
        yield respx_mock


# === Grok Response Fixtures ===


@pytest.fixture
def grok_chat_response():
    return {
        "choices": [
            {
                "message": {"role": "model", "content": "Hello! How can I help you today?"},
                "finishReason": "stop",
            }
        ],
        "usage": {"promptTokens": 10, "completionTokens": 15, "totalTokens": 25},
    }


@pytest.fixture
def grok_completion_response():
    return {
        "choices": [{"text": "Once upon a time", "finishReason": "length"}],
        "usage": {"promptTokens": 4, "completionTokens": 16, "totalTokens": 20},
    }


@pytest.fixture
def grok_embeddings_response():
    return {
        "data": [{"embedding": [0.1, 0.2, 0.3]}, {"embedding": [0.4, 0.5, 0.6]}],
        "usage": {"promptTokens": 6, "totalTokens": 6},
    }


@pytest.fixture
def grok_chat_stream_chunks():
    return [
        sse({"choices": [{"delta": {"content": "Hello"}}]}),
        sse({"choices": [{"delta": {"content": " world"}}]}),
        sse({"choices": [{"delta": {}, "finish_reason": "stop"}]}),
        b"data: [DONE]\n\n",
    ]


# === Helpers ===


def sse(payload: dict) -> bytes:
    return f"data: {json.dumps(payload)}\n\n".encode()


def parse_frames(raw: bytes) -> list[str]:
    """Split an OpenAI SSE body into its data payloads."""
    text = raw.decode("utf-8")
    return [
        frame[len("data: ") :]
        for frame in text.split("\n\n")
        if frame.startswith("data: ")
    ]


class ChunkedByteStream(httpx.AsyncByteStream):
    """Upstream body delivered in the given chunks, optionally failing afterwards."""

    def __init__(self, chunks: list[bytes], error: Exception | None = None) -> None:
        self.chunks = chunks
        self.error = error
        self.pulled = 0
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            self.pulled += 1
            yield chunk
        if self.error is not None:
            raise self.error

    async def aclose(self) -> None:
        self.closed = True


def streaming_response(chunks: list[bytes], error: Exception | None = None) -> httpx.Response:
    return httpx.Response(
        status_code=200,
        headers={"content-type": "text/event-stream"},
        stream=ChunkedByteStream(chunks, error),
    )


def pytest_collection_modifyitems(config, items):
    """Every test here runs without external services."""
    for item in items:
        item.add_marker(pytest.mark.unit)
