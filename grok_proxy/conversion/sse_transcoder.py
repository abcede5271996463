"""Grok SSE -> OpenAI SSE stream transcoding.

Upstream bytes arrive in chunks whose boundaries have nothing to do with SSE
frame boundaries. The transcoder keeps the undecoded tail of the previous
chunk (the carry) and only translates a frame once its terminating blank line
has arrived.

State machine:
    RUNNING   consuming upstream chunks
    DRAINING  upstream ended; flushing and appending the final ``[DONE]``
    CLOSED    terminal, nothing more may be fed

The per-chunk logic lives in plain functions over ``TranscoderState`` so it can
be exercised without any I/O; ``SseTranscoder`` and ``transcode_stream`` wrap
it for the dispatcher.
"""

from __future__ import annotations

import codecs
import json
import logging
from collections.abc import AsyncGenerator, AsyncIterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from grok_proxy.conversion.response_converter import project_chat_chunk, project_completion_chunk
from grok_proxy.conversion.routes import Route
from grok_proxy.core.constants import Constants
from grok_proxy.core.errors import StreamClosedError

logger = logging.getLogger(__name__)


class StreamPhase(str, Enum):
    RUNNING = "running"
    DRAINING = "draining"
    CLOSED = "closed"


def _new_decoder() -> codecs.IncrementalDecoder:
    return codecs.getincrementaldecoder("utf-8")(errors="replace")


@dataclass
class TranscoderState:
    """Mutable per-stream state. One instance per request."""

    route: Route
    model: str
    carry: str = ""
    phase: StreamPhase = StreamPhase.RUNNING
    frames_in: int = 0
    frames_out: int = 0
    passthrough_count: int = 0
    decoder: codecs.IncrementalDecoder = field(default_factory=_new_decoder, repr=False)


def encode_frame(payload: Any) -> str:
    """Encode ``payload`` as a single OpenAI SSE frame."""
    if payload == Constants.SSE_DONE:
        return f"data: {Constants.SSE_DONE}\n\n"
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def error_frame(message: str) -> str:
    return encode_frame({"error": {"message": message}})


def split_frames(text: str) -> tuple[list[str], str]:
    """Split ``text`` into complete frames and the unterminated remainder."""
    parts = text.split(Constants.SSE_FRAME_TERMINATOR)
    remainder = parts.pop()
    return parts, remainder


def _frame_payload(frame: str) -> str | None:
    """Return the joined ``data:`` payload of a frame, or None if it has none."""
    data_lines = []
    for line in frame.split("\n"):
        if line.startswith(Constants.SSE_DATA_PREFIX):
            value = line[len(Constants.SSE_DATA_PREFIX) :]
            data_lines.append(value[1:] if value.startswith(" ") else value)
    if not data_lines:
        return None
    return "\n".join(data_lines)


def _passthrough(state: TranscoderState, frame: str) -> str:
    state.passthrough_count += 1
    return f"{frame}{Constants.SSE_FRAME_TERMINATOR}"


def translate_frame(state: TranscoderState, frame: str) -> str | None:
    """Translate one complete upstream frame.

    Returns the encoded OpenAI frame, or None when the frame is dropped
    (blank frames and upstream ``[DONE]`` sentinels).
    """
    frame = frame.strip("\n")
    if not frame.strip():
        return None

    payload = _frame_payload(frame)
    if payload is None:
        return _passthrough(state, frame)

    if payload.strip() == Constants.SSE_DONE:
        # The single [DONE] is appended when the upstream really ends
        return None

    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug("Passing through non-JSON stream frame: %.100s", payload)
        return _passthrough(state, frame)

    if data == Constants.SSE_DONE:
        return None

    if isinstance(data, dict) and "error" in data and "choices" not in data:
        return _passthrough(state, frame)

    if state.route is Route.CHAT_COMPLETIONS:
        return encode_frame(project_chat_chunk(data if isinstance(data, dict) else {}, state.model))
    if state.route is Route.COMPLETIONS:
        return encode_frame(
            project_completion_chunk(data if isinstance(data, dict) else {}, state.model)
        )
    return encode_frame(data)


def ingest_upstream_chunk(state: TranscoderState, chunk: bytes) -> list[str]:
    """Consume one upstream chunk and return every frame it completed, in order."""
    if state.phase is not StreamPhase.RUNNING:
        raise StreamClosedError(f"Cannot feed a transcoder in phase {state.phase.value}")

    state.carry += state.decoder.decode(chunk)
    state.carry = state.carry.replace("\r\n", "\n")

    frames, state.carry = split_frames(state.carry)

    output = []
    for frame in frames:
        state.frames_in += 1
        translated = translate_frame(state, frame)
        if translated is not None:
            output.append(translated)
    state.frames_out += len(output)
    return output


def finish_stream(state: TranscoderState) -> list[str]:
    """Handle upstream end-of-stream: drop any partial frame and emit ``[DONE]``."""
    if state.phase is StreamPhase.CLOSED:
        return []

    state.phase = StreamPhase.DRAINING
    state.carry += state.decoder.decode(b"", final=True)
    if state.carry.strip():
        logger.warning(
            "Discarding unterminated stream frame at end of stream (%d chars)",
            len(state.carry),
        )
    state.carry = ""
    state.phase = StreamPhase.CLOSED
    state.frames_out += 1
    return [encode_frame(Constants.SSE_DONE)]


def fail_stream(state: TranscoderState, message: str) -> list[str]:
    """Handle an upstream read error: emit one error frame and close."""
    if state.phase is StreamPhase.CLOSED:
        return []
    state.carry = ""
    state.phase = StreamPhase.CLOSED
    state.frames_out += 1
    return [error_frame(message)]


class SseTranscoder:
    """Byte-oriented wrapper around ``TranscoderState``."""

    def __init__(self, route: Route, model: str) -> None:
        self.state = TranscoderState(route=route, model=model)

    @property
    def phase(self) -> StreamPhase:
        return self.state.phase

    @property
    def closed(self) -> bool:
        return self.state.phase is StreamPhase.CLOSED

    def feed(self, chunk: bytes) -> list[bytes]:
        return [frame.encode("utf-8") for frame in ingest_upstream_chunk(self.state, chunk)]

    def finish(self) -> list[bytes]:
        return [frame.encode("utf-8") for frame in finish_stream(self.state)]

    def fail(self, message: str) -> list[bytes]:
        return [frame.encode("utf-8") for frame in fail_stream(self.state, message)]


async def transcode_stream(
    transcoder: SseTranscoder, upstream_chunks: AsyncIterable[bytes]
) -> AsyncGenerator[bytes, None]:
    """Pull upstream chunks one at a time and yield translated frames.

    A read error ends the stream with an error frame instead of raising.
    """
    iterator = upstream_chunks.__aiter__()
    while True:
        try:
            chunk = await iterator.__anext__()
        except StopAsyncIteration:
            break
        except Exception as e:
            message = str(e) or e.__class__.__name__
            logger.error(f"Upstream stream failed: {message}")
            for frame in transcoder.fail(message):
                yield frame
            return

        for frame in transcoder.feed(chunk):
            yield frame

    for frame in transcoder.finish():
        yield frame
