"""Convert Grok response bodies into OpenAI-shaped response bodies.

Every field read from the upstream body falls back to a default, so even a
minimal upstream reply produces a complete OpenAI object.
"""

from __future__ import annotations

import time
from typing import Any

from grok_proxy.conversion.routes import Route
from grok_proxy.core.constants import Constants
from grok_proxy.core.errors import UnsupportedRouteError


def generate_id(prefix: str) -> str:
    """Time-based response id, e.g. ``chatcmpl-1700000000000``."""
    return f"{prefix}-{time.time_ns() // 1_000_000}"


def _unix_now() -> int:
    return int(time.time())


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _int_or_zero(value: Any) -> int:
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


def _finish_reason(choice: dict[str, Any], default: str | None) -> str | None:
    reason = choice.get("finishReason")
    if reason is None:
        reason = choice.get("finish_reason")
    return reason or default


def _completion_usage(grok_response: dict[str, Any]) -> dict[str, int]:
    usage = _as_dict(grok_response.get("usage"))
    return {
        "prompt_tokens": _int_or_zero(usage.get("promptTokens")),
        "completion_tokens": _int_or_zero(usage.get("completionTokens")),
        "total_tokens": _int_or_zero(usage.get("totalTokens")),
    }


def convert_grok_chat_to_openai(grok_response: dict[str, Any], model: str) -> dict[str, Any]:
    choices = []
    for index, choice in enumerate(_as_list(grok_response.get("choices"))):
        choice = _as_dict(choice)
        message = _as_dict(choice.get("message"))
        choices.append(
            {
                "index": index,
                "message": {
                    "role": Constants.ROLE_ASSISTANT,
                    "content": message.get("content") or "",
                },
                "finish_reason": _finish_reason(choice, Constants.FINISH_STOP),
            }
        )

    return {
        "id": generate_id(Constants.CHAT_ID_PREFIX),
        "object": Constants.OBJECT_CHAT_COMPLETION,
        "created": _unix_now(),
        "model": model,
        "choices": choices,
        "usage": _completion_usage(grok_response),
    }


def convert_grok_completion_to_openai(grok_response: dict[str, Any], model: str) -> dict[str, Any]:
    choices = []
    for index, choice in enumerate(_as_list(grok_response.get("choices"))):
        choice = _as_dict(choice)
        choices.append(
            {
                "index": index,
                "text": choice.get("text") or "",
                "finish_reason": _finish_reason(choice, Constants.FINISH_STOP),
            }
        )

    return {
        "id": generate_id(Constants.COMPLETION_ID_PREFIX),
        "object": Constants.OBJECT_TEXT_COMPLETION,
        "created": _unix_now(),
        "model": model,
        "choices": choices,
        "usage": _completion_usage(grok_response),
    }


def convert_grok_embeddings_to_openai(grok_response: dict[str, Any], model: str) -> dict[str, Any]:
    usage = _as_dict(grok_response.get("usage"))
    data = [
        {
            "object": Constants.OBJECT_EMBEDDING,
            "embedding": _as_list(_as_dict(item).get("embedding")),
            "index": index,
        }
        for index, item in enumerate(_as_list(grok_response.get("data")))
    ]
    return {
        "object": Constants.OBJECT_LIST,
        "data": data,
        "model": model,
        "usage": {
            "prompt_tokens": _int_or_zero(usage.get("promptTokens")),
            "total_tokens": _int_or_zero(usage.get("totalTokens")),
        },
    }


_CONVERTERS = {
    Route.CHAT_COMPLETIONS: convert_grok_chat_to_openai,
    Route.COMPLETIONS: convert_grok_completion_to_openai,
    Route.EMBEDDINGS: convert_grok_embeddings_to_openai,
}


def convert_grok_to_openai_response(
    route: Route,
    grok_response: Any,
    original_model: Any,
    *,
    default_model: str = "grok-1",
) -> dict[str, Any]:
    """Map a non-streaming upstream body back to the OpenAI shape for ``route``.

    ``original_model`` is the ``model`` field of the inbound request; it is
    echoed back, falling back to ``default_model`` when absent.
    """
    converter = _CONVERTERS.get(route)
    if converter is None:
        raise UnsupportedRouteError(f"Unsupported endpoint: {route.value}")
    model = original_model if isinstance(original_model, str) and original_model else default_model
    return converter(_as_dict(grok_response), model)


# --- Streaming chunk projections ---


def _first_choice(data: dict[str, Any]) -> dict[str, Any]:
    choices = _as_list(data.get("choices"))
    return _as_dict(choices[0]) if choices else {}


def project_chat_chunk(data: dict[str, Any], model: str) -> dict[str, Any]:
    choice = _first_choice(data)
    delta = _as_dict(choice.get("delta"))
    return {
        "id": generate_id(Constants.CHAT_ID_PREFIX),
        "object": Constants.OBJECT_CHAT_COMPLETION_CHUNK,
        "created": _unix_now(),
        "model": model,
        "choices": [
            {
                "index": 0,
                "delta": {"content": delta.get("content") or ""},
                "finish_reason": _finish_reason(choice, None),
            }
        ],
    }


def project_completion_chunk(data: dict[str, Any], model: str) -> dict[str, Any]:
    choice = _first_choice(data)
    return {
        "id": generate_id(Constants.COMPLETION_ID_PREFIX),
        "object": Constants.OBJECT_TEXT_COMPLETION_CHUNK,
        "created": _unix_now(),
        "model": model,
        "choices": [
            {
                "index": 0,
                "text": choice.get("text") or "",
                "finish_reason": _finish_reason(choice, None),
            }
        ],
    }


def models_listing(model_id: str) -> dict[str, Any]:
    """Static single-model listing served for ``/models``."""
    return {
        "object": Constants.OBJECT_LIST,
        "data": [
            {
                "id": model_id,
                "object": Constants.OBJECT_MODEL,
                "created": Constants.MODEL_CREATED,
                "owned_by": Constants.MODEL_OWNER,
            }
        ],
    }
