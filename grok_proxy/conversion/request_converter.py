"""Convert OpenAI-shaped request bodies into Grok request bodies."""

from __future__ import annotations

import logging
from typing import Any

from grok_proxy.conversion.routes import Route
from grok_proxy.core.constants import Constants
from grok_proxy.core.errors import InvalidRequestError, UnsupportedRouteError

logger = logging.getLogger(__name__)


def map_model(model: Any, *, model_prefix: str, default_model: str) -> str:
    """Forward Grok model ids unchanged; anything else becomes the default model.

    The substitution is silent so OpenAI clients with hard-coded model names
    keep working.
    """
    if isinstance(model, str) and model.startswith(model_prefix):
        return model
    return default_model


def map_role(role: Any) -> str:
    if role == Constants.ROLE_SYSTEM:
        return Constants.ROLE_SYSTEM
    if role == Constants.ROLE_ASSISTANT:
        return Constants.ROLE_MODEL
    return Constants.ROLE_USER


def _value_or(body: dict[str, Any], key: str, default: Any) -> Any:
    value = body.get(key)
    return default if value is None else value


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, (list, tuple)) else [value]


def _sampling_params(body: dict[str, Any]) -> dict[str, Any]:
    params: dict[str, Any] = {
        "temperature": _value_or(body, "temperature", Constants.DEFAULT_TEMPERATURE),
        "maxTokens": _value_or(body, "max_tokens", Constants.DEFAULT_MAX_TOKENS),
        "topP": _value_or(body, "top_p", Constants.DEFAULT_TOP_P),
        "stream": bool(body.get("stream") or False),
    }
    stop = body.get("stop")
    if stop:
        params["stopSequences"] = _as_list(stop)
    return params


def convert_chat_completions(
    body: dict[str, Any], *, model_prefix: str, default_model: str
) -> dict[str, Any]:
    messages = body.get("messages")
    if not isinstance(messages, list):
        raise InvalidRequestError("'messages' must be an array of message objects")

    grok_messages = []
    for message in messages:
        if not isinstance(message, dict):
            raise InvalidRequestError("Each message must be an object")
        grok_messages.append(
            {
                "role": map_role(message.get("role")),
                "content": message.get("content") or "",
            }
        )

    return {
        "model": map_model(body.get("model"), model_prefix=model_prefix, default_model=default_model),
        "messages": grok_messages,
        **_sampling_params(body),
    }


def convert_completions(
    body: dict[str, Any], *, model_prefix: str, default_model: str
) -> dict[str, Any]:
    return {
        "model": map_model(body.get("model"), model_prefix=model_prefix, default_model=default_model),
        "prompt": body.get("prompt"),
        **_sampling_params(body),
    }


def convert_embeddings(
    body: dict[str, Any], *, model_prefix: str, default_model: str
) -> dict[str, Any]:
    return {
        "model": map_model(body.get("model"), model_prefix=model_prefix, default_model=default_model),
        "input": _as_list(body.get("input")),
    }


_CONVERTERS = {
    Route.CHAT_COMPLETIONS: convert_chat_completions,
    Route.COMPLETIONS: convert_completions,
    Route.EMBEDDINGS: convert_embeddings,
}


def convert_openai_to_grok(
    route: Route,
    body: dict[str, Any],
    *,
    model_prefix: str = "grok-",
    default_model: str = "grok-1",
) -> dict[str, Any]:
    """Map an inbound body for ``route`` into the upstream request body.

    Raises:
        UnsupportedRouteError: ``route`` has no upstream counterpart.
        InvalidRequestError: The body cannot be mapped.
    """
    converter = _CONVERTERS.get(route)
    if converter is None:
        raise UnsupportedRouteError(f"Unsupported endpoint: {route.value}")

    grok_request = converter(body, model_prefix=model_prefix, default_model=default_model)
    if grok_request["model"] != body.get("model"):
        logger.debug("Model %r mapped to %r", body.get("model"), grok_request["model"])
    return grok_request
