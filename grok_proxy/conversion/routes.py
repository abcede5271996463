"""Route detection for inbound OpenAI-shaped paths."""

from __future__ import annotations

from enum import Enum

from grok_proxy.core.constants import Constants


class Route(str, Enum):
    CHAT_COMPLETIONS = "chat_completions"
    COMPLETIONS = "completions"
    EMBEDDINGS = "embeddings"
    MODELS = "models"
    UNSUPPORTED = "unsupported"


# Substring match, first hit wins: "/chat/completions" contains "/completions"
# so it has to be tested first.
_ROUTE_MATCHERS: tuple[tuple[str, Route], ...] = (
    (Constants.PATH_CHAT_COMPLETIONS, Route.CHAT_COMPLETIONS),
    (Constants.PATH_COMPLETIONS, Route.COMPLETIONS),
    (Constants.PATH_EMBEDDINGS, Route.EMBEDDINGS),
    (Constants.PATH_MODELS, Route.MODELS),
)

_UPSTREAM_PATHS: dict[Route, str] = {
    Route.CHAT_COMPLETIONS: "/v1/chat/completions",
    Route.COMPLETIONS: "/v1/completions",
    Route.EMBEDDINGS: "/v1/embeddings",
}


def route_from_path(path: str) -> Route:
    for fragment, route in _ROUTE_MATCHERS:
        if fragment in path:
            return route
    return Route.UNSUPPORTED


def upstream_path(route: Route) -> str | None:
    """Upstream path for a forwarded route, None for routes never sent upstream."""
    return _UPSTREAM_PATHS.get(route)
