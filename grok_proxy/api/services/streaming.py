"""Response header contracts shared by the dispatcher and the HTTP adapter."""

CORS_ORIGIN_HEADER = {"Access-Control-Allow-Origin": "*"}

PREFLIGHT_HEADERS = {
    **CORS_ORIGIN_HEADER,
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-API-Key",
    "Access-Control-Max-Age": "86400",
}


def sse_headers() -> dict[str, str]:
    # Centralize the SSE header contract used throughout the proxy.
    return {
        "Content-Type": "text/event-stream",
        "Cache-Control": "no-cache",
        "Connection": "keep-alive",
        **CORS_ORIGIN_HEADER,
    }


def json_headers() -> dict[str, str]:
    return {"Content-Type": "application/json", **CORS_ORIGIN_HEADER}
