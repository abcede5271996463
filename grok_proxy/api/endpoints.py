"""FastAPI adapter: turns HTTP requests into dispatcher calls and results into responses."""

from __future__ import annotations

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse, StreamingResponse

from grok_proxy.api.dispatcher import Dispatcher
from grok_proxy.api.models import StreamingResult, UniformResult
from grok_proxy.api.services.error_handling import ErrorResponseBuilder

router = APIRouter()


def get_dispatcher(http_request: Request) -> Dispatcher:
    dispatcher = getattr(http_request.app.state, "dispatcher", None)
    if dispatcher is None:
        # Lifespan did not run (e.g. TestClient used without a context manager)
        dispatcher = Dispatcher(
            http_request.app.state.config,
            supports_streaming=http_request.app.state.config.streaming_enabled,
        )
        http_request.app.state.dispatcher = dispatcher
    return dispatcher


def _without_content_type(headers: dict[str, str]) -> dict[str, str]:
    return {k: v for k, v in headers.items() if k.lower() != "content-type"}


def to_response(result: UniformResult) -> Response:
    if isinstance(result, StreamingResult):
        return StreamingResponse(
            result.producer,
            status_code=result.status,
            media_type="text/event-stream",
            headers=_without_content_type(result.headers),
        )
    return JSONResponse(
        status_code=result.status,
        content=result.body,
        headers=_without_content_type(result.headers),
    )


@router.get("/health")
async def health_check(http_request: Request) -> JSONResponse:
    return JSONResponse(
        content={"status": "healthy", "upstream": http_request.app.state.config.api_base}
    )


@router.get("/favicon.ico")
async def favicon() -> Response:
    return Response(status_code=204)


@router.api_route("/v1/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def proxy(path: str, http_request: Request) -> Response:
    dispatcher = get_dispatcher(http_request)
    body = await http_request.body()
    result = await dispatcher.handle(
        http_request.method,
        http_request.url.path,
        http_request.headers,
        body or None,
    )
    return to_response(result)


@router.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def not_found(path: str) -> Response:
    return to_response(ErrorResponseBuilder.not_found())
