import sys
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request, Response

from grok_proxy import __version__
from grok_proxy.api.dispatcher import Dispatcher
from grok_proxy.api.endpoints import router as api_router
from grok_proxy.api.services.streaming import CORS_ORIGIN_HEADER, PREFLIGHT_HEADERS
from grok_proxy.core.config import ProxyConfig
from grok_proxy.core.grok_client import build_timeout
from grok_proxy.core.logging import configure_root_logging


def create_app(config: ProxyConfig | None = None) -> FastAPI:
    """Build the ASGI app around one shared dispatcher."""
    config = config or ProxyConfig.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with httpx.AsyncClient(timeout=build_timeout(config)) as http_client:
            app.state.dispatcher = Dispatcher(
                config, http_client, supports_streaming=config.streaming_enabled
            )
            yield
            app.state.dispatcher = None

    app = FastAPI(title="Grok Proxy", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.dispatcher = None

    @app.middleware("http")
    async def cors_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=PREFLIGHT_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_ORIGIN_HEADER)
        return response

    app.include_router(api_router)
    return app


app = create_app()


def main() -> None:
    if len(sys.argv) > 1 and sys.argv[1] == "--help":
        print(f"Grok Proxy v{__version__}")
        print("")
        print("Usage: python -m grok_proxy.main")
        print("       or: grokproxy start")
        print("")
        print("Optional environment variables:")
        print("  GROK_API_KEY - Fallback API key when requests carry none")
        print("  GROK_API_BASE - Upstream base URL (default: https://api.grok.ai)")
        print("  GROK_DEFAULT_MODEL - Substitute model id (default: grok-1)")
        print("  HOST - Server host (default: 0.0.0.0)")
        print("  PORT - Server port (default: 3000)")
        print("  LOG_LEVEL - Logging level (default: INFO)")
        print("  REQUEST_TIMEOUT - Request timeout in seconds (default: 90)")
        sys.exit(0)

    config = app.state.config
    configure_root_logging(config.log_level)

    print(f"🚀 Grok Proxy v{__version__}")
    print(f"   API Key : {config.api_key_hash}")
    print(f"   Base URL: {config.api_base}")
    print(f"   Server: {config.host}:{config.port}")
    print("")

    uvicorn.run(
        "grok_proxy.main:app",
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=config.log_level == "DEBUG",
        reload=False,
    )


if __name__ == "__main__":
    main()
