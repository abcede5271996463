"""Start command for the grokproxy CLI."""

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from grok_proxy.core.config import ProxyConfig
from grok_proxy.core.logging import configure_root_logging


def start(
    host: str = typer.Option(None, "--host", help="Override host"),
    port: int = typer.Option(None, "--port", help="Override port"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
) -> None:
    """Start the proxy server."""
    console = Console()
    config = ProxyConfig.from_env()

    # Override config if provided
    server_host = host or config.host
    server_port = port or config.port

    table = Table(title="Grok Proxy Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Server URL", f"http://{server_host}:{server_port}")
    table.add_row("Grok Base URL", config.api_base)
    table.add_row("Default Model", config.default_model)
    table.add_row("Fallback API Key", config.api_key_hash)
    table.add_row("Streaming", "enabled" if config.streaming_enabled else "disabled")

    console.print(table)

    configure_root_logging(config.log_level)
    uvicorn.run(
        "grok_proxy.main:app",
        host=server_host,
        port=server_port,
        reload=reload,
        log_level=config.log_level.lower(),
    )
