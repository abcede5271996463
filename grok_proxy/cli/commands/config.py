"""Configuration commands for the grokproxy CLI."""

import sys

import typer
from rich.console import Console
from rich.table import Table

from grok_proxy.core.config import ConfigError, ConfigSchema, ProxyConfig

app = typer.Typer(help="Configuration management")


@app.command()
def show() -> None:
    """Show the resolved configuration."""
    console = Console()
    try:
        config = ProxyConfig.from_env()
    except ConfigError as e:
        console.print(f"[red]❌ Invalid configuration: {e}[/red]")
        sys.exit(1)

    table = Table(title="Grok Proxy Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("GROK_API_BASE", config.api_base)
    table.add_row("GROK_API_KEY", config.api_key_hash)
    table.add_row("GROK_DEFAULT_MODEL", config.default_model)
    table.add_row("GROK_MODEL_PREFIX", config.model_prefix)
    table.add_row("HOST", config.host)
    table.add_row("PORT", str(config.port))
    table.add_row("LOG_LEVEL", config.log_level)
    table.add_row("REQUEST_TIMEOUT", f"{config.request_timeout}s")
    table.add_row(
        "STREAMING_READ_TIMEOUT_SECONDS",
        "unlimited" if config.streaming_read_timeout is None else f"{config.streaming_read_timeout}s",
    )
    table.add_row("STREAMING_ENABLED", str(config.streaming_enabled).lower())

    console.print(table)


@app.command()
def env() -> None:
    """List every supported environment variable."""
    console = Console()

    table = Table(title="Environment Variables")
    table.add_column("Variable", style="cyan")
    table.add_column("Default", style="yellow")
    table.add_column("Description")

    for spec in ConfigSchema.all_specs():
        table.add_row(spec.name, "" if spec.default is None else str(spec.default), spec.description)

    console.print(table)
