"""Main CLI entry point for grok-proxy."""

import typer
from rich.console import Console

from grok_proxy.cli.commands import config, start

app = typer.Typer(
    name="grokproxy",
    help="Grok Proxy CLI - serve OpenAI-compatible endpoints backed by Grok",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(config.app, name="config", help="Configuration management")
app.command(name="start", help="Start the proxy server")(start.start)


@app.command()
def version() -> None:
    """Show version information."""
    from grok_proxy import __version__

    console = Console()
    console.print(f"[bold cyan]grokproxy[/bold cyan] version [green]{__version__}[/green]")


if __name__ == "__main__":
    app()
