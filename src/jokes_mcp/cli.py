"""Command line entry point."""

import click

from jokes_mcp.app import JokesMCP
from jokes_mcp.settings import Settings


@click.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to listen on (defaults to $PORT or 3001)")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Logging level",
)
def main(host: str | None, port: int | None, log_level: str | None) -> int:
    overrides: dict[str, object] = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if log_level is not None:
        overrides["log_level"] = log_level.upper()

    JokesMCP(Settings(**overrides)).run()
    return 0
