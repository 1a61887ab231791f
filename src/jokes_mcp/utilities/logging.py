"""Logging utilities for jokes-mcp."""

import logging
from typing import Literal


def get_logger(name: str) -> logging.Logger:
    """Get the logger called ``name``, usually the calling module's ``__name__``.

    Modules under jokes_mcp pass ``__name__``, which places their loggers under the
    ``jokes_mcp`` logger. Handlers are installed by ``configure_logging``.
    """
    return logging.getLogger(name)


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
) -> None:
    """Configure logging for the server.

    Args:
        level: the log level to use
    """
    handlers: list[logging.Handler] = []
    try:
        from rich.console import Console
        from rich.logging import RichHandler

        handlers.append(RichHandler(console=Console(stderr=True), rich_tracebacks=True))
    except ImportError:
        pass

    if not handlers:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=handlers,
    )
