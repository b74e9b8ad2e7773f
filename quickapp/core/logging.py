"""
Structured logging configuration for QuickApp.

Uses structlog for structured, context-rich logging that supports both human-readable
console output and JSON format for CI environments. Log output goes to stderr so
that passthrough output of external tools on stdout stays untouched.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from .config import Config


def _build_handler(log_level: str, interactive: bool) -> logging.Handler:
    if interactive:
        # structlog renders the timestamp and level; Rich highlights the line
        return RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_level=False,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=log_level == "DEBUG",
        )
    # One JSON document per line; no wrapping
    return logging.StreamHandler(sys.stderr)


def setup_logging(config: Config | None = None) -> None:
    """Configure structured logging for the application.

    structlog renders each event and hands the line to stdlib logging, whose
    root handler writes it to stderr: a Rich console on a terminal, plain
    JSON lines otherwise.

    Args:
        config: Optional configuration. If None, uses INFO level.
    """
    log_level = config.log_level if config else "INFO"
    level = getattr(logging, log_level, logging.INFO)
    interactive = sys.stderr.isatty()

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[_build_handler(log_level, interactive)],
        force=True,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if interactive:
        renderer: list[structlog.types.Processor] = [structlog.dev.ConsoleRenderer(colors=False)]
    else:
        renderer = [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured bound logger
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Bind context variables to all subsequent log entries in this context.

    Args:
        **kwargs: Context key-value pairs to bind
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
