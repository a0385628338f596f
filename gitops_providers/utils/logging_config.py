"""
Logging configuration using structlog for structured logging.

Log events go to stderr so that command output on stdout stays parseable.
JSON rendering is the default; ``json_output=False`` switches to the
human-readable console renderer for interactive use.
"""

import logging
import sys
from typing import Any

import structlog

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Configure structlog for the CLI.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render events as JSON lines instead of console text

    Raises:
        ValueError: If ``log_level`` is not a known level name
    """
    level_name = log_level.upper()
    if level_name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {log_level}. Expected one of {', '.join(LOG_LEVELS)}")

    renderer: Any = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level_name)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def bind_repository(url: str) -> None:
    """Attach the repository URL to every log event of the current command."""
    structlog.contextvars.bind_contextvars(repository=url)
