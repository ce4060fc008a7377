"""structlog setup shared by the CLI and library callers."""

import logging
import sys

import structlog


def configure_logging(level: int = logging.INFO, json_output: bool = False) -> None:
    """Configure structlog for console or JSON-lines output.

    Args:
        level: Minimum stdlib level number to emit.
        json_output: Render JSON lines instead of the colored console format.
    """
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
