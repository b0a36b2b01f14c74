"""
Structured logging configuration.

All log output goes to stderr: stdout carries the CSV result.
"""

import logging
import sys
from typing import IO, Optional

import structlog


def setup_logging(level: str = "WARNING", stream: Optional[IO[str]] = None) -> None:
    """
    Configure structlog for the command-line tool.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Destination (default: sys.stderr at call time)
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def configure_default_logging() -> None:
    """
    Give library users a quiet default: WARNING and above, on stderr.

    Runs at package import. Does nothing if the application has already
    configured structlog; a later setup_logging() call replaces it.
    """
    if not structlog.is_configured():
        setup_logging("WARNING")
