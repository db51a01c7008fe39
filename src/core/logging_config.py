"""Structured logging configuration.

This module configures structlog with a stable JSON format on stderr.
Every module obtains its logger through ``get_logger``.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL

_CONFIGURED_LEVEL: str | None = None


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure structlog processors and the minimum level.

    Args:
        level: Lowercase level name such as ``info`` or ``debug``.
    """
    global _CONFIGURED_LEVEL
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
    _CONFIGURED_LEVEL = level


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    """Create a print logger on the current stderr stream."""
    return structlog.PrintLogger(file=sys.stderr)


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger for the module.
    """
    if _CONFIGURED_LEVEL is None:
        configure_logging()
    return structlog.get_logger(name)
