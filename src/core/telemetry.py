"""Error telemetry reporting.

Reporters receive exception details from parsing and caching code.
Reporting is fire-and-forget: a failing reporter never breaks ingestion.
"""

from __future__ import annotations

from typing import Protocol

from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class ErrorReporter(Protocol):
    """Capability that forwards exceptions to an external collector."""

    def capture_exception(self, error: BaseException, **context: object) -> None:
        """Record one exception with optional context fields."""


class LoggingErrorReporter:
    """Default reporter that writes captured exceptions to the log."""

    def capture_exception(self, error: BaseException, **context: object) -> None:
        _LOGGER.error(
            "exception_captured",
            error_type=type(error).__name__,
            error=str(error),
            **context,
        )


def report_exception(
    reporter: ErrorReporter,
    error: BaseException,
    **context: object,
) -> None:
    """Send an exception to the reporter without letting it fail the caller.

    Args:
        reporter: Target reporter.
        error: Exception to report.
        **context: Extra fields describing where the failure happened.
    """
    try:
        reporter.capture_exception(error, **context)
    except Exception as reporter_error:  # noqa: BLE001
        _LOGGER.warning(
            "error_reporter_failed",
            reporter=type(reporter).__name__,
            error=str(reporter_error),
            reported_error=type(error).__name__,
        )
