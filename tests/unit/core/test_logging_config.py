"""Unit tests for structured logging setup."""

from __future__ import annotations

import json

from core.logging_config import configure_logging, get_logger


def test_get_logger_emits_json_events_on_stderr(capsys) -> None:
    """Module loggers should render JSON events to stderr."""
    configure_logging("info")
    logger = get_logger("couchscope.test")

    logger.info("ingest_completed", asset_count=2)
    line = capsys.readouterr().err.strip().splitlines()[-1]

    assert json.loads(line)["event"] == "ingest_completed"


def test_configured_level_filters_debug_events(capsys) -> None:
    """Debug events are dropped at the info level."""
    configure_logging("info")

    get_logger("couchscope.test").debug("asset_handles_released", count=1)

    assert capsys.readouterr().err == ""
