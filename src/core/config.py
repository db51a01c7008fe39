"""Runtime configuration model for Couchscope.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_ASSET_DECODE_WORKERS,
    DEFAULT_DATA_ROOT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_SESSION_ID,
    DEFAULT_STORAGE_PREFIX,
    SESSIONS_DIR_NAME,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import CouchscopeConfigError


@dataclass(frozen=True)
class CouchscopeConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for file-backed sessions.
        session_id: Name of the session whose cache is used.
        storage_prefix: Namespace prepended to every cache key.
        asset_decode_workers: Thread count for concurrent image decoding.
        log_level: Minimum structured log level.
    """

    data_root: Path
    session_id: str = DEFAULT_SESSION_ID
    storage_prefix: str = DEFAULT_STORAGE_PREFIX
    asset_decode_workers: int = DEFAULT_ASSET_DECODE_WORKERS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "CouchscopeConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            CouchscopeConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("COUCHSCOPE_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        session_id = _parse_session_id(os.getenv("COUCHSCOPE_SESSION_ID", DEFAULT_SESSION_ID))
        storage_prefix = os.getenv("COUCHSCOPE_STORAGE_PREFIX", DEFAULT_STORAGE_PREFIX)
        workers_value = os.getenv(
            "COUCHSCOPE_ASSET_WORKERS", str(DEFAULT_ASSET_DECODE_WORKERS)
        )
        log_level = _parse_log_level(os.getenv("COUCHSCOPE_LOG_LEVEL", DEFAULT_LOG_LEVEL))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            session_id=session_id,
            storage_prefix=storage_prefix,
            asset_decode_workers=_parse_asset_workers(workers_value),
            log_level=log_level,
        )

    @property
    def session_path(self) -> Path:
        """Return the JSON file backing the configured session."""
        return self.data_root / SESSIONS_DIR_NAME / f"{self.session_id}.json"


def _parse_asset_workers(raw_value: str) -> int:
    """Parse the asset worker count environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed positive worker count.

    Raises:
        CouchscopeConfigError: If value is not a positive integer.
    """
    try:
        workers = int(raw_value)
    except ValueError as error:
        raise CouchscopeConfigError(
            "Invalid COUCHSCOPE_ASSET_WORKERS value: "
            f"expected integer, got '{raw_value}'. "
            "Set COUCHSCOPE_ASSET_WORKERS to a positive number."
        ) from error
    if workers < 1:
        raise CouchscopeConfigError(
            f"Invalid COUCHSCOPE_ASSET_WORKERS value: {workers} is below 1. "
            "Set COUCHSCOPE_ASSET_WORKERS to a positive number."
        )
    return workers


def _parse_log_level(raw_value: str) -> str:
    """Normalize and validate the log level name."""
    level = raw_value.strip().lower()
    if level not in SUPPORTED_LOG_LEVELS:
        raise CouchscopeConfigError(
            f"Invalid COUCHSCOPE_LOG_LEVEL value '{raw_value}'. "
            f"Supported levels: {', '.join(SUPPORTED_LOG_LEVELS)}."
        )
    return level


def _parse_session_id(raw_value: str) -> str:
    """Validate that the session id is usable as a file name."""
    session_id = raw_value.strip()
    if not session_id or "/" in session_id or "\\" in session_id or session_id.startswith("."):
        raise CouchscopeConfigError(
            f"Invalid COUCHSCOPE_SESSION_ID value '{raw_value}'. "
            "Use a plain name without path separators."
        )
    return session_id
