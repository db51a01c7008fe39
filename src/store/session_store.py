"""Key/value stores backing the session cache.

Two implementations share one small interface: an in-memory store that
lives as long as the process, and a JSON file store scoped to a named
session under the data root.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Protocol

from core.errors import CacheIOError


class SessionStore(Protocol):
    """String key/value storage used by the session cache."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value or None when absent."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""

    def reset(self) -> None:
        """Discard every stored key, even when the contents are unreadable."""


class MemorySessionStore:
    """Process-lifetime store with an optional size quota."""

    def __init__(self, quota_bytes: int | None = None, enabled: bool = True) -> None:
        """Create an empty store.

        Args:
            quota_bytes: Optional cap on the summed UTF-8 size of all values.
            enabled: When False every operation fails like disabled storage.
        """
        self._items: dict[str, str] = {}
        self._quota_bytes = quota_bytes
        self._enabled = enabled

    def get_item(self, key: str) -> str | None:
        self._ensure_enabled()
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._ensure_enabled()
        if self._quota_bytes is not None:
            used_bytes = sum(
                len(item.encode("utf-8"))
                for item_key, item in self._items.items()
                if item_key != key
            )
            if used_bytes + len(value.encode("utf-8")) > self._quota_bytes:
                raise CacheIOError(
                    f"Session storage quota of {self._quota_bytes} bytes exceeded "
                    f"while writing {key}."
                )
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._ensure_enabled()
        self._items.pop(key, None)

    def reset(self) -> None:
        self._ensure_enabled()
        self._items.clear()

    def _ensure_enabled(self) -> None:
        if not self._enabled:
            raise CacheIOError("Session storage is disabled.")


class FileSessionStore:
    """JSON file store holding all keys of one session."""

    def __init__(self, session_path: Path) -> None:
        self._session_path = session_path

    @property
    def path(self) -> Path:
        return self._session_path

    def get_item(self, key: str) -> str | None:
        value = self._read_items().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        items = self._read_items()
        items[key] = value
        self._write_items(items)

    def remove_item(self, key: str) -> None:
        items = self._read_items()
        if key not in items:
            return
        del items[key]
        if items:
            self._write_items(items)
        else:
            self.reset()

    def reset(self) -> None:
        """Delete the session file without parsing it."""
        try:
            self._session_path.unlink(missing_ok=True)
        except OSError as error:
            raise CacheIOError(
                f"Failed to delete session file {self._session_path}: {error}."
            ) from error

    def _read_items(self) -> dict[str, object]:
        """Read the session file, treating a missing file as empty."""
        if not self._session_path.exists():
            return {}
        try:
            payload = json.loads(self._session_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as error:
            raise CacheIOError(
                f"Failed to parse session file {self._session_path}: {error.msg}. "
                "Run the clear command to reset the session."
            ) from error
        except OSError as error:
            raise CacheIOError(
                f"Failed to read session file {self._session_path}: {error}."
            ) from error
        if not isinstance(payload, dict):
            raise CacheIOError(
                f"Invalid session file {self._session_path}: expected a JSON object."
            )
        return payload

    def _write_items(self, items: dict[str, object]) -> None:
        """Replace the session file atomically."""
        temp_path = self._session_path.with_suffix(".tmp")
        try:
            self._session_path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(items, sort_keys=True) + "\n", encoding="utf-8")
            os.replace(temp_path, self._session_path)
        except OSError as error:
            raise CacheIOError(
                f"Failed to write session file {self._session_path}: {error}."
            ) from error
