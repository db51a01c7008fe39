"""Best-effort session cache for the last ingested profile.

This module mirrors session state into a key/value store and restores it.
Storage failures are logged and reported, never raised to callers.
"""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar

from core.constants import (
    CACHE_ASSETS_KEY,
    CACHE_DOCUMENT_KEY,
    CACHE_FILE_DATE_KEY,
    STORAGE_PROBE_KEY,
)
from core.errors import CacheIOError
from core.logging_config import get_logger
from core.telemetry import ErrorReporter, LoggingErrorReporter, report_exception
from core.types import CachedSession, SessionState
from ingest.identity_index import build_identity_index
from store.session_payload import dump_assets, dump_document, load_assets, load_document
from store.session_store import SessionStore

_LOGGER = get_logger(__name__)
_T = TypeVar("_T")
_CACHE_KEYS = (CACHE_FILE_DATE_KEY, CACHE_ASSETS_KEY, CACHE_DOCUMENT_KEY)


class SessionCache:
    """Namespaced save/load of session state over a ``SessionStore``.

    Any exception raised by the store is contained here, since stores are
    injected and may fail in ways this module cannot enumerate.
    """

    def __init__(
        self,
        store: SessionStore,
        prefix: str,
        reporter: ErrorReporter | None = None,
    ) -> None:
        """Create a cache bound to one store and key prefix.

        Args:
            store: Backing key/value store.
            prefix: Namespace prepended to every key.
            reporter: Error reporter for storage failures.
        """
        self._store = store
        self._prefix = prefix
        self._reporter = reporter or LoggingErrorReporter()

    def key(self, name: str) -> str:
        return f"{self._prefix}_{name}"

    def is_available(self) -> bool:
        """Probe the store with a write and remove of a throwaway key."""
        probe_key = self.key(STORAGE_PROBE_KEY)
        try:
            self._store.set_item(probe_key, probe_key)
            self._store.remove_item(probe_key)
        except Exception as error:  # noqa: BLE001
            _LOGGER.warning("session_storage_unavailable", error=str(error))
            return False
        return True

    def save(self, state: SessionState) -> None:
        """Write every session field, each independently of the others.

        A field that fails to write is removed so an older value never
        pairs with newer fields. A failed document write drops the whole
        snapshot, because the other fields are meaningless without it.
        The identity index is never stored; ``load`` re-derives it.
        """
        written = {
            CACHE_FILE_DATE_KEY: self._write(CACHE_FILE_DATE_KEY, lambda: state.file_date),
            CACHE_ASSETS_KEY: self._write(CACHE_ASSETS_KEY, lambda: dump_assets(state.assets)),
            CACHE_DOCUMENT_KEY: self._write(
                CACHE_DOCUMENT_KEY, lambda: dump_document(state.document)
            ),
        }
        if not written[CACHE_DOCUMENT_KEY]:
            self._remove_keys(_CACHE_KEYS)
            return
        self._remove_keys(name for name, ok in written.items() if not ok)

    def load(self) -> CachedSession:
        """Read cached fields; unreadable or invalid fields load as None."""
        file_date = self._read(CACHE_FILE_DATE_KEY, lambda text: text)
        assets = self._read(CACHE_ASSETS_KEY, load_assets)
        document = self._read(CACHE_DOCUMENT_KEY, load_document)
        identity_index = build_identity_index(document) if document is not None else None
        return CachedSession(
            document=document,
            assets=assets,
            file_date=file_date,
            identity_index=identity_index,
        )

    def clear(self) -> None:
        """Remove every cached field, resetting the store when keys cannot be removed."""
        if self._remove_keys(_CACHE_KEYS):
            return
        try:
            self._store.reset()
        except Exception as error:  # noqa: BLE001
            self._handle_failure("cache_reset_failed", self._prefix, error)
            return
        _LOGGER.info("session_storage_reset", prefix=self._prefix)

    def _remove_keys(self, names: Iterable[str]) -> bool:
        """Remove keys best-effort; return whether every removal succeeded."""
        removed_all = True
        for name in names:
            key = self.key(name)
            try:
                self._store.remove_item(key)
            except Exception as error:  # noqa: BLE001
                self._handle_failure("cache_remove_failed", key, error)
                removed_all = False
        return removed_all

    def _write(self, name: str, serialize: Callable[[], str]) -> bool:
        key = self.key(name)
        try:
            self._store.set_item(key, serialize())
        except Exception as error:  # noqa: BLE001
            self._handle_failure("cache_write_failed", key, error)
            return False
        return True

    def _read(self, name: str, deserialize: Callable[[str], _T]) -> _T | None:
        key = self.key(name)
        try:
            text = self._store.get_item(key)
            if text is None:
                return None
            return deserialize(text)
        except Exception as error:  # noqa: BLE001
            self._handle_failure("cache_read_failed", key, error)
            return None

    def _handle_failure(self, event: str, key: str, error: Exception) -> None:
        cache_error = (
            error
            if isinstance(error, CacheIOError)
            else CacheIOError(f"Session cache operation on {key} failed: {error}.")
        )
        if cache_error is not error:
            cache_error.__cause__ = error
        _LOGGER.error(event, key=key, error=str(error))
        report_exception(self._reporter, cache_error, key=key, operation=event)
