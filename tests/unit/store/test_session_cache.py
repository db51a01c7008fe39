"""Unit tests for the session cache."""

from __future__ import annotations

import pytest

from core.errors import CacheIOError
from core.types import Asset, SessionState
from ingest.identity_index import build_identity_index
from store.session_cache import SessionCache
from store.session_store import FileSessionStore, MemorySessionStore
from tests.archive_fixtures import sample_profile


def _state() -> SessionState:
    document = sample_profile()
    return SessionState(
        document=document,
        assets=(Asset(handle="blob:couchscope/1", source_name="photos/a.png"),),
        file_date="2020-05-20T07:51:00+00:00",
        identity_index=build_identity_index(document),
    )


class _FailingReadStore(MemorySessionStore):
    def get_item(self, key: str) -> str | None:
        raise CacheIOError("storage disabled")


def test_save_then_load_roundtrips_state(reporter) -> None:
    """Saved document, assets, and file date load back unchanged."""
    cache = SessionCache(MemorySessionStore(), "couchscope", reporter)
    state = _state()
    cache.save(state)

    cached = cache.load()

    assert cached.document == state.document
    assert cached.file_date == state.file_date
    assert cached.assets == state.assets
    assert cached.to_state() == state
    assert reporter.captured == []


def test_keys_are_namespaced_by_prefix() -> None:
    """Every field is stored under the shared prefix."""
    store = MemorySessionStore()
    SessionCache(store, "ns", None).save(_state())

    assert store.get_item("ns_file_date") == "2020-05-20T07:51:00+00:00"
    assert store.get_item("ns_profile") is not None
    assert store.get_item("ns_profile_images") is not None


def test_identity_index_is_rederived_not_stored() -> None:
    """Loading re-derives the index from the cached document."""
    store = MemorySessionStore()
    cache = SessionCache(store, "couchscope", None)
    cache.save(_state())
    store.set_item("couchscope_profile", '{"couch_visits": {"host_couch_visits": []}}')

    cached = cache.load()

    assert cached.identity_index == {}


def test_load_after_storage_failure_returns_absent_fields(reporter) -> None:
    """Unreadable storage loads every field as absent without raising."""
    cache = SessionCache(_FailingReadStore(), "couchscope", reporter)

    cached = cache.load()

    assert (cached.document, cached.assets, cached.file_date, cached.identity_index) == (
        None,
        None,
        None,
        None,
    )
    assert cached.to_state() is None
    assert reporter.error_types == [CacheIOError, CacheIOError, CacheIOError]


def test_document_write_failure_drops_whole_snapshot(reporter) -> None:
    """A quota failure on the document leaves no half-written snapshot."""
    store = MemorySessionStore(quota_bytes=200)
    cache = SessionCache(store, "couchscope", reporter)

    cache.save(_state())

    assert store.get_item("couchscope_file_date") is None
    assert store.get_item("couchscope_profile_images") is None
    assert store.get_item("couchscope_profile") is None
    assert reporter.error_types == [CacheIOError]


@pytest.mark.parametrize(
    "assets_text",
    ["not json", '{"handle": "x"}', '[{"handle": 1, "source_name": "a.png"}]'],
)
def test_invalid_asset_metadata_loads_as_absent(assets_text: str, reporter) -> None:
    """Non-conforming asset metadata fails closed."""
    store = MemorySessionStore()
    cache = SessionCache(store, "couchscope", reporter)
    cache.save(_state())
    store.set_item("couchscope_profile_images", assets_text)

    cached = cache.load()

    assert cached.assets is None
    assert cached.document == sample_profile()


def test_is_available_detects_disabled_storage() -> None:
    """The availability probe fails for disabled storage."""
    assert SessionCache(MemorySessionStore(enabled=False), "x", None).is_available() is False
    assert SessionCache(MemorySessionStore(), "x", None).is_available() is True


class _LockedStore(MemorySessionStore):
    def set_item(self, key: str, value: str) -> None:
        raise RuntimeError("database is locked")


class _AssetsRejectingStore(MemorySessionStore):
    def set_item(self, key: str, value: str) -> None:
        if key.endswith("_profile_images") and value != "[]":
            raise CacheIOError("assets rejected")
        super().set_item(key, value)


def test_second_save_failure_does_not_mix_snapshots(reporter) -> None:
    """A failed document write never leaves the older document behind."""
    store = MemorySessionStore(quota_bytes=600)
    cache = SessionCache(store, "couchscope", reporter)
    cache.save(SessionState(document={"username": "first"}, file_date="2020-01-01"))

    cache.save(SessionState(document={"bio": "x" * 1000}, file_date="2024-01-01"))
    cached = cache.load()

    assert (cached.document, cached.file_date) == (None, None)


def test_failed_field_write_removes_stale_value(reporter) -> None:
    """An asset metadata failure removes the previous asset list."""
    store = _AssetsRejectingStore()
    cache = SessionCache(store, "couchscope", reporter)
    cache.save(SessionState(document={"username": "first"}))

    cache.save(_state())
    cached = cache.load()

    assert cached.assets is None
    assert cached.document == sample_profile()


def test_unexpected_store_errors_are_contained(reporter) -> None:
    """Store errors outside the cache taxonomy never reach the caller."""
    cache = SessionCache(_LockedStore(), "couchscope", reporter)

    cache.save(_state())

    assert reporter.error_types[0] is CacheIOError
    assert isinstance(reporter.captured[0][0].__cause__, RuntimeError)


def test_clear_resets_store_when_keys_cannot_be_removed(tmp_path, reporter) -> None:
    """Clearing a corrupted file store deletes the session file."""
    session_path = tmp_path / "session.json"
    session_path.write_text("{broken", encoding="utf-8")
    cache = SessionCache(FileSessionStore(session_path), "couchscope", reporter)

    cache.clear()

    assert session_path.exists() is False
