"""Shared typed models.

This module defines immutable data models passed between the archive
reader, extractor, identity index, session cache, and orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable

from core.constants import ARCHIVE_MEDIA_TYPE, DOCUMENT_MEDIA_TYPE

if TYPE_CHECKING:
    from core.errors import CouchscopeIngestError

Document = Any
IdentityIndex = dict[Any, "Identity"]


@dataclass(frozen=True)
class RawInput:
    """One dropped file, alive only for a single ingestion attempt.

    Attributes:
        content: Raw file bytes.
        media_type: Declared media type of the file.
        name: File name used in logs and messages.
        last_modified: Optional last-modified timestamp.
    """

    content: bytes
    media_type: str
    name: str = ""
    last_modified: datetime | None = None

    @property
    def is_archive(self) -> bool:
        return self.media_type == ARCHIVE_MEDIA_TYPE

    @property
    def is_document(self) -> bool:
        return self.media_type == DOCUMENT_MEDIA_TYPE


@dataclass(frozen=True)
class ArchiveEntry:
    """One file entry of an opened archive.

    Attributes:
        name: Path of the entry inside the archive.
        is_dir: Whether the entry is a directory placeholder.
    """

    name: str
    is_dir: bool
    _reader: Callable[[], bytes] = field(repr=False, compare=False)

    def read(self) -> bytes:
        """Materialize the entry content."""
        return self._reader()


@dataclass(frozen=True)
class Asset:
    """Decoded image asset reachable through an opaque handle.

    Attributes:
        handle: Registry handle resolving to the image bytes.
        source_name: Archive entry name the asset was decoded from.
    """

    handle: str
    source_name: str


@dataclass(frozen=True)
class Identity:
    """Display identity of one person referenced by couch visits."""

    person_id: Any
    display_name: str | None
    username: str | None


@dataclass(frozen=True)
class SessionState:
    """Externally visible snapshot of the last successful ingestion.

    Attributes:
        document: Parsed export payload.
        assets: Images extracted alongside the payload.
        file_date: Last-modified timestamp of the source file, or empty.
        identity_index: Person identities derived from ``document``.
    """

    document: Document
    assets: tuple[Asset, ...] = ()
    file_date: str = ""
    identity_index: IdentityIndex = field(default_factory=dict)


@dataclass(frozen=True)
class CachedSession:
    """Fields restored from the session cache; each may be absent.

    Attributes:
        document: Cached document, or None.
        assets: Cached asset metadata, or None.
        file_date: Cached file date text, or None.
        identity_index: Index re-derived from ``document`` when present.
    """

    document: Document = None
    assets: tuple[Asset, ...] | None = None
    file_date: str | None = None
    identity_index: IdentityIndex | None = None

    def to_state(self) -> SessionState | None:
        """Build a session state when a document was restored."""
        if self.document is None:
            return None
        return SessionState(
            document=self.document,
            assets=self.assets or (),
            file_date=self.file_date or "",
            identity_index=dict(self.identity_index or {}),
        )


@dataclass(frozen=True)
class IngestionOutcome:
    """Terminal result of one drop, handed to the presentation layer.

    Attributes:
        status: Orchestrator status after the drop.
        state: Current session state, new on success or previous on failure.
        error: Ingest error when the drop failed.
        message: Human-readable failure message.
    """

    status: str
    state: SessionState | None
    error: CouchscopeIngestError | None = None
    message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
