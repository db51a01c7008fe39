"""Ingestion orchestration for dropped export files.

This module drives archive reading, payload extraction, parsing, and
identity indexing, then commits the result into session state and cache.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

from core.config import CouchscopeConfig
from core.constants import (
    STATUS_IDLE,
    STATUS_PROCESSING,
    STATUS_READY,
    SUPPORTED_MEDIA_TYPES,
)
from core.errors import (
    AssetDecodeError,
    CorruptArchiveError,
    CouchscopeIngestError,
    MalformedDocumentError,
    MultipleFilesError,
    NoDocumentFoundError,
    NoFilesError,
    UnsupportedTypeError,
)
from core.logging_config import get_logger
from core.telemetry import ErrorReporter, LoggingErrorReporter, report_exception
from core.types import Asset, Document, IngestionOutcome, RawInput, SessionState
from ingest.archive_reader import ArchiveReader
from ingest.document_parser import decode_document_text, parse_document
from ingest.identity_index import build_identity_index
from ingest.input_reader import read_raw_input
from ingest.payload_extractor import extract_assets, extract_document_text
from store.asset_registry import AssetRegistry
from store.session_cache import SessionCache
from store.session_store import MemorySessionStore, SessionStore

_LOGGER = get_logger(__name__)
_REPORTED_ERRORS = (CorruptArchiveError, MalformedDocumentError, AssetDecodeError)


class IngestionOrchestrator:
    """Stateful runner turning one dropped file into session state.

    Status moves ``idle -> processing -> ready``. A failed drop returns to
    ``ready`` when an earlier session exists and to ``idle`` otherwise;
    the earlier session is never modified by a failure.
    """

    def __init__(
        self,
        config: CouchscopeConfig,
        store: SessionStore | None = None,
        registry: AssetRegistry | None = None,
        reporter: ErrorReporter | None = None,
        notify: Callable[[str], None] | None = None,
        scroll_to_top: Callable[[], None] | None = None,
    ) -> None:
        """Create the orchestrator and restore any cached session.

        Args:
            config: Runtime configuration.
            store: Session key/value store; in-memory when omitted.
            registry: Asset registry; a private one when omitted.
            reporter: Error reporter for parse and cache failures.
            notify: Receives the user message of a failed drop.
            scroll_to_top: Invoked after each successful commit.
        """
        self._config = config
        self._registry = registry or AssetRegistry()
        self._reporter = reporter or LoggingErrorReporter()
        self._notify = notify
        self._scroll_to_top = scroll_to_top
        self._cache = SessionCache(
            store if store is not None else MemorySessionStore(),
            config.storage_prefix,
            self._reporter,
        )
        self._cache_enabled = self._cache.is_available()
        self._is_processing = False
        self._last_error: CouchscopeIngestError | None = None
        self._state = self._restore_cached_state()

    @property
    def state(self) -> SessionState | None:
        return self._state

    @property
    def is_processing(self) -> bool:
        return self._is_processing

    @property
    def last_error(self) -> CouchscopeIngestError | None:
        return self._last_error

    @property
    def status(self) -> str:
        if self._is_processing:
            return STATUS_PROCESSING
        return STATUS_READY if self._state is not None else STATUS_IDLE

    @property
    def registry(self) -> AssetRegistry:
        return self._registry

    @property
    def cache(self) -> SessionCache:
        return self._cache

    @property
    def cache_enabled(self) -> bool:
        return self._cache_enabled

    def handle_drop(self, files: Sequence[RawInput]) -> IngestionOutcome:
        """Ingest a drop and convert failures into a user-facing outcome.

        Args:
            files: Dropped files; exactly one is accepted.

        Returns:
            Outcome with the current state and, on failure, the error and
            its user message.
        """
        try:
            state = self._run(lambda: _single_input(files))
        except CouchscopeIngestError as error:
            message = error.user_message
            if self._notify is not None:
                self._notify(message)
            return IngestionOutcome(
                status=self.status, state=self._state, error=error, message=message
            )
        return IngestionOutcome(status=self.status, state=state)

    def ingest(self, raw_input: RawInput) -> SessionState:
        """Ingest one input and commit it.

        Raises:
            CouchscopeIngestError: If the input cannot be ingested; the
                previous session state is kept.
        """
        return self._run(lambda: raw_input)

    def ingest_path(self, source_path: Path) -> SessionState:
        """Read a local export file and ingest it."""
        return self._run(lambda: read_raw_input(source_path))

    def clear(self) -> None:
        """Drop the current session, its asset handles, and its cache."""
        if self._state is not None:
            self._registry.release(asset.handle for asset in self._state.assets)
        self._state = None
        self._last_error = None
        self._cache.clear()
        self._cache_enabled = self._cache.is_available()

    def _run(self, load_input: Callable[[], RawInput]) -> SessionState:
        """Run one ingestion with the processing flag held throughout."""
        self._is_processing = True
        try:
            raw_input = load_input()
            state = self._build_state(raw_input)
            self._commit(state)
        except CouchscopeIngestError as error:
            self._last_error = error
            _log_ingest_failure(error)
            if isinstance(error, _REPORTED_ERRORS):
                report_exception(self._reporter, error, operation="ingest")
            raise
        finally:
            self._is_processing = False
        self._last_error = None
        _log_ingest_completion(raw_input, state)
        return state

    def _build_state(self, raw_input: RawInput) -> SessionState:
        if raw_input.media_type not in SUPPORTED_MEDIA_TYPES:
            raise UnsupportedTypeError(
                f"Unsupported media type '{raw_input.media_type}' for "
                f"{raw_input.name or 'dropped file'}. "
                f"Supported types: {', '.join(SUPPORTED_MEDIA_TYPES)}."
            )
        file_date = raw_input.last_modified.isoformat() if raw_input.last_modified else ""
        if raw_input.is_archive:
            document, assets = self._extract_archive(raw_input)
        else:
            document = _require_document(
                parse_document(decode_document_text(raw_input.content)), raw_input
            )
            assets = []
        return SessionState(
            document=document,
            assets=tuple(assets),
            file_date=file_date,
            identity_index=build_identity_index(document),
        )

    def _extract_archive(self, raw_input: RawInput) -> tuple[Document, list[Asset]]:
        with ArchiveReader(raw_input.content) as reader:
            text = extract_document_text(reader)
            if text is None:
                raise NoDocumentFoundError(
                    f"No profile JSON entry found in {raw_input.name or 'archive'}. "
                    "Drop the export zip that contains the profile JSON file."
                )
            document = _require_document(parse_document(text), raw_input)
            assets = extract_assets(reader, self._registry, self._config.asset_decode_workers)
        return document, assets

    def _commit(self, state: SessionState) -> None:
        """Replace the session wholesale and mirror it into the cache."""
        previous_state = self._state
        self._state = state
        if previous_state is not None:
            self._registry.release(asset.handle for asset in previous_state.assets)
        if self._cache_enabled:
            self._cache.save(state)
        if self._scroll_to_top is not None:
            self._scroll_to_top()

    def _restore_cached_state(self) -> SessionState | None:
        if not self._cache_enabled:
            return None
        state = self._cache.load().to_state()
        if state is not None:
            _LOGGER.info(
                "session_restored",
                asset_count=len(state.assets),
                identity_count=len(state.identity_index),
                file_date=state.file_date,
            )
        return state


def ingest_file(source_path: Path, config: CouchscopeConfig) -> SessionState:
    """Ingest one local export file with a fresh in-memory session.

    Args:
        source_path: Path to a ``.zip`` export or ``.json`` profile.
        config: Runtime configuration.

    Returns:
        Committed session state.

    Raises:
        CouchscopeIngestError: If the file cannot be ingested.
    """
    return IngestionOrchestrator(config).ingest_path(source_path)


def _require_document(document: Document, raw_input: RawInput) -> Document:
    """Reject a top-level JSON null, which carries no profile."""
    if document is None:
        raise MalformedDocumentError(
            f"Profile document in {raw_input.name or 'dropped file'} is null. "
            "Provide the JSON file exactly as exported."
        )
    return document


def _single_input(files: Sequence[RawInput]) -> RawInput:
    """Return the only dropped file or raise an input count error."""
    if not files:
        raise NoFilesError("No files were dropped. Drop one export file.")
    if len(files) != 1:
        raise MultipleFilesError(
            f"{len(files)} files were dropped. Drop exactly one export file."
        )
    return files[0]


def _log_ingest_failure(error: CouchscopeIngestError) -> None:
    _LOGGER.warning("ingest_failed", error_type=type(error).__name__, error=str(error))


def _log_ingest_completion(raw_input: RawInput, state: SessionState) -> None:
    """Log ingestion completion with contextual metadata."""
    _LOGGER.info(
        "ingest_completed",
        source_name=raw_input.name,
        media_type=raw_input.media_type,
        asset_count=len(state.assets),
        identity_count=len(state.identity_index),
        file_date=state.file_date,
    )
