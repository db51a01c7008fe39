"""Couchscope exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Ingest errors carry the message shown to the person who dropped the file.
"""

from __future__ import annotations

from core.constants import (
    ASSET_DECODE_MESSAGE,
    CORRUPT_ARCHIVE_MESSAGE,
    MALFORMED_DOCUMENT_MESSAGE,
    MULTIPLE_FILES_MESSAGE,
    NO_DOCUMENT_MESSAGE,
    NO_FILES_MESSAGE,
    SOURCE_UNREADABLE_MESSAGE,
    UNSUPPORTED_TYPE_MESSAGE,
)


class CouchscopeError(Exception):
    """Base exception for all Couchscope failures."""


class CouchscopeConfigError(CouchscopeError):
    """Raised for invalid runtime configuration."""


class CouchscopeIngestError(CouchscopeError):
    """Raised when an export file cannot be ingested."""

    user_message = MALFORMED_DOCUMENT_MESSAGE


class SourceUnreadableError(CouchscopeIngestError):
    """Raised when a local export file is missing or cannot be read."""

    user_message = SOURCE_UNREADABLE_MESSAGE


class InputCountError(CouchscopeIngestError):
    """Raised when a drop does not contain exactly one file."""

    user_message = MULTIPLE_FILES_MESSAGE


class NoFilesError(InputCountError):
    """Raised when a drop contains no files."""

    user_message = NO_FILES_MESSAGE


class MultipleFilesError(InputCountError):
    """Raised when a drop contains more than one file."""

    user_message = MULTIPLE_FILES_MESSAGE


class UnsupportedTypeError(CouchscopeIngestError):
    """Raised for media types other than zip archives and JSON documents."""

    user_message = UNSUPPORTED_TYPE_MESSAGE


class CorruptArchiveError(CouchscopeIngestError):
    """Raised when archive bytes are not a readable zip container."""

    user_message = CORRUPT_ARCHIVE_MESSAGE


class NoDocumentFoundError(CouchscopeIngestError):
    """Raised when an archive holds no profile JSON entry."""

    user_message = NO_DOCUMENT_MESSAGE


class MalformedDocumentError(CouchscopeIngestError):
    """Raised when profile text is not well-formed JSON."""

    user_message = MALFORMED_DOCUMENT_MESSAGE


class AssetDecodeError(CouchscopeIngestError):
    """Raised when any image entry of an archive fails to decode."""

    user_message = ASSET_DECODE_MESSAGE

    def __init__(self, message: str, source_name: str) -> None:
        super().__init__(message)
        self.source_name = source_name


class CouchscopeStoreError(CouchscopeError):
    """Raised for session storage and asset registry failures."""


class CacheIOError(CouchscopeStoreError):
    """Raised when the session store rejects a read or write."""


class AssetNotFoundError(CouchscopeStoreError):
    """Raised when an asset handle is unknown or already released."""
