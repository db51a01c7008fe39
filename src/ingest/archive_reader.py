"""Zip archive reader for export files.

This module opens in-memory archive bytes and enumerates file entries
lazily, classifying them by lowercase extension.
"""

from __future__ import annotations

import io
import threading
import zipfile
import zlib
from pathlib import PurePosixPath
from types import TracebackType
from typing import Iterable, Iterator

from core.errors import CorruptArchiveError
from core.types import ArchiveEntry


class ArchiveReader:
    """Read-only view over zip archive bytes."""

    def __init__(self, content: bytes) -> None:
        """Open archive content.

        Args:
            content: Raw archive bytes.

        Raises:
            CorruptArchiveError: If content is not a valid zip container.
        """
        try:
            self._zip_file = zipfile.ZipFile(io.BytesIO(content))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError, EOFError) as error:
            raise CorruptArchiveError(
                f"Failed to open archive: {error}. "
                "Provide an unmodified zip export file."
            ) from error
        self._read_lock = threading.Lock()

    def __enter__(self) -> "ArchiveReader":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying zip handle."""
        self._zip_file.close()

    def entries(self) -> Iterator[ArchiveEntry]:
        """Yield file entries in archive order, skipping directories."""
        for info in self._zip_file.infolist():
            if info.is_dir():
                continue
            yield ArchiveEntry(
                name=info.filename,
                is_dir=False,
                _reader=lambda entry_name=info.filename: self._read_entry(entry_name),
            )

    def entries_with_extensions(self, extensions: Iterable[str]) -> Iterator[ArchiveEntry]:
        """Yield file entries whose lowercase extension is in ``extensions``.

        Args:
            extensions: Extensions without the leading dot.

        Returns:
            Lazy iterator of matching entries.
        """
        wanted = {extension.lower() for extension in extensions}
        return (entry for entry in self.entries() if entry_extension(entry.name) in wanted)

    def _read_entry(self, entry_name: str) -> bytes:
        """Read one entry, mapping container failures to ingest errors."""
        try:
            with self._read_lock:
                return self._zip_file.read(entry_name)
        except (
            zipfile.BadZipFile,
            zlib.error,
            NotImplementedError,
            RuntimeError,
            EOFError,
            OSError,
        ) as error:
            raise CorruptArchiveError(
                f"Failed to read archive entry {entry_name}: {error}."
            ) from error


def entry_extension(entry_name: str) -> str:
    """Return the lowercase extension of an entry name without the dot."""
    return PurePosixPath(entry_name).suffix.lower().lstrip(".")
