"""Unit tests for archive reader module."""

from __future__ import annotations

import pytest

from core.errors import CorruptArchiveError
from ingest.archive_reader import ArchiveReader, entry_extension
from tests.archive_fixtures import PNG_BYTES, build_zip, corrupt_entry


def test_entries_skip_directories() -> None:
    """Reader should only enumerate file entries."""
    content = build_zip({"photos/": b"", "photos/a.png": PNG_BYTES, "profile.json": "{}"})

    with ArchiveReader(content) as reader:
        names = [entry.name for entry in reader.entries()]

    assert names == ["photos/a.png", "profile.json"]


def test_entries_with_extensions_matches_case_insensitively() -> None:
    """Extension filtering should use the lowercase suffix."""
    content = build_zip({"A.PNG": PNG_BYTES, "b.txt": "x", "c.Json": "{}"})

    with ArchiveReader(content) as reader:
        names = [entry.name for entry in reader.entries_with_extensions(("png", "json"))]

    assert names == ["A.PNG", "c.Json"]


def test_entry_read_returns_content() -> None:
    """Entry content accessor should return the stored bytes."""
    content = build_zip({"a.png": PNG_BYTES})

    with ArchiveReader(content) as reader:
        entry = next(reader.entries())
        data = entry.read()

    assert data == PNG_BYTES


def test_reader_raises_for_non_archive_bytes() -> None:
    """Reader should reject bytes that are not a zip container."""
    with pytest.raises(CorruptArchiveError):
        ArchiveReader(b"definitely not a zip")


def test_entry_read_raises_for_damaged_entry() -> None:
    """Damaged compressed data should surface as a corrupt archive."""
    content = corrupt_entry(build_zip({"a.png": PNG_BYTES * 4}), "a.png")

    with ArchiveReader(content) as reader:
        entry = next(reader.entries())
        with pytest.raises(CorruptArchiveError):
            entry.read()


@pytest.mark.parametrize(
    ("entry_name", "expected"),
    [("a/b/photo.JPG", "jpg"), ("profile.json", "json"), ("json", ""), ("a.tar.gz", "gz")],
)
def test_entry_extension(entry_name: str, expected: str) -> None:
    """Extension helper should return the last suffix without the dot."""
    assert entry_extension(entry_name) == expected
