"""Shared builders for export archives and profile documents in tests."""

from __future__ import annotations

import io
import json
import struct
import zipfile
from datetime import datetime, timezone

from core.constants import ARCHIVE_MEDIA_TYPE, DOCUMENT_MEDIA_TYPE
from core.types import RawInput

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
GIF_BYTES = b"GIF89a" + b"\x00" * 16
FILE_DATE = datetime(2020, 5, 20, 7, 51, tzinfo=timezone.utc)


def sample_profile() -> dict[str, object]:
    """Build a profile document with host and surfer visits."""
    return {
        "username": "me",
        "couch_visits": {
            "host_couch_visits": [
                {
                    "surfer": {
                        "username": "alice",
                        "profile": {"id": 1, "display_name": "Alice"},
                    }
                },
                {
                    "surfer": {
                        "username": "bob",
                        "profile": {"id": 2, "display_name": "Bob"},
                    }
                },
            ],
            "surfer_couch_visits": [
                {
                    "host": {
                        "username": "carol",
                        "profile": {"id": 3, "display_name": "Carol"},
                    }
                },
            ],
        },
    }


def build_zip(entries: dict[str, bytes | str]) -> bytes:
    """Build zip bytes from an ordered name to content mapping.

    Names ending in ``/`` become directory entries.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in entries.items():
            if name.endswith("/"):
                archive.writestr(zipfile.ZipInfo(name), b"")
            else:
                archive.writestr(name, content)
    return buffer.getvalue()


def corrupt_entry(archive_bytes: bytes, entry_name: str) -> bytes:
    """Flip bytes inside one entry's compressed data so reading it fails."""
    with zipfile.ZipFile(io.BytesIO(archive_bytes)) as archive:
        info = archive.getinfo(entry_name)
    name_length, extra_length = struct.unpack_from("<HH", archive_bytes, info.header_offset + 26)
    data_start = info.header_offset + 30 + name_length + extra_length
    corrupted = bytearray(archive_bytes)
    for offset in range(data_start, data_start + max(info.compress_size, 1)):
        corrupted[offset] ^= 0xFF
    return bytes(corrupted)


def archive_input(entries: dict[str, bytes | str], name: str = "export.zip") -> RawInput:
    return RawInput(
        content=build_zip(entries),
        media_type=ARCHIVE_MEDIA_TYPE,
        name=name,
        last_modified=FILE_DATE,
    )


def document_input(document: object | str, name: str = "profile.json") -> RawInput:
    text = document if isinstance(document, str) else json.dumps(document)
    return RawInput(
        content=text.encode("utf-8"),
        media_type=DOCUMENT_MEDIA_TYPE,
        name=name,
        last_modified=FILE_DATE,
    )


class RecordingReporter:
    """Error reporter collecting every captured exception."""

    def __init__(self) -> None:
        self.captured: list[tuple[BaseException, dict[str, object]]] = []

    def capture_exception(self, error: BaseException, **context: object) -> None:
        self.captured.append((error, context))

    @property
    def error_types(self) -> list[type]:
        return [type(error) for error, _ in self.captured]
