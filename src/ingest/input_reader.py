"""Local file reader for dropped export files.

This module turns a file system path into a ``RawInput`` with a media
type guessed from its name and its last-modified timestamp.
"""

from __future__ import annotations

import mimetypes
from datetime import datetime, timezone
from pathlib import Path

from core.constants import ARCHIVE_MEDIA_TYPE, DOCUMENT_MEDIA_TYPE
from core.errors import SourceUnreadableError
from core.types import RawInput

_MEDIA_TYPES_BY_SUFFIX = {
    ".zip": ARCHIVE_MEDIA_TYPE,
    ".json": DOCUMENT_MEDIA_TYPE,
}


def read_raw_input(source_path: Path) -> RawInput:
    """Load one local file as a dropped input.

    Args:
        source_path: Path to a ``.zip`` export or ``.json`` profile.

    Returns:
        Raw input carrying content, media type, and modification time.

    Raises:
        SourceUnreadableError: If the path is missing or unreadable.
    """
    if not source_path.is_file():
        raise SourceUnreadableError(
            f"Failed to read source at {source_path}: path is not a file. "
            "Provide the exported .zip or .json file."
        )
    try:
        content = source_path.read_bytes()
        modified_at = source_path.stat().st_mtime
    except OSError as error:
        raise SourceUnreadableError(
            f"Failed to read source at {source_path}: {error}."
        ) from error
    return RawInput(
        content=content,
        media_type=guess_media_type(source_path.name),
        name=source_path.name,
        last_modified=datetime.fromtimestamp(modified_at, tz=timezone.utc),
    )


def guess_media_type(file_name: str) -> str:
    """Return the declared media type for a file name.

    Unknown names map to ``application/octet-stream`` so the orchestrator
    rejects them as unsupported.
    """
    suffix = Path(file_name).suffix.lower()
    if suffix in _MEDIA_TYPES_BY_SUFFIX:
        return _MEDIA_TYPES_BY_SUFFIX[suffix]
    media_type, _ = mimetypes.guess_type(file_name)
    return media_type or "application/octet-stream"
