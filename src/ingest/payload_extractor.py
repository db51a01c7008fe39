"""Profile payload and image extraction from export archives.

This module selects the profile JSON entry and decodes every image
entry concurrently, registering one handle per image.
"""

from __future__ import annotations

from concurrent import futures

from core.constants import DOCUMENT_EXTENSIONS, IMAGE_EXTENSIONS
from core.errors import AssetDecodeError
from core.logging_config import get_logger
from core.types import ArchiveEntry, Asset
from ingest.archive_reader import ArchiveReader
from ingest.document_parser import decode_document_text
from store.asset_registry import AssetRegistry

_LOGGER = get_logger(__name__)


def extract_document_text(reader: ArchiveReader) -> str | None:
    """Decode the first JSON entry of an archive.

    Further JSON entries are ignored.

    Args:
        reader: Opened archive.

    Returns:
        Document text, or None when the archive holds no JSON entry.

    Raises:
        CorruptArchiveError: If the entry cannot be read.
        MalformedDocumentError: If the entry is not UTF-8 text.
    """
    entry = next(reader.entries_with_extensions(DOCUMENT_EXTENSIONS), None)
    if entry is None:
        return None
    _LOGGER.debug("document_entry_selected", entry_name=entry.name)
    return decode_document_text(entry.read())


def extract_assets(
    reader: ArchiveReader,
    registry: AssetRegistry,
    max_workers: int,
) -> list[Asset]:
    """Decode all image entries concurrently into registered assets.

    Every decode task settles before this returns. When any task fails the
    whole batch fails: handles registered by its siblings are released.

    Args:
        reader: Opened archive.
        registry: Registry receiving decoded image bytes.
        max_workers: Thread pool size.

    Returns:
        Assets in archive enumeration order.

    Raises:
        AssetDecodeError: If any image entry fails to decode.
    """
    entries = list(reader.entries_with_extensions(IMAGE_EXTENSIONS))
    if not entries:
        return []
    with futures.ThreadPoolExecutor(
        max_workers=max_workers, thread_name_prefix="asset-decode"
    ) as executor:
        pending = [executor.submit(_decode_asset, entry, registry) for entry in entries]
        futures.wait(pending)
    assets: list[Asset] = []
    failures: list[tuple[ArchiveEntry, BaseException]] = []
    for entry, future in zip(entries, pending):
        error = future.exception()
        if error is None:
            assets.append(future.result())
        else:
            failures.append((entry, error))
    if failures:
        registry.release(asset.handle for asset in assets)
        failed_entry, first_error = failures[0]
        _LOGGER.error(
            "asset_batch_failed",
            failed_count=len(failures),
            entry_count=len(entries),
            entry_name=failed_entry.name,
        )
        raise AssetDecodeError(
            f"Failed to decode image {failed_entry.name}: {first_error}. "
            f"{len(failures)} of {len(entries)} images failed.",
            source_name=failed_entry.name,
        ) from first_error
    _LOGGER.info("assets_extracted", asset_count=len(assets))
    return assets


def _decode_asset(entry: ArchiveEntry, registry: AssetRegistry) -> Asset:
    """Read one image entry and register its bytes."""
    handle = registry.register(entry.read())
    return Asset(handle=handle, source_name=entry.name)
