"""In-process registry of decoded asset bytes.

Handles play the role of object URLs: opaque strings that resolve to
bytes while the registering process is alive and until released.
"""

from __future__ import annotations

import threading
import uuid
from typing import Iterable

from core.constants import ASSET_HANDLE_PREFIX
from core.errors import AssetNotFoundError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class AssetRegistry:
    """Thread-safe mapping of asset handles to image bytes."""

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def register(self, content: bytes) -> str:
        """Store bytes and return a new handle for them."""
        handle = f"{ASSET_HANDLE_PREFIX}{uuid.uuid4()}"
        with self._lock:
            self._blobs[handle] = content
        return handle

    def resolve(self, handle: str) -> bytes:
        """Return the bytes behind a handle.

        Raises:
            AssetNotFoundError: If the handle was never registered here
                or has been released.
        """
        with self._lock:
            content = self._blobs.get(handle)
        if content is None:
            raise AssetNotFoundError(
                f"Asset handle {handle} is not live in this process. "
                "Ingest the export file again to recreate its images."
            )
        return content

    def is_live(self, handle: str) -> bool:
        with self._lock:
            return handle in self._blobs

    def release(self, handles: Iterable[str]) -> int:
        """Release handles, ignoring unknown ones.

        Returns:
            Number of handles actually released.
        """
        released = 0
        with self._lock:
            for handle in handles:
                if self._blobs.pop(handle, None) is not None:
                    released += 1
        if released:
            _LOGGER.debug("asset_handles_released", count=released)
        return released

    def __len__(self) -> int:
        with self._lock:
            return len(self._blobs)
