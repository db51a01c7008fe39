"""Shared JSON serialization for cached session fields.

This module centralizes the text encoding of documents and asset
metadata written to the session store.
"""

from __future__ import annotations

import json
from typing import Any

from core.types import Asset, Document


def asset_to_payload(asset: Asset) -> dict[str, str]:
    """Serialize asset metadata into a JSON-safe payload."""
    return {"handle": asset.handle, "source_name": asset.source_name}


def asset_from_payload(payload: Any) -> Asset:
    """Deserialize one asset metadata payload.

    Args:
        payload: Decoded JSON value.

    Returns:
        Parsed asset metadata.

    Raises:
        ValueError: If payload lacks string ``handle``/``source_name`` fields.
    """
    if not isinstance(payload, dict):
        raise ValueError("asset payload must be a JSON object")
    handle = payload.get("handle")
    source_name = payload.get("source_name")
    if not isinstance(handle, str) or not isinstance(source_name, str):
        raise ValueError("asset payload requires string handle and source_name")
    return Asset(handle=handle, source_name=source_name)


def dump_assets(assets: tuple[Asset, ...]) -> str:
    return json.dumps([asset_to_payload(asset) for asset in assets])


def load_assets(text: str) -> tuple[Asset, ...]:
    """Parse serialized asset metadata.

    Raises:
        ValueError: If text is not a JSON list of asset payloads.
    """
    payload = json.loads(text)
    if not isinstance(payload, list):
        raise ValueError("cached assets must be a JSON list")
    return tuple(asset_from_payload(item) for item in payload)


def dump_document(document: Document) -> str:
    return json.dumps(document, ensure_ascii=False)


def load_document(text: str) -> Document:
    return json.loads(text)
