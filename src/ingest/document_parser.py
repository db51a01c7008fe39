"""Profile document decoding and parsing."""

from __future__ import annotations

import json

from core.constants import DOCUMENT_TEXT_ENCODING
from core.errors import MalformedDocumentError
from core.types import Document


def decode_document_text(content: bytes) -> str:
    """Decode document bytes as UTF-8 text.

    Args:
        content: Raw document bytes, optionally with a byte order mark.

    Returns:
        Decoded text.

    Raises:
        MalformedDocumentError: If bytes are not valid UTF-8.
    """
    try:
        return content.decode(DOCUMENT_TEXT_ENCODING)
    except UnicodeDecodeError as error:
        raise MalformedDocumentError(
            f"Failed to decode profile document as UTF-8 at byte {error.start}. "
            "Provide the JSON file exactly as exported."
        ) from error


def parse_document(text: str) -> Document:
    """Parse document text into nested JSON data.

    Only syntax is checked here; shape tolerance belongs to consumers.

    Args:
        text: JSON document text.

    Returns:
        Parsed document tree.

    Raises:
        MalformedDocumentError: If text is not well-formed JSON.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as error:
        raise MalformedDocumentError(
            f"Failed to parse profile document at line {error.lineno} "
            f"column {error.colno}: {error.msg}. "
            "Provide the JSON file exactly as exported."
        ) from error
    except RecursionError as error:
        raise MalformedDocumentError(
            "Failed to parse profile document: nesting is too deep. "
            "Provide the JSON file exactly as exported."
        ) from error
