"""Core constants used across Couchscope modules.

This module centralizes media types, cache keys, and user messages.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".couchscope")
SESSIONS_DIR_NAME = "sessions"
DEFAULT_SESSION_ID = "default"
DEFAULT_STORAGE_PREFIX = "couchscope"
DEFAULT_ASSET_DECODE_WORKERS = 4
DEFAULT_LOG_LEVEL = "info"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")

ARCHIVE_MEDIA_TYPE = "application/zip"
DOCUMENT_MEDIA_TYPE = "application/json"
SUPPORTED_MEDIA_TYPES = (ARCHIVE_MEDIA_TYPE, DOCUMENT_MEDIA_TYPE)
DOCUMENT_EXTENSIONS = ("json",)
IMAGE_EXTENSIONS = ("jpg", "jpeg", "gif", "png")
DOCUMENT_TEXT_ENCODING = "utf-8-sig"

ASSET_HANDLE_PREFIX = "blob:couchscope/"

CACHE_FILE_DATE_KEY = "file_date"
CACHE_ASSETS_KEY = "profile_images"
CACHE_DOCUMENT_KEY = "profile"
STORAGE_PROBE_KEY = "__storage_test__"

HOST_VISITS_PATH = ("couch_visits", "host_couch_visits")
SURFER_VISITS_PATH = ("couch_visits", "surfer_couch_visits")
PERSON_KEYS = ("surfer", "host")

STATUS_IDLE = "idle"
STATUS_PROCESSING = "processing"
STATUS_READY = "ready"

EXAMPLE_FILE_NAMES = (
    'E.g. "couchsurfing-export-123456-202005200751.zip", '
    'or "123456-202005200751.json"'
)
NO_FILES_MESSAGE = "No files?"
MULTIPLE_FILES_MESSAGE = "Just one file please."
UNSUPPORTED_TYPE_MESSAGE = (
    f"Please drop either the zip file or json file.\n\n{EXAMPLE_FILE_NAMES}"
)
NO_DOCUMENT_MESSAGE = (
    "Please drop a zip file which contains the profile json file.\n\n"
    f"{EXAMPLE_FILE_NAMES}"
)
MALFORMED_DOCUMENT_MESSAGE = (
    "File is little too funky for us to understand.\n\n"
    "Make sure you uploaded correct export file (it should be .json or .zip file)."
)
CORRUPT_ARCHIVE_MESSAGE = (
    "That zip file could not be opened.\n\n"
    "Download the export again and drop the untouched zip file."
)
SOURCE_UNREADABLE_MESSAGE = (
    "That file could not be opened.\n\n"
    "Check the path and make sure the export file still exists."
)
ASSET_DECODE_MESSAGE = (
    "Some images inside the zip file could not be read.\n\n"
    "Download the export again and drop the untouched zip file."
)
