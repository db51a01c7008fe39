"""Public SDK surface for Couchscope.

This module provides a stable import path for embedding applications.
It re-exports the orchestrator, stores, and typed models.
"""

from __future__ import annotations

from core.config import CouchscopeConfig
from core.telemetry import ErrorReporter, LoggingErrorReporter
from core.types import Asset, Identity, IngestionOutcome, RawInput, SessionState
from ingest.identity_index import build_identity_index
from ingest.pipeline import IngestionOrchestrator, ingest_file
from store.asset_registry import AssetRegistry
from store.session_store import FileSessionStore, MemorySessionStore

__all__ = [
    "Asset",
    "AssetRegistry",
    "CouchscopeConfig",
    "ErrorReporter",
    "FileSessionStore",
    "Identity",
    "IngestionOrchestrator",
    "IngestionOutcome",
    "LoggingErrorReporter",
    "MemorySessionStore",
    "RawInput",
    "SessionState",
    "build_identity_index",
    "ingest_file",
]
