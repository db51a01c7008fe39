"""Couchscope CLI entry points.
This module exposes commands to ingest an export file into a session
and to inspect the cached session. It maps argparse commands onto the SDK.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from core.config import CouchscopeConfig
from core.errors import CouchscopeIngestError
from core.logging_config import configure_logging
from core.types import SessionState
from ingest.pipeline import IngestionOrchestrator
from store.session_store import FileSessionStore


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="couchscope", description="Inspect Couchsurfing profile exports"
    )
    parser.add_argument("--data-root", help="Override COUCHSCOPE_DATA_ROOT for this command")
    parser.add_argument("--session", help="Override COUCHSCOPE_SESSION_ID for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    ingest_parser = subparsers.add_parser("ingest", help="Ingest one .zip or .json export")
    ingest_parser.add_argument("source", help="Path to the export file")
    subparsers.add_parser("show", help="Print the cached session summary")
    subparsers.add_parser("identities", help="List people referenced by couch visits")
    subparsers.add_parser("assets", help="List cached image assets")
    subparsers.add_parser("clear", help="Remove the cached session")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Couchscope CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config = _build_config(args.data_root, args.session)
    configure_logging(config.log_level)
    orchestrator = IngestionOrchestrator(config, store=FileSessionStore(config.session_path))
    if args.command == "ingest":
        return _run_ingest_command(orchestrator, args)
    if args.command == "show":
        return _run_show_command(orchestrator)
    if args.command == "identities":
        return _run_identities_command(orchestrator)
    if args.command == "assets":
        return _run_assets_command(orchestrator)
    if args.command == "clear":
        orchestrator.clear()
        return 0
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(data_root: str | None, session_id: str | None) -> CouchscopeConfig:
    """Build config with optional CLI overrides."""
    config = CouchscopeConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    if session_id:
        config = replace(config, session_id=session_id)
    return config


def _run_ingest_command(orchestrator: IngestionOrchestrator, args: argparse.Namespace) -> int:
    """Handle ingest command.

    Args:
        orchestrator: Session orchestrator.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    try:
        state = orchestrator.ingest_path(Path(args.source).expanduser())
    except CouchscopeIngestError as error:
        print(error.user_message, file=sys.stderr)
        return 1
    print(json.dumps(_summarize(state), sort_keys=True))
    return 0


def _run_show_command(orchestrator: IngestionOrchestrator) -> int:
    state = orchestrator.state
    if state is None:
        print("No cached session. Run ingest first.", file=sys.stderr)
        return 1
    print(json.dumps(_summarize(state), sort_keys=True))
    return 0


def _run_identities_command(orchestrator: IngestionOrchestrator) -> int:
    state = orchestrator.state
    if state is None:
        print("No cached session. Run ingest first.", file=sys.stderr)
        return 1
    for identity in state.identity_index.values():
        print(
            f"{_cell(identity.person_id)}\t"
            f"{_cell(identity.display_name)}\t"
            f"{_cell(identity.username)}"
        )
    return 0


def _run_assets_command(orchestrator: IngestionOrchestrator) -> int:
    """Handle assets command.

    Handles restored from a previous process are reported as stale.
    """
    state = orchestrator.state
    if state is None:
        print("No cached session. Run ingest first.", file=sys.stderr)
        return 1
    for asset in state.assets:
        liveness = "live" if orchestrator.registry.is_live(asset.handle) else "stale"
        print(f"{asset.handle}\t{asset.source_name}\t{liveness}")
    return 0


def _summarize(state: SessionState) -> dict[str, object]:
    return {
        "file_date": state.file_date,
        "asset_count": len(state.assets),
        "identity_count": len(state.identity_index),
    }


def _cell(value: object) -> str:
    return "-" if value is None else str(value)
