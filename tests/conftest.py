"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src and project root to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    for import_root in (project_root / "src", project_root):
        if str(import_root) not in sys.path:
            sys.path.insert(0, str(import_root))


@pytest.fixture
def config(tmp_path: Path):
    """Config rooted in a temporary directory with a small worker pool."""
    from core.config import CouchscopeConfig

    return CouchscopeConfig(data_root=tmp_path, asset_decode_workers=2)


@pytest.fixture
def reporter():
    """Error reporter that records captured exceptions."""
    from tests.archive_fixtures import RecordingReporter

    return RecordingReporter()
