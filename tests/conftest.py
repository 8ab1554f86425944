"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src and project directories to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    for import_root in (project_root / "src", project_root):
        if str(import_root) not in sys.path:
            sys.path.insert(0, str(import_root))


@pytest.fixture
def recording_logger():
    """Per-test logger fake capturing structured events."""
    from tests.fixture_builders import RecordingLogger

    return RecordingLogger()


@pytest.fixture(autouse=True)
def _isolated_transfer_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear transfer environment variables so tests start from defaults."""
    for name in (
        "ODK_TRANSFER_ROOTS",
        "ODK_TRANSFER_DESTINATION",
        "ODK_TRANSFER_MAX_WORKERS",
        "ODK_TRANSFER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
