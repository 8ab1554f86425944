"""Unit tests for core config parsing."""

from __future__ import annotations

import os

import pytest

from core.config import TransferConfig
from core.errors import TransferConfigError


def test_from_env_reads_roots_in_declaration_order(
    monkeypatch: pytest.MonkeyPatch, tmp_path
) -> None:
    """Config should split roots on the path separator and keep their order."""
    first = tmp_path / "b-root"
    second = tmp_path / "a-root"
    monkeypatch.setenv("ODK_TRANSFER_ROOTS", f"{first}{os.pathsep}{os.pathsep}{second}")

    config = TransferConfig.from_env()

    assert config.roots == (first.resolve(), second.resolve())


def test_from_env_uses_defaults() -> None:
    """Config should fall back to documented defaults."""
    config = TransferConfig.from_env()

    assert config.roots == ()
    assert config.destination.name == "destination"
    assert config.max_workers == 8
    assert config.log_level == "info"


def test_from_env_raises_for_invalid_max_workers(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for a non-numeric worker count."""
    monkeypatch.setenv("ODK_TRANSFER_MAX_WORKERS", "many")

    with pytest.raises(TransferConfigError):
        TransferConfig.from_env()


def test_from_env_raises_for_zero_max_workers(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject a worker pool with no workers."""
    monkeypatch.setenv("ODK_TRANSFER_MAX_WORKERS", "0")

    with pytest.raises(TransferConfigError):
        TransferConfig.from_env()


def test_from_env_normalizes_warn_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should accept ``WARN`` as the warning level."""
    monkeypatch.setenv("ODK_TRANSFER_LOG_LEVEL", "WARN")

    config = TransferConfig.from_env()

    assert config.log_level == "warning"


def test_from_env_raises_for_unknown_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject unsupported log levels."""
    monkeypatch.setenv("ODK_TRANSFER_LOG_LEVEL", "verbose")

    with pytest.raises(TransferConfigError):
        TransferConfig.from_env()
