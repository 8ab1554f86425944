"""Public SDK surface for ODK transfer.

This module provides a stable import path for transfer users.
It exposes the client and re-exports the typed option and report models.
"""

from __future__ import annotations

import threading
from pathlib import Path

from core.config import TransferConfig
from core.logging_config import TransferLogger, get_logger
from core.transfer_plan import TransferPlan, load_transfer_plan
from core.types import (
    Bundle,
    DiscoveryResult,
    MediaFile,
    RootReport,
    TransferOptions,
    TransferReport,
)
from transfer.pipeline import discover_root, run_transfer

__all__ = [
    "Bundle",
    "DiscoveryResult",
    "MediaFile",
    "RootReport",
    "TransferClient",
    "TransferConfig",
    "TransferOptions",
    "TransferPlan",
    "TransferReport",
    "load_transfer_plan",
]


class TransferClient:
    """Primary SDK entry point for discovery and transfer runs."""

    def __init__(
        self,
        config: TransferConfig | None = None,
        logger: TransferLogger | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration, read from env by default.
            logger: Optional logger shared by every run of this client.
        """
        self._config = config or TransferConfig.from_env()
        self._logger = logger

    @property
    def config(self) -> TransferConfig:
        """Return the runtime configuration."""
        return self._config

    def default_options(self) -> TransferOptions:
        """Build options from the configured roots and destination."""
        return TransferOptions(roots=self._config.roots, destination=self._config.destination)

    def run(
        self,
        options: TransferOptions | None = None,
        cancel_event: threading.Event | None = None,
    ) -> TransferReport:
        """Transfer forms and media from roots into the destination.

        Args:
            options: Run options; configured defaults when omitted.
            cancel_event: Optional event that stops the run early.

        Returns:
            Run report with per-root counts and failures.
        """
        return run_transfer(
            options or self.default_options(),
            self._config,
            logger=self._logger,
            cancel_event=cancel_event,
        )

    def discover(self, root: Path) -> DiscoveryResult:
        """List forms and media under one root without writing anything."""
        logger = self._logger or get_logger("odk_transfer", self._config.log_level)
        return discover_root(Path(root).expanduser().resolve(), logger, self._config.max_workers)
