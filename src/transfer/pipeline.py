"""Transfer orchestration across configured roots.

This module sequences discovery, conversion, bundling, hashing, and
materialization for each root in declaration order. Every stage joins
all of its units before the next begins, and bundles are written one at
a time. No per-item failure aborts the run.
"""

from __future__ import annotations

import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from bundling.bundler import bundle_form
from bundling.media_hashing import hash_bundles
from bundling.xform_conversion import convert_forms, original_path
from core.config import TransferConfig
from core.logging_config import TransferLogger, get_logger
from core.types import DiscoveryResult, RootReport, TransferOptions, TransferReport
from discovery.form_discovery import discover_forms
from discovery.media_discovery import discover_media
from transfer.materializer import materialize_bundle


class TransferRunner:
    """Runner for one stateless transfer over a list of roots."""

    def __init__(
        self,
        options: TransferOptions,
        config: TransferConfig,
        logger: TransferLogger | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._options = options
        self._max_workers = options.max_workers or config.max_workers
        self._run_id = uuid.uuid4().hex[:12]
        self._logger = logger or _build_run_logger(config.log_level, self._run_id)
        self._cancel_event = cancel_event or threading.Event()

    def run(self) -> TransferReport:
        """Transfer every root and return the run report."""
        report = TransferReport(run_id=self._run_id, destination=self._options.destination)
        for root in self._options.roots:
            if self._cancelled(report):
                break
            report.roots.append(self._transfer_root(root, report))
        _log_transfer_completion(self._logger, report)
        return report

    def _transfer_root(self, root: Path, report: TransferReport) -> RootReport:
        self._logger.info("root_started", root=str(root))
        root_report = RootReport(root=root)
        discovery = discover_root(root, self._logger, self._max_workers)
        root_report.media_found = len(discovery.media)
        root_report.forms_found = len(discovery.forms)
        root_report.record_failures("parse", discovery.parse_failures)

        forms, conversion_failures = convert_forms(
            list(discovery.forms), self._logger, self._max_workers
        )
        root_report.forms_converted = len(forms)
        root_report.record_failures("conversion", conversion_failures)

        bundles = [bundle_form(form, discovery.media, self._logger) for form in forms]
        hashed_bundles, hash_failures = hash_bundles(bundles, self._logger, self._max_workers)
        root_report.media_resolved = sum(len(bundle.media) for bundle in hashed_bundles)
        root_report.record_failures("hash", hash_failures)

        for bundle in hashed_bundles:
            if self._cancelled(report):
                break
            try:
                result = materialize_bundle(bundle, self._options.destination, self._logger)
            except Exception as error:
                self._logger.error(
                    "bundle_materialize_failed",
                    form=str(original_path(bundle.form)),
                    error=f"{type(error).__name__}: {error}",
                )
                root_report.record_failures("materialize", 1)
                continue
            root_report.record_failures("materialize", len(result.failed))
            if not result.failed:
                root_report.bundles_materialized += 1
        self._logger.info(
            "root_completed",
            root=str(root),
            bundles_materialized=root_report.bundles_materialized,
            failures=root_report.failure_count,
        )
        return root_report

    def _cancelled(self, report: TransferReport) -> bool:
        if not self._cancel_event.is_set():
            return False
        if not report.cancelled:
            report.cancelled = True
            self._logger.warning("transfer_cancelled", run_id=report.run_id)
        return True


def discover_root(root: Path, logger: TransferLogger, max_workers: int) -> DiscoveryResult:
    """Run media and form discovery for one root concurrently.

    Args:
        root: Directory to scan.
        logger: Run logger.
        max_workers: Worker pool bound for parsing forms.

    Returns:
        Forms and media found under the root.
    """
    with ThreadPoolExecutor(max_workers=2) as executor:
        media_future = executor.submit(discover_media, root, logger)
        forms_future = executor.submit(discover_forms, root, logger, max_workers)
        media = media_future.result()
        forms, parse_failures = forms_future.result()
    logger.info("media_discovered", root=str(root), media=[str(path) for path in media])
    logger.info("forms_discovered", root=str(root), forms=[str(path) for path in forms])
    return DiscoveryResult(
        root=root,
        forms=tuple(forms),
        media=tuple(media),
        parse_failures=parse_failures,
    )


def run_transfer(
    options: TransferOptions,
    config: TransferConfig,
    logger: TransferLogger | None = None,
    cancel_event: threading.Event | None = None,
) -> TransferReport:
    """Run the transfer pipeline over every configured root.

    Args:
        options: Roots, destination, and worker overrides.
        config: Runtime configuration.
        logger: Optional logger; a run-scoped structlog logger by default.
        cancel_event: Optional event that stops the run between bundles.

    Returns:
        Report of per-root counts and failures.
    """
    runner = TransferRunner(options, config, logger=logger, cancel_event=cancel_event)
    return runner.run()


def _build_run_logger(log_level: str, run_id: str) -> Any:
    """Create a structlog logger bound to one run."""
    return get_logger("odk_transfer", log_level).bind(run_id=run_id)


def _log_transfer_completion(logger: TransferLogger, report: TransferReport) -> None:
    """Log run completion with contextual metadata."""
    logger.info(
        "transfer_completed",
        destination=str(report.destination),
        roots=len(report.roots),
        bundles_materialized=sum(root.bundles_materialized for root in report.roots),
        failures=report.failure_count,
        cancelled=report.cancelled,
    )
