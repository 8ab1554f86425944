"""Shared typed models.

This module defines the data models handed between discovery, bundling,
hashing, and materialization stages to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generic, List, TypeVar, Union

FormValue = Union[str, int, float, bool, None, List[Any], Dict[str, Any]]
"""Parsed form tree: scalars, sequences, and string-keyed mappings at any depth."""

FormDocument = Dict[str, Any]

T = TypeVar("T")
S = TypeVar("S")


@dataclass(frozen=True)
class MediaFile:
    """One media reference resolved to a discovered file.

    Attributes:
        name: Filename exactly as referenced inside the form.
        path: Absolute path of the discovered file.
        digest: Lower-case hex content digest, absent until hashed.
    """

    name: str
    path: Path
    digest: str | None = None


@dataclass(frozen=True)
class Bundle:
    """One parsed form paired with the media files it references.

    Attributes:
        form: Parsed form JSON value carrying ``meta.transfer.originalPath``.
        media: Resolved media entries in reference order.
    """

    form: FormDocument
    media: tuple[MediaFile, ...] = ()


@dataclass(frozen=True)
class ItemResult(Generic[S, T]):
    """Outcome of one independent unit of work.

    Attributes:
        item: The input the unit was given.
        value: Produced value when the unit succeeded.
        error: Failure message when the unit failed.
    """

    item: S
    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Return whether the unit completed without error."""
        return self.error is None


@dataclass(frozen=True)
class DiscoveryResult:
    """Forms and media found under one root.

    Attributes:
        root: Root directory that was scanned.
        forms: Absolute paths of XML files classified as forms.
        media: Absolute paths of files with a media extension.
        parse_failures: Number of XML files that failed to parse.
    """

    root: Path
    forms: tuple[Path, ...]
    media: tuple[Path, ...]
    parse_failures: int = 0


@dataclass(frozen=True)
class MaterializeResult:
    """Per-bundle outcome of writing to the destination.

    Attributes:
        bundle_dir: Destination directory of the bundle.
        written: Destination files created in this run.
        skipped: Destination files left untouched because they existed.
        failed: Error messages for writes and copies that failed.
    """

    bundle_dir: Path
    written: tuple[Path, ...] = ()
    skipped: tuple[Path, ...] = ()
    failed: tuple[str, ...] = ()


@dataclass
class RootReport:
    """Counters collected while transferring one root."""

    root: Path
    media_found: int = 0
    forms_found: int = 0
    forms_converted: int = 0
    media_resolved: int = 0
    bundles_materialized: int = 0
    failures: Dict[str, int] = field(default_factory=dict)

    def record_failures(self, stage: str, count: int) -> None:
        """Add ``count`` failures to a stage counter."""
        if count:
            self.failures[stage] = self.failures.get(stage, 0) + count

    @property
    def failure_count(self) -> int:
        """Return total failures across stages."""
        return sum(self.failures.values())


@dataclass
class TransferReport:
    """Summary of a whole transfer run.

    Attributes:
        run_id: Identifier bound into every log line of the run.
        destination: Destination root written to.
        roots: Per-root reports in processing order.
        cancelled: Whether the run stopped early on request.
    """

    run_id: str
    destination: Path
    roots: List[RootReport] = field(default_factory=list)
    cancelled: bool = False

    @property
    def failure_count(self) -> int:
        """Return total failures across all roots."""
        return sum(report.failure_count for report in self.roots)


@dataclass(frozen=True)
class TransferOptions:
    """Transfer run options.

    Attributes:
        roots: Ordered root directories to scan.
        destination: Destination directory for bundles.
        max_workers: Optional worker pool override.
    """

    roots: tuple[Path, ...]
    destination: Path
    max_workers: int | None = None
