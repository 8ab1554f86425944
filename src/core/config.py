"""Runtime configuration model for ODK transfer.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from core.constants import (
    DEFAULT_DESTINATION,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_WORKERS,
    DESTINATION_ENV_VAR,
    LOG_LEVEL_ENV_VAR,
    MAX_WORKERS_ENV_VAR,
    ROOTS_ENV_VAR,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import TransferConfigError


@dataclass(frozen=True)
class TransferConfig:
    """Validated runtime configuration.

    Attributes:
        roots: Ordered root directories to scan for forms and media.
        destination: Directory that receives one bundle directory per form.
        max_workers: Upper bound of the I/O worker pool.
        log_level: Minimum structured log level.
    """

    roots: tuple[Path, ...]
    destination: Path
    max_workers: int
    log_level: str

    @classmethod
    def from_env(cls) -> "TransferConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            TransferConfigError: If environment values are invalid.
        """
        roots_value = os.getenv(ROOTS_ENV_VAR, "")
        destination_value = os.getenv(DESTINATION_ENV_VAR, str(DEFAULT_DESTINATION))
        max_workers_value = os.getenv(MAX_WORKERS_ENV_VAR, str(DEFAULT_MAX_WORKERS))
        log_level_value = os.getenv(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL)
        return cls(
            roots=parse_roots(roots_value),
            destination=resolve_path(destination_value),
            max_workers=parse_max_workers(max_workers_value, MAX_WORKERS_ENV_VAR),
            log_level=parse_log_level(log_level_value),
        )


def resolve_path(raw_path: str | os.PathLike[str]) -> Path:
    """Expand and absolutize a user-supplied path."""
    return Path(raw_path).expanduser().resolve()


def parse_roots(raw_value: str) -> tuple[Path, ...]:
    """Split a path-separator delimited root list, keeping declaration order.

    Args:
        raw_value: Raw string such as ``/data/a:/data/b``.

    Returns:
        Absolute root paths with empty segments removed.
    """
    segments = [segment.strip() for segment in raw_value.split(os.pathsep)]
    return tuple(resolve_path(segment) for segment in segments if segment)


def parse_max_workers(raw_value: object, source: str) -> int:
    """Parse a positive worker count.

    Args:
        raw_value: Raw value from environment, plan, or CLI.
        source: Name of the setting for error messages.

    Returns:
        Parsed positive integer.

    Raises:
        TransferConfigError: If value is not a positive integer.
    """
    if isinstance(raw_value, bool):
        raise TransferConfigError(
            f"Invalid {source} value: expected positive integer, got '{raw_value}'."
        )
    try:
        max_workers = int(str(raw_value))
    except ValueError as error:
        raise TransferConfigError(
            f"Invalid {source} value: expected positive integer, got '{raw_value}'. "
            f"Set {source} to a number such as {DEFAULT_MAX_WORKERS}."
        ) from error
    if max_workers < 1:
        raise TransferConfigError(
            f"Invalid {source} value: expected positive integer, got {max_workers}."
        )
    return max_workers


def parse_log_level(raw_value: str) -> str:
    """Normalize and validate a log level name.

    Raises:
        TransferConfigError: If the level is unsupported.
    """
    level = raw_value.strip().lower()
    if level == "warn":
        level = "warning"
    if level not in SUPPORTED_LOG_LEVELS:
        supported_rows = ", ".join(SUPPORTED_LOG_LEVELS)
        raise TransferConfigError(
            f"Invalid {LOG_LEVEL_ENV_VAR} value '{raw_value}'. Use one of: {supported_rows}."
        )
    return level
