"""Structured logging configuration.

This module initializes structlog with readable console lines on a
terminal and a stable JSON line format otherwise. It also defines the
logger protocol that pipeline components receive explicitly.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Protocol

import structlog

from core.constants import DEFAULT_LOG_LEVEL


class TransferLogger(Protocol):
    """Leveled structured logger accepted by every pipeline component."""

    def debug(self, event: str, **fields: Any) -> Any: ...

    def info(self, event: str, **fields: Any) -> Any: ...

    def warning(self, event: str, **fields: Any) -> Any: ...

    def error(self, event: str, **fields: Any) -> Any: ...


def get_logger(name: str, level: str = DEFAULT_LOG_LEVEL) -> Any:
    """Return a structlog logger filtered at the given level.

    Args:
        name: Logger name, usually __name__.
        level: Minimum level name such as ``info``.

    Returns:
        A structlog bound logger; JSON output unless stdout is a terminal.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            _renderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger(name)


def _level_number(level: str) -> int:
    """Map a level name to its stdlib numeric value."""
    return logging.getLevelName(level.upper())


def _renderer() -> Any:
    """Pick console rendering for terminals and JSON for pipes and files."""
    if sys.stdout.isatty():
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()
