"""ODK transfer exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class TransferError(Exception):
    """Base exception for all transfer failures."""


class TransferConfigError(TransferError):
    """Raised for invalid runtime configuration or transfer plans."""


class FormParseError(TransferError):
    """Raised for unreadable or malformed XML documents."""


class FormConversionError(TransferError):
    """Raised when an XForm document cannot be converted to JSON."""


class MediaHashError(TransferError):
    """Raised when a media file cannot be read for hashing."""


class MaterializeError(TransferError):
    """Raised for destination directory, write, and copy failures."""
