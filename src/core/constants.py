"""Core constants used across ODK transfer modules.

This module centralizes extension sets, file patterns, and defaults.
Keeping values here avoids magic literals in pipeline logic.
"""

from __future__ import annotations

from pathlib import Path

MEDIA_EXTENSIONS = (
    "gif",
    "jpg",
    "jpeg",
    "png",
    "bmp",
    "m4a",
    "mp3",
    "wav",
    "mpeg",
    "mp4",
    "avi",
    "zip",
    "docx",
    "doc",
    "xlsx",
    "xls",
    "txt",
)
FORM_FILE_PATTERN = "*.xml"
FORM_JSON_SUFFIX = ".json"
HASH_ALGORITHM = "md5"
HASH_CHUNK_SIZE = 1024 * 1024
JSON_INDENT = 2
TRANSFER_META_KEY = "transfer"
ORIGINAL_PATH_KEY = "originalPath"
DEFAULT_DESTINATION = Path("destination")
DEFAULT_MAX_WORKERS = 8
DEFAULT_LOG_LEVEL = "info"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")
TRANSFER_PLAN_VERSION = 1
ROOTS_ENV_VAR = "ODK_TRANSFER_ROOTS"
DESTINATION_ENV_VAR = "ODK_TRANSFER_DESTINATION"
MAX_WORKERS_ENV_VAR = "ODK_TRANSFER_MAX_WORKERS"
LOG_LEVEL_ENV_VAR = "ODK_TRANSFER_LOG_LEVEL"
