"""Form discovery over a root directory.

This module walks a root for XML files, parses each one in the worker
pool, and keeps the files the classifier accepts as ODK forms.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import FORM_FILE_PATTERN
from core.logging_config import TransferLogger
from core.task_pool import run_parallel
from discovery.form_classifier import is_form
from discovery.tree_walker import glob_matcher, walk_files
from discovery.xml_reader import read_xml_file


def discover_forms(
    root: Path,
    logger: TransferLogger,
    max_workers: int,
) -> tuple[list[Path], int]:
    """Find ODK forms under a root.

    Args:
        root: Directory to scan.
        logger: Run logger.
        max_workers: Worker pool bound for parsing.

    Returns:
        Classified form paths in walk order and the number of XML files
        that failed to parse. Parse failures are logged and excluded.
    """
    xml_files = walk_files(root, glob_matcher(FORM_FILE_PATTERN), logger)
    results = run_parallel(xml_files, read_xml_file, max_workers)
    forms: list[Path] = []
    parse_failures = 0
    for result in results:
        if not result.ok:
            parse_failures += 1
            logger.error(
                "form_parse_failed", root=str(root), path=str(result.item), error=result.error
            )
            continue
        if is_form(result.value or {}):
            forms.append(result.item)
        else:
            logger.debug("xml_not_a_form", root=str(root), path=str(result.item))
    return forms, parse_failures
