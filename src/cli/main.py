"""ODK transfer CLI entry points.

This module exposes the run and discover commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import Any, Sequence

from core.config import TransferConfig, parse_log_level, parse_max_workers, resolve_path
from core.constants import SUPPORTED_LOG_LEVELS
from core.errors import TransferConfigError
from core.transfer_plan import load_transfer_plan
from core.types import TransferOptions, TransferReport
from odk_transfer import TransferClient

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="odk-transfer",
        description="Bundle ODK forms with their media into a destination directory",
    )
    parser.add_argument(
        "--log-level",
        choices=SUPPORTED_LOG_LEVELS,
        help="Override ODK_TRANSFER_LOG_LEVEL for this command",
    )
    parser.add_argument(
        "--max-workers",
        help="Override ODK_TRANSFER_MAX_WORKERS for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_run_command(subparsers)
    _add_discover_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the ODK transfer CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
        if args.command == "run":
            return _run_transfer_command(config, args)
        if args.command == "discover":
            return _run_discover_command(config, args)
    except TransferConfigError as error:
        print(f"error: {error}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    parser.error(f"Unsupported command: {args.command}")
    return EXIT_CONFIG_ERROR


def _build_config(args: argparse.Namespace) -> TransferConfig:
    """Build config from env with global flag overrides.

    Raises:
        TransferConfigError: If env or flag values are invalid.
    """
    config = TransferConfig.from_env()
    if args.log_level:
        config = replace(config, log_level=parse_log_level(args.log_level))
    if args.max_workers is not None:
        config = replace(config, max_workers=parse_max_workers(args.max_workers, "--max-workers"))
    return config


def _run_transfer_command(config: TransferConfig, args: argparse.Namespace) -> int:
    """Handle run command.

    Roots come from positional arguments, then the plan, then the
    environment. The destination comes from the flag, the plan, then the
    environment.

    Returns:
        Exit code.
    """
    plan = load_transfer_plan(args.plan) if args.plan else None
    roots = tuple(resolve_path(root) for root in args.roots)
    if not roots and plan is not None:
        roots = plan.roots
    if not roots:
        roots = config.roots
    if not roots:
        raise TransferConfigError(
            "No roots to scan. Pass root directories, a --plan file, or set ODK_TRANSFER_ROOTS."
        )
    destination = config.destination
    if plan is not None and plan.destination is not None:
        destination = plan.destination
    if args.destination:
        destination = resolve_path(args.destination)
    max_workers = plan.max_workers if plan is not None and args.max_workers is None else None
    options = TransferOptions(roots=roots, destination=destination, max_workers=max_workers)
    report = TransferClient(config).run(options)
    _print_report(report)
    if args.strict and report.failure_count:
        return EXIT_FAILURES
    return EXIT_OK


def _run_discover_command(config: TransferConfig, args: argparse.Namespace) -> int:
    """Handle discover command.

    Returns:
        Exit code.
    """
    result = TransferClient(config).discover(args.root)
    for form_path in result.forms:
        print(f"form\t{form_path}")
    for media_path in result.media:
        print(f"media\t{media_path}")
    return EXIT_OK


def _print_report(report: TransferReport) -> None:
    """Print one tab-separated summary row per root."""
    for root_report in report.roots:
        print(
            f"{root_report.root}\t"
            f"forms={root_report.forms_converted}/{root_report.forms_found}\t"
            f"media={root_report.media_resolved}\t"
            f"bundles={root_report.bundles_materialized}\t"
            f"failures={root_report.failure_count}"
        )
    if report.cancelled:
        print("cancelled")


def _add_run_command(subparsers: Any) -> None:
    """Register run subcommand."""
    parser = subparsers.add_parser("run", help="Bundle forms and media from roots")
    parser.add_argument("roots", nargs="*", help="Root directories to scan, in order")
    parser.add_argument("--destination", help="Destination directory for bundles")
    parser.add_argument("--plan", help="YAML transfer plan naming roots and destination")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any file failed to transfer",
    )


def _add_discover_command(subparsers: Any) -> None:
    """Register discover subcommand."""
    parser = subparsers.add_parser("discover", help="List forms and media under a root")
    parser.add_argument("root", help="Root directory to scan")
