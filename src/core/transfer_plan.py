"""Typed transfer-plan parsing for declarative ODK transfer runs.

This module loads and validates YAML plan files naming the roots to scan
and the destination to write to. A plan replaces hardcoded root lists so
operators can keep per-site transfer setups under version control.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence, cast

import yaml

from core.config import parse_max_workers, resolve_path
from core.constants import TRANSFER_PLAN_VERSION
from core.errors import TransferConfigError

_ALLOWED_ROOT_KEYS = frozenset({"version", "roots", "destination", "max_workers"})


@dataclass(frozen=True)
class TransferPlan:
    """Validated transfer plan.

    Attributes:
        roots: Ordered root directories, relative entries resolved
            against the plan file's directory.
        destination: Optional destination override.
        max_workers: Optional worker pool override.
    """

    roots: tuple[Path, ...]
    destination: Path | None = None
    max_workers: int | None = None


def load_transfer_plan(plan_path: str | Path) -> TransferPlan:
    """Load and validate a YAML transfer plan from disk.

    Args:
        plan_path: File path to YAML plan.

    Returns:
        Fully validated plan object.

    Raises:
        TransferConfigError: If the file is missing, invalid, or fails schema checks.
    """
    plan_file = resolve_path(plan_path)
    payload = _load_yaml_payload(plan_file)
    root_mapping = _expect_mapping(payload, "transfer plan root")
    _validate_root_keys(root_mapping)
    _parse_version(root_mapping)
    base_dir = plan_file.parent
    return TransferPlan(
        roots=_parse_roots(root_mapping, base_dir),
        destination=_parse_destination(root_mapping, base_dir),
        max_workers=_parse_plan_max_workers(root_mapping),
    )


def _load_yaml_payload(plan_file: Path) -> object:
    if not plan_file.exists():
        raise TransferConfigError(
            f"Transfer plan does not exist at {plan_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(plan_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise TransferConfigError(
            f"Failed to read transfer plan at {plan_file}: {error}. Check file permissions."
        ) from error
    except yaml.YAMLError as error:
        raise TransferConfigError(
            f"Failed to parse YAML transfer plan at {plan_file}: {error}. Fix YAML syntax."
        ) from error
    if payload is None:
        raise TransferConfigError(
            f"Transfer plan at {plan_file} is empty. Define 'version' and 'roots'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise TransferConfigError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise TransferConfigError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise TransferConfigError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise TransferConfigError(
            f"Transfer plan field 'version' must be an integer. Set version: {TRANSFER_PLAN_VERSION}."
        )
    if raw_version != TRANSFER_PLAN_VERSION:
        raise TransferConfigError(
            f"Unsupported transfer plan version {raw_version}. Use version: {TRANSFER_PLAN_VERSION}."
        )
    return raw_version


def _parse_roots(root_mapping: Mapping[str, object], base_dir: Path) -> tuple[Path, ...]:
    raw_roots = root_mapping.get("roots")
    if raw_roots is None:
        raise TransferConfigError(
            "Transfer plan missing required field 'roots'. Add a list of directories."
        )
    roots: list[Path] = []
    for index, raw_root in enumerate(_expect_sequence(raw_roots, "transfer plan roots")):
        if not isinstance(raw_root, str) or not raw_root.strip():
            raise TransferConfigError(
                f"Invalid transfer plan root #{index + 1}: expected non-empty string."
            )
        roots.append(_resolve_against(raw_root.strip(), base_dir))
    return tuple(roots)


def _parse_destination(root_mapping: Mapping[str, object], base_dir: Path) -> Path | None:
    raw_destination = root_mapping.get("destination")
    if raw_destination is None:
        return None
    if not isinstance(raw_destination, str) or not raw_destination.strip():
        raise TransferConfigError(
            "Transfer plan field 'destination' must be a non-empty string when provided."
        )
    return _resolve_against(raw_destination.strip(), base_dir)


def _parse_plan_max_workers(root_mapping: Mapping[str, object]) -> int | None:
    raw_max_workers = root_mapping.get("max_workers")
    if raw_max_workers is None:
        return None
    return parse_max_workers(raw_max_workers, "transfer plan field 'max_workers'")


def _resolve_against(raw_path: str, base_dir: Path) -> Path:
    candidate = Path(raw_path).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return candidate.resolve()


def _validate_root_keys(root_mapping: Mapping[str, object]) -> None:
    unknown_keys = sorted(set(root_mapping) - _ALLOWED_ROOT_KEYS)
    if unknown_keys:
        raise TransferConfigError(
            f"Transfer plan contains unknown root fields: {', '.join(unknown_keys)}."
        )
