"""Unit tests for transfer orchestration."""

from __future__ import annotations

import threading
from dataclasses import replace

from bundling.xform_conversion import convert_forms, original_path
from core.config import TransferConfig
from core.types import TransferOptions
from transfer import pipeline
from transfer.pipeline import discover_root, run_transfer
from tests.fixture_builders import form_xml, write_file


def test_discover_root_returns_forms_and_media(tmp_path, recording_logger) -> None:
    """Discovery should report both forms and media for a root."""
    form_path = write_file(tmp_path / "survey.xml", form_xml("  <photo>img1.png</photo>"))
    image = write_file(tmp_path / "img1.png", b"png")

    result = discover_root(tmp_path, recording_logger, max_workers=2)

    assert result.forms == (form_path.resolve(),)
    assert result.media == (image.resolve(),)
    assert {"media_discovered", "forms_discovered"} <= set(recording_logger.events("info"))


def test_run_transfer_processes_roots_in_order(tmp_path, recording_logger) -> None:
    """Roots should be transferred sequentially in declaration order."""
    second = tmp_path / "second"
    first = tmp_path / "first"
    write_file(second / "b.xml", form_xml("", form_id="b"))
    write_file(first / "a.xml", form_xml("", form_id="a"))
    options = TransferOptions(roots=(second, first), destination=tmp_path / "out")

    report = run_transfer(options, TransferConfig.from_env(), logger=recording_logger)

    assert [root_report.root for root_report in report.roots] == [second, first]
    assert (tmp_path / "out" / "a" / "a.json").exists()
    assert (tmp_path / "out" / "b" / "b.json").exists()
    assert recording_logger.events()[-1] == "transfer_completed"


def test_run_transfer_stops_when_cancelled(tmp_path, recording_logger) -> None:
    """A set cancel event should stop the run before any root is processed."""
    write_file(tmp_path / "root" / "a.xml", form_xml(""))
    options = TransferOptions(roots=(tmp_path / "root",), destination=tmp_path / "out")
    cancel_event = threading.Event()
    cancel_event.set()

    report = run_transfer(
        options, TransferConfig.from_env(), logger=recording_logger, cancel_event=cancel_event
    )

    assert report.cancelled is True
    assert report.roots == []
    assert not (tmp_path / "out").exists()
    assert "transfer_cancelled" in recording_logger.events("warning")


def test_run_transfer_uses_option_worker_override(
    tmp_path, recording_logger, monkeypatch
) -> None:
    """Option max_workers should take precedence over the configured bound."""
    write_file(tmp_path / "root" / "a.xml", form_xml(""))
    config = replace(TransferConfig.from_env(), max_workers=4)
    options = TransferOptions(
        roots=(tmp_path / "root",), destination=tmp_path / "out", max_workers=1
    )
    seen_bounds: list[int] = []

    def recording_convert(paths, logger, max_workers):
        seen_bounds.append(max_workers)
        return convert_forms(paths, logger, max_workers)

    monkeypatch.setattr(pipeline, "convert_forms", recording_convert)

    report = run_transfer(options, config, logger=recording_logger)

    assert seen_bounds == [1]
    assert report.roots[0].bundles_materialized == 1
    assert report.failure_count == 0


def test_run_transfer_continues_after_bundle_error(tmp_path, recording_logger, monkeypatch) -> None:
    """An unexpected error in one bundle should not stop later bundles."""
    write_file(tmp_path / "root" / "a.xml", form_xml("", form_id="a"))
    write_file(tmp_path / "root" / "b.xml", form_xml("", form_id="b"))
    options = TransferOptions(roots=(tmp_path / "root",), destination=tmp_path / "out")
    real_materialize = pipeline.materialize_bundle

    def fail_bundle_a(bundle, destination_root, logger):
        if original_path(bundle.form).name == "a.xml":
            raise RuntimeError("disk vanished")
        return real_materialize(bundle, destination_root, logger)

    monkeypatch.setattr(pipeline, "materialize_bundle", fail_bundle_a)

    report = run_transfer(options, TransferConfig.from_env(), logger=recording_logger)

    assert (tmp_path / "out" / "b" / "b.json").exists()
    assert report.roots[0].failures == {"materialize": 1}
    assert report.roots[0].bundles_materialized == 1
    assert recording_logger.events("error") == ["bundle_materialize_failed"]
    assert recording_logger.fields_for("bundle_materialize_failed")[0]["error"] == (
        "RuntimeError: disk vanished"
    )
    assert recording_logger.events()[-1] == "transfer_completed"
