"""Integration tests for the full transfer workflow."""

from __future__ import annotations

import json
from dataclasses import replace

from core.config import TransferConfig
from core.hashing import digest_bytes
from core.types import TransferOptions
from odk_transfer import TransferClient
from tests.fixture_builders import RecordingLogger, form_xml, write_file


def _client(tmp_path, logger: RecordingLogger) -> TransferClient:
    config = replace(TransferConfig.from_env(), destination=tmp_path / "destination")
    return TransferClient(config, logger=logger)


def _snapshot(directory) -> dict:
    return {
        str(path.relative_to(directory)): (path.read_bytes(), path.stat().st_mtime_ns)
        for path in sorted(directory.rglob("*"))
        if path.is_file()
    }


def test_transfer_bundles_form_with_hashed_media(tmp_path) -> None:
    """A form and its image should land in a self-contained bundle."""
    root = tmp_path / "root"
    write_file(root / "survey.xml", form_xml("  <photo>img1.png</photo>"))
    write_file(root / "img1.png", b"\x89PNG image bytes")
    digest = digest_bytes(b"\x89PNG image bytes")
    logger = RecordingLogger()
    client = _client(tmp_path, logger)

    report = client.run(TransferOptions(roots=(root,), destination=tmp_path / "destination"))

    bundle_dir = tmp_path / "destination" / "survey"
    form_json = json.loads((bundle_dir / "survey.json").read_text(encoding="utf-8"))
    assert form_json["photo"] == f"{digest}.png"
    assert form_json["meta"]["transfer"]["originalPath"] == str((root / "survey.xml").resolve())
    assert (bundle_dir / "survey.xml").read_bytes() == (root / "survey.xml").read_bytes()
    assert (bundle_dir / f"{digest}.png").read_bytes() == b"\x89PNG image bytes"
    assert sorted(path.name for path in bundle_dir.iterdir()) == sorted(
        ["survey.json", "survey.xml", f"{digest}.png"]
    )
    assert report.failure_count == 0
    assert logger.events()[-1] == "transfer_completed"


def test_transfer_rerun_leaves_destination_unchanged(tmp_path) -> None:
    """A second run should not modify any existing destination file."""
    root = tmp_path / "root"
    write_file(root / "forms" / "survey.xml", form_xml("  <photo>img1.png</photo>"))
    write_file(root / "forms" / "img1.png", b"png")
    options = TransferOptions(roots=(root,), destination=tmp_path / "destination")
    client = _client(tmp_path, RecordingLogger())
    client.run(options)
    first = _snapshot(tmp_path / "destination")

    report = client.run(options)

    assert _snapshot(tmp_path / "destination") == first
    assert report.failure_count == 0


def test_transfer_isolates_malformed_xml(tmp_path) -> None:
    """A malformed XML file should be logged without blocking valid forms."""
    root = tmp_path / "root"
    write_file(root / "survey.xml", form_xml("  <photo>img1.png</photo>"))
    write_file(root / "img1.png", b"png")
    write_file(root / "broken.xml", "<survey><meta><instanceID>")
    logger = RecordingLogger()

    report = _client(tmp_path, logger).run(
        TransferOptions(roots=(root,), destination=tmp_path / "destination")
    )

    assert (tmp_path / "destination" / "survey" / "survey.json").exists()
    assert not (tmp_path / "destination" / "broken").exists()
    assert logger.events("error") == ["form_parse_failed"]
    assert report.roots[0].failures == {"parse": 1}
    assert report.roots[0].bundles_materialized == 1


def test_transfer_resolves_media_from_other_directory(tmp_path) -> None:
    """Media outside the form directory is still bundled with a warning."""
    root = tmp_path / "root"
    write_file(root / "forms" / "visit.xml", form_xml("  <audio>note.mp3</audio>"))
    write_file(root / "media" / "note.mp3", b"mp3")
    logger = RecordingLogger()

    _client(tmp_path, logger).run(
        TransferOptions(roots=(root,), destination=tmp_path / "destination")
    )

    digest = digest_bytes(b"mp3")
    assert (tmp_path / "destination" / "visit" / f"{digest}.mp3").exists()
    assert "media_outside_form_directory" in logger.events("warning")


def test_transfer_copies_duplicate_reference_once(tmp_path) -> None:
    """A filename referenced twice yields one file and a skipped second copy."""
    root = tmp_path / "root"
    write_file(
        root / "survey.xml",
        form_xml("  <photo>img1.png</photo>\n  <again>img1.png</again>"),
    )
    write_file(root / "img1.png", b"png")
    logger = RecordingLogger()

    report = _client(tmp_path, logger).run(
        TransferOptions(roots=(root,), destination=tmp_path / "destination")
    )

    bundle_dir = tmp_path / "destination" / "survey"
    assert report.roots[0].media_resolved == 2
    assert len(list(bundle_dir.glob("*.png"))) == 1
    assert "copy_skipped_existing" in logger.events("info")


def test_transfer_survives_deeply_nested_form(tmp_path) -> None:
    """A form too deep to serialize fails alone; its siblings still transfer."""
    root = tmp_path / "root"
    depth = 3000
    nested = "<g>" * depth + "<photo>img1.png</photo>" + "</g>" * depth
    write_file(root / "a_deep.xml", form_xml(nested, form_id="a_deep"))
    write_file(root / "b_ok.xml", form_xml("  <photo>img1.png</photo>", form_id="b_ok"))
    write_file(root / "img1.png", b"png")
    digest = digest_bytes(b"png")
    logger = RecordingLogger()

    report = _client(tmp_path, logger).run(
        TransferOptions(roots=(root,), destination=tmp_path / "destination")
    )

    destination = tmp_path / "destination"
    assert (destination / "b_ok" / "b_ok.json").exists()
    assert not (destination / "a_deep" / "a_deep.json").exists()
    assert (destination / "a_deep" / "a_deep.xml").exists()
    assert (destination / "a_deep" / f"{digest}.png").read_bytes() == b"png"
    assert logger.events("error") == ["form_json_write_failed"]
    assert report.roots[0].failures == {"materialize": 1}
    assert report.roots[0].bundles_materialized == 1
    assert logger.events()[-1] == "transfer_completed"
