"""Tests for the command-line interface."""

import json

from conftest import CLIP

from hdvsync import __version__
from hdvsync.cli import main


def test_version():
    """Test that version is defined and follows semver format."""
    parts = __version__.split(".")
    assert len(parts) == 3
    assert all(part.isdigit() for part in parts)


def test_sync(clip_path, sidecar_path, capsys):
    assert main([str(clip_path)]) == 0
    out = capsys.readouterr().out
    assert f"Clip: {CLIP}" in out
    assert "Written:      yes" in out
    assert sidecar_path.exists()


def test_sync_quiet_twice(clip_path, capsys):
    assert main(["-q", str(clip_path)]) == 0
    assert main(["-q", str(clip_path)]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0] == f"{CLIP} | first_sync | 8 changed | written"
    assert lines[1] == f"{CLIP} | unchanged | 0 changed | not written"


def test_dry_run(clip_path, sidecar_path):
    assert main(["--dry-run", "--fast", str(clip_path)]) == 0
    assert not sidecar_path.exists()


def test_inspect_json(clip_path, capsys):
    assert main(["--inspect", "--json", str(clip_path)]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["technical"]["frame_rate"]["label"] == "29.97p"
    assert data["technical"]["start_timecode"]["drop_frame"] is True
    assert len(data["record"]["header"]) == 32


def test_inspect_text(clip_path, capsys):
    assert main(["--inspect", str(clip_path)]) == 0
    out = capsys.readouterr().out
    assert "Timecode:     01;02;03;04 (2997DropTimecode)" in out
    assert "Frame size:   1440x1080 pixels" in out


def test_digest(clip_path, capsys):
    assert main(["--digest", str(clip_path)]) == 0
    digest, name = capsys.readouterr().out.split()
    assert len(digest) == 32
    assert name == CLIP


def test_report_output(clip_path, tmp_path):
    report = tmp_path / "report.json"
    assert main(["-q", "-o", str(report), str(clip_path)]) == 0
    data = json.loads(report.read_text(encoding="utf-8"))
    assert data[0]["clip_name"] == CLIP
    assert data[0]["written"] is True


def test_not_a_clip(tmp_path, capsys):
    assert main([str(tmp_path / "nothing")]) == 1
    assert "not a Sony HDV clip" in capsys.readouterr().err
