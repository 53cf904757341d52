"""Tests for the command line interface."""

from unittest.mock import patch

import pytest

from video_archive.cli.main import ArchiveCLI, main
from video_archive.config.constants import EXIT_COMPLETED_WITH_ERRORS, EXIT_FATAL, EXIT_OK
from video_archive.core import ProcessingResult, ProcessingStatus
from video_archive.pipeline import RunReport
from video_archive.processors import IngestReport


def test_missing_transcoder_exits_fatal(tmp_path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("transcoder:\n  executable: /definitely/not/ffmpeg\n", encoding="utf-8")
    base_dir = tmp_path / "archive"
    base_dir.mkdir()
    (base_dir / "raw").mkdir()
    raw = base_dir / "raw" / "clip1.mp4"
    raw.write_bytes(b"raw")

    exit_code = main(["--config", str(config_path), "--base-dir", str(base_dir), "--no-progress", "run"])

    assert exit_code == EXIT_FATAL
    assert raw.exists()
    assert list((base_dir / "vidHQ").iterdir()) == []


def test_status_lists_pending_work(tmp_path, capsys) -> None:
    for name in ("raw", "vidHQ", "vidLQ", "previews"):
        (tmp_path / name).mkdir()
    (tmp_path / "raw" / "new.mp4").write_bytes(b"raw")
    (tmp_path / "vidHQ" / "1.mp4").write_bytes(b"hq")
    (tmp_path / "vidLQ" / "1.mp4").write_bytes(b"lq")

    exit_code = main(["--base-dir", str(tmp_path), "status"])

    out = capsys.readouterr().out
    assert exit_code == EXIT_OK
    assert "Highest identifier: 1" in out
    assert "new.mp4" in out
    assert "1: preview" in out


def test_options_become_overrides() -> None:
    cli = ArchiveCLI()
    args = cli.build_parser().parse_args(["--dry-run", "run", "--no-push", "--crf", "28", "-m", "Weekly"])

    options = cli.create_processing_options(args)

    assert options.dry_run
    assert options.push is False
    assert options.crf == 28
    assert options.commit_message == "Weekly"


def test_item_failures_exit_with_errors(tmp_path, capsys) -> None:
    failed = ProcessingResult(
        source_file=tmp_path / "clip.mp4",
        status=ProcessingStatus.FAILED,
        message="FFmpeg failed with return code 1",
        video_id=3,
        step="derive preview",
    )
    report = RunReport(ingest=IngestReport(next_id=4, changed=True, results=[failed]))

    with patch("video_archive.cli.commands.archive.ArchivePipeline") as mock_pipeline:
        mock_pipeline.return_value.run.return_value = report
        exit_code = main(["--base-dir", str(tmp_path), "run"])

    assert exit_code == EXIT_COMPLETED_WITH_ERRORS
    out = capsys.readouterr().out
    assert "ARCHIVE FAILURES" in out
    assert "derive preview" in out


def test_encoding_overrides_are_validated(capsys) -> None:
    parser = ArchiveCLI().build_parser()

    for bad in (["run", "--width", "0"], ["heal", "--crf", "-1"]):
        with pytest.raises(SystemExit):
            parser.parse_args(bad)

    assert "must" in capsys.readouterr().err
    assert parser.parse_args(["ingest", "--width", "480", "--crf", "0"]).width == 480
