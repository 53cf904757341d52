"""Tests for the FFmpeg wrapper and artifact derivation."""

import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from video_archive.config import LowQualityConfig, PreviewConfig
from video_archive.core import ArtifactDeriver, ArtifactKind, FFmpegError, FFmpegProcessor, FileManager


def test_low_quality_command_scales_and_sets_crf() -> None:
    processor = FFmpegProcessor(executable="/opt/ffmpeg/bin/ffmpeg")
    settings = LowQualityConfig(width=480, crf=28, codec="libx264", preset="fast", audio_codec="aac")

    cmd = processor.build_low_quality_command(Path("vidHQ/1.mp4"), Path("vidLQ/1.tmp.mp4"), settings)

    assert cmd[0] == "/opt/ffmpeg/bin/ffmpeg"
    assert cmd[cmd.index("-i") + 1] == str(Path("vidHQ/1.mp4"))
    assert cmd[cmd.index("-vf") + 1] == "scale=480:-2"
    assert cmd[cmd.index("-crf") + 1] == "28"
    assert cmd[cmd.index("-preset") + 1] == "fast"
    assert cmd[-1] == str(Path("vidLQ/1.tmp.mp4"))


def test_preview_command_extracts_one_frame_after_one_second() -> None:
    cmd = FFmpegProcessor().build_preview_command(Path("1.mp4"), Path("1.tmp.jpg"), PreviewConfig())

    assert cmd[cmd.index("-ss") + 1] == "1"
    assert cmd[cmd.index("-frames:v") + 1] == "1"
    # Seeking before -i keeps extraction fast on long files
    assert cmd.index("-ss") < cmd.index("-i")


def test_check_availability_missing_executable() -> None:
    with patch("video_archive.core.ffmpeg.shutil.which", return_value=None):
        with pytest.raises(FFmpegError) as exc_info:
            FFmpegProcessor(executable="/nowhere/ffmpeg").check_availability()

    assert "/nowhere/ffmpeg" in str(exc_info.value)
    assert exc_info.value.operation == "validate"


def test_run_command_nonzero_exit_raises_with_context() -> None:
    failed = subprocess.CompletedProcess(
        args=["ffmpeg"], returncode=1, stdout="", stderr="ffmpeg version 6\nInvalid data found when processing input\n"
    )

    with patch("video_archive.core.ffmpeg.subprocess.run", return_value=failed):
        with pytest.raises(FFmpegError) as exc_info:
            FFmpegProcessor().run_command(["ffmpeg", "-i", "x.mp4"], Path("x.mp4"))

    error = exc_info.value
    assert error.return_code == 1
    assert error.file_path == Path("x.mp4")
    assert str(error).endswith("Invalid data found when processing input")


def test_run_command_timeout_is_reported() -> None:
    with patch(
        "video_archive.core.ffmpeg.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd=["ffmpeg"], timeout=5),
    ):
        with pytest.raises(FFmpegError, match="timed out after 5s"):
            FFmpegProcessor(timeout=5).run_command(["ffmpeg"])


def test_run_command_passes_timeout() -> None:
    ok = subprocess.CompletedProcess(args=["ffmpeg"], returncode=0, stdout="", stderr="")

    with patch("video_archive.core.ffmpeg.subprocess.run", return_value=ok) as mock_run:
        FFmpegProcessor(timeout=60).run_command(["ffmpeg", "-version"])

    assert mock_run.call_args.kwargs["timeout"] == 60


def test_deriver_moves_output_into_place(tmp_path, config_manager) -> None:
    source = tmp_path / "1.mp4"
    source.write_bytes(b"hq")
    target = tmp_path / "lq" / "1.mp4"
    target.parent.mkdir()

    transcoder = Mock()
    transcoder.transcode_low_quality.side_effect = lambda src, tmp, settings: tmp.write_bytes(b"lq")

    ArtifactDeriver(transcoder, FileManager(), config_manager).derive(ArtifactKind.LOW_QUALITY, source, target)

    assert target.read_bytes() == b"lq"
    assert not (target.parent / "1.tmp.mp4").exists()
    settings = transcoder.transcode_low_quality.call_args.args[2]
    assert settings.width == 640


def test_deriver_uses_overridden_settings(tmp_path, config_manager) -> None:
    config_manager.set_override("low_quality.crf", 30)
    transcoder = Mock()
    transcoder.transcode_low_quality.side_effect = lambda src, tmp, settings: tmp.write_bytes(b"lq")

    ArtifactDeriver(transcoder, FileManager(), config_manager).derive(
        ArtifactKind.LOW_QUALITY, tmp_path / "1.mp4", tmp_path / "out.mp4"
    )

    assert transcoder.transcode_low_quality.call_args.args[2].crf == 30


def test_deriver_without_output_fails(tmp_path, config_manager) -> None:
    """A transcoder that exits cleanly but writes nothing is a failure."""
    transcoder = Mock()

    with pytest.raises(FFmpegError, match="no preview output"):
        ArtifactDeriver(transcoder, FileManager(), config_manager).derive(
            ArtifactKind.PREVIEW, tmp_path / "1.mp4", tmp_path / "1.jpg"
        )

    assert not (tmp_path / "1.jpg").exists()
