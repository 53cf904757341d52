"""Tests for YAML configuration loading and overrides."""

from pathlib import Path

import pytest

from video_archive.config import ArchiveConfig
from video_archive.core import ConfigManager, ProcessingOptions, with_config_overrides


def test_defaults() -> None:
    config = ArchiveConfig()

    assert config.transcoder.executable == "ffmpeg"
    assert config.low_quality.crf == 23
    assert config.low_quality.width == 640
    assert config.git.commit_message == "Update video archive"
    assert config.directories.high_quality == "vidHQ"
    assert ".mp4" in config.extensions


def test_load_from_file(tmp_path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
base_dir: ~/videos
extensions: [mp4, .MOV]
transcoder:
  executable: /usr/local/bin/ffmpeg
  timeout: 3600
low_quality:
  width: 480
  crf: 26
git:
  commit_message: "Nightly import"
  push: false
global:
  log_level: debug
""",
        encoding="utf-8",
    )

    config = ArchiveConfig.load_from_file(config_path)

    assert config.base_dir == Path("~/videos").expanduser()
    assert config.extensions == [".mp4", ".mov"]
    assert config.transcoder.executable == "/usr/local/bin/ffmpeg"
    assert config.transcoder.timeout == 3600
    assert config.low_quality.width == 480
    assert config.low_quality.crf == 26
    assert config.low_quality.codec == "libx264"
    assert config.git.push is False
    assert config.git.commit_message == "Nightly import"
    assert config.global_.log_level == "DEBUG"


def test_invalid_values_fall_back(tmp_path, caplog) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("low_quality:\n  width: wide\n  crf: -3\nglobal:\n  log_level: loud\n", encoding="utf-8")

    config = ArchiveConfig.load_from_file(config_path)

    assert config.low_quality.width == 640
    assert config.low_quality.crf == 23
    assert config.global_.log_level == "INFO"
    assert "low_quality.width" in caplog.text


def test_broken_yaml_uses_defaults(tmp_path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("low_quality: [unclosed", encoding="utf-8")

    assert ArchiveConfig.load_from_file(config_path) == ArchiveConfig()


def test_processing_options_override_config() -> None:
    manager = ConfigManager(config=ArchiveConfig())

    with with_config_overrides(manager) as scoped:
        scoped.apply_processing_options(ProcessingOptions(dry_run=True, push=False, crf=30, width=320))
        assert scoped.dry_run
        assert scoped.get_value("git.push") is False
        assert scoped.low_quality_settings().crf == 30
        assert scoped.low_quality_settings().width == 320

    assert not manager.dry_run
    assert manager.get_value("git.push") is True
    assert manager.low_quality_settings().crf == 23


def test_processing_options_reject_invalid_encoding_values() -> None:
    manager = ConfigManager(config=ArchiveConfig())

    with pytest.raises(ValueError, match="Width"):
        manager.apply_processing_options(ProcessingOptions(width=0))
    with pytest.raises(ValueError, match="CRF"):
        manager.apply_processing_options(ProcessingOptions(crf=-5))

    assert manager.low_quality_settings().width == 640
