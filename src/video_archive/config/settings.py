"""Configuration management for the video archive."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .constants import (
    DEFAULT_VIDEO_EXTENSIONS,
    HIGH_QUALITY_DIR_NAME,
    INBOX_DIR_NAME,
    LOW_QUALITY_DIR_NAME,
    PREVIEW_DIR_NAME,
)

LOG = logging.getLogger(__name__)


# Configuration singleton
class _ConfigSingleton:
    """Configuration singleton holder."""

    _instance: ArchiveConfig | None = None

    @classmethod
    def get_instance(cls) -> ArchiveConfig:
        """Get the configuration instance."""
        if cls._instance is None:
            # Try to load from default config file (look in working directory)
            config_path = Path.cwd() / "config.yaml"
            if config_path.exists():
                cls._instance = ArchiveConfig.load_from_file(config_path)
            else:
                cls._instance = ArchiveConfig()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the configuration instance."""
        cls._instance = None


_config_singleton = _ConfigSingleton()


@dataclass
class DirectoriesConfig:
    """Names of the working directories below the base directory."""

    inbox: str = INBOX_DIR_NAME
    high_quality: str = HIGH_QUALITY_DIR_NAME
    low_quality: str = LOW_QUALITY_DIR_NAME
    previews: str = PREVIEW_DIR_NAME


@dataclass
class TranscoderConfig:
    """Transcoder executable settings."""

    executable: str = "ffmpeg"
    timeout: int | None = None  # None waits for the process indefinitely


@dataclass
class LowQualityConfig:
    """Encoding parameters for the low-quality preview copy."""

    width: int = 640
    crf: int = 23  # Lower is higher quality, typical range 17-28
    codec: str = "libx264"
    preset: str = "medium"
    audio_codec: str = "aac"


@dataclass
class PreviewConfig:
    """Still-frame extraction parameters."""

    seek_seconds: float = 1.0
    quality: int = 2  # JPEG qscale, 2 is near lossless


@dataclass
class GitConfig:
    """Version control settings."""

    executable: str = "git"
    commit_message: str = "Update video archive"
    push: bool = True
    timeout: int | None = 300


@dataclass
class GlobalConfig:
    """Global settings."""

    log_level: str = "INFO"
    show_progress: bool = True


@dataclass
class ArchiveConfig:
    """Main configuration class."""

    base_dir: Path | None = None
    directories: DirectoriesConfig = field(default_factory=DirectoriesConfig)
    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_VIDEO_EXTENSIONS))
    transcoder: TranscoderConfig = field(default_factory=TranscoderConfig)
    low_quality: LowQualityConfig = field(default_factory=LowQualityConfig)
    preview: PreviewConfig = field(default_factory=PreviewConfig)
    git: GitConfig = field(default_factory=GitConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> ArchiveConfig:
        """Load configuration from YAML file."""
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

            if not isinstance(data, dict):
                LOG.warning("Ignoring config %s: top level must be a mapping", config_path)
                return cls()
            return cls._from_dict(data)
        except (OSError, yaml.YAMLError) as e:
            LOG.warning("Failed to load config from %s: %s", config_path, e)
            return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> ArchiveConfig:
        """Create config from dictionary."""
        base_dir = data.get("base_dir")

        return cls(
            base_dir=Path(base_dir).expanduser() if base_dir else None,
            directories=cls._parse_directories(data.get("directories") or {}),
            extensions=cls._parse_extensions(data.get("extensions")),
            transcoder=cls._parse_transcoder(data.get("transcoder") or {}),
            low_quality=cls._parse_low_quality(data.get("low_quality") or {}),
            preview=cls._parse_preview(data.get("preview") or {}),
            git=cls._parse_git(data.get("git") or {}),
            global_=cls._parse_global_config(data.get("global") or {}),
        )

    @classmethod
    def _parse_directories(cls, dir_data: dict[str, Any]) -> DirectoriesConfig:
        """Parse working directory names."""
        defaults = DirectoriesConfig()
        return DirectoriesConfig(
            inbox=str(dir_data.get("inbox", defaults.inbox)),
            high_quality=str(dir_data.get("high_quality", defaults.high_quality)),
            low_quality=str(dir_data.get("low_quality", defaults.low_quality)),
            previews=str(dir_data.get("previews", defaults.previews)),
        )

    @classmethod
    def _parse_extensions(cls, extensions: object) -> list[str]:
        """Normalize configured extensions to lower-case with a leading dot."""
        if not extensions:
            return list(DEFAULT_VIDEO_EXTENSIONS)
        if not isinstance(extensions, list):
            LOG.warning("Invalid extensions list %r. Using defaults.", extensions)
            return list(DEFAULT_VIDEO_EXTENSIONS)
        return [ext.lower() if str(ext).startswith(".") else f".{ext}".lower() for ext in map(str, extensions)]

    @classmethod
    def _parse_transcoder(cls, transcoder_data: dict[str, Any]) -> TranscoderConfig:
        """Parse transcoder settings."""
        return TranscoderConfig(
            executable=str(transcoder_data.get("executable", "ffmpeg")),
            timeout=_optional_int(transcoder_data.get("timeout"), "transcoder.timeout"),
        )

    @classmethod
    def _parse_low_quality(cls, lq_data: dict[str, Any]) -> LowQualityConfig:
        """Parse low-quality encoding settings."""
        defaults = LowQualityConfig()
        width = _int_or_default(lq_data.get("width"), defaults.width, "low_quality.width")
        crf = _int_or_default(lq_data.get("crf"), defaults.crf, "low_quality.crf")

        if width <= 0:
            LOG.warning("Invalid low_quality.width %d. Using %d.", width, defaults.width)
            width = defaults.width
        if crf < 0:
            LOG.warning("Invalid low_quality.crf %d. Using %d.", crf, defaults.crf)
            crf = defaults.crf

        return LowQualityConfig(
            width=width,
            crf=crf,
            codec=str(lq_data.get("codec", defaults.codec)),
            preset=str(lq_data.get("preset", defaults.preset)),
            audio_codec=str(lq_data.get("audio_codec", defaults.audio_codec)),
        )

    @classmethod
    def _parse_preview(cls, preview_data: dict[str, Any]) -> PreviewConfig:
        """Parse preview extraction settings."""
        defaults = PreviewConfig()
        try:
            seek_seconds = float(preview_data.get("seek_seconds", defaults.seek_seconds))
        except (TypeError, ValueError):
            seek_seconds = defaults.seek_seconds
            LOG.warning("Invalid preview.seek_seconds %r. Using %.1f.", preview_data.get("seek_seconds"), seek_seconds)

        return PreviewConfig(
            seek_seconds=seek_seconds,
            quality=_int_or_default(preview_data.get("quality"), defaults.quality, "preview.quality"),
        )

    @classmethod
    def _parse_git(cls, git_data: dict[str, Any]) -> GitConfig:
        """Parse version control settings."""
        defaults = GitConfig()
        return GitConfig(
            executable=str(git_data.get("executable", defaults.executable)),
            commit_message=str(git_data.get("commit_message", defaults.commit_message)),
            push=bool(git_data.get("push", defaults.push)),
            timeout=_optional_int(git_data.get("timeout", defaults.timeout), "git.timeout"),
        )

    @classmethod
    def _parse_global_config(cls, global_data: dict[str, Any]) -> GlobalConfig:
        """Parse global configuration."""
        log_level = str(global_data.get("log_level", "INFO")).upper()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if log_level not in valid_levels:
            LOG.warning(
                "Invalid log level '%s'. Using 'INFO'. Valid options: %s",
                log_level,
                ", ".join(sorted(valid_levels)),
            )
            log_level = "INFO"

        return GlobalConfig(
            log_level=log_level,
            show_progress=bool(global_data.get("show_progress", True)),
        )


def _int_or_default(value: object, default: int, key: str) -> int:
    """Convert a config value to int, warning and falling back on bad input."""
    if value is None:
        return default
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        LOG.warning("Invalid value %r for %s. Using %d.", value, key, default)
        return default


def _optional_int(value: object, key: str) -> int | None:
    """Convert an optional config value to int; None stays None."""
    if value is None:
        return None
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        LOG.warning("Invalid value %r for %s. Ignoring it.", value, key)
        return None


def get_config() -> ArchiveConfig:
    """Get the global configuration instance."""
    return _config_singleton.get_instance()
