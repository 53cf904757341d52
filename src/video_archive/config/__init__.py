"""Configuration management for the video archive."""

from __future__ import annotations

from .constants import *  # noqa: F403, F401
from .settings import (
    ArchiveConfig,
    DirectoriesConfig,
    GitConfig,
    GlobalConfig,
    LowQualityConfig,
    PreviewConfig,
    TranscoderConfig,
    get_config,
)

__all__ = [
    "ArchiveConfig",
    "DirectoriesConfig",
    "GitConfig",
    "GlobalConfig",
    "LowQualityConfig",
    "PreviewConfig",
    "TranscoderConfig",
    "get_config",
]
