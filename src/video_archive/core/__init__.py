"""Core abstractions and utilities for the video archive."""

from .base import ArchiveSetupError, MediaProcessor, ProcessingError, ProcessingResult, ProcessingStatus
from .config import ConfigManager, ProcessingOptions, with_config_overrides
from .deriver import ArtifactDeriver, ArtifactKind
from .ffmpeg import FFmpegError, FFmpegProcessor, TranscodeClient
from .file_manager import FileManager, FileOperation
from .git import GitClient, GitError, VersionControlClient
from .layout import ArchiveLayout, parse_identifier

__all__ = [
    "ArchiveLayout",
    "ArchiveSetupError",
    "ArtifactDeriver",
    "ArtifactKind",
    "ConfigManager",
    "FFmpegError",
    "FFmpegProcessor",
    "FileManager",
    "FileOperation",
    "GitClient",
    "GitError",
    "MediaProcessor",
    "ProcessingError",
    "ProcessingOptions",
    "ProcessingResult",
    "ProcessingStatus",
    "TranscodeClient",
    "VersionControlClient",
    "parse_identifier",
    "with_config_overrides",
]
