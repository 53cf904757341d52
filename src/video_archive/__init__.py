"""Video Archive - ingest, derive, heal and publish a numbered video library."""

from __future__ import annotations

__version__ = "0.1.0"
__description__ = "Video library maintenance: numbered archive, previews and git sync"

# Public API exports
from .config import ArchiveConfig, get_config
from .core import (
    ArchiveLayout,
    ArchiveSetupError,
    ArtifactDeriver,
    ArtifactKind,
    ConfigManager,
    FFmpegError,
    FFmpegProcessor,
    FileManager,
    GitClient,
    GitError,
    ProcessingError,
    ProcessingOptions,
    ProcessingResult,
    ProcessingStatus,
    TranscodeClient,
    VersionControlClient,
    with_config_overrides,
)
from .pipeline import ArchivePipeline, RunReport
from .processors import HealingScanner, IngestionSequencer, SyncPublisher

__all__ = [
    # Configuration
    "ArchiveConfig",
    "ConfigManager",
    "ProcessingOptions",
    "get_config",
    "with_config_overrides",
    # Core functionality
    "ArchiveLayout",
    "ArtifactDeriver",
    "FFmpegProcessor",
    "FileManager",
    "GitClient",
    "TranscodeClient",
    "VersionControlClient",
    # Processors
    "ArchivePipeline",
    "HealingScanner",
    "IngestionSequencer",
    "SyncPublisher",
    # Enums and data classes
    "ArtifactKind",
    "ProcessingResult",
    "ProcessingStatus",
    "RunReport",
    # Exceptions
    "ArchiveSetupError",
    "FFmpegError",
    "GitError",
    "ProcessingError",
]
