"""Base classes and interfaces for archive processing."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

LOG = logging.getLogger(__name__)


class ProcessingStatus(Enum):
    """Status of a processing operation."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class ProcessingResult:
    """Result of processing one inbox file or one archived video."""

    source_file: Path
    status: ProcessingStatus
    message: str = ""
    output_file: Path | None = None
    video_id: int | None = None
    step: str | None = None  # Step that failed, if any
    processing_time: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        """True for failed or errored results."""
        return self.status in {ProcessingStatus.FAILED, ProcessingStatus.ERROR}


class ProcessingError(Exception):
    """Base exception for archive processing errors."""

    def __init__(
        self,
        message: str,
        file_path: Path | None = None,
        cause: Exception | None = None,
        *,
        operation: str | None = None,
    ) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.cause = cause
        self.operation = operation


class ArchiveSetupError(ProcessingError):
    """A working directory could not be created or read."""


class MediaProcessor(ABC):
    """Abstract base class for archive processors."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @abstractmethod
    def can_process(self, file_path: Path) -> bool:
        """Check if this processor can handle the given file."""

    @abstractmethod
    def should_process(self, file_path: Path, **kwargs) -> bool:
        """Check if the file needs work."""

    @abstractmethod
    def process_file(self, file_path: Path, **kwargs) -> ProcessingResult:
        """Process a single file."""

    def discover_files(self, directory: Path) -> list[Path]:
        """List compatible files in a directory, sorted by name."""
        if not directory.exists():
            msg = f"Directory does not exist: {directory}"
            raise ProcessingError(msg, file_path=directory, operation="scan")

        try:
            files = sorted(
                (f for f in directory.iterdir() if f.is_file() and self.can_process(f)),
                key=lambda f: f.name,
            )
        except OSError as e:
            msg = f"Cannot list directory {directory}: {e}"
            raise ProcessingError(msg, file_path=directory, cause=e, operation="scan") from e

        self.logger.debug("Found %d files in %s", len(files), directory)
        return files
