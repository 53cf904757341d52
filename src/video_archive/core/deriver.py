"""Derived artifact production on top of the transcoder client."""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import TYPE_CHECKING

from ..config.constants import TEMP_MARKER
from .ffmpeg import FFmpegError

if TYPE_CHECKING:
    from pathlib import Path

    from .config import ConfigManager
    from .ffmpeg import TranscodeClient
    from .file_manager import FileManager

LOG = logging.getLogger(__name__)


class ArtifactKind(Enum):
    """Artifacts derived from an archived video."""

    LOW_QUALITY = "low-quality"
    PREVIEW = "preview"


def temp_path_for(target: Path) -> Path:
    """Sibling path a derived file is written to before being moved into place."""
    return target.with_name(f"{target.stem}{TEMP_MARKER}{target.suffix}")


class ArtifactDeriver:
    """Produces low-quality copies and preview frames, or raises."""

    def __init__(self, transcoder: TranscodeClient, file_manager: FileManager, config_manager: ConfigManager) -> None:
        self.transcoder = transcoder
        self.file_manager = file_manager
        self.config_manager = config_manager

    def derive(self, kind: ArtifactKind, source: Path, target: Path) -> Path:
        """
        Derive one artifact from source into target.

        The transcoder writes to a temporary sibling which is moved to target
        only on success, so target never holds a half-written file.

        Raises:
            FFmpegError: transcoding failed or produced nothing
            ProcessingError: the finished file could not be moved into place

        """
        temp_path = temp_path_for(target)
        start_time = time.time()
        LOG.info("Deriving %s %s from %s", kind.value, target.name, source.name)

        try:
            if kind is ArtifactKind.LOW_QUALITY:
                self.transcoder.transcode_low_quality(source, temp_path, self.config_manager.low_quality_settings())
            else:
                self.transcoder.extract_preview(source, temp_path, self.config_manager.preview_settings())

            if not temp_path.is_file():
                msg = f"Transcoder produced no {kind.value} output for {source}"
                raise FFmpegError(msg, file_path=source, operation=f"derive {kind.value}")

            self.file_manager.move_into_place(temp_path, target)
        except Exception:
            self.file_manager.discard(temp_path)
            raise

        LOG.debug("Derived %s in %.2fs", target, time.time() - start_time)
        return target
