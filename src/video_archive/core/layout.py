"""Archive directory layout and identifier bookkeeping."""

from __future__ import annotations

import filecmp
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..config.constants import EMPTY_ARCHIVE_IDENTIFIER, LOW_QUALITY_SUFFIX, PREVIEW_SUFFIX
from .base import ArchiveSetupError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .config import ConfigManager

LOG = logging.getLogger(__name__)


def parse_identifier(file_path: Path) -> int | None:
    """Return the video identifier encoded in a file name, or None."""
    stem = file_path.stem
    if not stem.isdigit():
        return None
    identifier = int(stem)
    return identifier if identifier > 0 else None


@dataclass(frozen=True)
class ArchiveLayout:
    """The inbox plus the three parallel archive directories."""

    base_dir: Path
    inbox: Path
    high_quality: Path
    low_quality: Path
    previews: Path

    @classmethod
    def from_config(cls, config_manager: ConfigManager, base_dir: Path | None = None) -> ArchiveLayout:
        """Resolve the layout from CLI base dir, configured base dir, or the working directory."""
        root = base_dir or config_manager.config.base_dir or Path.cwd()
        root = Path(root).expanduser().resolve()
        dirs = config_manager.config.directories
        return cls(
            base_dir=root,
            inbox=root / dirs.inbox,
            high_quality=root / dirs.high_quality,
            low_quality=root / dirs.low_quality,
            previews=root / dirs.previews,
        )

    @property
    def working_dirs(self) -> tuple[Path, Path, Path, Path]:
        return (self.inbox, self.high_quality, self.low_quality, self.previews)

    @property
    def archive_dirs(self) -> tuple[Path, Path, Path]:
        return (self.high_quality, self.low_quality, self.previews)

    def relative_archive_dirs(self) -> list[str]:
        """Archive directories relative to the base directory, for git pathspecs."""
        return [str(d.relative_to(self.base_dir)) for d in self.archive_dirs]

    def ensure_directories(self) -> list[Path]:
        """Create any missing working directory. Returns the ones created."""
        created = []
        for directory in self.working_dirs:
            if directory.is_dir():
                continue
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                msg = f"Cannot create directory {directory}: {e}"
                raise ArchiveSetupError(msg, file_path=directory, cause=e, operation="create directory") from e
            LOG.info("Created directory %s", directory)
            created.append(directory)
        return created

    def high_quality_path(self, video_id: int, suffix: str) -> Path:
        return self.high_quality / f"{video_id}{suffix.lower()}"

    def low_quality_path(self, video_id: int) -> Path:
        return self.low_quality / f"{video_id}{LOW_QUALITY_SUFFIX}"

    def preview_path(self, video_id: int) -> Path:
        return self.previews / f"{video_id}{PREVIEW_SUFFIX}"

    def iter_high_quality(self, extensions: Iterable[str]) -> list[tuple[int, Path]]:
        """List (identifier, path) for every archived video, ascending by identifier."""
        allowed = {ext.lower() for ext in extensions}
        entries = []
        for path in self.high_quality.iterdir():
            if not path.is_file() or path.suffix.lower() not in allowed:
                continue
            video_id = parse_identifier(path)
            if video_id is None:
                LOG.debug("Ignoring %s: name is not an identifier", path.name)
                continue
            entries.append((video_id, path))
        return sorted(entries)

    def identifier_in_use(self, video_id: int) -> bool:
        """True if any high-quality file already carries this identifier."""
        return any(parse_identifier(p) == video_id for p in self.high_quality.glob(f"{video_id}.*"))

    def highest_identifier(self, extensions: Iterable[str]) -> int:
        """Highest identifier in the high-quality archive, 0 if empty or unreadable."""
        try:
            entries = self.iter_high_quality(extensions)
        except OSError as e:
            LOG.warning("Could not read %s, numbering from 1: %s", self.high_quality, e)
            return EMPTY_ARCHIVE_IDENTIFIER
        return max((video_id for video_id, _ in entries), default=EMPTY_ARCHIVE_IDENTIFIER)

    def find_archived_copy(self, raw_file: Path, extensions: Iterable[str]) -> tuple[int, Path] | None:
        """
        Find the archived video whose content is identical to a raw file.

        A raw file that stayed in the inbox after a failed derivation already
        holds an identifier; matching on content keeps it from taking a second.
        """
        try:
            size = raw_file.stat().st_size
            for video_id, path in self.iter_high_quality(extensions):
                if path.stat().st_size == size and filecmp.cmp(raw_file, path, shallow=False):
                    return video_id, path
        except OSError as e:
            LOG.warning("Could not compare %s with the archive: %s", raw_file.name, e)
        return None

    def is_complete(self, video_id: int) -> bool:
        """True if both derived files exist for this identifier."""
        return self.low_quality_path(video_id).exists() and self.preview_path(video_id).exists()
