"""File operations on the inbox and archive, with a per-session log."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .base import ProcessingError

if TYPE_CHECKING:
    from pathlib import Path

LOG = logging.getLogger(__name__)


@dataclass
class FileOperation:
    """Represents one file operation performed during a session."""

    operation_type: str
    source_path: Path
    target_path: Path | None = None
    success: bool = False


class FileManager:
    """Copies, moves and removes files, recording every attempt."""

    def __init__(self) -> None:
        self.session_operations: list[FileOperation] = []

    def _record(self, operation_type: str, source: Path, target: Path | None, *, success: bool) -> FileOperation:
        operation = FileOperation(
            operation_type=operation_type,
            source_path=source,
            target_path=target,
            success=success,
        )
        self.session_operations.append(operation)
        return operation

    def copy_into_archive(self, source_path: Path, target_path: Path) -> FileOperation:
        """Copy a raw file to its archive path, removing any partial copy on failure."""
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source_path, target_path)
        except (OSError, shutil.Error) as e:
            self._record("copy", source_path, target_path, success=False)
            self.discard(target_path)
            msg = f"Copy {source_path} -> {target_path} failed: {e}"
            raise ProcessingError(msg, file_path=source_path, cause=e, operation="copy") from e

        LOG.debug("Copied %s -> %s", source_path, target_path)
        return self._record("copy", source_path, target_path, success=True)

    def move_into_place(self, temp_path: Path, final_path: Path) -> FileOperation:
        """Move a finished temporary file to its final name."""
        try:
            shutil.move(temp_path, final_path)
        except (OSError, shutil.Error) as e:
            self._record("move", temp_path, final_path, success=False)
            msg = f"Move {temp_path} -> {final_path} failed: {e}"
            raise ProcessingError(msg, file_path=final_path, cause=e, operation="move") from e

        LOG.debug("Moved %s -> %s", temp_path, final_path)
        return self._record("move", temp_path, final_path, success=True)

    def remove(self, file_path: Path) -> FileOperation:
        """Delete a file."""
        try:
            file_path.unlink()
        except OSError as e:
            self._record("remove", file_path, None, success=False)
            msg = f"Remove {file_path} failed: {e}"
            raise ProcessingError(msg, file_path=file_path, cause=e, operation="remove") from e

        LOG.debug("Removed %s", file_path)
        return self._record("remove", file_path, None, success=True)

    def discard(self, file_path: Path) -> None:
        """Best-effort removal of a leftover temporary or partial file."""
        try:
            if file_path.exists():
                file_path.unlink()
                LOG.debug("Discarded leftover %s", file_path)
        except OSError as e:
            LOG.warning("Failed to remove leftover file %s: %s", file_path, e)

    def get_session_summary(self) -> dict[str, Any]:
        """Get summary of file operations in this session."""
        successful_ops = [op for op in self.session_operations if op.success]
        failed_ops = [op for op in self.session_operations if not op.success]

        return {
            "total_operations": len(self.session_operations),
            "successful_operations": len(successful_ops),
            "failed_operations": len(failed_ops),
            "operations": self.session_operations,
        }
