"""FFmpeg integration for deriving preview copies and still frames."""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from typing import TYPE_CHECKING, Protocol

from .base import ProcessingError

if TYPE_CHECKING:
    from pathlib import Path

    from ..config import LowQualityConfig, PreviewConfig

LOG = logging.getLogger(__name__)


class FFmpegError(ProcessingError):
    """FFmpeg-specific error."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        return_code: int | None = None,
        stderr: str | None = None,
        file_path: Path | None = None,
        operation: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize FFmpeg error with detailed context."""
        super().__init__(message, file_path=file_path, cause=cause, operation=operation)
        self.command = command
        self.return_code = return_code
        self.stderr = stderr


class TranscodeClient(Protocol):
    """What the archive needs from a transcoder."""

    def check_availability(self) -> str:
        """Return the resolved executable or raise FFmpegError."""
        ...

    def transcode_low_quality(self, source: Path, target: Path, settings: LowQualityConfig) -> None:
        """Write a scaled-down copy of source to target."""
        ...

    def extract_preview(self, source: Path, target: Path, settings: PreviewConfig) -> None:
        """Write a single still frame of source to target."""
        ...


class FFmpegProcessor:
    """FFmpeg command executor with enhanced error handling."""

    def __init__(self, executable: str = "ffmpeg", timeout: int | None = None) -> None:
        """Initialize FFmpeg processor with executable and optional timeout."""
        self.executable = executable
        self.timeout = timeout

    def check_availability(self) -> str:
        """Check that the configured ffmpeg executable exists and is runnable."""
        resolved = shutil.which(self.executable)
        if not resolved:
            error_msg = f"Transcoder executable not found: {self.executable}"
            LOG.error(error_msg)
            raise FFmpegError(error_msg, operation="validate")
        LOG.debug("Using transcoder at %s", resolved)
        return resolved

    def run_command(self, command: list[str], file_path: Path | None = None, operation: str = "transcode") -> None:
        """Run FFmpeg command with proper error handling."""
        LOG.debug("Running FFmpeg command: %s", " ".join(command))
        start_time = time.time()

        try:
            result = subprocess.run(  # noqa: S603
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,  # We'll handle return code ourselves
                encoding="utf-8",
                errors="replace",
            )
        except subprocess.TimeoutExpired as e:
            msg = f"FFmpeg command timed out after {self.timeout}s"
            raise FFmpegError(msg, command=command, file_path=file_path, operation=operation, cause=e) from e
        except OSError as e:
            msg = f"Could not start FFmpeg: {e}"
            raise FFmpegError(msg, command=command, file_path=file_path, operation=operation, cause=e) from e

        LOG.debug("FFmpeg command completed in %.2fs", time.time() - start_time)

        if result.returncode != 0:
            self._handle_ffmpeg_error(result, command, file_path, operation)

    def _handle_ffmpeg_error(
        self,
        result: subprocess.CompletedProcess,
        command: list[str],
        file_path: Path | None,
        operation: str,
    ) -> None:
        """Handle FFmpeg command error by raising appropriate exception."""
        error_msg = f"FFmpeg failed with return code {result.returncode}"
        if result.stderr:
            # ffmpeg prints its banner first; the cause is on the last lines
            error_msg += f": {result.stderr.strip().splitlines()[-1]}"

        raise FFmpegError(
            error_msg,
            command=command,
            return_code=result.returncode,
            stderr=result.stderr,
            file_path=file_path,
            operation=operation,
        )

    def build_low_quality_command(self, input_file: Path, output_file: Path, settings: LowQualityConfig) -> list[str]:
        """Build FFmpeg command for the scaled-down preview copy."""
        return [
            self.executable,
            "-y",
            "-i",
            str(input_file),
            # -2 keeps the aspect ratio with an even height, which libx264 requires
            "-vf",
            f"scale={settings.width}:-2",
            "-c:v",
            settings.codec,
            "-preset",
            settings.preset,
            "-crf",
            str(settings.crf),
            "-c:a",
            settings.audio_codec,
            str(output_file),
        ]

    def build_preview_command(self, input_file: Path, output_file: Path, settings: PreviewConfig) -> list[str]:
        """Build FFmpeg command for a single still frame."""
        return [
            self.executable,
            "-y",
            "-ss",
            f"{settings.seek_seconds:g}",
            "-i",
            str(input_file),
            "-frames:v",
            "1",
            "-q:v",
            str(settings.quality),
            str(output_file),
        ]

    def transcode_low_quality(self, source: Path, target: Path, settings: LowQualityConfig) -> None:
        """Transcode source into a low-quality copy at target."""
        command = self.build_low_quality_command(source, target, settings)
        self.run_command(command, source, operation="derive low-quality")

    def extract_preview(self, source: Path, target: Path, settings: PreviewConfig) -> None:
        """Extract a preview frame of source into target."""
        command = self.build_preview_command(source, target, settings)
        self.run_command(command, source, operation="derive preview")
