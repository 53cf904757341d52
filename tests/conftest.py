"""Shared fixtures: fake transcoder and git clients, a ready archive layout."""

from __future__ import annotations

from pathlib import Path

import pytest

from video_archive.config import ArchiveConfig, GlobalConfig
from video_archive.core import ConfigManager, FFmpegError, GitError
from video_archive.pipeline import ArchivePipeline


class FakeTranscoder:
    """Writes placeholder outputs and records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Path, Path]] = []
        self.available = True
        self.fail_kinds: set[str] = set()
        self.fail_sources: set[str] = set()
        self.fail_once_kinds: set[str] = set()

    def check_availability(self) -> str:
        if not self.available:
            msg = "Transcoder executable not found: ffmpeg"
            raise FFmpegError(msg, operation="validate")
        return "/usr/bin/ffmpeg"

    def _run(self, kind: str, source: Path, target: Path) -> None:
        self.calls.append((kind, source, target))
        fail_once = kind in self.fail_once_kinds
        self.fail_once_kinds.discard(kind)
        if fail_once or kind in self.fail_kinds or source.name in self.fail_sources:
            # Leave a partial file behind like a crashed ffmpeg would
            target.write_bytes(b"partial")
            msg = f"FFmpeg failed with return code 1: cannot {kind} {source.name}"
            raise FFmpegError(msg, return_code=1, file_path=source, operation=f"derive {kind}")
        target.write_bytes(f"{kind} of {source.name}".encode())

    def transcode_low_quality(self, source: Path, target: Path, settings: object) -> None:
        self._run("low-quality", source, target)

    def extract_preview(self, source: Path, target: Path, settings: object) -> None:
        self._run("preview", source, target)


class FakeGit:
    """Records git steps; can report a dirty tree or fail a step."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.status_lines: list[str] = []
        self.fail_step: str | None = None
        self.status_error = False
        self.commit_messages: list[str] = []

    def _step(self, name: str) -> None:
        self.calls.append(name)
        if name == self.fail_step:
            msg = f"git {name} failed with return code 1"
            raise GitError(msg, return_code=1, operation=name)

    def status(self, paths: list[str]) -> list[str]:
        self.calls.append("status")
        if self.status_error:
            msg = "git status failed with return code 128: not a git repository"
            raise GitError(msg, return_code=128, operation="status")
        return list(self.status_lines)

    def stage_all(self, paths: list[str]) -> None:
        self._step("stage")

    def commit(self, message: str) -> None:
        self._step("commit")
        self.commit_messages.append(message)

    def push(self) -> None:
        self._step("push")


@pytest.fixture
def config_manager() -> ConfigManager:
    """Default configuration with progress bars off."""
    return ConfigManager(config=ArchiveConfig(global_=GlobalConfig(show_progress=False)))


@pytest.fixture
def transcoder() -> FakeTranscoder:
    return FakeTranscoder()


@pytest.fixture
def git() -> FakeGit:
    return FakeGit()


@pytest.fixture
def pipeline(tmp_path, config_manager, transcoder, git) -> ArchivePipeline:
    """Pipeline over tmp_path with working directories created."""
    archive = ArchivePipeline(config_manager, tmp_path, transcoder=transcoder, vcs=git)
    archive.layout.ensure_directories()
    return archive


def add_raw(pipeline: ArchivePipeline, name: str, content: bytes | None = None) -> Path:
    """Drop a raw file into the inbox; content defaults to something unique per name."""
    path = pipeline.layout.inbox / name
    path.write_bytes(content if content is not None else f"raw video {name}".encode())
    return path


def add_archived(pipeline: ArchivePipeline, video_id: int, *, lq: bool = False, preview: bool = False) -> Path:
    layout = pipeline.layout
    hq_path = layout.high_quality_path(video_id, ".mp4")
    hq_path.write_bytes(b"hq")
    if lq:
        layout.low_quality_path(video_id).write_bytes(b"lq")
    if preview:
        layout.preview_path(video_id).write_bytes(b"jpg")
    return hq_path
