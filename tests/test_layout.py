"""Tests for directory layout and identifier bookkeeping."""

from pathlib import Path
from unittest.mock import patch

import pytest

from video_archive.config import ArchiveConfig, DirectoriesConfig
from video_archive.core import ArchiveLayout, ConfigManager, FileManager, ProcessingError, parse_identifier

EXTENSIONS = [".mp4", ".mkv"]


@pytest.mark.parametrize(
    ("name", "expected"),
    [("1.mp4", 1), ("42.mkv", 42), ("007.mp4", 7), ("0.mp4", None), ("3.tmp.mp4", None), ("clip.mp4", None)],
)
def test_parse_identifier(name: str, expected: int | None) -> None:
    assert parse_identifier(Path(name)) == expected


def test_layout_uses_configured_directory_names(tmp_path) -> None:
    config = ArchiveConfig(directories=DirectoriesConfig(inbox="incoming", previews="thumbs"))

    layout = ArchiveLayout.from_config(ConfigManager(config=config), tmp_path)

    assert layout.inbox == tmp_path.resolve() / "incoming"
    assert layout.previews == tmp_path.resolve() / "thumbs"
    assert layout.low_quality_path(5).name == "5.mp4"
    assert layout.preview_path(5).name == "5.jpg"
    assert layout.high_quality_path(5, ".MOV").name == "5.mov"


def test_ensure_directories_creates_missing_only(tmp_path, config_manager) -> None:
    layout = ArchiveLayout.from_config(config_manager, tmp_path)
    layout.inbox.mkdir()

    created = layout.ensure_directories()

    assert created == [layout.high_quality, layout.low_quality, layout.previews]
    assert layout.ensure_directories() == []


def test_highest_identifier(tmp_path, config_manager) -> None:
    layout = ArchiveLayout.from_config(config_manager, tmp_path)
    layout.ensure_directories()
    assert layout.highest_identifier(EXTENSIONS) == 0

    for name in ("2.mp4", "10.mkv", "9.mp4", "99.txt", "notes.mp4"):
        (layout.high_quality / name).write_bytes(b"x")

    assert layout.highest_identifier(EXTENSIONS) == 10
    assert [video_id for video_id, _ in layout.iter_high_quality(EXTENSIONS)] == [2, 9, 10]


def test_unreadable_archive_numbers_from_zero(tmp_path, config_manager, caplog) -> None:
    layout = ArchiveLayout.from_config(config_manager, tmp_path)

    with patch.object(ArchiveLayout, "iter_high_quality", side_effect=PermissionError("denied")):
        assert layout.highest_identifier(EXTENSIONS) == 0

    assert "numbering from 1" in caplog.text


def test_find_archived_copy_matches_on_content(tmp_path, config_manager) -> None:
    layout = ArchiveLayout.from_config(config_manager, tmp_path)
    layout.ensure_directories()
    raw = layout.inbox / "clip.mkv"
    raw.write_bytes(b"video bytes")
    (layout.high_quality / "1.mp4").write_bytes(b"other")
    (layout.high_quality / "2.mkv").write_bytes(b"video bytes")

    assert layout.find_archived_copy(raw, EXTENSIONS) == (2, layout.high_quality / "2.mkv")

    raw.write_bytes(b"video BYTES")
    assert layout.find_archived_copy(raw, EXTENSIONS) is None


def test_is_complete_needs_both_derived_files(tmp_path, config_manager) -> None:
    layout = ArchiveLayout.from_config(config_manager, tmp_path)
    layout.ensure_directories()
    layout.low_quality_path(5).write_bytes(b"lq")
    assert not layout.is_complete(5)

    layout.preview_path(5).write_bytes(b"jpg")
    assert layout.is_complete(5)


def test_file_manager_copy_failure_removes_partial_copy(tmp_path) -> None:
    manager = FileManager()
    target = tmp_path / "1.mp4"

    def partial_copy(source, destination):
        Path(destination).write_bytes(b"half")
        raise OSError("No space left on device")

    with patch("video_archive.core.file_manager.shutil.copy2", side_effect=partial_copy):
        with pytest.raises(ProcessingError) as exc_info:
            manager.copy_into_archive(tmp_path / "raw.mp4", target)

    assert exc_info.value.operation == "copy"
    assert not target.exists()
    assert manager.get_session_summary()["failed_operations"] == 1
