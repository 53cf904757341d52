"""Inbox ingestion: numbering raw videos and deriving their artifacts."""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tqdm import tqdm

from ..core import ArtifactKind, MediaProcessor, ProcessingError, ProcessingResult, ProcessingStatus

if TYPE_CHECKING:
    from pathlib import Path

    from ..core import ArchiveLayout, ArtifactDeriver, ConfigManager, FileManager


@dataclass
class IngestReport:
    """Outcome of one pass over the inbox."""

    next_id: int
    files_processed: int = 0
    changed: bool = False
    results: list[ProcessingResult] = field(default_factory=list)


class IngestionSequencer(MediaProcessor):
    """Moves raw inbox videos into the archive under sequential identifiers."""

    def __init__(
        self,
        config_manager: ConfigManager,
        layout: ArchiveLayout,
        deriver: ArtifactDeriver,
        file_manager: FileManager,
    ) -> None:
        super().__init__("IngestionSequencer")
        self.config_manager = config_manager
        self.layout = layout
        self.deriver = deriver
        self.file_manager = file_manager

    def can_process(self, file_path: Path) -> bool:
        """Check if file is a visible video with a supported extension."""
        extensions = {ext.lower() for ext in self.config_manager.get_value("extensions", [])}
        return not file_path.name.startswith(".") and file_path.suffix.lower() in extensions

    def should_process(self, file_path: Path, **_kwargs: object) -> bool:
        """Raw files are ingested as long as they are still in the inbox."""
        return file_path.is_file()

    def process_file(self, file_path: Path, **kwargs: object) -> ProcessingResult:
        """
        Ingest one raw file under the given identifier.

        Steps run in order: copy to the high-quality archive, derive the
        low-quality copy, derive the preview from it, remove the raw file.
        The first failing step ends processing of this file. The raw file is
        only removed once every artifact exists.

        When ``archived`` names a high-quality file already holding this
        video, the copy is skipped and only missing derived files are made.

        Keyword Args:
            video_id: identifier to assign
            archived: existing high-quality copy of the raw file, if any

        Returns:
            Result with ``metadata["copied"]`` telling whether a new
            identifier was taken by a high-quality file, and
            ``metadata["changed"]`` whether anything was written.

        """
        video_id = int(kwargs["video_id"])  # type: ignore[call-overload]
        archived: Path | None = kwargs.get("archived")  # type: ignore[assignment]
        start_time = time.time()
        hq_path = archived or self.layout.high_quality_path(video_id, file_path.suffix)
        lq_path = self.layout.low_quality_path(video_id)
        preview_path = self.layout.preview_path(video_id)

        if self.config_manager.dry_run:
            if archived:
                self.logger.info("[dry-run] Would complete video %d from %s", video_id, file_path.name)
            else:
                self.logger.info("[dry-run] Would ingest %s as %s", file_path.name, hq_path.name)
            return ProcessingResult(
                source_file=file_path,
                status=ProcessingStatus.SKIPPED,
                message="dry run",
                output_file=hq_path,
                video_id=video_id,
                metadata={"reused": archived is not None},
            )

        steps = []
        if archived:
            self.logger.info("%s is already archived as video %d, completing it", file_path.name, video_id)
        else:
            self.logger.info("Ingesting %s as video %d", file_path.name, video_id)
            steps.append(("copy", lambda: self.file_manager.copy_into_archive(file_path, hq_path)))
        if not archived or not lq_path.exists():
            steps.append(
                ("derive low-quality", lambda: self.deriver.derive(ArtifactKind.LOW_QUALITY, hq_path, lq_path))
            )
        if not archived or not preview_path.exists():
            steps.append(
                ("derive preview", lambda: self.deriver.derive(ArtifactKind.PREVIEW, lq_path, preview_path))
            )

        completed: list[str] = []
        for step, action in steps:
            try:
                action()
            except ProcessingError as e:
                self.logger.error("Ingest of %s (video %d) failed at %s: %s", file_path.name, video_id, step, e)
                return ProcessingResult(
                    source_file=file_path,
                    status=ProcessingStatus.FAILED,
                    message=str(e),
                    output_file=hq_path if archived or completed else None,
                    video_id=video_id,
                    step=step,
                    processing_time=time.time() - start_time,
                    metadata={
                        "copied": "copy" in completed,
                        "reused": archived is not None,
                        "changed": bool(completed),
                    },
                )
            completed.append(step)

        inbox_removed = self._remove_raw(file_path)
        return ProcessingResult(
            source_file=file_path,
            status=ProcessingStatus.SUCCESS,
            message="" if inbox_removed else "Archived, but raw file was not removed",
            output_file=hq_path,
            video_id=video_id,
            processing_time=time.time() - start_time,
            metadata={
                "copied": "copy" in completed,
                "reused": archived is not None,
                "changed": bool(completed),
                "inbox_removed": inbox_removed,
            },
        )

    def _remove_raw(self, file_path: Path) -> bool:
        try:
            self.file_manager.remove(file_path)
        except ProcessingError as e:
            # The archive copy stands; the next run matches the file to it again
            self.logger.warning("Could not remove %s from the inbox: %s", file_path.name, e)
            return False
        return True

    def _first_free_identifier(self, video_id: int) -> int:
        """Skip identifiers already held by a high-quality file."""
        while self.layout.identifier_in_use(video_id):
            self.logger.warning("Identifier %d is already in use in %s, skipping it", video_id, self.layout.high_quality)
            video_id += 1
        return video_id

    def ingest(self, next_id: int) -> IngestReport:
        """Ingest every raw file in the inbox, numbering from next_id."""
        report = IngestReport(next_id=next_id)
        try:
            files = [f for f in self.discover_files(self.layout.inbox) if self.should_process(f)]
        except ProcessingError as e:
            self.logger.error("Skipping ingestion: %s", e)
            report.results.append(
                ProcessingResult(
                    source_file=self.layout.inbox,
                    status=ProcessingStatus.ERROR,
                    message=str(e),
                    step="scan",
                )
            )
            return report

        if not files:
            self.logger.info("Inbox %s is empty", self.layout.inbox)
            return report

        self.logger.info("Found %d new files in %s", len(files), self.layout.inbox)
        extensions = self.config_manager.get_value("extensions", [])
        progress_bar = tqdm(
            total=len(files),
            desc="Ingesting",
            unit="file",
            disable=not self.config_manager.get_value("global_.show_progress", default=True)
            or not sys.stderr.isatty(),
        )

        try:
            for file_path in files:
                progress_bar.set_description(f"Ingesting {file_path.name}")
                match = self.layout.find_archived_copy(file_path, extensions)
                if match:
                    video_id, archived = match
                    result = self._process_safely(file_path, video_id, archived)
                else:
                    video_id = self._first_free_identifier(report.next_id)
                    result = self._process_safely(file_path, video_id)
                    if result.metadata.get("copied") or result.status is ProcessingStatus.SKIPPED:
                        report.next_id = video_id + 1
                report.results.append(result)

                if result.metadata.get("changed"):
                    report.changed = True
                if result.status is ProcessingStatus.SUCCESS:
                    report.files_processed += 1
                progress_bar.update(1)
        finally:
            progress_bar.close()

        self.logger.info(
            "Ingestion complete: %d of %d files archived, next identifier %d",
            report.files_processed,
            len(files),
            report.next_id,
        )
        return report

    def release_completed(self, report: IngestReport) -> int:
        """
        Remove raw files whose archive record was completed after ingestion.

        Ingestion keeps the raw file when a derivation fails. Once healing has
        made the missing files, the archive holds the whole record and the
        raw file can go. Returns the number of raw files removed.
        """
        if self.config_manager.dry_run:
            return 0

        released = 0
        for result in report.results:
            held = result.metadata.get("copied") or result.metadata.get("reused")
            if not result.failed or not held or result.video_id is None:
                continue
            if not result.source_file.exists() or not self.layout.is_complete(result.video_id):
                continue
            if self._remove_raw(result.source_file):
                self.logger.info(
                    "Video %d is complete, removed %s from the inbox", result.video_id, result.source_file.name
                )
                result.metadata["inbox_removed"] = True
                released += 1
        return released

    def _process_safely(self, file_path: Path, video_id: int, archived: Path | None = None) -> ProcessingResult:
        """Run process_file, turning unexpected errors into an error result."""
        try:
            return self.process_file(file_path, video_id=video_id, archived=archived)
        except Exception as e:
            self.logger.exception("Unexpected error ingesting %s", file_path)
            copied = archived is None and self.layout.identifier_in_use(video_id)
            return ProcessingResult(
                source_file=file_path,
                status=ProcessingStatus.ERROR,
                message=str(e),
                video_id=video_id,
                metadata={"copied": copied, "reused": archived is not None, "changed": copied},
            )
