"""Healing: regenerate derived artifacts missing from the archive."""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tqdm import tqdm

from ..core import ArtifactKind, MediaProcessor, ProcessingError, ProcessingResult, ProcessingStatus, parse_identifier

if TYPE_CHECKING:
    from pathlib import Path

    from ..core import ArchiveLayout, ArtifactDeriver, ConfigManager


@dataclass
class HealReport:
    """Outcome of one healing pass."""

    files_healed: int = 0
    changed: bool = False
    results: list[ProcessingResult] = field(default_factory=list)


class HealingScanner(MediaProcessor):
    """Fills in low-quality copies and previews missing for archived videos."""

    def __init__(self, config_manager: ConfigManager, layout: ArchiveLayout, deriver: ArtifactDeriver) -> None:
        super().__init__("HealingScanner")
        self.config_manager = config_manager
        self.layout = layout
        self.deriver = deriver

    def can_process(self, file_path: Path) -> bool:
        """Check if file is an archived video named by its identifier."""
        extensions = {ext.lower() for ext in self.config_manager.get_value("extensions", [])}
        return file_path.suffix.lower() in extensions and parse_identifier(file_path) is not None

    def missing_artifacts(self, video_id: int) -> list[ArtifactKind]:
        """Derived artifacts absent for this identifier."""
        missing = []
        if not self.layout.low_quality_path(video_id).exists():
            missing.append(ArtifactKind.LOW_QUALITY)
        if not self.layout.preview_path(video_id).exists():
            missing.append(ArtifactKind.PREVIEW)
        return missing

    def should_process(self, file_path: Path, **_kwargs: object) -> bool:
        """Check if any derived artifact is missing for this video."""
        video_id = parse_identifier(file_path)
        return video_id is not None and bool(self.missing_artifacts(video_id))

    def find_missing(self) -> dict[int, list[ArtifactKind]]:
        """Map identifier to missing artifacts, for every incomplete video."""
        extensions = self.config_manager.get_value("extensions", [])
        missing = {}
        for video_id, _ in self.layout.iter_high_quality(extensions):
            kinds = self.missing_artifacts(video_id)
            if kinds:
                missing[video_id] = kinds
        return missing

    def process_file(self, file_path: Path, **_kwargs: object) -> ProcessingResult:
        """Derive whatever is missing for one high-quality file."""
        video_id = parse_identifier(file_path)
        if video_id is None:
            return ProcessingResult(
                source_file=file_path,
                status=ProcessingStatus.SKIPPED,
                message="File name is not an identifier",
            )

        start_time = time.time()
        lq_path = self.layout.low_quality_path(video_id)
        preview_path = self.layout.preview_path(video_id)
        created: list[str] = []
        failures: dict[str, str] = {}

        if self.config_manager.dry_run:
            kinds = ", ".join(kind.value for kind in self.missing_artifacts(video_id))
            self.logger.info("[dry-run] Would derive %s for video %d", kinds, video_id)
            return ProcessingResult(
                source_file=file_path,
                status=ProcessingStatus.SKIPPED,
                message="dry run",
                video_id=video_id,
            )

        if not lq_path.exists():
            self._heal_one(ArtifactKind.LOW_QUALITY, file_path, lq_path, video_id, created, failures)

        if not preview_path.exists():
            source = lq_path if lq_path.exists() else file_path
            self._heal_one(ArtifactKind.PREVIEW, source, preview_path, video_id, created, failures)

        return ProcessingResult(
            source_file=file_path,
            status=ProcessingStatus.FAILED if failures else ProcessingStatus.SUCCESS,
            message="; ".join(f"{kind}: {error}" for kind, error in failures.items()),
            video_id=video_id,
            step=", ".join(f"derive {kind}" for kind in failures) or None,
            processing_time=time.time() - start_time,
            metadata={"created": created},
        )

    def _heal_one(
        self,
        kind: ArtifactKind,
        source: Path,
        target: Path,
        video_id: int,
        created: list[str],
        failures: dict[str, str],
    ) -> None:
        try:
            self.deriver.derive(kind, source, target)
        except ProcessingError as e:
            self.logger.error("Healing video %d: %s derivation from %s failed: %s", video_id, kind.value, source.name, e)
            failures[kind.value] = str(e)
        else:
            created.append(kind.value)

    def heal(self) -> HealReport:
        """Regenerate every missing derived artifact in the archive."""
        report = HealReport()
        extensions = self.config_manager.get_value("extensions", [])

        try:
            entries = self.layout.iter_high_quality(extensions)
        except OSError as e:
            self.logger.error("Cannot scan %s for healing: %s", self.layout.high_quality, e)
            return report

        pending = [path for _, path in entries if self.should_process(path)]
        if not pending:
            self.logger.info("Archive is complete, nothing to heal")
            return report

        self.logger.info("Found %d archived videos with missing artifacts", len(pending))
        progress_bar = tqdm(
            total=len(pending),
            desc="Healing",
            unit="video",
            disable=not self.config_manager.get_value("global_.show_progress", default=True)
            or not sys.stderr.isatty(),
        )

        try:
            for file_path in pending:
                progress_bar.set_description(f"Healing {file_path.name}")
                result = self.process_file(file_path)
                report.results.append(result)

                healed = len(result.metadata.get("created", []))
                if healed:
                    report.files_healed += healed
                    report.changed = True
                progress_bar.update(1)
        finally:
            progress_bar.close()

        self.logger.info("Healing complete: %d artifacts created", report.files_healed)
        return report
