"""Run orchestration: setup, ingestion, healing, publishing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .core import ArchiveLayout, ArtifactDeriver, FFmpegProcessor, FileManager, GitClient, ProcessingStatus
from .processors import HealingScanner, IngestionSequencer, SyncPublisher

if TYPE_CHECKING:
    from pathlib import Path

    from .core import ConfigManager, ProcessingResult, TranscodeClient, VersionControlClient
    from .processors import HealReport, IngestReport, PublishResult

LOG = logging.getLogger(__name__)


@dataclass
class RunReport:
    """Everything one run did."""

    ingest: IngestReport | None = None
    heal: HealReport | None = None
    publish: PublishResult | None = None

    @property
    def changed(self) -> bool:
        return bool((self.ingest and self.ingest.changed) or (self.heal and self.heal.changed))

    @property
    def failures(self) -> list[ProcessingResult]:
        results = []
        if self.ingest:
            results.extend(r for r in self.ingest.results if r.failed)
        if self.heal:
            results.extend(r for r in self.heal.results if r.failed)
        return results

    @property
    def has_errors(self) -> bool:
        publish_failed = self.publish is not None and self.publish.status is ProcessingStatus.FAILED
        return publish_failed or bool(self.failures)


class ArchivePipeline:
    """
    Drives one maintenance run over a base directory.

    Only one instance may work on a base directory at a time: identifiers
    are taken from the files on disk with no locking.
    """

    def __init__(
        self,
        config_manager: ConfigManager,
        base_dir: Path | None = None,
        *,
        transcoder: TranscodeClient | None = None,
        vcs: VersionControlClient | None = None,
    ) -> None:
        config = config_manager.config
        self.config_manager = config_manager
        self.layout = ArchiveLayout.from_config(config_manager, base_dir)
        self.transcoder = transcoder or FFmpegProcessor(
            executable=config.transcoder.executable,
            timeout=config.transcoder.timeout,
        )
        self.vcs = vcs or GitClient(self.layout.base_dir, executable=config.git.executable, timeout=config.git.timeout)
        self.file_manager = FileManager()

        deriver = ArtifactDeriver(self.transcoder, self.file_manager, config_manager)
        self.ingestor = IngestionSequencer(config_manager, self.layout, deriver, self.file_manager)
        self.healer = HealingScanner(config_manager, self.layout, deriver)
        self.publisher = SyncPublisher(self.vcs, self.layout, config_manager)

    def prepare(self) -> int:
        """
        Create working directories and check the transcoder.

        Returns:
            The identifier the next ingested file gets.

        Raises:
            ArchiveSetupError: a working directory cannot be created
            FFmpegError: the transcoder executable is missing

        """
        LOG.info("Using archive at %s", self.layout.base_dir)
        self.layout.ensure_directories()
        self.transcoder.check_availability()

        highest = self.layout.highest_identifier(self.config_manager.get_value("extensions", []))
        LOG.info("Highest archived identifier is %d", highest)
        return highest + 1

    def run(self, *, publish: bool = True) -> RunReport:
        """Ingest, heal and publish, in that order."""
        next_id = self.prepare()
        report = RunReport()

        report.ingest = self.ingestor.ingest(next_id)
        # Healing after ingestion only picks up files whose own derivation failed
        report.heal = self.healer.heal()
        self.ingestor.release_completed(report.ingest)

        if publish:
            report.publish = self.publisher.publish(report.changed)
        else:
            LOG.info("Publishing skipped on request")

        self._log_summary(report)
        return report

    def run_ingest(self) -> RunReport:
        """Ingest the inbox without healing or publishing."""
        report = RunReport(ingest=self.ingestor.ingest(self.prepare()))
        self._log_summary(report)
        return report

    def run_heal(self) -> RunReport:
        """Heal the archive without ingesting or publishing."""
        self.prepare()
        report = RunReport(heal=self.healer.heal())
        self._log_summary(report)
        return report

    def run_publish(self) -> RunReport:
        """Publish whatever the working tree holds."""
        self.layout.ensure_directories()
        return RunReport(publish=self.publisher.publish(changed=False))

    def _log_summary(self, report: RunReport) -> None:
        summary = self.file_manager.get_session_summary()
        LOG.info(
            "Run complete: %d file operations (%d failed), %d item failures",
            summary["total_operations"],
            summary["failed_operations"],
            len(report.failures),
        )
