"""Archive maintenance CLI commands."""

from __future__ import annotations

import argparse
import logging
from typing import TYPE_CHECKING

from ...config.constants import EXIT_COMPLETED_WITH_ERRORS, EXIT_FATAL, EXIT_OK
from ...core import ArchiveLayout, ProcessingError, ProcessingStatus
from ...pipeline import ArchivePipeline
from ..failure_table import print_failure_table

if TYPE_CHECKING:
    from ...core import ConfigManager
    from ...pipeline import RunReport

LOG = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        msg = f"must be a positive integer, got {value}"
        raise argparse.ArgumentTypeError(msg)
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        msg = f"must not be negative, got {value}"
        raise argparse.ArgumentTypeError(msg)
    return number


class ArchiveCommands:
    """Handlers for run, ingest, heal, publish and status."""

    COMMANDS = ("run", "ingest", "heal", "publish", "status")

    def __init__(self, config_manager: ConfigManager) -> None:
        """Initialize archive commands handler."""
        self.config_manager = config_manager

    def add_subcommands(self, subparsers: argparse._SubParsersAction) -> None:
        """Add archive subcommands to the top-level subparsers."""
        run_parser = subparsers.add_parser("run", help="Ingest the inbox, heal the archive, then publish")
        self._add_encoding_options(run_parser)
        run_parser.add_argument("--message", "-m", help="Commit message (overrides config)")
        run_parser.add_argument("--no-push", action="store_true", help="Commit locally without pushing")
        run_parser.add_argument("--skip-publish", action="store_true", help="Do not commit or push at all")

        ingest_parser = subparsers.add_parser("ingest", help="Only ingest new files from the inbox")
        self._add_encoding_options(ingest_parser)

        heal_parser = subparsers.add_parser("heal", help="Only regenerate missing low-quality copies and previews")
        self._add_encoding_options(heal_parser)

        publish_parser = subparsers.add_parser("publish", help="Commit and push pending archive changes")
        publish_parser.add_argument("--message", "-m", help="Commit message (overrides config)")
        publish_parser.add_argument("--no-push", action="store_true", help="Commit locally without pushing")

        subparsers.add_parser("status", help="Show pending inbox files and missing artifacts")

    @staticmethod
    def _add_encoding_options(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--crf", "-c", type=_non_negative_int, help="Override low-quality CRF value from config")
        parser.add_argument("--width", "-w", type=_positive_int, help="Override low-quality width in pixels")

    def handle_command(self, args: argparse.Namespace) -> int:
        """Handle archive command execution."""
        command = getattr(args, "command", None) or "run"

        if command == "status":
            return self._handle_status(args)

        pipeline = ArchivePipeline(self.config_manager, getattr(args, "base_dir", None))
        try:
            if command == "run":
                report = pipeline.run(publish=not getattr(args, "skip_publish", False))
            elif command == "ingest":
                report = pipeline.run_ingest()
            elif command == "heal":
                report = pipeline.run_heal()
            elif command == "publish":
                report = pipeline.run_publish()
            else:
                LOG.error("Unknown command: %s", command)
                return EXIT_FATAL
        except ProcessingError as e:
            LOG.error("Aborting: %s", e)
            return EXIT_FATAL

        return self._finish(report)

    def _finish(self, report: RunReport) -> int:
        """Show failures and map the report to an exit code."""
        print_failure_table(report.failures)

        if report.ingest:
            LOG.info("Ingested %d files", report.ingest.files_processed)
        if report.heal:
            LOG.info("Healed %d artifacts", report.heal.files_healed)
        if report.publish and report.publish.status is ProcessingStatus.FAILED:
            LOG.error("Publish failed at %s: %s", report.publish.failed_step, report.publish.message)

        return EXIT_COMPLETED_WITH_ERRORS if report.has_errors else EXIT_OK

    def _handle_status(self, args: argparse.Namespace) -> int:
        """Print pending inbox files and videos with missing artifacts."""
        pipeline = ArchivePipeline(self.config_manager, getattr(args, "base_dir", None))
        layout: ArchiveLayout = pipeline.layout

        missing_dirs = [d for d in layout.working_dirs if not d.is_dir()]
        if missing_dirs:
            for directory in missing_dirs:
                print(f"Missing directory: {directory}")
            print("Run 'video-archive run' to create them.")
            return EXIT_OK

        try:
            pending = pipeline.ingestor.discover_files(layout.inbox)
            missing = pipeline.healer.find_missing()
            highest = layout.highest_identifier(self.config_manager.get_value("extensions", []))
        except (OSError, ProcessingError) as e:
            LOG.error("Cannot read archive at %s: %s", layout.base_dir, e)
            return EXIT_FATAL

        print(f"Archive: {layout.base_dir}")
        print(f"Highest identifier: {highest}")
        print(f"Inbox files pending: {len(pending)}")
        for file_path in pending:
            print(f"  {file_path.name}")

        print(f"Videos with missing artifacts: {len(missing)}")
        for video_id, kinds in missing.items():
            print(f"  {video_id}: {', '.join(kind.value for kind in kinds)}")

        return EXIT_OK
