"""Main CLI interface for the video archive."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ..config.constants import EXIT_FATAL, EXIT_INTERRUPTED
from ..core import ConfigManager, ProcessingOptions, with_config_overrides
from .commands import ArchiveCommands, UtilityCommands


class ArchiveCLI:
    """Main CLI interface."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_manager = ConfigManager(config_path)
        self.archive_commands = ArchiveCommands(self.config_manager)
        self.utility_commands = UtilityCommands(self.config_manager)

    @staticmethod
    def setup_logging(verbosity: int, *, quiet: bool = False, default_level: str = "INFO") -> None:
        """Setup logging from the configured level and -v/-q flags."""
        if quiet:
            level = logging.WARNING
        elif verbosity >= 1:
            level = logging.DEBUG
        else:
            level = getattr(logging, default_level.upper(), logging.INFO)

        log_format = "%(levelname)s: %(name)s: %(message)s" if verbosity >= 2 else "%(levelname)s: %(message)s"

        logging.basicConfig(level=level, format=log_format, handlers=[logging.StreamHandler(sys.stderr)])

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the argument parser."""
        parser = argparse.ArgumentParser(
            prog="video-archive",
            description="Ingest raw videos into a numbered archive, derive previews and publish with git",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Full maintenance run (default command)
  video-archive --base-dir /srv/videos run

  # Re-encode previews smaller and commit without pushing
  video-archive run --width 480 --crf 28 --no-push

  # See what is pending without touching anything
  video-archive status
            """,
        )

        # Global options
        parser.add_argument(
            "-v",
            "--verbose",
            action="count",
            default=0,
            help="Increase verbosity (-v for debug, -vv adds logger names)",
        )
        parser.add_argument("-q", "--quiet", action="store_true", help="Only show warnings and errors")
        parser.add_argument("--config", type=Path, help="Path to configuration file")
        parser.add_argument("--base-dir", "-d", type=Path, help="Archive base directory (overrides config)")
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be done without actually doing it",
        )
        parser.add_argument("--no-progress", action="store_true", help="Disable progress bars")

        subparsers = parser.add_subparsers(dest="command", help="Available commands (default: run)")
        self.archive_commands.add_subcommands(subparsers)
        self.utility_commands.add_subcommands(subparsers)

        return parser

    @staticmethod
    def create_processing_options(args: argparse.Namespace) -> ProcessingOptions:
        """Create processing options from CLI arguments."""
        return ProcessingOptions(
            dry_run=getattr(args, "dry_run", False),
            push=False if getattr(args, "no_push", False) else None,
            commit_message=getattr(args, "message", None),
            crf=getattr(args, "crf", None),
            width=getattr(args, "width", None),
            show_progress=False if getattr(args, "no_progress", False) else None,
        )

    def _use_config(self, config_path: Path) -> None:
        self.config_manager = ConfigManager(config_path)
        self.archive_commands.config_manager = self.config_manager
        self.utility_commands.config_manager = self.config_manager

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parser = self.build_parser()
        parsed_args = parser.parse_args(args)

        # Update config manager if custom config provided
        if getattr(parsed_args, "config", None):
            self._use_config(parsed_args.config)

        self.setup_logging(
            parsed_args.verbose,
            quiet=parsed_args.quiet,
            default_level=self.config_manager.config.global_.log_level,
        )
        log = logging.getLogger(__name__)

        processing_options = self.create_processing_options(parsed_args)

        try:
            with with_config_overrides(self.config_manager) as config_mgr:
                config_mgr.apply_processing_options(processing_options)

                if parsed_args.command in (None, *ArchiveCommands.COMMANDS):
                    return self.archive_commands.handle_command(parsed_args)
                return self.utility_commands.handle_command(parsed_args)

        except KeyboardInterrupt:
            log.info("Operation cancelled by user")
            return EXIT_INTERRUPTED
        except Exception as e:
            log.exception("Unexpected error: %s", e)
            return EXIT_FATAL


def main(args: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    cli = ArchiveCLI()
    return cli.run(args)


if __name__ == "__main__":
    sys.exit(main())
