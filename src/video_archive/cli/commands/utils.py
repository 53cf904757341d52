"""Utility CLI commands."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from ...config.constants import EXIT_OK
from ...core import ArchiveLayout

if TYPE_CHECKING:
    import argparse

    from ...core import ConfigManager

LOG = logging.getLogger(__name__)


class UtilityCommands:
    """Utility command handlers."""

    def __init__(self, config_manager: ConfigManager) -> None:
        """Initialize utility commands handler."""
        self.config_manager = config_manager

    def add_subcommands(self, subparsers: argparse._SubParsersAction) -> None:
        """Add utility subcommands to the top-level subparsers."""
        subparsers.add_parser("info", help="Show configuration and tool availability")

    def handle_command(self, args: argparse.Namespace) -> int:
        """Handle utility command execution."""
        if args.command == "info":
            return self._handle_info(args)
        LOG.error("Unknown utility command: %s", args.command)
        return 1

    def _handle_info(self, args: argparse.Namespace) -> int:
        """Show resolved layout, encoding settings and external tools."""
        config = self.config_manager.config
        layout = ArchiveLayout.from_config(self.config_manager, getattr(args, "base_dir", None))

        print("Directories:")
        for label, directory in zip(("inbox", "high quality", "low quality", "previews"), layout.working_dirs):
            state = "✓" if directory.is_dir() else "✗ missing"
            print(f"  {label:<13} {directory} {state}")

        lq = self.config_manager.low_quality_settings()
        preview = self.config_manager.preview_settings()
        print(f"Low quality: width {lq.width}, {lq.codec} preset {lq.preset}, CRF {lq.crf}, audio {lq.audio_codec}")
        print(f"Preview: frame at {preview.seek_seconds:g}s, quality {preview.quality}")
        print(f"Extensions: {', '.join(self.config_manager.get_value('extensions', []))}")
        print(f"Commit message: {self.config_manager.get_value('git.commit_message')}")
        print(f"Push: {'yes' if self.config_manager.get_value('git.push') else 'no'}")

        print("Tools:")
        for name, executable in (("transcoder", config.transcoder.executable), ("git", config.git.executable)):
            resolved = shutil.which(executable)
            print(f"  {name:<13} {resolved or executable} {'✓' if resolved else '✗ not found'}")

        config_path = Path.cwd() / "config.yaml"
        print(f"Config file: {config_path} {'✓ Found' if config_path.exists() else '✗ Missing (using defaults)'}")
        return EXIT_OK
