"""CLI module for the video archive."""

from .commands import ArchiveCommands, UtilityCommands
from .main import ArchiveCLI

__all__ = [
    "ArchiveCLI",
    "ArchiveCommands",
    "UtilityCommands",
]
