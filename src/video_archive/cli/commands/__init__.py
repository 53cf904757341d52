"""CLI command modules."""

from .archive import ArchiveCommands
from .utils import UtilityCommands

__all__ = ["ArchiveCommands", "UtilityCommands"]
