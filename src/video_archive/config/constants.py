"""
System constants that should never change.

These are layout and protocol defaults, not user preferences.
User-configurable values should go in config.yaml instead.
"""

# Working directory names relative to the base directory
INBOX_DIR_NAME = "raw"
HIGH_QUALITY_DIR_NAME = "vidHQ"
LOW_QUALITY_DIR_NAME = "vidLQ"
PREVIEW_DIR_NAME = "previews"

# Artifact suffixes
LOW_QUALITY_SUFFIX = ".mp4"
PREVIEW_SUFFIX = ".jpg"
TEMP_MARKER = ".tmp"  # Derived files are written as <id>.tmp<suffix> first

DEFAULT_VIDEO_EXTENSIONS = (".mp4", ".mkv", ".avi", ".mov", ".wmv", ".flv", ".webm", ".m4v")

# Identifiers start at 1; an empty archive reports 0 as its highest identifier
EMPTY_ARCHIVE_IDENTIFIER = 0

# CLI exit codes
EXIT_OK = 0
EXIT_FATAL = 1
EXIT_COMPLETED_WITH_ERRORS = 2
EXIT_INTERRUPTED = 130
