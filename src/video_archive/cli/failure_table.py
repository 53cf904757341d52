"""Failure table display for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..core import ProcessingResult

# Constants for table formatting
MAX_FILENAME_LENGTH = 27
FILENAME_TRUNCATE_LENGTH = 24
MAX_STEP_LENGTH = 18
MAX_ERROR_MSG_LENGTH = 29
ERROR_MSG_TRUNCATE_LENGTH = 26


def _truncate(text: str, limit: int, keep: int) -> str:
    return text[:keep] + "..." if len(text) > limit else text


def print_failure_table(failed_results: list[ProcessingResult]) -> None:
    """
    Print a simple table of files that could not be ingested or healed.

    Args:
        failed_results: ProcessingResult objects with failed or error status

    """
    if not failed_results:
        return

    print("\n" + "=" * 80)
    print(f"{'ARCHIVE FAILURES':^80}")
    print("=" * 80)
    print(f"Total failed: {len(failed_results)} items\n")

    print(f"{'FILE':<28} | {'ID':>5} | {'STEP':<18} | {'ERROR':<30}")
    print("-" * 80)

    for result in failed_results:
        filename = _truncate(result.source_file.name, MAX_FILENAME_LENGTH, FILENAME_TRUNCATE_LENGTH)
        video_id = str(result.video_id) if result.video_id is not None else "-"
        step = (result.step or result.status.value)[:MAX_STEP_LENGTH]
        error_msg = _truncate(result.message or "Unknown error", MAX_ERROR_MSG_LENGTH, ERROR_MSG_TRUNCATE_LENGTH)

        print(f"{filename:<28} | {video_id:>5} | {step:<18} | {error_msg:<30}")

    print("\n💡 TIP: Failed derivations are retried on the next run; raw files stay in the inbox until archived\n")
