"""Git integration for publishing the archive."""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING, Protocol

from .base import ProcessingError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

LOG = logging.getLogger(__name__)


class GitError(ProcessingError):
    """Git-specific error."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        return_code: int | None = None,
        stderr: str | None = None,
        file_path: Path | None = None,
        operation: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, file_path=file_path, cause=cause, operation=operation)
        self.command = command
        self.return_code = return_code
        self.stderr = stderr


class VersionControlClient(Protocol):
    """What the archive needs from version control."""

    def status(self, paths: Sequence[str]) -> list[str]:
        """Return porcelain status lines for the given paths."""
        ...

    def stage_all(self, paths: Sequence[str]) -> None:
        """Stage additions, modifications and deletions under paths."""
        ...

    def commit(self, message: str) -> None:
        """Commit the staged changes."""
        ...

    def push(self) -> None:
        """Push the current branch to its upstream."""
        ...


class GitClient:
    """Runs git commands inside the repository root."""

    def __init__(self, repo_root: Path, executable: str = "git", timeout: int | None = 300) -> None:
        self.repo_root = repo_root
        self.executable = executable
        self.timeout = timeout

    def run_command(self, args: list[str], operation: str) -> subprocess.CompletedProcess:
        """Run a git subcommand, raising GitError on any failure."""
        command = [self.executable, *args]
        LOG.debug("Running git command: %s", " ".join(command))

        try:
            result = subprocess.run(  # noqa: S603
                command,
                cwd=self.repo_root,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
                encoding="utf-8",
                errors="replace",
            )
        except subprocess.TimeoutExpired as e:
            msg = f"git {operation} timed out after {self.timeout}s"
            raise GitError(msg, command=command, file_path=self.repo_root, operation=operation, cause=e) from e
        except OSError as e:
            msg = f"Could not run git {operation}: {e}"
            raise GitError(msg, command=command, file_path=self.repo_root, operation=operation, cause=e) from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            msg = f"git {operation} failed with return code {result.returncode}"
            if detail:
                msg += f": {detail}"
            raise GitError(
                msg,
                command=command,
                return_code=result.returncode,
                stderr=result.stderr,
                file_path=self.repo_root,
                operation=operation,
            )
        return result

    def status(self, paths: Sequence[str]) -> list[str]:
        """Return porcelain status lines for the given paths."""
        result = self.run_command(["status", "--porcelain", "--", *paths], "status")
        return [line for line in result.stdout.splitlines() if line.strip()]

    def stage_all(self, paths: Sequence[str]) -> None:
        """Stage additions, modifications and deletions under paths."""
        self.run_command(["add", "--all", "--", *paths], "stage")

    def commit(self, message: str) -> None:
        """Commit the staged changes."""
        self.run_command(["commit", "-m", message], "commit")

    def push(self) -> None:
        """Push the current branch to its upstream."""
        self.run_command(["push"], "push")
