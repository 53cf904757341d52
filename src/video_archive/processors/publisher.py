"""Publishing the archive to its git remote."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..core import GitError, ProcessingStatus

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..core import ArchiveLayout, ConfigManager, VersionControlClient

LOG = logging.getLogger(__name__)


@dataclass
class PublishResult:
    """Outcome of a publish attempt."""

    status: ProcessingStatus
    message: str = ""
    failed_step: str | None = None
    completed_steps: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status is ProcessingStatus.SUCCESS

    @property
    def attempted(self) -> bool:
        return self.status is not ProcessingStatus.SKIPPED


class SyncPublisher:
    """Stages, commits and pushes archive changes."""

    def __init__(self, vcs: VersionControlClient, layout: ArchiveLayout, config_manager: ConfigManager) -> None:
        self.vcs = vcs
        self.layout = layout
        self.config_manager = config_manager

    def is_dirty(self) -> bool:
        """Ask git whether anything under the archive directories changed."""
        try:
            entries = self.vcs.status(self.layout.relative_archive_dirs())
        except GitError as e:
            LOG.warning("Could not check repository status, relying on change flag: %s", e)
            return False

        if entries:
            LOG.info("Repository reports %d pending archive changes", len(entries))
        return bool(entries)

    def publish(self, changed: bool) -> PublishResult:
        """
        Commit and push the archive if this run or an earlier one changed it.

        The working-tree check catches files written by a run that died
        before it could publish. Steps stop at the first failure and nothing
        is rolled back.
        """
        if not changed and not self.is_dirty():
            LOG.info("No archive changes, nothing to publish")
            return PublishResult(status=ProcessingStatus.SKIPPED, message="no changes")

        message = str(self.config_manager.get_value("git.commit_message", "Update video archive"))
        if self.config_manager.dry_run:
            LOG.info("[dry-run] Would commit and push archive changes: %s", message)
            return PublishResult(status=ProcessingStatus.SKIPPED, message="dry run")

        steps: list[tuple[str, Callable[[], None]]] = [
            ("stage", lambda: self.vcs.stage_all(self.layout.relative_archive_dirs())),
            ("commit", lambda: self.vcs.commit(message)),
        ]
        if self.config_manager.get_value("git.push", default=True):
            steps.append(("push", self.vcs.push))
        else:
            LOG.info("Push disabled, changes will only be committed locally")

        result = PublishResult(status=ProcessingStatus.SUCCESS)
        for step, action in steps:
            LOG.info("Publishing: %s", step)
            try:
                action()
            except GitError as e:
                LOG.error("Publish failed at %s: %s", step, e)
                LOG.warning(
                    "Repository at %s may be partially staged or committed; resolve it manually",
                    self.layout.base_dir,
                )
                result.status = ProcessingStatus.FAILED
                result.failed_step = step
                result.message = str(e)
                return result
            result.completed_steps.append(step)

        LOG.info("Archive published: %s", ", ".join(result.completed_steps))
        return result
