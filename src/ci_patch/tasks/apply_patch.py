"""Apply a code-review patch to the build's working copy."""

from __future__ import annotations

from enum import Enum

from ..conduit import ConduitError
from ..models import PatchOutcome, PatchRequest, TaskResult
from ..tools.process import ProcessError, ProcessRunner
from ..tools.remote_file import RemoteFile
from ..tools.strategies import PatchStrategy, select_strategy
from ..tools.workspace import WorkspacePreparer
from ..utils.logger import TaskLogger
from .base import Task

# Faults converted to FAILURE instead of escaping the task.
_INFRASTRUCTURE_FAULTS = (OSError, ProcessError, ConduitError)


class PatchState(str, Enum):
    """Progress of an :class:`ApplyPatchTask`."""

    INIT = "INIT"
    WORKSPACE_PREPARED = "WORKSPACE_PREPARED"
    SKIPPED_PREP = "SKIPPED_PREP"
    PATCH_APPLIED = "PATCH_APPLIED"
    DONE = "DONE"


class ApplyPatchTask(Task):
    """Prepare the workspace, apply the patch and map the exit code.

    git workspaces are reset to the base commit, cleaned and have their
    submodules synced first.  The patch itself goes through ``arc patch``
    for review-tool revisions and through the svn client for raw diffs.
    """

    def __init__(
        self,
        logger: TaskLogger,
        request: PatchRequest,
        *,
        runner: ProcessRunner,
        remote: RemoteFile,
    ) -> None:
        super().__init__(logger)
        self.request = request
        self.runner = runner
        self.remote = remote
        self.state = PatchState.INIT
        self.history: list[PatchState] = [PatchState.INIT]
        self.outcome: PatchOutcome | None = None

    @property
    def tag(self) -> str:
        return self.request.tag

    def _transition(self, state: PatchState) -> None:
        self.state = state
        self.history.append(state)

    def preparer(self) -> WorkspacePreparer:
        return WorkspacePreparer(runner=self.runner, logger=self.logger, tag=self.tag)

    def strategy(self) -> PatchStrategy:
        return select_strategy(self.request, runner=self.runner, remote=self.remote, logger=self.logger)

    def execute(self) -> None:
        try:
            prepared = self.preparer().prepare(self.request)
            self._transition(PatchState.WORKSPACE_PREPARED if prepared else PatchState.SKIPPED_PREP)

            exit_code = self.strategy().apply(self.request)
            self._transition(PatchState.PATCH_APPLIED)
            self.outcome = PatchOutcome(exit_code=exit_code)
            if exit_code != 0:
                self.logger.error(self.tag, f"Patch command exited with code {exit_code}")
            self.result = self.outcome.result
        except KeyboardInterrupt as error:
            self.logger.exception(self.tag, "Interrupted while applying patch", error)
            self.result = TaskResult.FAILURE
        except _INFRASTRUCTURE_FAULTS as error:
            self.logger.exception(self.tag, "Failed to apply patch", error)
            self.result = TaskResult.FAILURE
        finally:
            self._transition(PatchState.DONE)


__all__ = ["ApplyPatchTask", "PatchState"]
