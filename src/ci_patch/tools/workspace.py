"""Reset a git workspace to the diff's base commit before patching."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..models import PatchRequest
from ..utils.logger import TaskLogger
from .process import ProcessRunner


@dataclass(slots=True)
class WorkspacePreparer:
    """Run ``reset --hard``, ``clean`` and ``submodule update`` in order.

    Only the reset exit code is inspected; a failing reset is reported and
    preparation carries on.  ``clean`` and ``submodule update`` are best
    effort and their exit codes are discarded.
    """

    runner: ProcessRunner
    logger: TaskLogger
    tag: str

    def commands(self, request: PatchRequest) -> List[List[str]]:
        git = request.tools.git
        commands = [[git, "reset", "--hard", request.base_commit]]
        if not request.skip_forced_clean:
            # Untracked leftovers make `arc patch` and `svn apply` fail.
            commands.append([git, "clean", "-fd", "-f"])
        commands.append([git, "submodule", "update", "--init", "--recursive"])
        return commands

    def prepare(self, request: PatchRequest) -> bool:
        """Return ``True`` when the workspace was prepared (git only)."""

        if not request.scm_type.is_distributed:
            return False

        reset, *rest = self.commands(request)
        exit_code = self.runner.launch(reset, stdout=self.logger.stream)
        if exit_code != 0:
            self.logger.warning(
                self.tag,
                f"Got non-zero exit code resetting to base commit {request.base_commit}: {exit_code}",
            )
        for command in rest:
            self.runner.launch(command, stdout=self.logger.stream)
        return True


__all__ = ["WorkspacePreparer"]
