"""The two ways a change under review can be applied to the workspace."""

from __future__ import annotations

import tempfile
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List

from ..conduit import ArcanistClient
from ..models import PatchRequest
from ..utils.logger import TaskLogger
from .process import ProcessRunner
from .remote_file import RemoteFile

PATCH_ENCODING = "utf-8"


@dataclass(slots=True)
class PatchStrategy(ABC):
    """Apply the requested change and return the exit code of the patch tool."""

    runner: ProcessRunner
    logger: TaskLogger
    tag: str

    @abstractmethod
    def apply(self, request: PatchRequest) -> int:
        raise NotImplementedError


def arc_patch_params(request: PatchRequest) -> List[str]:
    """Return the ``arc patch`` arguments for ``request``.

    ``--nocommit``/``--nobranch`` only make sense for git workspaces.
    """

    params = ["--diff", request.diff_id]
    if request.scm_type.is_distributed:
        if not request.create_commit:
            params.append("--nocommit")
        if not request.create_branch:
            params.append("--nobranch")
    if request.patch_with_force_flag:
        params.append("--force")
    return params


@dataclass(slots=True)
class ArcPatchStrategy(PatchStrategy):
    """Let ``arc patch`` fetch and apply the diff by its identifier."""

    def client(self, request: PatchRequest) -> ArcanistClient:
        return ArcanistClient(
            arc_path=request.tools.arc,
            method="patch",
            conduit_token=request.conduit_token,
            params=tuple(arc_patch_params(request)),
        )

    def apply(self, request: PatchRequest) -> int:
        return self.client(request).call_conduit(self.runner, self.logger)


def temp_patch_name(build_number: int) -> str:
    return f"{build_number}-{uuid.uuid4()}.diff"


@contextmanager
def temp_patch_file(
    request: PatchRequest,
    remote: RemoteFile,
    logger: TaskLogger,
    tag: str,
) -> Iterator[Path]:
    """Write ``request.raw_diff`` locally and on the execution host.

    Both copies share one absolute path and are deleted on exit, whatever
    the outcome of the body.  Failed deletions are reported, not raised.
    """

    base_dir = Path(request.temp_dir) if request.temp_dir else Path(tempfile.gettempdir())
    path = (base_dir / temp_patch_name(request.build_number)).resolve()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(request.raw_diff, encoding=PATCH_ENCODING, newline="")
        logger.info(tag, path.as_posix())
        remote.write(path, request.raw_diff, PATCH_ENCODING)
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as error:
            logger.warning(tag, f"Failed to delete local patch file {path}: {error}")
        try:
            remote.delete(path)
        except OSError as error:
            logger.warning(tag, f"Failed to delete remote patch file {path}: {error}")


@dataclass(slots=True)
class RawDiffPatchStrategy(PatchStrategy):
    """Apply a raw unified diff through the centralized SCM client.

    git workspaces use ``svn apply``-style invocation, centralized
    workspaces use ``patch``.  Both run the svn binary.
    """

    remote: RemoteFile

    def verb(self, request: PatchRequest) -> str:
        return "apply" if request.scm_type.is_distributed else "patch"

    def command(self, request: PatchRequest, path: Path) -> List[str]:
        return [request.tools.svn, self.verb(request), path.as_posix()]

    def apply(self, request: PatchRequest) -> int:
        with temp_patch_file(request, self.remote, self.logger, self.tag) as path:
            return self.runner.launch(self.command(request, path), stdout=self.logger.stream)


def select_strategy(
    request: PatchRequest,
    *,
    runner: ProcessRunner,
    remote: RemoteFile,
    logger: TaskLogger,
) -> PatchStrategy:
    """Pick the strategy matching the request's revision type."""

    if request.revision_type.is_review_tool_native:
        return ArcPatchStrategy(runner=runner, logger=logger, tag=request.tag)
    return RawDiffPatchStrategy(runner=runner, logger=logger, tag=request.tag, remote=remote)


__all__ = [
    "ArcPatchStrategy",
    "PatchStrategy",
    "RawDiffPatchStrategy",
    "arc_patch_params",
    "select_strategy",
    "temp_patch_file",
    "temp_patch_name",
]
