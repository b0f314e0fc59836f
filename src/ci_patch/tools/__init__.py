"""Process, file and workspace integrations used while patching."""

from .process import ProcessError, ProcessRunner, SubprocessRunner
from .remote_file import LocalRemoteFile, RemoteFile
from .strategies import (
    ArcPatchStrategy,
    PatchStrategy,
    RawDiffPatchStrategy,
    arc_patch_params,
    select_strategy,
    temp_patch_file,
)
from .workspace import WorkspacePreparer

__all__ = [
    "ArcPatchStrategy",
    "LocalRemoteFile",
    "PatchStrategy",
    "ProcessError",
    "ProcessRunner",
    "RawDiffPatchStrategy",
    "RemoteFile",
    "SubprocessRunner",
    "WorkspacePreparer",
    "arc_patch_params",
    "select_strategy",
    "temp_patch_file",
]
