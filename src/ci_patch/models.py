"""Typed records describing a patch request and its outcome."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

REVIEW_TOOL_REVISION = "diffusion"
DISTRIBUTED_SCM = "git"


class ConfigError(ValueError):
    """Raised when a patch request or configuration is not usable."""


class RecordModel(BaseModel):
    """Base Pydantic model with strict field handling."""

    model_config = ConfigDict(extra="forbid", frozen=False)


class RevisionType(str, Enum):
    """How the change under review is delivered to the workspace."""

    DIFFUSION = "diffusion"
    GENERIC = "generic"

    @classmethod
    def parse(cls, value: "str | RevisionType | None") -> "RevisionType":
        if isinstance(value, RevisionType):
            return value
        if (value or "").strip().lower() == REVIEW_TOOL_REVISION:
            return cls.DIFFUSION
        return cls.GENERIC

    @property
    def is_review_tool_native(self) -> bool:
        return self is RevisionType.DIFFUSION


class ScmType(str, Enum):
    """Source control model of the checked-out workspace."""

    GIT = "git"
    CENTRALIZED = "svn"

    @classmethod
    def parse(cls, value: "str | ScmType | None") -> "ScmType":
        if isinstance(value, ScmType):
            return value
        if (value or "").strip().lower() == DISTRIBUTED_SCM:
            return cls.GIT
        return cls.CENTRALIZED

    @property
    def is_distributed(self) -> bool:
        return self is ScmType.GIT


class TaskResult(str, Enum):
    """Final state reported by a task."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    UNKNOWN = "UNKNOWN"


class ToolPaths(RecordModel):
    """Resolved binaries used while patching."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    git: str = "git"
    arc: str = "arc"
    svn: str = "svn"


class PatchRequest(RecordModel):
    """Immutable description of one patch-application run.

    Exactly one of ``diff_id`` and ``raw_diff`` carries the change: review-tool
    native revisions are fetched by ``diff_id`` while every other revision
    type ships the full unified diff in ``raw_diff``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    revision_type: RevisionType = RevisionType.DIFFUSION
    scm_type: ScmType = ScmType.GIT
    base_commit: str = ""
    diff_id: str = ""
    raw_diff: str = ""
    conduit_token: Optional[str] = None
    create_commit: bool = False
    create_branch: bool = False
    patch_with_force_flag: bool = False
    skip_forced_clean: bool = False
    build_number: int = 0
    tools: ToolPaths = Field(default_factory=ToolPaths)
    temp_dir: Optional[Path] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_kinds(cls, data):
        if isinstance(data, dict):
            data = dict(data)
            if "revision_type" in data:
                data["revision_type"] = RevisionType.parse(data["revision_type"])
            if "scm_type" in data:
                data["scm_type"] = ScmType.parse(data["scm_type"])
        return data

    @model_validator(mode="after")
    def _check_payload(self) -> "PatchRequest":
        if self.revision_type.is_review_tool_native and not self.diff_id.strip():
            raise ValueError("diff_id is required for review-tool revisions")
        if not self.revision_type.is_review_tool_native and not self.raw_diff:
            raise ValueError("raw_diff is required for generic diff revisions")
        return self

    @property
    def tag(self) -> str:
        return "arc-patch" if self.revision_type.is_review_tool_native else "non-arc"


class PatchOutcome(RecordModel):
    """Exit code of the patch step and the result derived from it."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    exit_code: int

    @property
    def result(self) -> TaskResult:
        return TaskResult.SUCCESS if self.exit_code == 0 else TaskResult.FAILURE


__all__ = [
    "ConfigError",
    "PatchOutcome",
    "PatchRequest",
    "RevisionType",
    "ScmType",
    "TaskResult",
    "ToolPaths",
]
