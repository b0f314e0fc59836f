"""Apply code-review patches to CI working copies."""

from .models import PatchOutcome, PatchRequest, RevisionType, ScmType, TaskResult
from .tasks import ApplyPatchTask

__all__ = [
    "ApplyPatchTask",
    "PatchOutcome",
    "PatchRequest",
    "RevisionType",
    "ScmType",
    "TaskResult",
]
