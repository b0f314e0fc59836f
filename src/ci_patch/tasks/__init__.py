"""Build tasks."""

from .apply_patch import ApplyPatchTask, PatchState
from .base import Task

__all__ = ["ApplyPatchTask", "PatchState", "Task"]
