"""Lifecycle shared by every build task."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import TaskResult
from ..utils.logger import TaskLogger, emit_event


class Task(ABC):
    """A unit of build work with a setup/execute/tear-down lifecycle.

    Subclasses set ``self.result`` from :meth:`execute`; :meth:`run` returns
    it once :meth:`tear_down` has completed.
    """

    def __init__(self, logger: TaskLogger) -> None:
        self.logger = logger
        self.result = TaskResult.UNKNOWN

    @property
    @abstractmethod
    def tag(self) -> str:
        """Short label prefixed to every log line of the task."""

    def info(self, message: str) -> None:
        self.logger.info(self.tag, message)

    def setup(self) -> None:
        pass

    @abstractmethod
    def execute(self) -> None:
        raise NotImplementedError

    def tear_down(self) -> None:
        pass

    def run(self) -> TaskResult:
        self.setup()
        try:
            self.execute()
        finally:
            self.tear_down()
        emit_event("task.result", tag=self.tag, result=self.result.value)
        return self.result


__all__ = ["Task"]
