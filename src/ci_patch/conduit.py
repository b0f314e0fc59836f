"""Thin wrapper around the ``arc`` command line client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Sequence, TextIO

from .utils.logger import TaskLogger

if TYPE_CHECKING:
    from .tools.process import ProcessRunner


class ConduitError(RuntimeError):
    """Raised when the review tool cannot be invoked."""

    def __init__(self, message: str, code: int = 0) -> None:
        super().__init__(message)
        self.code = code


@dataclass(slots=True)
class ArcanistClient:
    """Invoke ``arc <method> [params...]`` with an optional conduit token.

    The token travels as ``--conduit-token`` and is registered with the
    logger as a secret so it never shows up in the build log.
    """

    arc_path: str
    method: str
    conduit_token: str | None = None
    params: Sequence[str] = field(default_factory=tuple)

    def command(self) -> List[str]:
        if not self.arc_path:
            raise ConduitError("No arc binary configured.")
        if not self.method:
            raise ConduitError("No arc method given.")
        command = [self.arc_path, self.method, *self.params]
        if self.conduit_token:
            command.extend(["--conduit-token", self.conduit_token])
        return command

    def call_conduit(self, runner: ProcessRunner, logger: TaskLogger, *, stdout: TextIO | None = None) -> int:
        logger.add_secret(self.conduit_token)
        return runner.launch(self.command(), stdout=stdout if stdout is not None else logger.stream)


__all__ = ["ArcanistClient", "ConduitError"]
