"""Launching external commands on behalf of a task."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Protocol, Sequence, TextIO

from ..utils.logger import TaskLogger, emit_event


class ProcessError(RuntimeError):
    """Raised when a command cannot be launched."""

    def __init__(self, message: str, *, command: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.command: tuple[str, ...] = tuple(command)


class ProcessRunner(Protocol):
    """Capability to run one command to completion and report its exit code."""

    def launch(self, command: Sequence[str], *, stdout: TextIO | None = None) -> int:
        ...


class SubprocessRunner:
    """Run commands locally, streaming merged stdout/stderr to a sink.

    Each call blocks until the child exits.  An interruption while waiting
    terminates the child before the interruption propagates to the caller.
    """

    def __init__(self, cwd: Path | str | None = None, *, logger: TaskLogger | None = None) -> None:
        self.cwd = Path(cwd).resolve() if cwd is not None else None
        self.logger = logger

    def _display(self, command: Sequence[str]) -> list[str]:
        if self.logger is None:
            return [str(part) for part in command]
        return self.logger.mask_command(command)

    def launch(self, command: Sequence[str], *, stdout: TextIO | None = None) -> int:
        args = [str(part) for part in command]
        if not args:
            raise ProcessError("Cannot launch an empty command.")

        display = self._display(args)
        emit_event("process.launch", command=display, cwd=self.cwd)
        try:
            process = subprocess.Popen(  # noqa: S603 - arguments are built by the strategies
                args,
                cwd=self.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as error:
            raise ProcessError(f"Failed to launch {display[0]}: {error}", command=display) from error

        try:
            assert process.stdout is not None
            for line in process.stdout:
                if stdout is not None:
                    stdout.write(line)
            returncode = process.wait()
        except BaseException:
            process.kill()
            process.wait()
            raise
        finally:
            if process.stdout is not None:
                process.stdout.close()

        if stdout is not None:
            stdout.flush()
        emit_event("process.exit", command=display, returncode=returncode)
        return returncode


__all__ = ["ProcessError", "ProcessRunner", "SubprocessRunner"]
