from __future__ import annotations

import io
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Sequence, TextIO

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from ci_patch.utils.logger import TaskLogger  # noqa: E402


@dataclass(slots=True)
class FakeProcessRunner:
    """Records launched commands instead of spawning processes.

    ``results`` maps a command verb (``argv[1]``) to either an exit code or
    an exception to raise.  Unlisted verbs exit with ``0``.
    """

    results: Dict[str, object] = field(default_factory=dict)
    calls: List[List[str]] = field(default_factory=list)
    on_launch: Callable[[List[str]], None] | None = None

    def launch(self, command: Sequence[str], *, stdout: TextIO | None = None) -> int:
        args = [str(part) for part in command]
        self.calls.append(args)
        if self.on_launch is not None:
            self.on_launch(args)
        outcome = self.results.get(args[1] if len(args) > 1 else "", 0)
        if isinstance(outcome, BaseException):
            raise outcome
        if stdout is not None:
            stdout.write(f"ran {args[1]}\n")
        return int(outcome)

    def verbs(self) -> List[str]:
        return [call[1] for call in self.calls]


@dataclass(slots=True)
class FakeRemoteFile:
    """In-memory execution host filesystem."""

    files: Dict[str, str] = field(default_factory=dict)
    writes: List[tuple[str, str]] = field(default_factory=list)
    deletes: List[str] = field(default_factory=list)
    fail_write: BaseException | None = None
    fail_delete: BaseException | None = None

    def write(self, path: Path | str, content: str, encoding: str = "utf-8") -> None:
        if self.fail_write is not None:
            raise self.fail_write
        key = Path(path).as_posix()
        self.writes.append((key, encoding))
        self.files[key] = content

    def delete(self, path: Path | str) -> None:
        key = Path(path).as_posix()
        self.deletes.append(key)
        if self.fail_delete is not None:
            raise self.fail_delete
        self.files.pop(key, None)


@pytest.fixture()
def log_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture()
def task_logger(log_stream: io.StringIO) -> TaskLogger:
    return TaskLogger(log_stream)


@pytest.fixture()
def runner() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture()
def remote() -> FakeRemoteFile:
    return FakeRemoteFile()
