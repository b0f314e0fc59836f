"""File writes on the host that executes the patch commands."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class RemoteFile(Protocol):
    """Capability to write and delete files on the execution host."""

    def write(self, path: Path | str, content: str, encoding: str = "utf-8") -> None:
        ...

    def delete(self, path: Path | str) -> None:
        ...


class LocalRemoteFile:
    """:class:`RemoteFile` for builds whose execution host is this machine."""

    def write(self, path: Path | str, content: str, encoding: str = "utf-8") -> None:
        target = Path(path)
        if not target.is_absolute():
            raise ValueError(f"Remote paths must be absolute: {target}")
        target.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps the diff byte-for-byte, CRLF hunks included
        with target.open("w", encoding=encoding, newline="") as handle:
            handle.write(content)

    def delete(self, path: Path | str) -> None:
        Path(path).unlink(missing_ok=True)


__all__ = ["LocalRemoteFile", "RemoteFile"]
