"""Build-log writer shared by tasks, strategies and the process runner."""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, TextIO

LOGGER = logging.getLogger(__name__)
TELEMETRY_LOGGER = logging.getLogger("ci_patch.telemetry")
MASK = "********"


def _event_default(value: Any) -> Any:
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


def emit_event(event: str, **fields: Any) -> None:
    """Log a compact JSON telemetry line; paths and sets are flattened."""
    payload = {"event": event, "timestamp": datetime.now(timezone.utc).isoformat(), **fields}
    TELEMETRY_LOGGER.info(json.dumps(payload, default=_event_default, separators=(",", ":"), ensure_ascii=True))


class TaskLogger:
    """Tag-aware logger writing human-readable lines to the build log.

    Every line is mirrored to :mod:`logging` so embedding applications can
    route it elsewhere.  Registered secrets are masked in anything passed
    through :meth:`mask`.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream: TextIO = stream if stream is not None else sys.stdout
        self._secrets: set[str] = set()

    # ----------------------------------------------------------------- secrets
    def add_secret(self, value: str | None) -> None:
        if value:
            self._secrets.add(value)

    def mask(self, text: str) -> str:
        for secret in sorted(self._secrets, key=len, reverse=True):
            text = text.replace(secret, MASK)
        return text

    def mask_command(self, command: Iterable[str]) -> list[str]:
        return [self.mask(str(part)) for part in command]

    # ----------------------------------------------------------------- writing
    def _write(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.stream.flush()

    def info(self, tag: str, message: str) -> None:
        text = self.mask(f"[{tag}] {message}")
        self._write(text)
        LOGGER.info(text)

    def warning(self, tag: str, message: str) -> None:
        text = self.mask(f"[{tag}] WARNING: {message}")
        self._write(text)
        LOGGER.warning(text)

    def error(self, tag: str, message: str) -> None:
        text = self.mask(f"[{tag}] ERROR: {message}")
        self._write(text)
        LOGGER.error(text)

    def exception(self, tag: str, message: str, error: BaseException) -> None:
        """Record ``error`` with its full traceback."""
        self.error(tag, f"{message}: {error}")
        details = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        self.stream.write(self.mask(details))
        self.stream.flush()


__all__ = ["MASK", "TELEMETRY_LOGGER", "TaskLogger", "emit_event"]
