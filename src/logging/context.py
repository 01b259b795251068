# src/logging/context.py — v2
"""Contextual logging support — attach run_id, folder and file to log records.

Each concurrently processed file runs in its own asyncio task, which copies
the context at creation, so set_file_context() in one task never leaks into
its siblings.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_folder: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "folder", default=None
)
_file: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    run_id: str | None = None
    folder: str | None = None
    file: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        run_id=_run_id.get(),
        folder=_folder.get(),
        file=_file.get(),
    )


def set_folder_context(folder: str, run_id: str) -> None:
    """Set folder-level context (called once per folder run)."""
    _folder.set(folder)
    _run_id.set(run_id)
    _file.set(None)


def set_file_context(filename: str | None) -> None:
    """Set file-level context (called inside each per-file task)."""
    _file.set(filename)


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _folder.set(None)
    _file.set(None)
