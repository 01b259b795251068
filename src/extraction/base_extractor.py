# src/extraction/base_extractor.py — v2
"""Abstract text reader interface and the extraction error taxonomy."""

from __future__ import annotations

import asyncio
import contextvars
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import Executor
from pathlib import Path
from typing import Any, TypeVar

T = TypeVar("T")

_wave_executor: contextvars.ContextVar[Executor | None] = contextvars.ContextVar(
    "wave_executor", default=None,
)


class ExtractionError(Exception):
    """Reading text from a document failed.

    Args:
        message: Human-readable reason, shown in the folder failure summary.
        retryable: True when the cause is transient (file missing, locked).
    """

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class CorruptedImageError(ExtractionError):
    """The rasterized page or its image data could not be decoded."""


class BaseTextReader(ABC):
    """Unified interface for producers of text from a document."""

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """File extensions this reader handles (e.g., ['.pdf'])."""

    @abstractmethod
    async def read(self, path: Path) -> str:
        """Return the document text. Raises ExtractionError on failure."""

    @property
    def name(self) -> str:
        """Short label used in logs."""
        return type(self).__name__


def bind_executor(executor: Executor | None) -> contextvars.Token:
    """Route blocking reads started from the current context to ``executor``."""
    return _wave_executor.set(executor)


def reset_executor(token: contextvars.Token) -> None:
    _wave_executor.reset(token)


async def run_blocking(func: Callable[..., T], *args: Any) -> T:
    """Run ``func(*args)`` off the event loop.

    Uses the executor bound with :func:`bind_executor` when there is one, so
    its owner can wait for the thread even after the awaiting task was
    cancelled. Falls back to ``asyncio.to_thread``.
    """
    executor = _wave_executor.get()
    if executor is None:
        return await asyncio.to_thread(func, *args)
    loop = asyncio.get_running_loop()
    ctx = contextvars.copy_context()
    return await loop.run_in_executor(executor, ctx.run, func, *args)
