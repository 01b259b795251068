# src/batch/models.py — v2
"""Batch processing models: RunContext, FailureEntry, FolderReport."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, Field

from rutrenamer.core.models import (
    ExtractionFailure,
    ExtractionResult,
    ExtractionSkipped,
    IdentifierGroups,
    group_by_identifier,
)
from rutrenamer.storage.models import RenameOperation


class FailureEntry(BaseModel):
    """One line of the per-folder failure summary."""

    filename: str
    reason: str


class FolderReport(BaseModel):
    """Outcome of processing one folder."""

    folder: str
    total_files: int
    pending: int
    renamed: int = 0
    grouped: int = 0
    skipped: int = 0
    failures: list[FailureEntry] = Field(default_factory=list)
    operations: list[RenameOperation] = Field(default_factory=list)
    dry_run: bool = False
    duration_seconds: float = 0.0

    @property
    def failed(self) -> int:
        return len(self.failures)


@dataclass
class RunContext:
    """Mutable state of one folder run, owned by the scheduler.

    The registry set is only mutated between waves.
    """

    folder: Path
    processed: set[str]
    total: int = 0
    completed: int = 0
    results: list[ExtractionResult] = field(default_factory=list)

    def record(self, result: ExtractionResult, register: bool = True) -> None:
        """Store a result; definitive outcomes join the registry set."""
        self.results.append(result)
        self.completed += 1
        if not register:
            return
        if isinstance(result, ExtractionFailure) and result.retryable:
            return
        self.processed.add(result.task.key)

    def groups(self) -> IdentifierGroups:
        return group_by_identifier(self.results)

    def failures(self) -> list[FailureEntry]:
        return [
            FailureEntry(filename=r.task.filename, reason=r.reason)
            for r in self.results
            if isinstance(r, ExtractionFailure)
        ]

    def skipped(self) -> int:
        return sum(1 for r in self.results if isinstance(r, ExtractionSkipped))
