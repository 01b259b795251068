# src/storage/models.py — v2
"""Rename/group models: RenameOperation, ResolveResult."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class RenameOperation(BaseModel):
    """A single planned or performed file placement."""

    identifier: str
    source: Path
    target: Path
    grouped: bool = False
    performed: bool = False  # False in dry-run or when already in place
    reason: str = ""  # e.g. "name taken, suffixed", "already named"


class ResolveResult(BaseModel):
    """Aggregate outcome of resolving all identifier groups of a folder."""

    renamed: int = 0
    moved: int = 0
    operations: list[RenameOperation] = Field(default_factory=list)
