# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types — all imports come from core.models.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from rutrenamer.cache.fingerprint import file_key


# === FILE DISCOVERY ===


class FileTask(BaseModel):
    """A document discovered in a folder scan. Immutable within a run."""

    model_config = ConfigDict(frozen=True)

    path: Path
    size_bytes: int
    mtime_ns: int

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def key(self) -> str:
        """Identity key: changes whenever the path, size or mtime change."""
        return file_key(self.path, self.size_bytes, self.mtime_ns)

    @classmethod
    def from_path(cls, path: Path) -> FileTask:
        """Build a task from the current on-disk state of ``path``."""
        stat = path.stat()
        return cls(
            path=path.resolve(),
            size_bytes=stat.st_size,
            mtime_ns=stat.st_mtime_ns,
        )


# === EXTRACTION RESULTS ===


class ExtractionSuccess(BaseModel):
    """An identifier was found in the document."""

    status: Literal["success"] = "success"
    task: FileTask
    identifier: str
    source: Literal["text", "ocr"] = "text"


class ExtractionFailure(BaseModel):
    """No identifier could be obtained.

    Retryable failures (file vanished, locked, timed out) are not recorded in
    the processed-file registry so a later run picks them up again.
    """

    status: Literal["failure"] = "failure"
    task: FileTask
    reason: str
    retryable: bool = False


class ExtractionSkipped(BaseModel):
    """The file was deliberately not processed."""

    status: Literal["skipped"] = "skipped"
    task: FileTask
    reason: str


ExtractionResult = Annotated[
    Union[ExtractionSuccess, ExtractionFailure, ExtractionSkipped],
    Field(discriminator="status"),
]


# === GROUPING ===


class GroupMember(BaseModel):
    """One file that produced a given identifier."""

    filename: str
    path: Path


IdentifierGroups = dict[str, list[GroupMember]]


def group_by_identifier(results: list[ExtractionResult]) -> IdentifierGroups:
    """Fold successful results into identifier → members, in discovery order."""
    groups: IdentifierGroups = {}
    for result in results:
        if not isinstance(result, ExtractionSuccess) or not result.identifier:
            continue
        groups.setdefault(result.identifier, []).append(
            GroupMember(filename=result.task.filename, path=result.task.path)
        )
    return groups
