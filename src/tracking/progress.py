# src/tracking/progress.py — v1
"""Progress and summary reporting for folder runs.

Purely observational: reporters receive updates from the scheduler and
never influence control flow.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from rutrenamer.batch.models import FolderReport

BAR_LENGTH = 30
NAME_WIDTH = 30


class ProgressReporter:
    """No-op reporter. Subclass and override what you need."""

    def folder_started(self, folder: Path, total: int, pending: int) -> None:
        """Called once per folder after the registry has been consulted."""

    def progress(self, completed: int, total: int, current_file: str = "") -> None:
        """Called as files of a wave start and finish."""

    def folder_completed(self, report: FolderReport) -> None:
        """Called once per folder after the resolve phase."""


class ConsoleProgressReporter(ProgressReporter):
    """Single-line progress bar plus a per-folder summary on a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdout
        self._bar_active = False

    def folder_started(self, folder: Path, total: int, pending: int) -> None:
        self._write(f"\nProcessing folder: {folder}\n")
        self._write(f"  PDF files: {total}\n")
        self._write(f"  Pending:   {pending}\n")
        if pending == 0:
            self._write("  All files were already processed\n")

    def progress(self, completed: int, total: int, current_file: str = "") -> None:
        self._write("\r" + format_progress(completed, total, current_file))
        self._bar_active = True

    def folder_completed(self, report: FolderReport) -> None:
        if self._bar_active:
            self._write("\n")
            self._bar_active = False

        title = "Dry run for" if report.dry_run else "Summary for"
        self._write(f"\n{title} {report.folder}:\n")
        for label, value in (
            ("Renamed:", report.renamed),
            ("Moved to subfolders:", report.grouped),
            ("Skipped:", report.skipped),
            ("Failed:", report.failed),
        ):
            self._write(f"  {label:<21}{value}\n")
        if report.dry_run:
            for op in report.operations:
                self._write(f"    {op.source.name} -> {_relative(op.target, report.folder)}\n")
        for failure in report.failures:
            self._write(f"    ! {failure.filename}: {failure.reason}\n")

    def _write(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()


def format_progress(completed: int, total: int, current_file: str = "") -> str:
    """Render ``Progress: [████░░░░] 40% (2/5) name.pdf``."""
    percentage = round(completed / total * 100) if total else 100
    filled = round(percentage / 100 * BAR_LENGTH)
    bar = "█" * filled + "░" * (BAR_LENGTH - filled)
    name = current_file
    if len(name) > NAME_WIDTH:
        name = name[: NAME_WIDTH - 3] + "..."
    return f"Progress: [{bar}] {percentage}% ({completed}/{total}) {name}"


def _relative(target: Path, folder: str) -> str:
    try:
        return str(target.relative_to(folder))
    except ValueError:
        return str(target)
