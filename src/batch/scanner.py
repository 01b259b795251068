# src/batch/scanner.py — v2
"""Folder scanner: discover documents to process.

Only the top level of a folder is scanned. Identifier subfolders created by
earlier runs are therefore never revisited.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from rutrenamer.core.models import FileTask

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = (".pdf",)


class FolderScanner:
    """List files with a recognized document extension as FileTasks."""

    def __init__(self, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> None:
        self._extensions = frozenset(e.lower() for e in extensions)

    def scan(self, folder: Path) -> list[FileTask]:
        """Discover documents in ``folder`` (non-recursive, sorted by name).

        Raises:
            ValueError: If ``folder`` is not a directory.
        """
        if not folder.is_dir():
            msg = f"Scan root is not a directory: {folder}"
            raise ValueError(msg)

        tasks: list[FileTask] = []
        for path in sorted(folder.iterdir()):
            if not path.is_file():
                continue
            if path.suffix.lower() not in self._extensions:
                continue
            try:
                tasks.append(FileTask.from_path(path))
            except OSError as e:
                # vanished between listing and stat
                logger.warning("Cannot stat %s: %s", path.name, e)

        logger.info("Scanned %s: found %d documents", folder, len(tasks))
        return tasks
