# src/cache/json_store.py — v2
"""JSON file-based processed-file registry.

The ledger is a single JSON array of identity keys (see cache/fingerprint.py).
A missing or corrupt ledger degrades to "reprocess everything"; a failed save
only costs repeated work on a future run. Neither ever raises to the caller.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from rutrenamer.cache.fingerprint import file_key

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_FILE = Path("processed_files.json")


class ProcessedRegistry:
    """Persistent idempotency ledger keyed by file identity."""

    def __init__(self, path: str | Path = DEFAULT_REGISTRY_FILE) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    @staticmethod
    def key(path: str | Path, size: int, mtime_ns: int) -> str:
        """Identity key for a file (path + size + modification time)."""
        return file_key(path, size, mtime_ns)

    def load(self) -> set[str]:
        """Read the ledger. Returns an empty set when absent or unreadable."""
        if not self._path.exists():
            logger.debug("No registry at %s, starting fresh", self._path)
            return set()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(
                "Could not load registry %s, reprocessing everything: %s",
                self._path, e,
            )
            return set()

        if not isinstance(data, list) or not all(isinstance(k, str) for k in data):
            logger.warning(
                "Registry %s is not a list of keys, reprocessing everything",
                self._path,
            )
            return set()

        logger.debug("Loaded %d registry entries from %s", len(data), self._path)
        return set(data)

    def save(self, keys: Iterable[str]) -> bool:
        """Overwrite the ledger atomically (write temp file, then replace).

        Returns:
            True if the ledger was written, False if persisting failed.
        """
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        payload = json.dumps(sorted(set(keys)), indent=2, ensure_ascii=False)
        try:
            if self._path.parent != Path(""):
                self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            logger.warning("Could not save registry %s: %s", self._path, e)
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                logger.debug("Could not remove %s", tmp_path)
            return False
        return True
