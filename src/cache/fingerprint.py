# src/cache/fingerprint.py — v3
"""File identity keys for the processed-file registry.

A key is the composite of absolute path, byte size and modification time.
Editing, replacing or touching a file yields a new key, so the file is
processed again on the next run. Keys are readable on purpose: operators
inspect and prune the ledger by hand.
"""

from __future__ import annotations

from pathlib import Path

_SEPARATOR = "::"


def file_key(path: str | Path, size: int, mtime_ns: int) -> str:
    """Compute the registry key of a file.

    Args:
        path: File path (made absolute, not resolved through symlinks).
        size: Size in bytes.
        mtime_ns: Modification time in nanoseconds since the epoch.

    Returns:
        Deterministic key string ``"<path>::<size>::<mtime_ns>"``.
    """
    absolute = Path(path).absolute()
    return _SEPARATOR.join((str(absolute), str(int(size)), str(int(mtime_ns))))
