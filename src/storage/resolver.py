# src/storage/resolver.py — v1
"""Rename/group resolver: place files by identifier without overwriting.

Singleton groups are renamed in place to ``<identifier>.pdf``. Groups of two
or more files are moved into a ``<identifier>/`` subfolder. Free names are
looked up against the live filesystem at the moment of each rename, since
earlier renames in the same group change what is free.

There is no rollback: an OSError halfway through leaves the folder partially
reorganized and propagates to the caller.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rutrenamer.core.models import GroupMember, IdentifierGroups
from rutrenamer.storage.models import RenameOperation, ResolveResult

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".pdf"
FIRST_SUFFIX = 2


def unique_target(
    directory: Path,
    base_name: str,
    extension: str = DEFAULT_EXTENSION,
    source: Path | None = None,
    reserved: set[Path] | None = None,
) -> Path:
    """Return the first free ``<base>.ext``, ``<base> (2).ext``, ``<base> (3).ext``...

    Args:
        directory: Target directory.
        base_name: Name without extension (the identifier).
        extension: Extension including the dot.
        source: The file being placed. Its own current path counts as free.
        reserved: Paths already promised to other files (dry-run planning).
    """
    reserved = reserved or set()

    def _taken(candidate: Path) -> bool:
        if source is not None and candidate == source:
            return False
        return candidate in reserved or candidate.exists()

    candidate = directory / f"{base_name}{extension}"
    i = FIRST_SUFFIX
    while _taken(candidate):
        candidate = directory / f"{base_name} ({i}){extension}"
        i += 1
    return candidate


class RenameResolver:
    """Apply (or, in dry-run, plan) the placement of every identifier group."""

    def __init__(self, dry_run: bool = False) -> None:
        self.dry_run = dry_run
        self._reserved: set[Path] = set()

    def resolve(self, groups: IdentifierGroups, folder: Path) -> ResolveResult:
        """Rename singletons and move multi-file groups into subfolders.

        Groups are handled in insertion order (first sighting).
        """
        self._reserved = set()
        result = ResolveResult()

        for identifier, members in groups.items():
            if not members:
                continue

            if len(members) == 1:
                op = self._place(members[0], folder, identifier, grouped=False)
                result.operations.append(op)
                if op.reason != "already named":
                    result.renamed += 1
                continue

            target_dir = folder / identifier
            if not self.dry_run:
                target_dir.mkdir(exist_ok=True)
            for member in members:
                op = self._place(member, target_dir, identifier, grouped=True)
                result.operations.append(op)
                result.moved += 1

        return result

    def _place(
        self,
        member: GroupMember,
        directory: Path,
        identifier: str,
        grouped: bool,
    ) -> RenameOperation:
        extension = member.path.suffix.lower() or DEFAULT_EXTENSION
        target = unique_target(
            directory, identifier, extension,
            source=member.path, reserved=self._reserved,
        )

        if target == member.path:
            return RenameOperation(
                identifier=identifier, source=member.path, target=target,
                grouped=grouped, performed=False, reason="already named",
            )

        reason = ""
        if target.name != f"{identifier}{extension}":
            reason = "name taken, suffixed"

        if self.dry_run:
            self._reserved.add(target)
            return RenameOperation(
                identifier=identifier, source=member.path, target=target,
                grouped=grouped, performed=False, reason=reason,
            )

        member.path.rename(target)
        logger.info("%s -> %s", member.filename, _display(target, grouped))
        return RenameOperation(
            identifier=identifier, source=member.path, target=target,
            grouped=grouped, performed=True, reason=reason,
        )


def _display(target: Path, grouped: bool) -> str:
    if grouped:
        return f"{target.parent.name}/{target.name}"
    return target.name
