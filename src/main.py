# src/main.py — v2
"""CLI entry point — run and verify commands.

Usage:
    rutrenamer run <folder1> [folder2 ...] [options]
    rutrenamer verify <folder1> [folder2 ...] [options]

``run`` renames every document after the RUT/C.I. found in it and groups
documents sharing one identifier into a subfolder. ``verify`` performs the
same extraction but only prints what would be renamed.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rutrenamer.version import __version__

if TYPE_CHECKING:
    from rutrenamer.config.settings import Settings

logger = logging.getLogger(__name__)


class InvalidFolderError(ValueError):
    """A folder argument is missing, does not exist or is not a directory."""


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        folders = _validate_folders(args.folders)
    except InvalidFolderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print(f"Usage: {parser.prog} {args.command} <folder1> [folder2 ...]", file=sys.stderr)
        return 1

    from rutrenamer.config.settings import ConfigurationError

    try:
        settings = _load_settings(args)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(folders, settings, args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="rutrenamer",
        description=f"rutrenamer v{__version__} — rename scanned PDFs by RUT/C.I.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    for name, func, help_text in (
        ("run", _cmd_run, "Rename and group documents by identifier"),
        ("verify", _cmd_verify, "Show what would be renamed, change nothing"),
    ):
        p = subparsers.add_parser(name, help=help_text)
        # nargs="*" so a missing folder is reported by us with exit code 1
        p.add_argument("folders", nargs="*", type=Path, help="Folders to process")
        p.add_argument(
            "-c", "--concurrency", type=int, default=None,
            help="Files processed concurrently per wave (default: 5)",
        )
        p.add_argument(
            "--registry", type=Path, default=None,
            help="Processed-file registry (default: ./processed_files.json)",
        )
        p.add_argument(
            "--no-ocr", action="store_true",
            help="Disable the OCR fallback",
        )
        p.set_defaults(func=func)

    return parser


def _validate_folders(folders: list[Path]) -> list[Path]:
    """Check every folder argument before any work starts."""
    if not folders:
        raise InvalidFolderError("at least one folder must be given")
    for folder in folders:
        if not folder.exists():
            raise InvalidFolderError(f"folder {str(folder)!r} does not exist")
        if not folder.is_dir():
            raise InvalidFolderError(f"{str(folder)!r} is not a folder")
    return folders


def _load_settings(args: argparse.Namespace) -> Settings:
    """Load Settings, applying CLI overrides."""
    from rutrenamer.config.settings import load_settings

    overrides: dict[str, object] = {}
    if args.concurrency is not None:
        overrides["max_concurrent"] = args.concurrency
    if args.registry is not None:
        overrides["registry_file"] = args.registry
    if args.no_ocr:
        overrides["ocr_enabled"] = False
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return load_settings(**overrides)


async def _cmd_run(folders: list[Path], settings: Settings, args: argparse.Namespace) -> int:
    """Rename/group every folder in turn."""
    return await _process_folders(folders, settings, dry_run=False)


async def _cmd_verify(folders: list[Path], settings: Settings, args: argparse.Namespace) -> int:
    """Dry-run every folder in turn."""
    return await _process_folders(folders, settings, dry_run=True)


async def _process_folders(folders: list[Path], settings: Settings, dry_run: bool) -> int:
    """Process folders sequentially; one folder's failure never stops the rest."""
    from rutrenamer.batch.scheduler import BatchScheduler
    from rutrenamer.tracking.progress import ConsoleProgressReporter

    scheduler = BatchScheduler(
        settings=settings,
        reporter=ConsoleProgressReporter(),
    )

    print(f"Folders to process: {', '.join(str(f) for f in folders)}")
    for folder in folders:
        try:
            await scheduler.process(folder, dry_run=dry_run)
        except Exception as exc:
            logger.error(
                "Error processing folder %s: %s", folder, exc,
                exc_info=logger.isEnabledFor(logging.DEBUG),
            )
            logger.warning("Continuing with the next folder")

    print("\nAll folders processed.")
    return 0


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from rutrenamer.logging.filters import install_noise_filters
    from rutrenamer.logging.logger import setup_logging

    install_noise_filters()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        stream=sys.stderr,
    )


if __name__ == "__main__":
    sys.exit(main())
