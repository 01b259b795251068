# src/batch/scheduler.py — v1
"""Batch scheduler — bounded-concurrency processing of one folder.

Workflow:
    1. Scan the folder for documents and load the processed-file registry
    2. Split pending files into waves of at most ``max_concurrent``
    3. Run each wave concurrently, wait for all of it (hard barrier). A
       timed-out file is reported at once but its worker thread is still
       drained before the next wave starts
    4. Register definitive outcomes and checkpoint the registry after each wave
    5. Group successes by identifier and hand them to the rename resolver
    6. Register the renamed files under their new names and checkpoint again

A crash therefore loses at most one wave of extraction work. Step 6 keeps a
second run over the same folder from renaming anything.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

from rutrenamer.batch.models import FolderReport, RunContext
from rutrenamer.batch.scanner import FolderScanner
from rutrenamer.cache.json_store import ProcessedRegistry
from rutrenamer.core.models import ExtractionFailure, ExtractionResult, FileTask
from rutrenamer.extraction.base_extractor import bind_executor, reset_executor
from rutrenamer.extraction.pipeline import IdentifierPipeline
from rutrenamer.logging.context import set_file_context, set_folder_context
from rutrenamer.storage.models import RenameOperation
from rutrenamer.storage.resolver import RenameResolver
from rutrenamer.tracking.progress import ProgressReporter

if TYPE_CHECKING:
    from rutrenamer.config.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT = 5


def iter_waves(items: Sequence[FileTask], size: int) -> Iterator[Sequence[FileTask]]:
    """Yield consecutive slices of at most ``size`` items."""
    if size < 1:
        raise ValueError("wave size must be >= 1")
    for start in range(0, len(items), size):
        yield items[start : start + size]


class BatchScheduler:
    """Drive the identifier pipeline over a folder, wave by wave."""

    def __init__(
        self,
        settings: Settings | None = None,
        pipeline: IdentifierPipeline | None = None,
        registry: ProcessedRegistry | None = None,
        scanner: FolderScanner | None = None,
        reporter: ProgressReporter | None = None,
    ) -> None:
        if pipeline is None:
            pipeline = (
                IdentifierPipeline.from_settings(settings)
                if settings is not None else IdentifierPipeline()
            )
        if registry is None:
            registry = (
                ProcessedRegistry(settings.registry_file)
                if settings is not None else ProcessedRegistry()
            )
        if scanner is None:
            scanner = (
                FolderScanner(settings.document_extensions_list)
                if settings is not None else FolderScanner()
            )
        self._pipeline = pipeline
        self._registry = registry
        self._scanner = scanner
        self._reporter = reporter or ProgressReporter()
        self._max_concurrent = (
            settings.max_concurrent if settings is not None else DEFAULT_MAX_CONCURRENT
        )
        self._timeout = settings.file_timeout if settings is not None else None

    async def process(self, folder: Path, dry_run: bool = False) -> FolderReport:
        """Extract identifiers for every pending file, then rename/group.

        Args:
            folder: Folder to process (top level only).
            dry_run: Extract and plan names, but neither rename files nor
                write the registry.

        Returns:
            FolderReport with renamed/grouped/skipped counts and failures.

        Raises:
            ValueError: If ``folder`` is not a directory.
            OSError: If a rename or mkdir fails during the resolve phase.
        """
        t0 = time.perf_counter()
        folder = Path(folder).resolve()
        set_folder_context(str(folder), uuid.uuid4().hex[:8])

        tasks = self._scanner.scan(folder)
        ctx = RunContext(folder=folder, processed=self._registry.load())
        pending = [t for t in tasks if t.key not in ctx.processed]
        ctx.total = len(pending)

        logger.info(
            "Folder %s: %d documents, %d pending (dry_run=%s)",
            folder, len(tasks), len(pending), dry_run,
        )
        self._reporter.folder_started(folder, len(tasks), len(pending))

        for wave_no, wave in enumerate(iter_waves(pending, self._max_concurrent), 1):
            results = await self._run_wave(wave, ctx)
            for result in results:
                ctx.record(result, register=not dry_run)
                self._reporter.progress(ctx.completed, ctx.total, result.task.filename)
            if not dry_run:
                self._registry.save(ctx.processed)
            logger.debug("Wave %d done (%d/%d)", wave_no, ctx.completed, ctx.total)

        groups = ctx.groups()
        resolver = RenameResolver(dry_run=dry_run)
        resolution = resolver.resolve(groups, folder)

        if not dry_run:
            self._register_targets(resolution.operations, ctx)

        report = FolderReport(
            folder=str(folder),
            total_files=len(tasks),
            pending=len(pending),
            renamed=resolution.renamed,
            grouped=resolution.moved,
            skipped=ctx.skipped(),
            failures=ctx.failures(),
            operations=resolution.operations,
            dry_run=dry_run,
            duration_seconds=round(time.perf_counter() - t0, 2),
        )
        logger.info(
            "Folder %s done: %d renamed, %d grouped, %d skipped, %d failed",
            folder, report.renamed, report.grouped, report.skipped, report.failed,
        )
        self._reporter.folder_completed(report)
        return report

    async def _run_wave(
        self, wave: Sequence[FileTask], ctx: RunContext,
    ) -> list[ExtractionResult]:
        """Run one wave concurrently; every task resolves to a result value."""
        for task in wave:
            self._reporter.progress(ctx.completed, ctx.total, task.filename)

        # Blocking reads of this wave share one pool; timed-out reads still
        # hold their thread until the pool is drained below.
        executor = ThreadPoolExecutor(
            max_workers=len(wave), thread_name_prefix="rutrenamer-wave",
        )
        token = bind_executor(executor)
        try:
            outcomes = await asyncio.gather(
                *(self._run_one(task) for task in wave),
                return_exceptions=True,
            )
        finally:
            reset_executor(token)
            await asyncio.to_thread(executor.shutdown, wait=True)

        results: list[ExtractionResult] = []
        for task, outcome in zip(wave, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error("Unexpected error on %s: %s", task.filename, outcome)
                outcome = ExtractionFailure(
                    task=task, reason=str(outcome) or type(outcome).__name__,
                )
            results.append(outcome)
        return results

    async def _run_one(self, task: FileTask) -> ExtractionResult:
        set_file_context(task.filename)
        if self._timeout is None:
            return await self._pipeline.run(task)
        try:
            return await asyncio.wait_for(self._pipeline.run(task), self._timeout)
        except asyncio.TimeoutError:
            logger.warning("Timed out after %gs: %s", self._timeout, task.filename)
            return ExtractionFailure(
                task=task,
                reason=f"Timed out after {self._timeout:g}s",
                retryable=True,
            )

    def _register_targets(self, operations: list[RenameOperation], ctx: RunContext) -> None:
        """Record renamed files under their new identity and checkpoint."""
        added = 0
        for op in operations:
            if not op.performed:
                continue
            try:
                ctx.processed.add(FileTask.from_path(op.target).key)
                added += 1
            except OSError as e:
                logger.warning("Cannot stat renamed file %s: %s", op.target, e)
        if added:
            self._registry.save(ctx.processed)
