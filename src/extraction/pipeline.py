# src/extraction/pipeline.py — v1
"""Per-file identifier pipeline: structured text first, OCR as fallback.

Every outcome is a value (success, failure or skip). Exceptions raised while
handling one file are converted to ExtractionFailure here, so a single bad
document can never abort the wave it belongs to.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from rutrenamer.core.models import (
    ExtractionFailure,
    ExtractionResult,
    ExtractionSkipped,
    ExtractionSuccess,
    FileTask,
)
from rutrenamer.extraction.base_extractor import BaseTextReader, ExtractionError
from rutrenamer.extraction.identifier import extract_identifier
from rutrenamer.extraction.ocr_extractor import OcrTextReader
from rutrenamer.extraction.pdf_extractor import PdfTextReader

if TYPE_CHECKING:
    from rutrenamer.config.settings import Settings

logger = logging.getLogger(__name__)

NOT_FOUND_REASON = "No RUT/C.I. found"


class IdentifierPipeline:
    """Turns a FileTask into an ExtractionResult."""

    def __init__(
        self,
        text_reader: BaseTextReader | None = None,
        ocr_reader: BaseTextReader | None = None,
        min_text_length: int = 5,
        skip_files: Iterable[str] = (),
    ) -> None:
        """Initialize the pipeline.

        Args:
            text_reader: Structured reader (defaults to PdfTextReader).
            ocr_reader: Fallback reader. None disables OCR.
            min_text_length: Structured text with fewer non-blank characters
                is treated as "no structured text".
            skip_files: File names that are never opened.
        """
        self._text_reader = text_reader or PdfTextReader()
        self._ocr_reader = ocr_reader
        self._min_text_length = min_text_length
        self._skip_files = frozenset(skip_files)

    @classmethod
    def from_settings(cls, settings: Settings) -> IdentifierPipeline:
        """Build a pipeline with the readers configured in Settings."""
        ocr_reader = None
        if settings.ocr_enabled:
            ocr_reader = OcrTextReader(
                dpi=settings.ocr_dpi,
                languages=settings.ocr_languages,
                temp_dir=settings.ocr_temp_dir,
                tesseract_cmd=settings.tesseract_cmd,
            )
        return cls(
            text_reader=PdfTextReader(),
            ocr_reader=ocr_reader,
            min_text_length=settings.min_text_length,
            skip_files=settings.skip_files_list,
        )

    async def run(self, task: FileTask) -> ExtractionResult:
        """Process one file. Never raises for per-file errors."""
        if task.filename in self._skip_files:
            logger.info("Skipping %s (listed in skip_files)", task.filename)
            return ExtractionSkipped(task=task, reason="Listed in skip_files")
        if not any(_accepts(r, task) for r in (self._text_reader, self._ocr_reader) if r):
            logger.info("Skipping %s (no reader handles %r files)", task.filename, task.path.suffix)
            return ExtractionSkipped(
                task=task, reason=f"Unsupported file type '{task.path.suffix}'",
            )

        try:
            return await self._extract(task)
        except Exception as e:
            logger.debug("Extraction crashed for %s", task.filename, exc_info=True)
            return ExtractionFailure(task=task, reason=str(e) or type(e).__name__)

    async def _extract(self, task: FileTask) -> ExtractionResult:
        structured_error: ExtractionError | None = None
        text = ""
        if _accepts(self._text_reader, task):
            try:
                text = await self._text_reader.read(task.path)
            except ExtractionError as e:
                logger.debug("%s failed on %s: %s", self._text_reader.name, task.filename, e)
                structured_error = e

        if self._has_usable_text(text):
            identifier = extract_identifier(text)
            if identifier:
                logger.debug("Found %s in text layer of %s", identifier, task.filename)
                return ExtractionSuccess(task=task, identifier=identifier, source="text")

        if self._ocr_reader is not None and _accepts(self._ocr_reader, task):
            ocr_text = await self._ocr_reader.read(task.path)
            identifier = extract_identifier(ocr_text) if ocr_text.strip() else None
            if identifier:
                logger.debug("Found %s via OCR in %s", identifier, task.filename)
                return ExtractionSuccess(task=task, identifier=identifier, source="ocr")

        if structured_error is not None:
            return ExtractionFailure(
                task=task,
                reason=str(structured_error),
                retryable=structured_error.retryable,
            )
        return ExtractionFailure(task=task, reason=NOT_FOUND_REASON)

    def _has_usable_text(self, text: str) -> bool:
        stripped = "".join(text.split())
        return bool(stripped) and len(stripped) >= self._min_text_length


def _accepts(reader: BaseTextReader, task: FileTask) -> bool:
    return task.path.suffix.lower() in reader.supported_extensions
