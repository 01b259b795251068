# src/extraction/pdf_extractor.py — v2
"""Structured PDF text reader using PyMuPDF (fitz).

Concatenates the text layer of every page, in page order.
Requires the 'pymupdf' package.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from rutrenamer.extraction.base_extractor import BaseTextReader, ExtractionError, run_blocking

logger = logging.getLogger(__name__)


class PdfTextReader(BaseTextReader):
    """Fast reader for the embedded text layer of a PDF.

    Zero-page, encrypted and malformed documents produce an empty string
    ("no structured text") rather than an error, so the caller can fall back
    to OCR.
    """

    @property
    def supported_extensions(self) -> list[str]:
        return [".pdf"]

    async def read(self, path: Path) -> str:
        """Extract the text of every page, pages separated by a newline."""
        return await run_blocking(self._read_sync, Path(path))

    def _read_sync(self, path: Path) -> str:
        try:
            import fitz  # PyMuPDF
        except ImportError as e:
            raise ImportError(
                "pymupdf package required for PDF extraction: pip install pymupdf"
            ) from e

        if not path.is_file():
            raise ExtractionError(f"File not found: {path.name}", retryable=True)

        try:
            doc = self._open_document(path, fitz)
        except OSError as e:
            raise ExtractionError(
                f"Cannot read {path.name}: {e}", retryable=True
            ) from e
        except RuntimeError as e:
            # fitz.FileDataError / EmptyFileError derive from RuntimeError
            logger.debug("Malformed PDF %s: %s", path.name, e)
            return ""

        with doc:
            if doc.needs_pass:
                logger.debug("Encrypted PDF %s, no structured text", path.name)
                return ""
            if doc.page_count == 0:
                logger.debug("PDF %s has no pages", path.name)
                return ""

            pages: list[str] = []
            for page_num in range(doc.page_count):
                try:
                    pages.append(doc[page_num].get_text("text"))
                except RuntimeError as e:
                    raise ExtractionError(
                        f"Cannot read page {page_num + 1} of {path.name}: {e}"
                    ) from e

        return "\n".join(pages)

    @staticmethod
    def _open_document(path: Path, fitz_module: Any) -> Any:
        """Open a PDF from disk."""
        return fitz_module.open(str(path), filetype="pdf")
