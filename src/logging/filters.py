# src/logging/filters.py — v1
"""Suppression of known-benign diagnostic noise.

Filter decisions use only the record level and exception type. Message text is
never inspected. The scheduler's own failure summary does not go through
logging and is never affected.
"""

from __future__ import annotations

import logging
import warnings

from rutrenamer.extraction.base_extractor import CorruptedImageError

# Third-party loggers raised to ERROR by install_noise_filters.
NOISY_LOGGERS: frozenset[str] = frozenset({"PIL", "fitz", "pymupdf", "pytesseract"})


class BenignNoiseFilter(logging.Filter):
    """Drop below-ERROR records that only report a corrupted image."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.ERROR:
            return True
        if record.exc_info and isinstance(record.exc_info[1], CorruptedImageError):
            return False
        return True


def install_noise_filters() -> None:
    """Silence process-wide diagnostics from MuPDF and Pillow.

    MuPDF writes its own errors and warnings straight to stderr, Pillow emits
    DecompressionBombWarning for large renders. Both are reported through
    CorruptedImageError / ExtractionError by the readers instead.
    """
    import fitz  # PyMuPDF
    from PIL import Image

    fitz.TOOLS.mupdf_display_errors(False)
    fitz.TOOLS.mupdf_display_warnings(False)
    warnings.filterwarnings("ignore", category=Image.DecompressionBombWarning)

    # Their records propagate to the root logger, never to our handlers.
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.ERROR)
