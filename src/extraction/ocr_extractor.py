# src/extraction/ocr_extractor.py — v1
"""OCR fallback reader: rasterize the first page, run Tesseract on it.

Slow and CPU/memory heavy, only invoked when the structured text layer
yields no identifier. Requires 'pymupdf', 'Pillow' and 'pytesseract' plus a
Tesseract binary with the configured language packs.
"""

from __future__ import annotations

import logging
import tempfile
import uuid
from pathlib import Path

from rutrenamer.extraction.base_extractor import (
    BaseTextReader,
    CorruptedImageError,
    ExtractionError,
    run_blocking,
)

logger = logging.getLogger(__name__)

DEFAULT_DPI = 300
DEFAULT_LANGUAGES = "spa+eng"


class OcrTextReader(BaseTextReader):
    """Reader that recognizes text on a rendered image of page 1.

    Never fails the pipeline: every rendering or recognition error is
    logged and surfaces as an empty string.
    """

    def __init__(
        self,
        dpi: int = DEFAULT_DPI,
        languages: str = DEFAULT_LANGUAGES,
        temp_dir: str | Path | None = None,
        tesseract_cmd: str = "",
    ) -> None:
        self._dpi = dpi
        self._languages = languages
        self._temp_dir = Path(temp_dir) if temp_dir else None
        self._tesseract_cmd = tesseract_cmd

    @property
    def supported_extensions(self) -> list[str]:
        return [".pdf"]

    async def read(self, path: Path) -> str:
        """Return the trimmed OCR text of the first page, or "" on failure."""
        path = Path(path)
        try:
            return await run_blocking(self._read_sync, path)
        except CorruptedImageError as e:
            logger.debug("Corrupted image while OCR-ing %s", path.name, exc_info=e)
            return ""
        except ExtractionError as e:
            logger.warning("OCR failed for %s: %s", path.name, e)
            return ""

    def _read_sync(self, path: Path) -> str:
        image_path = self._render_first_page(path)
        try:
            text = self._recognize(image_path)
        finally:
            self._cleanup(image_path)
        return text.strip()

    def _render_first_page(self, path: Path) -> Path:
        """Rasterize page 1 to a uniquely named PNG and return its path."""
        try:
            import fitz  # PyMuPDF
        except ImportError as e:
            raise ImportError(
                "pymupdf package required for OCR rendering: pip install pymupdf"
            ) from e

        temp_dir = self._temp_dir or Path(tempfile.gettempdir())
        image_path = temp_dir / f"page_{uuid.uuid4().hex}.png"

        try:
            temp_dir.mkdir(parents=True, exist_ok=True)
            with fitz.open(str(path), filetype="pdf") as doc:
                if doc.needs_pass:
                    raise ExtractionError(f"{path.name} is encrypted")
                if doc.page_count == 0:
                    raise ExtractionError(f"{path.name} has no pages")
                pix = doc[0].get_pixmap(dpi=self._dpi, alpha=False)
                pix.save(str(image_path))
        except fitz.FileDataError as e:
            raise CorruptedImageError(f"Cannot render {path.name}: {e}") from e
        except (RuntimeError, OSError, ValueError) as e:
            raise ExtractionError(f"Cannot render {path.name}: {e}") from e
        return image_path

    def _recognize(self, image_path: Path) -> str:
        """Run Tesseract on a rendered page image."""
        try:
            import pytesseract
            from PIL import Image, UnidentifiedImageError
        except ImportError as e:
            raise ImportError(
                "pytesseract and Pillow required for OCR: pip install pytesseract pillow"
            ) from e

        if self._tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd

        try:
            image = Image.open(image_path)
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise CorruptedImageError(
                f"Cannot decode page image {image_path.name}: {e}"
            ) from e

        with image:
            try:
                return pytesseract.image_to_string(image, lang=self._languages)
            except pytesseract.TesseractNotFoundError as e:
                raise ExtractionError(f"Tesseract is not installed: {e}") from e
            except (pytesseract.TesseractError, RuntimeError, OSError) as e:
                raise ExtractionError(f"Recognition failed: {e}") from e

    @staticmethod
    def _cleanup(image_path: Path) -> None:
        """Delete the intermediate image; failure is not an error."""
        try:
            image_path.unlink(missing_ok=True)
        except OSError:
            logger.debug("Could not remove temporary image %s", image_path)
