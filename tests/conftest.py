# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides PDF factories (real files built with PyMuPDF), FileTask builders,
scripted text readers and isolated settings. Tesseract is never invoked.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from rutrenamer.config.settings import Settings, load_settings
from rutrenamer.core.models import FileTask
from rutrenamer.extraction.base_extractor import BaseTextReader
from rutrenamer.logging.context import clear_context


class ScriptedReader(BaseTextReader):
    """Text reader answering from a filename → text/exception script."""

    def __init__(
        self,
        script: dict[str, str | BaseException] | None = None,
        default: str | BaseException = "",
    ) -> None:
        self.script = script or {}
        self.default = default
        self.calls: list[str] = []

    @property
    def supported_extensions(self) -> list[str]:
        return [".pdf"]

    async def read(self, path: Path) -> str:
        name = Path(path).name
        self.calls.append(name)
        value = self.script.get(name, self.default)
        if isinstance(value, BaseException):
            raise value
        return value


# === FIXTURES: Files ===


@pytest.fixture
def make_pdf() -> Callable[..., Path]:
    """Factory writing a real one-page PDF with the given text."""
    import fitz

    def _make(path: Path, text: str = "", pages: int = 1) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        doc = fitz.open()
        for i in range(pages):
            page = doc.new_page()
            if text and i == 0:
                page.insert_text((72, 72), text, fontsize=11)
        doc.save(str(path))
        doc.close()
        return path

    return _make


@pytest.fixture
def make_task() -> Callable[..., FileTask]:
    """Factory creating a dummy file on disk and returning its FileTask."""

    def _make(path: Path, content: bytes = b"%PDF-1.4 fake") -> FileTask:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return FileTask.from_path(path)

    return _make


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Temporary folder of documents."""
    folder = tmp_path / "docs"
    folder.mkdir()
    return folder


# === FIXTURES: Readers / settings ===


@pytest.fixture
def scripted_reader() -> type[ScriptedReader]:
    """The ScriptedReader class, for building fake text sources."""
    return ScriptedReader


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from any .env, registry under tmp_path."""
    return load_settings(
        _env_file=None,
        registry_file=tmp_path / "processed_files.json",
        ocr_temp_dir=tmp_path / "ocr_tmp",
    )


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()
