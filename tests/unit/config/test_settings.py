# tests/unit/config/test_settings.py — v2
"""Tests for config/settings.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from rutrenamer.config.settings import ConfigurationError, Settings, load_settings


class TestDefaults:
    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.max_concurrent == 5
        assert s.registry_file == Path("processed_files.json")
        assert s.document_extensions_list == [".pdf"]
        assert s.min_text_length == 5
        assert s.ocr_enabled is True
        assert s.ocr_dpi == 300
        assert s.ocr_languages == "spa+eng"
        assert s.file_timeout is None
        assert s.skip_files_list == []
        assert s.log_level == "INFO"


class TestEnvironment:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("RUTRENAMER_MAX_CONCURRENT", "3")
        monkeypatch.setenv("RUTRENAMER_OCR_ENABLED", "false")
        s = Settings(_env_file=None)
        assert s.max_concurrent == 3
        assert s.ocr_enabled is False

    def test_env_file(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("RUTRENAMER_OCR_DPI=150\nUNRELATED=1\n", encoding="utf-8")
        assert Settings(_env_file=env).ocr_dpi == 150

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("RUTRENAMER_MAX_CONCURRENT", "3")
        assert load_settings(_env_file=None, max_concurrent=8).max_concurrent == 8


class TestValidation:
    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("max_concurrent", 0, "MAX_CONCURRENT"),
            ("file_timeout_seconds", -1, "FILE_TIMEOUT_SECONDS"),
            ("min_text_length", -1, "MIN_TEXT_LENGTH"),
            ("ocr_dpi", 10, "OCR_DPI"),
            ("ocr_languages", " ", "OCR_LANGUAGES"),
            ("document_extensions", " , ", "DOCUMENT_EXTENSIONS"),
        ],
    )
    def test_out_of_range(self, field, value, message):
        with pytest.raises(ConfigurationError, match=message):
            load_settings(_env_file=None, **{field: value})

    def test_errors_joined(self):
        with pytest.raises(ConfigurationError, match="MAX_CONCURRENT.*; OCR_DPI"):
            load_settings(_env_file=None, max_concurrent=0, ocr_dpi=1)

    def test_empty_languages_ok_without_ocr(self):
        s = load_settings(_env_file=None, ocr_enabled=False, ocr_languages="")
        assert s.ocr_enabled is False


class TestHelpers:
    def test_extensions_normalized(self):
        s = load_settings(_env_file=None, document_extensions="PDF, .Tif,")
        assert s.document_extensions_list == [".pdf", ".tif"]

    def test_skip_files(self):
        s = load_settings(_env_file=None, skip_files=" a.pdf ,b.pdf,, ")
        assert s.skip_files_list == ["a.pdf", "b.pdf"]

    def test_file_timeout(self):
        assert load_settings(_env_file=None, file_timeout_seconds=30).file_timeout == 30
