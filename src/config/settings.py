# src/config/settings.py — v2
"""Typed configuration loaded from the environment / .env via pydantic-settings.

Single source of truth for tunables. CLI flags override these values through
load_settings(**overrides).
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration values are out of range or inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RUTRENAMER_",
        extra="ignore",
    )

    # === Batch scheduling ===
    max_concurrent: int = 5
    file_timeout_seconds: float = 0.0
    document_extensions: str = ".pdf"
    skip_files: str = ""

    # === Registry ===
    registry_file: Path = Path("processed_files.json")

    # === Extraction ===
    min_text_length: int = 5

    # === OCR ===
    ocr_enabled: bool = True
    ocr_dpi: int = 300
    ocr_languages: str = "spa+eng"
    ocr_temp_dir: Path | None = None
    tesseract_cmd: str = ""

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Reject values the scheduler and readers cannot work with."""
        errors: list[str] = []

        if self.max_concurrent < 1:
            errors.append("MAX_CONCURRENT must be >= 1")
        if self.file_timeout_seconds < 0:
            errors.append("FILE_TIMEOUT_SECONDS must be >= 0")
        if self.min_text_length < 0:
            errors.append("MIN_TEXT_LENGTH must be >= 0")
        if self.ocr_dpi < 72:
            errors.append("OCR_DPI must be >= 72")
        if self.ocr_enabled and not self.ocr_languages.strip():
            errors.append("OCR_LANGUAGES must not be empty when OCR is enabled")
        if not self.document_extensions_list:
            errors.append("DOCUMENT_EXTENSIONS must list at least one extension")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def document_extensions_list(self) -> list[str]:
        """Parse comma-separated extensions, lowercased and dot-prefixed."""
        exts: list[str] = []
        for raw in self.document_extensions.split(","):
            ext = raw.strip().lower()
            if not ext:
                continue
            exts.append(ext if ext.startswith(".") else f".{ext}")
        return exts

    @property
    def skip_files_list(self) -> list[str]:
        """Parse comma-separated file names to skip."""
        return [f.strip() for f in self.skip_files.split(",") if f.strip()]

    @property
    def file_timeout(self) -> float | None:
        """Per-file timeout in seconds, None when disabled."""
        return self.file_timeout_seconds or None


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (CLI flags, tests).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If a value is out of range.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
