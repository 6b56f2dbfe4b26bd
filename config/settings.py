#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from typing import Literal, Optional
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    A4_WIDTH_CM,
    A4_HEIGHT_CM,
    MARGIN_TOP_CM,
    MARGIN_RIGHT_CM,
    MARGIN_BOTTOM_CM,
    MARGIN_LEFT_CM,
    POINTS_PER_CM,
    EXPORT_BASENAME,
    IMAGE_FETCH_TIMEOUT_SECONDS,
    LOG_LEVEL,
)


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent

TocNumbering = Literal["ordinal", "actual"]


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_prefix="ABNT_",
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========== Page geometry (cm) ==========
    page_width_cm: float = A4_WIDTH_CM
    page_height_cm: float = A4_HEIGHT_CM
    margin_top_cm: float = MARGIN_TOP_CM
    margin_right_cm: float = MARGIN_RIGHT_CM
    margin_bottom_cm: float = MARGIN_BOTTOM_CM
    margin_left_cm: float = MARGIN_LEFT_CM

    # Overrides the derived content height when set (points)
    page_content_height_override_pt: Optional[float] = None

    # ========== Typography ==========
    body_font: str = "Times-Roman"            # reportlab base-14 names
    body_font_bold: str = "Times-Bold"
    body_font_italic: str = "Times-Italic"
    body_font_bold_italic: str = "Times-BoldItalic"
    docx_font: str = "Times New Roman"
    css_font_stack: str = '"Times New Roman", Times, serif'

    # ========== Table of contents ==========
    # Preview numbers titles by ordinal position, print by real page.
    preview_toc_numbering: TocNumbering = "ordinal"
    print_toc_numbering: TocNumbering = "actual"

    # ========== Export ==========
    export_basename: str = EXPORT_BASENAME
    output_dir: Path = BASE_DIR / "data" / "output"
    image_fetch_timeout: float = IMAGE_FETCH_TIMEOUT_SECONDS
    print_page_numbers: bool = True

    # ========== Logging ==========
    log_level: str = LOG_LEVEL
    # Rotating file log; console only when unset
    log_file: Optional[Path] = None

    language: str = "pt-BR"

    @field_validator("margin_top_cm", "margin_right_cm", "margin_bottom_cm", "margin_left_cm")
    @classmethod
    def _non_negative_margin(cls, v: float) -> float:
        if v < 0:
            raise ValueError("margins must be >= 0")
        return v

    @model_validator(mode="after")
    def _content_area_positive(self) -> "Settings":
        if self.content_width_cm <= 0 or self.content_height_cm <= 0:
            raise ValueError("margins leave no content area on the page")
        return self

    @property
    def content_width_cm(self) -> float:
        return self.page_width_cm - self.margin_left_cm - self.margin_right_cm

    @property
    def content_height_cm(self) -> float:
        return self.page_height_cm - self.margin_top_cm - self.margin_bottom_cm

    @property
    def page_content_width_pt(self) -> float:
        return self.content_width_cm * POINTS_PER_CM

    @property
    def page_content_height_pt(self) -> float:
        """Page height handed to the pagination engine by every renderer."""
        if self.page_content_height_override_pt is not None:
            return self.page_content_height_override_pt
        return self.content_height_cm * POINTS_PER_CM

    def export_filename(self, extension: str) -> str:
        """Default artifact name, e.g. documento-abnt.pdf"""
        return f"{self.export_basename}.{extension.lstrip('.')}"

    def ensure_output_dir(self) -> Path:
        self.output_dir.mkdir(exist_ok=True, parents=True)
        return self.output_dir


# Global settings instance
settings = Settings()
