#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Layout Module

Pagination and multi-format rendering of block documents.

Components:
- PaginationEngine: Split blocks into fixed-height pages
- PreviewRenderer: Paginated HTML
- PrintRenderer: PDF, one physical page per pagination page
- DocxExporter: Structured Word document

Usage:
    from abnt.layout import LayoutAgent

    agent = LayoutAgent(output_dir="out")
    results = agent.process(blocks, formats=["pdf", "docx"])

Version: 1.0.0
"""

from .agent import LayoutAgent, SUPPORTED_FORMATS
from .executor.pagination import PaginationEngine, Page, paginate, page_number_index
from .renderer.base_renderer import ExportResult
from .renderer.preview_renderer import PreviewRenderer, LivePreview
from .renderer.print_renderer import PrintRenderer, export_pdf_sync
from .renderer.docx_exporter import DocxExporter

__all__ = [
    "LayoutAgent",
    "SUPPORTED_FORMATS",
    "PaginationEngine",
    "Page",
    "paginate",
    "page_number_index",
    "ExportResult",
    "PreviewRenderer",
    "LivePreview",
    "PrintRenderer",
    "export_pdf_sync",
    "DocxExporter",
]

__version__ = "1.0.0"
