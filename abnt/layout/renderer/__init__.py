#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Renderer Module

Provides document rendering for the HTML preview, PDF and DOCX outputs.
"""

from .base_renderer import BaseRenderer, ExportResult, write_atomic
from .preview_renderer import PreviewRenderer, PreviewDocument, LivePreview
from .print_renderer import PrintRenderer, export_pdf_sync
from .docx_exporter import DocxExporter
from .images import ImageLoader

__all__ = [
    "BaseRenderer",
    "ExportResult",
    "write_atomic",
    "PreviewRenderer",
    "PreviewDocument",
    "LivePreview",
    "PrintRenderer",
    "export_pdf_sync",
    "DocxExporter",
    "ImageLoader",
]
