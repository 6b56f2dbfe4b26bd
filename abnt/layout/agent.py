#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Layout Agent

Main orchestrator of the export pipeline. Takes a block sequence and
produces the requested artifacts (HTML preview, PDF, DOCX).

Version: 1.0.0
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union
import asyncio

from abnt.contracts.blocks import Block, snapshot
from abnt.contracts.document import Document
from config.logging_config import get_logger
from config.settings import settings

from .executor.pagination import Page, paginate
from .renderer.base_renderer import ExportResult, write_atomic
from .renderer.docx_exporter import DocxExporter
from .renderer.preview_renderer import PreviewRenderer
from .renderer.print_renderer import PrintRenderer

logger = get_logger(__name__)

SUPPORTED_FORMATS = (PreviewRenderer.FORMAT, PrintRenderer.FORMAT, DocxExporter.FORMAT)


class LayoutAgent:
    """
    Export orchestrator.

    Responsibilities:
    1. Validate the document (warnings only)
    2. Paginate for preview and print
    3. Render to output formats (HTML, PDF, DOCX)

    Usage:
        agent = LayoutAgent(output_dir="out")
        results = agent.process(blocks, formats=["pdf", "docx"])
        results["pdf"].success

        # Or step by step:
        pages = agent.paginate(blocks)
        result = await agent.export(blocks, "pdf")
    """

    def __init__(
        self,
        output_dir: Union[str, Path, None] = None,
        basename: Optional[str] = None,
    ):
        """
        Initialize Layout Agent.

        Args:
            output_dir: Directory for artifacts (defaults to settings.output_dir)
            basename: File name without extension (defaults to documento-abnt)
        """
        self.output_dir = Path(output_dir) if output_dir else settings.output_dir
        self.basename = basename or settings.export_basename

        self.preview_renderer = PreviewRenderer()
        self.print_renderer = PrintRenderer()
        self.docx_exporter = DocxExporter()

        logger.info(f"LayoutAgent initialized: output_dir={self.output_dir}")

    def output_path(self, fmt: str) -> Path:
        return self.output_dir / f"{self.basename}.{fmt}"

    def validate(self, blocks: Sequence[Block]) -> List[str]:
        """Log and return validation findings; none of them block an export."""
        issues = Document(blocks=list(blocks)).validate()
        for issue in issues:
            logger.warning(f"{issue!r}" + (f" (block {issue.block_id})" if issue.block_id else ""))
        return [issue.message for issue in issues]

    def paginate(self, blocks: Sequence[Block]) -> List[Page]:
        return paginate(blocks, settings.page_content_height_pt)

    async def export(self, blocks: Sequence[Block], fmt: str) -> ExportResult:
        """
        Export one format.

        Args:
            blocks: Document blocks
            fmt: html, pdf or docx

        Returns:
            ExportResult
        """
        fmt = fmt.lower()
        if fmt not in SUPPORTED_FORMATS:
            return ExportResult(success=False, error=f"Unsupported output format: {fmt}")

        path = self.output_path(fmt)

        if fmt == "pdf":
            return await self.print_renderer.export(blocks, path)
        if fmt == "docx":
            return self.docx_exporter.export(blocks, path)
        return self.export_html(blocks, path)

    def export_html(self, blocks: Sequence[Block], path: Union[str, Path]) -> ExportResult:
        """Write the paginated preview as a standalone HTML file."""
        try:
            preview = self.preview_renderer.render(blocks)
            write_atomic(preview.html.encode("utf-8"), path)
        except Exception as e:
            logger.error(f"HTML export failed: {e}")
            return ExportResult(success=False, error=str(e))

        logger.info(f"HTML saved: {path}")
        return ExportResult(success=True, path=Path(path), pages=preview.page_count)

    async def process_async(
        self,
        blocks: Sequence[Block],
        formats: Iterable[str] = SUPPORTED_FORMATS,
    ) -> Dict[str, ExportResult]:
        """
        Run the full pipeline for several formats.

        Args:
            blocks: Document blocks
            formats: Output formats

        Returns:
            Format -> ExportResult
        """
        logger.info("=== Export Processing ===")
        blocks = snapshot(blocks)

        # 1. Validate
        logger.info("Step 1: Validating document...")
        self.validate(blocks)

        # 2. Paginate
        logger.info("Step 2: Paginating...")
        pages = self.paginate(blocks)
        logger.info(f"Document: {len(blocks)} blocks, {len(pages)} pages")

        # 3. Render outputs
        logger.info("Step 3: Rendering outputs...")
        results: Dict[str, ExportResult] = {}
        for fmt in formats:
            results[fmt] = await self.export(blocks, fmt)

        failed = [fmt for fmt, r in results.items() if not r.success]
        if failed:
            logger.error(f"Failed formats: {', '.join(failed)}")
        logger.info("=== Export Processing Complete ===")

        return results

    def process(
        self,
        blocks: Sequence[Block],
        formats: Iterable[str] = SUPPORTED_FORMATS,
    ) -> Dict[str, ExportResult]:
        """Synchronous entry point for process_async."""
        return asyncio.run(self.process_async(blocks, formats))
