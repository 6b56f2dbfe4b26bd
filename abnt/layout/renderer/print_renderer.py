#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Print Renderer

Renders the paginated document to PDF using reportlab. Each pagination
page becomes exactly one physical page: its flowables are wrapped in a
KeepInFrame that shrinks oversized content instead of spilling it.

Usage:
    renderer = PrintRenderer()
    result = await renderer.export(blocks, "documento-abnt.pdf")

    # From synchronous code
    result = export_pdf_sync(blocks, "documento-abnt.pdf")
"""

from io import BytesIO
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
import asyncio
import logging

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import cm
from reportlab.lib.utils import ImageReader
from reportlab.platypus import (
    BaseDocTemplate,
    Frame,
    HRFlowable,
    Image,
    KeepInFrame,
    ListFlowable,
    ListItem,
    PageBreak,
    PageTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
)

from abnt.contracts.base import ExportError
from abnt.contracts.blocks import (
    Block,
    BlockType,
    CoverBlock,
    FootnoteBlock,
    ImageBlock,
    KeywordsBlock,
    ListBlock,
    ReferencesBlock,
    TableBlock,
    TitleBlock,
    snapshot,
)
from abnt.formatting.defaults import resolve_block, keywords_line, image_alt
from abnt.formatting.rules import (
    BLOCK_RULES,
    COVER_RULES,
    IMAGE_CAPTION_RULE,
    KEYWORDS_LABEL_RULE,
    SECTION_HEADING_RULE,
    TABLE_CELL_RULE,
    TABLE_HEADER_RULE,
    TITLE_RULES,
    rule_font_name,
    rule_to_paragraph_style,
)
from abnt.formatting.toc import TocEntry, build_toc
from abnt.layout.executor.pagination import Page, paginate, page_number_index
from config.constants import LABELS
from config.settings import settings
from .base_renderer import BaseRenderer, ExportResult, write_atomic
from .images import ImageLoader, load_embedded_image

logger = logging.getLogger(__name__)


class PrintRenderer(BaseRenderer):
    """
    Renders blocks to PDF.

    Features:
    - Same pagination call and page height as the HTML preview
    - Paragraph styles derived from the shared rule table
    - Cover authors in alphabetical order
    - TOC with real page numbers
    - Optional page numbers top-right (not on cover or blank pages)
    """

    FORMAT = "pdf"

    def __init__(
        self,
        image_loader: Optional[ImageLoader] = None,
        toc_numbering: Optional[str] = None,
        page_numbers: Optional[bool] = None,
    ):
        self.image_loader = image_loader or ImageLoader()
        self.toc_numbering = toc_numbering or settings.print_toc_numbering
        self.page_numbers = settings.print_page_numbers if page_numbers is None else page_numbers

        self.page_size = (settings.page_width_cm * cm, settings.page_height_cm * cm)
        self.frame_width = settings.content_width_cm * cm
        self.frame_height = settings.content_height_cm * cm

        self.styles = self._create_styles()

        logger.info(f"PrintRenderer initialized: toc={self.toc_numbering}")

    def _create_styles(self) -> Dict[str, ParagraphStyle]:
        """Create paragraph styles from the rule table"""
        styles = {
            "Paragraph": rule_to_paragraph_style(BLOCK_RULES[BlockType.PARAGRAPH], "Paragraph"),
            "Quote": rule_to_paragraph_style(BLOCK_RULES[BlockType.QUOTE], "Quote"),
            "Abstract": rule_to_paragraph_style(BLOCK_RULES[BlockType.ABSTRACT], "Abstract"),
            "Keywords": rule_to_paragraph_style(BLOCK_RULES[BlockType.KEYWORDS], "Keywords"),
            "KeywordsLabel": rule_to_paragraph_style(KEYWORDS_LABEL_RULE, "KeywordsLabel"),
            "Reference": rule_to_paragraph_style(BLOCK_RULES[BlockType.REFERENCES], "Reference"),
            "ListItem": rule_to_paragraph_style(BLOCK_RULES[BlockType.LIST], "ListItem"),
            "Footnote": rule_to_paragraph_style(BLOCK_RULES[BlockType.FOOTNOTE], "Footnote"),
            "SectionHeading": rule_to_paragraph_style(SECTION_HEADING_RULE, "SectionHeading"),
            "TableHeader": rule_to_paragraph_style(TABLE_HEADER_RULE, "TableHeader"),
            "TableCell": rule_to_paragraph_style(TABLE_CELL_RULE, "TableCell"),
            "Caption": rule_to_paragraph_style(IMAGE_CAPTION_RULE, "Caption"),
            "TocEntry": ParagraphStyle("TocEntry", fontName=settings.body_font, fontSize=12, leading=18),
            "TocPage": ParagraphStyle("TocPage", fontName=settings.body_font, fontSize=12, leading=18, alignment=TA_RIGHT),
        }
        # List indentation comes from ListFlowable
        styles["ListItem"].leftIndent = 0
        styles["Caption"].textColor = colors.HexColor("#666666")

        for level, rule in TITLE_RULES.items():
            styles[f"Title{level}"] = rule_to_paragraph_style(rule, f"Title{level}")
        for name, rule in COVER_RULES.items():
            styles[f"Cover-{name}"] = rule_to_paragraph_style(rule, f"Cover-{name}")

        return styles

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def layout(self, blocks: Sequence[Block]) -> List[Page]:
        """Pagination used for drawing (same call as the preview)."""
        return paginate(blocks, settings.page_content_height_pt)

    async def export(
        self,
        blocks: Sequence[Block],
        output_path: Union[str, Path, None] = None,
    ) -> ExportResult:
        """
        Load images, render and write the PDF.

        Args:
            blocks: Document blocks (snapshotted, not mutated)
            output_path: Target file (defaults to <output_dir>/documento-abnt.pdf)

        Returns:
            ExportResult; failures are reported, not raised
        """
        if output_path is None:
            output_path = settings.ensure_output_dir() / settings.export_filename("pdf")
        output_path = Path(output_path)

        blocks = snapshot(blocks)
        logger.info(f"Exporting PDF: {len(blocks)} blocks -> {output_path}")

        try:
            if not blocks:
                raise ExportError("Document has no blocks")

            images = await self.image_loader.load_all(blocks)
            data, pages = self._build_pdf(blocks, images)
            write_atomic(data, output_path)

        except Exception as e:
            logger.error(f"PDF export failed: {e}")
            return ExportResult(success=False, path=None, error=str(e))

        logger.info(f"PDF saved: {output_path} ({len(pages)} pages)")
        return ExportResult(success=True, path=output_path, pages=len(pages))

    def render_bytes(
        self,
        blocks: Sequence[Block],
        images: Optional[Dict[str, Optional[bytes]]] = None,
    ) -> bytes:
        """Render synchronously. Without ``images`` only embedded sources are drawn."""
        blocks = snapshot(blocks)
        if images is None:
            images = {
                src: load_embedded_image(src)
                for src in ImageLoader.image_sources(blocks)
            }
        data, _ = self._build_pdf(blocks, images)
        return data

    # =========================================================================
    # DOCUMENT ASSEMBLY
    # =========================================================================

    def _build_pdf(
        self,
        blocks: Sequence[Block],
        images: Dict[str, Optional[bytes]],
    ) -> Tuple[bytes, List[Page]]:
        pages = self.layout(blocks)
        page_index = page_number_index(pages)
        toc = build_toc(
            blocks,
            self.toc_numbering,
            page_index if self.toc_numbering == "actual" else None,
        )

        story: List[Any] = []
        for i, page in enumerate(pages):
            flowables: List[Any] = []
            for block in page.blocks:
                flowables.extend(self._render_block(block, toc, images))
            if not flowables:
                flowables.append(Spacer(1, 0))

            story.append(KeepInFrame(
                self.frame_width,
                self.frame_height - 1,
                flowables,
                mode="shrink",
            ))
            if i < len(pages) - 1:
                story.append(PageBreak())

        buffer = BytesIO()
        doc = BaseDocTemplate(
            buffer,
            pagesize=self.page_size,
            topMargin=settings.margin_top_cm * cm,
            bottomMargin=settings.margin_bottom_cm * cm,
            leftMargin=settings.margin_left_cm * cm,
            rightMargin=settings.margin_right_cm * cm,
            title=settings.export_basename,
        )
        frame = Frame(
            doc.leftMargin,
            doc.bottomMargin,
            self.frame_width,
            self.frame_height,
            leftPadding=0,
            rightPadding=0,
            topPadding=0,
            bottomPadding=0,
            id="content",
        )
        doc.addPageTemplates([
            PageTemplate(id="abnt", frames=[frame], onPage=self._create_page_decorator(pages)),
        ])
        doc.build(story)

        return buffer.getvalue(), pages

    def _create_page_decorator(self, pages: List[Page]):
        """Create page-number callback"""
        if not self.page_numbers:
            return lambda canvas, doc: None

        unnumbered = {
            p.number for p in pages
            if p.is_blank or any(b.type == BlockType.COVER for b in p.blocks)
        }
        page_width, page_height = self.page_size

        def draw_page_number(canvas, doc):
            page_num = canvas.getPageNumber()
            if page_num in unnumbered:
                return

            canvas.saveState()
            canvas.setFont(settings.body_font, 10)
            canvas.drawRightString(
                page_width - settings.margin_right_cm * cm,
                page_height - 2 * cm,
                str(page_num),
            )
            canvas.restoreState()

        return draw_page_number

    # =========================================================================
    # BLOCKS
    # =========================================================================

    def _render_block(
        self,
        block: Block,
        toc: List[TocEntry],
        images: Dict[str, Optional[bytes]],
    ) -> List[Any]:
        """Render a single block to flowables"""
        block = resolve_block(block)

        if isinstance(block, TitleBlock):
            return [self._para(block.content, f"Title{block.level}", TITLE_RULES[block.level].uppercase)]

        if block.type == BlockType.PARAGRAPH:
            return [self._para(block.content, "Paragraph")]

        if block.type == BlockType.QUOTE:
            return [self._para(block.content, "Quote")]

        if block.type == BlockType.ABSTRACT:
            return [
                self._para(LABELS["abstract"], "SectionHeading"),
                self._para(block.content, "Abstract"),
            ]

        if isinstance(block, KeywordsBlock):
            return [
                self._para(LABELS["keywords"], "KeywordsLabel"),
                self._para(keywords_line(block.keywords), "Keywords"),
            ]

        if isinstance(block, ReferencesBlock):
            flowables = [self._para(LABELS["references"], "SectionHeading")]
            flowables.extend(self._para(ref, "Reference") for ref in block.references)
            return flowables

        if isinstance(block, ListBlock):
            return self._list(block)

        if isinstance(block, TableBlock):
            return self._table(block)

        if isinstance(block, ImageBlock):
            return self._image(block, images.get(block.image_url) if block.image_url else None)

        if isinstance(block, FootnoteBlock):
            return [
                HRFlowable(width="30%", thickness=0.5, color=colors.HexColor("#cccccc"),
                           hAlign="LEFT", spaceBefore=BLOCK_RULES[BlockType.FOOTNOTE].space_before_pt),
                Paragraph(f"<super>{block.number}</super> {self._escape_html(block.content)}",
                          self.styles["Footnote"]),
            ]

        if isinstance(block, CoverBlock):
            return self._cover(block)

        if block.type == BlockType.TOC:
            return self._toc(toc)

        # page-break: zero-height marker
        return []

    def _para(self, text: str, style_name: str, uppercase: bool = False) -> Paragraph:
        if uppercase:
            text = text.upper()
        content = self._escape_html(text).replace("\n", "<br/>")
        return Paragraph(content, self.styles[style_name])

    def _list(self, block: ListBlock) -> List[Any]:
        rule = BLOCK_RULES[block.type]
        items = [ListItem(self._para(item, "ListItem")) for item in block.items]
        return [
            ListFlowable(
                items,
                bulletType="1" if block.ordered else "bullet",
                leftIndent=rule.left_indent_cm * cm,
                bulletFontName=rule_font_name(rule),
                bulletFontSize=rule.font_size_pt,
            ),
            Spacer(1, rule.space_after_pt),
        ]

    def _table(self, block: TableBlock) -> List[Any]:
        table_data = block.table
        if not table_data.headers:
            return []

        rule = BLOCK_RULES[BlockType.TABLE]
        col_width = self.frame_width / table_data.column_count
        rows = [[self._para(h, "TableHeader") for h in table_data.headers]]
        rows.extend([self._para(cell, "TableCell") for cell in row] for row in table_data.rows)

        table = Table(rows, colWidths=[col_width] * table_data.column_count, repeatRows=1)
        table.setStyle(TableStyle([
            ("GRID", (0, 0), (-1, -1), 0.75, colors.HexColor("#cccccc")),
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#eeeeee")),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, -1), 6),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ]))
        return [Spacer(1, rule.space_before_pt), table, Spacer(1, rule.space_after_pt)]

    def _image(self, block: ImageBlock, data: Optional[bytes]) -> List[Any]:
        rule = BLOCK_RULES[BlockType.IMAGE]
        flowables: List[Any] = [Spacer(1, rule.space_before_pt)]

        drawn = False
        if data:
            try:
                reader = ImageReader(BytesIO(data))
                img_w, img_h = reader.getSize()
                width = self.frame_width * block.image_width / 100
                height = width * img_h / img_w if img_w else width
                flowables.append(Image(BytesIO(data), width=width, height=height))
                drawn = True
            except Exception as e:
                logger.warning(f"Image {block.id} could not be decoded: {e}")

        if not drawn:
            flowables.append(self._para(f"[{image_alt(block)}]", "Caption"))
        if block.alt:
            flowables.append(self._para(block.alt, "Caption"))

        flowables.append(Spacer(1, rule.space_after_pt))
        return flowables

    def _cover(self, block: CoverBlock) -> List[Any]:
        """Institution and authors on top, title centred, place and year at the bottom."""
        cover = block.cover
        gap = self.frame_height * 0.25

        flowables: List[Any] = [self._para(cover.institution, "Cover-institution", uppercase=True)]
        flowables.extend(self._para(author, "Cover-author") for author in cover.authors)
        flowables.append(Spacer(1, gap))
        flowables.append(self._para(cover.title, "Cover-title", uppercase=True))
        if cover.subtitle:
            flowables.append(self._para(cover.subtitle, "Cover-subtitle"))
        flowables.append(Spacer(1, gap))
        flowables.append(self._para(cover.city, "Cover-place"))
        flowables.append(self._para(cover.year, "Cover-place"))
        return flowables

    def _toc(self, toc: List[TocEntry]) -> List[Any]:
        """Create table of contents"""
        flowables: List[Any] = [self._para(LABELS["toc"], "SectionHeading")]
        if not toc:
            return flowables

        number_width = 1.5 * cm
        rows = []
        for entry in toc:
            style = ParagraphStyle(
                f"TocEntry{entry.level}",
                parent=self.styles["TocEntry"],
                leftIndent=entry.indent_cm * cm,
            )
            rows.append([
                Paragraph(self._escape_html(entry.text), style),
                Paragraph(str(entry.page), self.styles["TocPage"]),
            ])

        table = Table(rows, colWidths=[self.frame_width - number_width, number_width])
        table.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "BOTTOM"),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("RIGHTPADDING", (0, 0), (-1, -1), 0),
        ]))
        flowables.append(table)
        return flowables

    def _escape_html(self, text: str) -> str:
        """Escape HTML special characters"""
        text = text.replace("&", "&amp;")
        text = text.replace("<", "&lt;")
        text = text.replace(">", "&gt;")
        return text


def export_pdf_sync(
    blocks: Sequence[Block],
    output_path: Union[str, Path, None] = None,
    renderer: Optional[PrintRenderer] = None,
) -> ExportResult:
    """Run the PDF export from synchronous code."""
    renderer = renderer or PrintRenderer()
    return asyncio.run(renderer.export(blocks, output_path))
