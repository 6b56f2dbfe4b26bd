#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DOCX Exporter

Builds a Word document straight from the block sequence with python-docx.
No pagination is simulated: Word paginates the result itself, so the
exporter only emits the breaks the rule table asks for (around cover and
toc, after abstract, before references, page-break blocks) and the ABNT
page setup. A boundary that is already at the top of a page adds no
second break.

Usage:
    exporter = DocxExporter()
    result = exporter.export(blocks, "documento-abnt.docx")
    if not result.success:
        print(result.error)
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Sequence, Union

from docx import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Cm, Pt, RGBColor

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
from abnt.formatting.defaults import resolve_block, keywords_line, image_alt, sort_authors
from abnt.formatting.rules import (
    BLOCK_RULES,
    COVER_RULES,
    IMAGE_CAPTION_RULE,
    KEYWORDS_LABEL_RULE,
    SECTION_HEADING_RULE,
    TABLE_CELL_RULE,
    TABLE_HEADER_RULE,
    TITLE_RULES,
    BlockRule,
    apply_rule_to_docx,
    get_rule,
)
from config.constants import LABELS
from config.logging_config import get_logger
from config.settings import settings
from .base_renderer import BaseRenderer, ExportResult, write_atomic
from .images import load_embedded_image

logger = get_logger(__name__)


class DocxExporter(BaseRenderer):
    """
    Exports blocks to DOCX.

    Features:
    - A4 page, margins 3cm top/left and 2cm bottom/right
    - Heading 1-5 with the shared title rules
    - Justified body with 1.25cm first-line indent and 1.5 spacing
    - Long quotes with 4cm indent, 11pt, single spacing
    - Cover with alphabetical authors, abstract, keywords, references
    - TOC as a Word field (updated by the word processor)
    """

    FORMAT = "docx"

    def __init__(self, font_name: Optional[str] = None):
        self.font_name = font_name or settings.docx_font
        self.doc = None

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def export(
        self,
        blocks: Sequence[Block],
        output_path: Union[str, Path, None] = None,
    ) -> ExportResult:
        """
        Build and write the DOCX file.

        Args:
            blocks: Document blocks (snapshotted, not mutated)
            output_path: Target file (defaults to <output_dir>/documento-abnt.docx)

        Returns:
            ExportResult; failures are reported, not raised
        """
        if output_path is None:
            output_path = settings.ensure_output_dir() / settings.export_filename("docx")
        output_path = Path(output_path)

        logger.info(f"Exporting DOCX: {len(blocks)} blocks -> {output_path}")

        try:
            data = self.render_bytes(blocks)
            write_atomic(data, output_path)
        except Exception as e:
            logger.error(f"DOCX export failed: {e}")
            return ExportResult(success=False, path=None, error=str(e))

        logger.info(f"DOCX saved: {output_path}")
        return ExportResult(success=True, path=output_path)

    def render_bytes(self, blocks: Sequence[Block]) -> bytes:
        """Serialize the document to memory."""
        document = self.build_document(blocks)
        buffer = BytesIO()
        document.save(buffer)
        return buffer.getvalue()

    def build_document(self, blocks: Sequence[Block]):
        """Create the python-docx Document for a block sequence."""
        blocks = snapshot(blocks)

        self.doc = Document()
        self._setup_page_layout()
        self._setup_base_styles()
        self._setup_metadata(blocks)

        self._at_page_start = True
        self._break_pending = False
        for block in blocks:
            self._add_block(resolve_block(block))

        return self.doc

    # =========================================================================
    # DOCUMENT SETUP
    # =========================================================================

    def _setup_page_layout(self) -> None:
        """A4 with ABNT margins on every section."""
        for section in self.doc.sections:
            section.page_width = Cm(settings.page_width_cm)
            section.page_height = Cm(settings.page_height_cm)
            section.top_margin = Cm(settings.margin_top_cm)
            section.right_margin = Cm(settings.margin_right_cm)
            section.bottom_margin = Cm(settings.margin_bottom_cm)
            section.left_margin = Cm(settings.margin_left_cm)

    def _setup_base_styles(self) -> None:
        """Configure Normal and Heading 1-5 styles."""
        styles = self.doc.styles

        normal_style = styles['Normal']
        normal_style.font.name = self.font_name
        normal_style.font.size = Pt(12)
        normal_style.paragraph_format.line_spacing = 1.5

        for level, rule in TITLE_RULES.items():
            heading = styles[f'Heading {level}']
            heading.font.name = self.font_name
            heading.font.size = Pt(rule.font_size_pt)
            heading.font.bold = rule.bold
            heading.font.italic = False
            heading.font.color.rgb = RGBColor(0, 0, 0)

    def _setup_metadata(self, blocks: Sequence[Block]) -> None:
        core_props = self.doc.core_properties
        core_props.language = settings.language

        cover = next((b for b in blocks if isinstance(b, CoverBlock) and b.cover), None)
        if cover:
            core_props.title = cover.cover.title or settings.export_basename
            core_props.author = "; ".join(sort_authors(cover.cover.authors))
        else:
            core_props.title = settings.export_basename

    # =========================================================================
    # BLOCKS
    # =========================================================================

    def _add_block(self, block: Block) -> None:
        """Emit one block, placing the page breaks its rule asks for."""
        if block.type == BlockType.PAGE_BREAK:
            self._flush_pending_break()
            self.doc.add_page_break()
            self._at_page_start = True
            return

        rule = get_rule(block.type, block.level if isinstance(block, TitleBlock) else None)
        if rule.own_page:
            self._break_pending = True
        self._flush_pending_break()

        self._add_content(block)

        self._at_page_start = False
        self._break_pending = rule.own_page or rule.page_break_after

    def _flush_pending_break(self) -> None:
        """One break per boundary; none at the top of a page."""
        if self._break_pending and not self._at_page_start:
            self.doc.add_page_break()
            self._at_page_start = True
        self._break_pending = False

    def _add_content(self, block: Block) -> None:
        if isinstance(block, TitleBlock):
            rule = TITLE_RULES[block.level]
            text = block.content.upper() if rule.uppercase else block.content
            heading = self.doc.add_heading(text, level=block.level)
            self._apply(heading, rule)

        elif block.type == BlockType.PARAGRAPH:
            self._add_text(block.content, BLOCK_RULES[BlockType.PARAGRAPH])

        elif block.type == BlockType.QUOTE:
            self._add_text(block.content, BLOCK_RULES[BlockType.QUOTE])

        elif block.type == BlockType.ABSTRACT:
            self._add_text(LABELS["abstract"], SECTION_HEADING_RULE)
            self._add_text(block.content, BLOCK_RULES[BlockType.ABSTRACT])

        elif isinstance(block, KeywordsBlock):
            self._add_keywords(block)

        elif isinstance(block, ReferencesBlock):
            heading = self._add_text(LABELS["references"], SECTION_HEADING_RULE)
            heading.paragraph_format.page_break_before = not self._at_page_start
            for ref in block.references:
                self._add_text(ref, BLOCK_RULES[BlockType.REFERENCES])

        elif isinstance(block, ListBlock):
            style = 'List Number' if block.ordered else 'List Bullet'
            rule = BLOCK_RULES[block.type]
            for item in block.items:
                paragraph = self.doc.add_paragraph(item, style=style)
                self._apply(paragraph, rule)

        elif isinstance(block, TableBlock):
            self._add_table(block)

        elif isinstance(block, ImageBlock):
            self._add_image(block)

        elif isinstance(block, FootnoteBlock):
            self._add_footnote(block)

        elif isinstance(block, CoverBlock):
            self._add_cover(block)

        elif block.type == BlockType.TOC:
            self._add_text(LABELS["toc"], SECTION_HEADING_RULE)
            self._add_toc_field()

    def _apply(self, paragraph, rule: BlockRule) -> None:
        apply_rule_to_docx(paragraph, rule, self.font_name)
        for run in paragraph.runs:
            run.font.color.rgb = RGBColor(0, 0, 0)

    def _add_text(self, text: str, rule: BlockRule):
        if rule.uppercase:
            text = text.upper()
        paragraph = self.doc.add_paragraph(text)
        self._apply(paragraph, rule)
        return paragraph

    def _add_keywords(self, block: KeywordsBlock) -> None:
        """'Palavras-chave: a; b.' with a bold label."""
        rule = BLOCK_RULES[BlockType.KEYWORDS]
        paragraph = self.doc.add_paragraph()
        paragraph.add_run(f'{LABELS["keywords"]} ')
        paragraph.add_run(keywords_line(block.keywords))
        self._apply(paragraph, rule)
        paragraph.runs[0].font.bold = KEYWORDS_LABEL_RULE.bold

    def _add_footnote(self, block: FootnoteBlock) -> None:
        rule = BLOCK_RULES[BlockType.FOOTNOTE]
        paragraph = self.doc.add_paragraph()
        paragraph.add_run(str(block.number))
        paragraph.add_run(f" {block.content}")
        self._apply(paragraph, rule)
        paragraph.runs[0].font.superscript = True

    def _add_table(self, block: TableBlock) -> None:
        table_data = block.table
        if not table_data.headers:
            return

        cols = table_data.column_count
        table = self.doc.add_table(rows=1 + len(table_data.rows), cols=cols)
        table.style = 'Table Grid'
        col_width = Cm(settings.content_width_cm / cols)

        for row_idx, values in enumerate([table_data.headers] + table_data.rows):
            rule = TABLE_HEADER_RULE if row_idx == 0 else TABLE_CELL_RULE
            for col_idx, value in enumerate(values):
                cell = table.cell(row_idx, col_idx)
                cell.width = col_width
                cell.text = value
                for paragraph in cell.paragraphs:
                    self._apply(paragraph, rule)

        # Spacing after the table
        self.doc.add_paragraph()

    def _add_image(self, block: ImageBlock) -> None:
        data = load_embedded_image(block.image_url) if block.image_url else None
        rule = BLOCK_RULES[BlockType.IMAGE]

        if data:
            try:
                self.doc.add_picture(
                    BytesIO(data),
                    width=Cm(settings.content_width_cm * block.image_width / 100),
                )
                self._apply(self.doc.paragraphs[-1], rule)
            except Exception as e:
                logger.warning(f"Image {block.id} not embedded: {e}")
                data = None

        if not data:
            self._add_text(f"[{image_alt(block)}]", IMAGE_CAPTION_RULE)
        if block.alt:
            self._add_text(block.alt, IMAGE_CAPTION_RULE)

    def _add_cover(self, block: CoverBlock) -> None:
        """Institution and authors, title, then city and year."""
        cover = block.cover

        self._add_text(cover.institution, COVER_RULES["institution"])
        for author in cover.authors:
            self._add_text(author, COVER_RULES["author"])

        for _ in range(6):
            self.doc.add_paragraph()

        self._add_text(cover.title, COVER_RULES["title"])
        if cover.subtitle:
            self._add_text(cover.subtitle, COVER_RULES["subtitle"])

        for _ in range(6):
            self.doc.add_paragraph()

        self._add_text(cover.city, COVER_RULES["place"])
        self._add_text(cover.year, COVER_RULES["place"])

    def _add_toc_field(self, max_level: int = 5) -> None:
        """Insert a TOC field; the word processor fills in the page numbers."""
        paragraph = self.doc.add_paragraph()
        run = paragraph.add_run()

        fldChar1 = OxmlElement('w:fldChar')
        fldChar1.set(qn('w:fldCharType'), 'begin')

        instrText = OxmlElement('w:instrText')
        instrText.set(qn('xml:space'), 'preserve')
        instrText.text = f'TOC \\o "1-{max_level}" \\h \\z \\u'

        fldChar2 = OxmlElement('w:fldChar')
        fldChar2.set(qn('w:fldCharType'), 'separate')

        fldChar3 = OxmlElement('w:fldChar')
        fldChar3.set(qn('w:fldCharType'), 'end')

        run._r.append(fldChar1)
        run._r.append(instrText)
        run._r.append(fldChar2)
        run._r.append(fldChar3)
