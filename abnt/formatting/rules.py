#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Formatting Rule Table

Single source of typographic rules per block type (and title level).
The HTML preview, the PDF renderer and the DOCX exporter all read the
same BlockRule and convert it to their native unit:

    rule = get_rule(BlockType.QUOTE)
    rule_to_css(rule)                 # "font-size: 11pt; ..."
    rule_to_paragraph_style(rule, "quote")   # reportlab ParagraphStyle
    apply_rule_to_docx(paragraph, rule)      # python-docx paragraph format
"""

from dataclasses import dataclass
from typing import Dict, Optional

from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import cm
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Cm, Pt

from abnt.contracts.blocks import BlockType, MIN_TITLE_LEVEL, MAX_TITLE_LEVEL
from config.settings import settings


@dataclass(frozen=True)
class BlockRule:
    """Typography of one block kind, in points and centimetres."""
    font_size_pt: float = 12
    bold: bool = False
    italic: bool = False
    uppercase: bool = False
    font_weight: Optional[int] = None  # CSS weight when not plain bold/normal
    alignment: str = "left"            # left, center, right, justify
    line_height: float = 1.5
    first_line_indent_cm: float = 0.0
    left_indent_cm: float = 0.0
    space_before_pt: float = 0.0
    space_after_pt: float = 12.0
    page_break_before: bool = False
    page_break_after: bool = False
    own_page: bool = False

    @property
    def leading_pt(self) -> float:
        return self.font_size_pt * self.line_height

    @property
    def css_weight(self) -> str:
        if self.font_weight is not None:
            return str(self.font_weight)
        return "bold" if self.bold else "normal"


TITLE_RULES: Dict[int, BlockRule] = {
    1: BlockRule(font_size_pt=20, bold=True, uppercase=True, alignment="center"),
    2: BlockRule(font_size_pt=16, bold=True),
    3: BlockRule(font_size_pt=14, bold=True),
    4: BlockRule(font_size_pt=12, bold=True),
    5: BlockRule(font_size_pt=12, font_weight=600),
}

# RESUMO / REFERÊNCIAS / SUMÁRIO
SECTION_HEADING_RULE = BlockRule(
    font_size_pt=12, bold=True, uppercase=True, alignment="center", space_after_pt=12,
)

KEYWORDS_LABEL_RULE = BlockRule(font_size_pt=12, bold=True, space_after_pt=6)

TABLE_HEADER_RULE = BlockRule(font_size_pt=12, bold=True, alignment="center", line_height=1.0, space_after_pt=0)
TABLE_CELL_RULE = BlockRule(font_size_pt=12, line_height=1.0, space_after_pt=0)

IMAGE_CAPTION_RULE = BlockRule(font_size_pt=9.6, alignment="center", line_height=1.0, space_after_pt=0)

COVER_RULES: Dict[str, BlockRule] = {
    "institution": BlockRule(font_size_pt=14.4, bold=True, uppercase=True, alignment="center", line_height=1.2),
    "author": BlockRule(font_size_pt=12, alignment="center", line_height=1.2, space_after_pt=0),
    "title": BlockRule(font_size_pt=24, bold=True, uppercase=True, alignment="center", line_height=1.2, space_after_pt=6),
    "subtitle": BlockRule(font_size_pt=15, alignment="center", line_height=1.2),
    "place": BlockRule(font_size_pt=12, alignment="center", line_height=1.2, space_after_pt=0),
}

TOC_ENTRY_INDENT_CM = 1.0  # per level below 1

BLOCK_RULES: Dict[BlockType, BlockRule] = {
    BlockType.PARAGRAPH: BlockRule(alignment="justify", first_line_indent_cm=1.25),
    BlockType.QUOTE: BlockRule(
        font_size_pt=11, italic=True, line_height=1.0, left_indent_cm=4.0,
        space_before_pt=12,
    ),
    BlockType.LIST: BlockRule(left_indent_cm=1.0),
    BlockType.ORDERED_LIST: BlockRule(left_indent_cm=1.0),
    BlockType.ABSTRACT: BlockRule(alignment="justify", space_before_pt=24, page_break_after=True),
    BlockType.KEYWORDS: BlockRule(space_before_pt=18),
    BlockType.REFERENCES: BlockRule(space_after_pt=8, page_break_before=True),
    BlockType.TABLE: BlockRule(line_height=1.0, space_before_pt=18, space_after_pt=18),
    BlockType.IMAGE: BlockRule(alignment="center", line_height=1.0, space_before_pt=18, space_after_pt=18),
    BlockType.FOOTNOTE: BlockRule(font_size_pt=10, line_height=1.0, space_before_pt=12),
    BlockType.COVER: BlockRule(alignment="center", own_page=True),
    BlockType.TOC: BlockRule(own_page=True, space_before_pt=24),
    BlockType.PAGE_BREAK: BlockRule(line_height=0.0, space_after_pt=0),
}


def clamp_level(level: Optional[int]) -> int:
    """Missing level means 1; others clamp into 1..5."""
    if level is None:
        return MIN_TITLE_LEVEL
    return min(max(level, MIN_TITLE_LEVEL), MAX_TITLE_LEVEL)


def get_rule(block_type: BlockType, level: Optional[int] = None) -> BlockRule:
    if block_type == BlockType.TITLE:
        return TITLE_RULES[clamp_level(level)]
    return BLOCK_RULES[block_type]


# =============================================================================
# CSS
# =============================================================================

def rule_to_css(rule: BlockRule) -> str:
    """CSS declarations for a block rule (preview renderer)."""
    parts = [
        f"font-size: {_num(rule.font_size_pt)}pt",
        f"font-weight: {rule.css_weight}",
        f"font-style: {'italic' if rule.italic else 'normal'}",
        f"text-align: {rule.alignment}",
        f"line-height: {_num(rule.line_height)}",
        f"margin: {_num(rule.space_before_pt)}pt 0 {_num(rule.space_after_pt)}pt {_num(rule.left_indent_cm)}cm",
    ]
    if rule.uppercase:
        parts.append("text-transform: uppercase")
    if rule.first_line_indent_cm:
        parts.append(f"text-indent: {_num(rule.first_line_indent_cm)}cm")
    if rule.page_break_before:
        parts.append("break-before: page")
    if rule.page_break_after:
        parts.append("break-after: page")
    return "; ".join(parts) + ";"


def _num(value: float) -> str:
    """Compact number formatting for CSS (12.0 -> 12, 1.25 -> 1.25)."""
    return f"{value:g}"


# =============================================================================
# REPORTLAB
# =============================================================================

_RL_ALIGNMENT = {
    "left": TA_LEFT,
    "center": TA_CENTER,
    "right": TA_RIGHT,
    "justify": TA_JUSTIFY,
}


def rule_font_name(rule: BlockRule) -> str:
    """Base-14 Times face for a rule. Times has no semi-bold face."""
    if rule.bold:
        return settings.body_font_bold_italic if rule.italic else settings.body_font_bold
    if rule.italic:
        return settings.body_font_italic
    return settings.body_font


def rule_to_paragraph_style(rule: BlockRule, name: str) -> ParagraphStyle:
    """reportlab ParagraphStyle for a block rule (print renderer)."""
    return ParagraphStyle(
        name,
        fontName=rule_font_name(rule),
        fontSize=rule.font_size_pt,
        leading=max(rule.leading_pt, rule.font_size_pt),
        alignment=_RL_ALIGNMENT[rule.alignment],
        firstLineIndent=rule.first_line_indent_cm * cm,
        leftIndent=rule.left_indent_cm * cm,
        spaceBefore=rule.space_before_pt,
        spaceAfter=rule.space_after_pt,
    )


# =============================================================================
# DOCX
# =============================================================================

_DOCX_ALIGNMENT = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}


def docx_alignment(rule: BlockRule):
    return _DOCX_ALIGNMENT[rule.alignment]


def apply_rule_to_docx(paragraph, rule: BlockRule, font_name: Optional[str] = None) -> None:
    """Apply paragraph format and run font of a rule to a python-docx paragraph."""
    pf = paragraph.paragraph_format
    pf.alignment = docx_alignment(rule)
    pf.line_spacing = rule.line_height or 1.0
    pf.space_before = Pt(rule.space_before_pt)
    pf.space_after = Pt(rule.space_after_pt)
    if rule.first_line_indent_cm:
        pf.first_line_indent = Cm(rule.first_line_indent_cm)
    if rule.left_indent_cm:
        pf.left_indent = Cm(rule.left_indent_cm)
    if rule.page_break_before:
        pf.page_break_before = True

    for run in paragraph.runs:
        run.font.name = font_name or settings.docx_font
        run.font.size = Pt(rule.font_size_pt)
        run.font.bold = rule.bold
        run.font.italic = rule.italic
