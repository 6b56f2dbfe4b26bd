#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Height Model

Approximate vertical cost of a block in points. The estimate does not
measure glyphs; it counts wrapped lines per block type and scales by the
rule table's leading. Calibration values live in config.constants.
"""

import math
from typing import Optional

from abnt.contracts.blocks import (
    Block,
    BlockType,
    FootnoteBlock,
    ImageBlock,
    KeywordsBlock,
    ListBlock,
    ReferencesBlock,
    TableBlock,
    TitleBlock,
)
from abnt.formatting.defaults import resolve_block, keywords_line
from abnt.formatting.rules import get_rule, KEYWORDS_LABEL_RULE
from config.constants import (
    BODY_CHARS_PER_LINE,
    QUOTE_CHARS_PER_LINE,
    FOOTNOTE_CHARS_PER_LINE,
    BLOCK_GAP_PT,
    SECTION_HEADING_PT,
    TABLE_ROW_PT,
    LIST_ITEM_GAP_PT,
    REFERENCE_GAP_PT,
    IMAGE_ASPECT_RATIO,
    IMAGE_CAPTION_PT,
)
from config.settings import settings

# Forced onto their own page or zero-height markers
ZERO_COST_TYPES = frozenset({BlockType.COVER, BlockType.TOC, BlockType.PAGE_BREAK})


def count_lines(text: str, chars_per_line: float) -> int:
    """Wrapped line count; explicit newlines start new lines."""
    chars_per_line = max(1, int(chars_per_line))
    return sum(
        max(1, math.ceil(len(segment) / chars_per_line))
        for segment in (text or "").split("\n")
    )


def estimate_height(block: Block, content_width_pt: Optional[float] = None) -> float:
    """
    Estimate block height in points.

    Args:
        block: Block to measure (placeholders are applied first)
        content_width_pt: Usable page width, for image scaling

    Returns:
        Height cost in points (0 for cover, toc and page-break)
    """
    if block.type in ZERO_COST_TYPES:
        return 0.0

    if content_width_pt is None:
        content_width_pt = settings.page_content_width_pt

    block = resolve_block(block)
    level = block.level if isinstance(block, TitleBlock) else None
    rule = get_rule(block.type, level)

    if isinstance(block, TitleBlock):
        # Wider glyphs at larger sizes
        chars = BODY_CHARS_PER_LINE * 12 / rule.font_size_pt
        lines = count_lines(block.content, chars)
        return lines * rule.leading_pt + BLOCK_GAP_PT

    if block.type == BlockType.PARAGRAPH:
        return count_lines(block.content, BODY_CHARS_PER_LINE) * rule.leading_pt + BLOCK_GAP_PT

    if block.type == BlockType.QUOTE:
        return count_lines(block.content, QUOTE_CHARS_PER_LINE) * rule.leading_pt + 2 * BLOCK_GAP_PT

    if block.type == BlockType.ABSTRACT:
        body = count_lines(block.content, BODY_CHARS_PER_LINE) * rule.leading_pt
        return SECTION_HEADING_PT + body + BLOCK_GAP_PT

    if isinstance(block, KeywordsBlock):
        body = count_lines(keywords_line(block.keywords), BODY_CHARS_PER_LINE) * rule.leading_pt
        return KEYWORDS_LABEL_RULE.leading_pt + body + BLOCK_GAP_PT

    if isinstance(block, ListBlock):
        items = sum(
            count_lines(item, BODY_CHARS_PER_LINE) * rule.leading_pt + LIST_ITEM_GAP_PT
            for item in block.items
        )
        return items + BLOCK_GAP_PT

    if isinstance(block, ReferencesBlock):
        refs = sum(
            count_lines(ref, BODY_CHARS_PER_LINE) * rule.leading_pt + REFERENCE_GAP_PT
            for ref in block.references
        )
        return SECTION_HEADING_PT + refs

    if isinstance(block, TableBlock):
        row_count = len(block.table.rows) + 1  # header row
        return row_count * TABLE_ROW_PT + 2 * BLOCK_GAP_PT

    if isinstance(block, ImageBlock):
        width = content_width_pt * block.image_width / 100
        caption = IMAGE_CAPTION_PT if block.alt else 0
        return width * IMAGE_ASPECT_RATIO + caption + 2 * BLOCK_GAP_PT

    if isinstance(block, FootnoteBlock):
        return count_lines(block.content, FOOTNOTE_CHARS_PER_LINE) * rule.leading_pt + BLOCK_GAP_PT

    return BLOCK_GAP_PT
