#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Default Resolution

Turns a stored block into the block a renderer should draw: missing or
empty fields are replaced by documented placeholders, title levels are
clamped and tables are made rectangular. Every renderer calls
``resolve_block`` so the three outputs show the same fallback text.

The input block is never mutated; a resolved copy is returned.
"""

import copy
import unicodedata
from typing import List, Optional

from abnt.contracts.blocks import (
    Block,
    CoverBlock,
    CoverData,
    FootnoteBlock,
    ImageBlock,
    KeywordsBlock,
    ListBlock,
    ReferencesBlock,
    TableBlock,
    TableData,
    TitleBlock,
    ParagraphBlock,
    QuoteBlock,
    AbstractBlock,
)
from config.constants import PLACEHOLDERS, DEFAULT_IMAGE_WIDTH_PERCENT
from .rules import clamp_level


def author_sort_key(name: str):
    """
    Accent- and case-insensitive collation key (pt-BR base sensitivity).

    "Álvaro" and "alvaro" compare equal on the primary key; the original
    string breaks the tie so the ordering is total and deterministic.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold().strip(), name)


def sort_authors(authors: List[str]) -> List[str]:
    """Non-empty author names in alphabetical order. Input list untouched."""
    return sorted((a for a in authors if a and a.strip()), key=author_sort_key)


def normalize_table(table: Optional[TableData]) -> TableData:
    """Rectangular copy: rows padded with "" or truncated to the header count."""
    if table is None:
        return TableData()

    headers = [
        header or PLACEHOLDERS["table_header"].format(n=i + 1)
        for i, header in enumerate(table.headers)
    ]
    width = len(headers)
    rows = [
        (list(row) + [""] * width)[:width]
        for row in table.rows
    ]
    return TableData(headers=headers, rows=rows)


def list_items(items: List[str]) -> List[str]:
    return [item or PLACEHOLDERS["list_item"].format(n=i + 1) for i, item in enumerate(items)]


def reference_items(references: List[str]) -> List[str]:
    return [ref or PLACEHOLDERS["reference"].format(n=i + 1) for i, ref in enumerate(references)]


def keywords_line(keywords: List[str]) -> str:
    """'a; b; c.' - empty entries dropped."""
    return "; ".join(k.strip() for k in keywords if k and k.strip()) + "."


def resolve_block(block: Block) -> Block:
    """Return a render-ready copy of ``block`` with defaults substituted."""
    resolved = copy.deepcopy(block)

    if isinstance(resolved, TitleBlock):
        resolved.content = resolved.content or PLACEHOLDERS["title"]
        resolved.level = clamp_level(resolved.level)

    elif isinstance(resolved, ParagraphBlock):
        resolved.content = resolved.content or PLACEHOLDERS["paragraph"]

    elif isinstance(resolved, QuoteBlock):
        resolved.content = resolved.content or PLACEHOLDERS["quote"]

    elif isinstance(resolved, AbstractBlock):
        resolved.content = resolved.content or PLACEHOLDERS["abstract"]

    elif isinstance(resolved, ListBlock):
        resolved.items = list_items(resolved.items)

    elif isinstance(resolved, ReferencesBlock):
        resolved.references = reference_items(resolved.references)

    elif isinstance(resolved, KeywordsBlock):
        resolved.keywords = [k.strip() for k in resolved.keywords if k and k.strip()]

    elif isinstance(resolved, TableBlock):
        resolved.table = normalize_table(resolved.table)

    elif isinstance(resolved, FootnoteBlock):
        if not resolved.number or resolved.number < 1:
            resolved.number = 1

    elif isinstance(resolved, ImageBlock):
        if not resolved.image_width or resolved.image_width <= 0:
            resolved.image_width = DEFAULT_IMAGE_WIDTH_PERCENT
        resolved.image_width = min(resolved.image_width, 100)

    elif isinstance(resolved, CoverBlock):
        cover = resolved.cover or CoverData()
        cover.authors = sort_authors(cover.authors)
        resolved.cover = cover

    return resolved


def image_alt(block: ImageBlock) -> str:
    return block.alt or PLACEHOLDERS["image_alt"]
