#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Block Model

Typed content blocks, their JSON wire format and the Document container.

Usage:
    from abnt.contracts import Document, BlockType, create_block

    doc = Document.from_json(path.read_text(encoding="utf-8"))
    for issue in doc.validate():
        print(issue)

    doc.blocks.append(create_block(BlockType.PARAGRAPH))
"""

from .base import (
    ContractError,
    BlockParseError,
    ExportError,
    calculate_checksum,
)

from .blocks import (
    BlockType,
    UNIQUE_BLOCK_TYPES,
    TableData,
    CoverData,
    Block,
    CoverBlock,
    TitleBlock,
    ParagraphBlock,
    QuoteBlock,
    ImageBlock,
    ListBlock,
    TableBlock,
    FootnoteBlock,
    AbstractBlock,
    KeywordsBlock,
    ReferencesBlock,
    TocBlock,
    PageBreakBlock,
    block_from_dict,
    blocks_from_list,
    blocks_from_json,
    blocks_to_json,
    create_block,
    snapshot,
)

from .document import Document, ValidationIssue

__all__ = [
    # Errors
    "ContractError",
    "BlockParseError",
    "ExportError",
    "calculate_checksum",
    # Blocks
    "BlockType",
    "UNIQUE_BLOCK_TYPES",
    "TableData",
    "CoverData",
    "Block",
    "CoverBlock",
    "TitleBlock",
    "ParagraphBlock",
    "QuoteBlock",
    "ImageBlock",
    "ListBlock",
    "TableBlock",
    "FootnoteBlock",
    "AbstractBlock",
    "KeywordsBlock",
    "ReferencesBlock",
    "TocBlock",
    "PageBreakBlock",
    "block_from_dict",
    "blocks_from_list",
    "blocks_from_json",
    "blocks_to_json",
    "create_block",
    "snapshot",
    # Document
    "Document",
    "ValidationIssue",
]

__version__ = "1.0.0"
