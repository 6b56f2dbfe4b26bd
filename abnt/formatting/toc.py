#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Table of contents builder.

Lists every title block in document order. Page numbers come either from
the title's ordinal position ("ordinal") or from the pagination result
("actual").
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from abnt.contracts.blocks import Block, TitleBlock
from config.constants import PLACEHOLDERS
from .rules import TOC_ENTRY_INDENT_CM, clamp_level


@dataclass
class TocEntry:
    """Table of contents entry."""
    block_id: str
    text: str
    level: int
    page: int

    @property
    def indent_cm(self) -> float:
        return (self.level - 1) * TOC_ENTRY_INDENT_CM


def build_toc(
    blocks: Sequence[Block],
    mode: str = "ordinal",
    page_index: Optional[Dict[str, int]] = None,
) -> List[TocEntry]:
    """
    Build TOC entries for all titles.

    Args:
        blocks: Document block sequence
        mode: "ordinal" or "actual"
        page_index: block id -> 1-based page number; required for "actual"

    Returns:
        List of TocEntry in document order
    """
    if mode not in ("ordinal", "actual"):
        raise ValueError(f"Unknown TOC numbering mode: {mode}")
    if mode == "actual" and page_index is None:
        raise ValueError("Actual TOC numbering needs a page index")

    entries = []
    titles = [b for b in blocks if isinstance(b, TitleBlock)]
    for ordinal, title in enumerate(titles, start=1):
        page = ordinal if mode == "ordinal" else page_index.get(title.id, ordinal)
        entries.append(TocEntry(
            block_id=title.id,
            text=title.content or PLACEHOLDERS["title"],
            level=clamp_level(title.level),
            page=page,
        ))
    return entries
