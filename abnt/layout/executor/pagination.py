#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pagination Engine

Splits a flat block sequence into fixed-height pages using the height
model. Both the HTML preview and the PDF renderer call ``paginate`` with
the same page height, so they agree on page boundaries.

Rules, in order of precedence:
- page-break: closes the current page (or emits a blank page when the
  current page is empty) and opens a new page on which the marker is the
  first, zero-height member
- cover / toc: always alone on their own page
- references: start a new page; abstract: ends its page
- a page-break directly before references, cover or toc merges with
  their own boundary: references share the marker's page, and for cover
  and toc the marker stays at the end of the previous page
- everything else accumulates until the next block would overflow

Concatenating the blocks of all pages reproduces the input exactly.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
import logging

from abnt.contracts.blocks import Block, BlockType, TitleBlock
from abnt.formatting.rules import get_rule
from config.settings import settings
from .heights import estimate_height

logger = logging.getLogger(__name__)


@dataclass
class Page:
    """One simulated printed page"""
    number: int
    blocks: List[Block] = field(default_factory=list)
    height: float = 0.0

    @property
    def is_blank(self) -> bool:
        """No visible content (empty, or only a page-break marker)."""
        return all(b.type == BlockType.PAGE_BREAK for b in self.blocks)

    @property
    def block_ids(self) -> List[str]:
        return [b.id for b in self.blocks]

    def to_dict(self) -> Dict:
        return {
            "number": self.number,
            "block_ids": self.block_ids,
            "height": round(self.height, 2),
            "blank": self.is_blank,
        }


@dataclass
class FlowState:
    """Accumulator for the page being filled"""
    page_height: float
    pages: List[Page] = field(default_factory=list)
    buffer: List[Block] = field(default_factory=list)
    y_position: float = 0.0

    def available_space(self) -> float:
        return self.page_height - self.y_position

    def advance(self, height: float):
        self.y_position += height

    def append(self, block: Block, height: float):
        self.buffer.append(block)
        self.advance(height)

    def holds_only_markers(self) -> bool:
        """Buffer is non-empty and contains page-break markers only."""
        return bool(self.buffer) and all(b.type == BlockType.PAGE_BREAK for b in self.buffer)

    def attach_to_previous(self):
        """Move pending markers onto the last emitted page."""
        self.pages[-1].blocks.extend(self.buffer)
        self.buffer = []
        self.y_position = 0.0

    def flush(self, allow_empty: bool = False):
        """Close the current page. Empty pages are only emitted on request."""
        if self.buffer or allow_empty:
            self.pages.append(Page(
                number=len(self.pages) + 1,
                blocks=self.buffer,
                height=self.y_position,
            ))
        self.buffer = []
        self.y_position = 0.0


class PaginationEngine:
    """
    Stateless paginator.

    Usage:
        engine = PaginationEngine()
        pages = engine.paginate(blocks)
        index = page_number_index(pages)
    """

    def __init__(
        self,
        page_height: Optional[float] = None,
        content_width: Optional[float] = None,
    ):
        """
        Args:
            page_height: Usable page height in points (defaults to settings)
            content_width: Usable page width in points, for image estimates
        """
        self.page_height = page_height if page_height is not None else settings.page_content_height_pt
        self.content_width = content_width if content_width is not None else settings.page_content_width_pt

    def paginate(self, blocks: Sequence[Block]) -> List[Page]:
        """
        Paginate a block sequence.

        Args:
            blocks: Ordered blocks (not mutated)

        Returns:
            Pages in order; empty input gives no pages
        """
        state = FlowState(page_height=self.page_height)

        for block in blocks:
            if block.type == BlockType.PAGE_BREAK:
                state.flush(allow_empty=True)
                state.append(block, 0.0)
                continue

            level = block.level if isinstance(block, TitleBlock) else None
            rule = get_rule(block.type, level)

            if rule.own_page:
                # A pending break already ends the previous page
                if state.holds_only_markers() and state.pages:
                    state.attach_to_previous()
                state.flush()
                state.append(block, 0.0)
                state.flush()
                continue

            if rule.page_break_before and not state.holds_only_markers():
                state.flush()

            height = estimate_height(block, self.content_width)

            if height > state.available_space() and state.y_position > 0:
                state.flush()

            state.append(block, height)

            if rule.page_break_after:
                state.flush()

        state.flush()

        logger.debug(f"Paginated {len(blocks)} blocks into {len(state.pages)} pages")
        return state.pages


def paginate(blocks: Sequence[Block], page_height: Optional[float] = None) -> List[Page]:
    """Module-level shortcut used by every renderer."""
    return PaginationEngine(page_height=page_height).paginate(blocks)


def page_number_index(pages: Sequence[Page]) -> Dict[str, int]:
    """Block id -> 1-based page number."""
    index = {}
    for page in pages:
        for block in page.blocks:
            index.setdefault(block.id, page.number)
    return index
