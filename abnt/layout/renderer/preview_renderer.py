#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Preview Renderer

Renders the paginated document as HTML: one fixed-size A4
``<section class="page">`` per pagination page, styled with CSS generated
from the formatting rule table.

Usage:
    renderer = PreviewRenderer()
    preview = renderer.render(blocks)
    preview.html           # full standalone document
    preview.page_html[0]   # markup of the first page

    live = LivePreview()
    live.subscribe(lambda doc: print(len(doc.pages)))
    live.update(blocks)    # re-paginates only when the content changed
"""

from dataclasses import dataclass, field
from html import escape
from typing import Callable, List, Optional, Sequence
import logging

from abnt.contracts.document import Document
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
    rule_to_css,
)
from abnt.formatting.toc import TocEntry, build_toc
from abnt.layout.executor.pagination import Page, paginate, page_number_index
from config.constants import LABELS, PLACEHOLDERS
from config.settings import settings
from .base_renderer import BaseRenderer

logger = logging.getLogger(__name__)


@dataclass
class PreviewDocument:
    """Result of one preview pass"""
    pages: List[Page] = field(default_factory=list)
    page_html: List[str] = field(default_factory=list)
    html: str = ""
    toc: List[TocEntry] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)


class PreviewRenderer(BaseRenderer):
    """
    Renders blocks to paginated HTML.

    Features:
    - A4 page boxes with ABNT margins as padding
    - Rule-table CSS shared with the PDF and DOCX outputs
    - Table of contents with ordinal or real page numbers
    """

    FORMAT = "html"

    def __init__(self, toc_numbering: Optional[str] = None):
        self.toc_numbering = toc_numbering or settings.preview_toc_numbering
        self.css = self._build_css()

    def render(self, blocks: Sequence[Block]) -> PreviewDocument:
        """
        Paginate and render blocks.

        Args:
            blocks: Document blocks (not mutated)

        Returns:
            PreviewDocument with pages and markup
        """
        blocks = snapshot(blocks)

        if not blocks:
            return PreviewDocument(html=self._wrap_document([self._empty_state()]))

        pages = paginate(blocks, settings.page_content_height_pt)
        page_index = page_number_index(pages) if self.toc_numbering == "actual" else None
        toc = build_toc(blocks, self.toc_numbering, page_index)

        page_html = [self._render_page(page, toc) for page in pages]

        logger.debug(f"Preview rendered: {len(blocks)} blocks, {len(pages)} pages")

        return PreviewDocument(
            pages=pages,
            page_html=page_html,
            html=self._wrap_document(page_html),
            toc=toc,
        )

    def render_bytes(self, blocks: Sequence[Block]) -> bytes:
        return self.render(blocks).html.encode("utf-8")

    # =========================================================================
    # PAGE & DOCUMENT
    # =========================================================================

    def _render_page(self, page: Page, toc: List[TocEntry]) -> str:
        classes = "page blank" if page.is_blank else "page"
        body = "".join(self._block_to_html(b, toc) for b in page.blocks)
        return f'<section class="{classes}" data-page="{page.number}">\n{body}</section>\n'

    def _wrap_document(self, parts: List[str]) -> str:
        return f"""<!DOCTYPE html>
<html lang="{escape(settings.language)}">
<head>
    <meta charset="utf-8"/>
    <title>{escape(settings.export_basename)}</title>
    <style>{self.css}</style>
</head>
<body>
{"".join(parts)}</body>
</html>
"""

    def _empty_state(self) -> str:
        return (
            '<div class="empty-document">\n'
            f'    <p>{escape(PLACEHOLDERS["empty_document"])}</p>\n'
            f'    <p class="hint">{escape(PLACEHOLDERS["empty_document_hint"])}</p>\n'
            '</div>\n'
        )

    # =========================================================================
    # BLOCKS
    # =========================================================================

    def _block_to_html(self, block: Block, toc: List[TocEntry]) -> str:
        """Convert a block to HTML"""
        block = resolve_block(block)
        attrs = f'data-block-id="{escape(block.id)}"'

        if isinstance(block, TitleBlock):
            return f'<h2 class="title level-{block.level}" {attrs}>{escape(block.content)}</h2>\n'

        if block.type == BlockType.PARAGRAPH:
            return f'<p class="paragraph" {attrs}>{escape(block.content)}</p>\n'

        if block.type == BlockType.QUOTE:
            return f'<blockquote class="quote" {attrs}>{escape(block.content)}</blockquote>\n'

        if block.type == BlockType.ABSTRACT:
            return (
                f'<div class="abstract" {attrs}>\n'
                f'    <h2 class="section-heading">{LABELS["abstract"]}</h2>\n'
                f'    <p>{escape(block.content)}</p>\n'
                '</div>\n'
            )

        if isinstance(block, KeywordsBlock):
            return (
                f'<div class="keywords" {attrs}>\n'
                f'    <p class="keywords-label">{LABELS["keywords"]}</p>\n'
                f'    <p class="keywords-body">{escape(keywords_line(block.keywords))}</p>\n'
                '</div>\n'
            )

        if isinstance(block, ReferencesBlock):
            refs = "".join(f'    <p class="reference">{escape(ref)}</p>\n' for ref in block.references)
            return (
                f'<div class="references" {attrs}>\n'
                f'    <h2 class="section-heading">{LABELS["references"]}</h2>\n'
                f'{refs}</div>\n'
            )

        if isinstance(block, ListBlock):
            tag = "ol" if block.ordered else "ul"
            items = "".join(f"    <li>{escape(item)}</li>\n" for item in block.items)
            return f'<{tag} class="{block.type.value}" {attrs}>\n{items}</{tag}>\n'

        if isinstance(block, TableBlock):
            return self._table_to_html(block, attrs)

        if isinstance(block, ImageBlock):
            return self._image_to_html(block, attrs)

        if isinstance(block, FootnoteBlock):
            return (
                f'<div class="footnote" {attrs}>'
                f'<sup>{block.number}</sup> {escape(block.content)}</div>\n'
            )

        if isinstance(block, CoverBlock):
            return self._cover_to_html(block, attrs)

        if block.type == BlockType.TOC:
            return self._toc_to_html(toc, attrs)

        if block.type == BlockType.PAGE_BREAK:
            return f'<div class="page-break" {attrs}></div>\n'

        return ""

    def _table_to_html(self, block: TableBlock, attrs: str) -> str:
        headers = "".join(f"<th>{escape(h)}</th>" for h in block.table.headers)
        rows = "".join(
            "        <tr>" + "".join(f"<td>{escape(cell)}</td>" for cell in row) + "</tr>\n"
            for row in block.table.rows
        )
        return (
            f'<table class="table" {attrs}>\n'
            f'    <thead><tr>{headers}</tr></thead>\n'
            f'    <tbody>\n{rows}    </tbody>\n'
            '</table>\n'
        )

    def _image_to_html(self, block: ImageBlock, attrs: str) -> str:
        alt = image_alt(block)
        if block.image_url:
            img = (
                f'<img src="{escape(block.image_url)}" alt="{escape(alt)}" '
                f'style="width: {block.image_width}%; height: auto;"/>'
            )
        else:
            img = f'<div class="image-missing">{escape(alt)}</div>'
        caption = f"<figcaption>{escape(block.alt)}</figcaption>" if block.alt else ""
        return f'<figure class="image" {attrs}>{img}{caption}</figure>\n'

    def _cover_to_html(self, block: CoverBlock, attrs: str) -> str:
        cover = block.cover
        authors = "".join(f'<p class="author">{escape(a)}</p>' for a in cover.authors)
        subtitle = f'<p class="cover-subtitle">{escape(cover.subtitle)}</p>' if cover.subtitle else ""
        return (
            f'<div class="cover" {attrs}>\n'
            f'    <div><p class="institution">{escape(cover.institution)}</p>{authors}</div>\n'
            f'    <div><h1 class="cover-title">{escape(cover.title)}</h1>{subtitle}</div>\n'
            f'    <div><p class="place">{escape(cover.city)}</p><p class="place">{escape(cover.year)}</p></div>\n'
            '</div>\n'
        )

    def _toc_to_html(self, toc: List[TocEntry], attrs: str) -> str:
        entries = "".join(
            f'    <div class="toc-entry level-{entry.level}" style="margin-left: {entry.indent_cm:g}cm">'
            f'<span>{escape(entry.text)}</span><span>{entry.page}</span></div>\n'
            for entry in toc
        )
        return (
            f'<div class="toc" {attrs}>\n'
            f'    <h2 class="section-heading">{LABELS["toc"]}</h2>\n'
            f'{entries}</div>\n'
        )

    # =========================================================================
    # CSS
    # =========================================================================

    def _build_css(self) -> str:
        """Stylesheet generated from the rule table."""
        s = settings
        rules = [
            f'body {{ background: #e5e5e5; margin: 0; font-family: {s.css_font_stack}; color: #000; }}',
            (
                f'.page {{ box-sizing: border-box; width: {s.page_width_cm:g}cm; height: {s.page_height_cm:g}cm; '
                f'padding: {s.margin_top_cm:g}cm {s.margin_right_cm:g}cm {s.margin_bottom_cm:g}cm {s.margin_left_cm:g}cm; '
                'margin: 1cm auto; background: #fff; overflow: hidden; page-break-after: always; }'
            ),
            '.empty-document { text-align: center; color: #777; padding: 5cm 0; }',
            '.empty-document .hint { font-size: 10pt; }',
            f'.paragraph {{ {rule_to_css(BLOCK_RULES[BlockType.PARAGRAPH])} }}',
            f'.quote {{ {rule_to_css(BLOCK_RULES[BlockType.QUOTE])} }}',
            f'.list, .ordered-list {{ {rule_to_css(BLOCK_RULES[BlockType.LIST])} }}',
            '.list { list-style-type: disc; }',
            '.ordered-list { list-style-type: decimal; }',
            f'.abstract p {{ {rule_to_css(BLOCK_RULES[BlockType.ABSTRACT])} }}',
            f'.section-heading {{ {rule_to_css(SECTION_HEADING_RULE)} }}',
            f'.keywords-label {{ {rule_to_css(KEYWORDS_LABEL_RULE)} }}',
            f'.keywords-body {{ {rule_to_css(BLOCK_RULES[BlockType.KEYWORDS])} }}',
            f'.reference {{ {rule_to_css(BLOCK_RULES[BlockType.REFERENCES])} }}',
            f'.footnote {{ {rule_to_css(BLOCK_RULES[BlockType.FOOTNOTE])} border-top: 1px solid #ccc; }}',
            f'.image {{ {rule_to_css(BLOCK_RULES[BlockType.IMAGE])} }}',
            f'.image figcaption {{ {rule_to_css(IMAGE_CAPTION_RULE)} color: #666; }}',
            '.image-missing { border: 1px dashed #999; padding: 1cm; color: #666; }',
            '.table { width: 100%; border-collapse: collapse; }',
            f'.table th {{ {rule_to_css(TABLE_HEADER_RULE)} border: 1px solid #ccc; padding: 0.5em; background: #eee; }}',
            f'.table td {{ {rule_to_css(TABLE_CELL_RULE)} border: 1px solid #ccc; padding: 0.5em; }}',
            (
                '.cover { display: flex; flex-direction: column; justify-content: space-between; '
                'align-items: center; text-align: center; height: 100%; }'
            ),
            f'.institution {{ {rule_to_css(COVER_RULES["institution"])} }}',
            f'.author {{ {rule_to_css(COVER_RULES["author"])} }}',
            f'.cover-title {{ {rule_to_css(COVER_RULES["title"])} }}',
            f'.cover-subtitle {{ {rule_to_css(COVER_RULES["subtitle"])} }}',
            f'.place {{ {rule_to_css(COVER_RULES["place"])} }}',
            '.toc-entry { display: flex; justify-content: space-between; font-size: 12pt; line-height: 1.5; }',
            '.page-break { height: 0; }',
        ]
        for level, rule in TITLE_RULES.items():
            rules.append(f'.title.level-{level} {{ {rule_to_css(rule)} }}')
        return "\n".join(rules)


class LivePreview:
    """
    Reactive wrapper around PreviewRenderer.

    Keeps the last rendered PreviewDocument and re-renders only when the
    serialized block content changes (edits in place, inserts, removals
    and reorders all change the fingerprint).
    """

    def __init__(self, renderer: Optional[PreviewRenderer] = None):
        self.renderer = renderer or PreviewRenderer()
        self._fingerprint: Optional[str] = None
        self._document = PreviewDocument()
        self._subscribers: List[Callable[[PreviewDocument], None]] = []
        self.render_count = 0

    def subscribe(self, callback: Callable[[PreviewDocument], None]) -> Callable[[], None]:
        """Register a callback; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def update(self, blocks: Sequence[Block]) -> bool:
        """
        Re-render if the block content changed.

        Returns:
            True if a new render happened
        """
        fingerprint = Document(blocks=list(blocks)).fingerprint()
        if fingerprint == self._fingerprint:
            return False

        self._fingerprint = fingerprint
        self._document = self.renderer.render(blocks)
        self.render_count += 1

        for callback in list(self._subscribers):
            callback(self._document)
        return True

    @property
    def pages(self) -> List[Page]:
        return self._document.pages

    @property
    def html(self) -> str:
        return self._document.html
