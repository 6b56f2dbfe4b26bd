"""
Formatting Module

Shared typographic rules, default resolution and table of contents.
"""

from .rules import (
    BlockRule,
    TITLE_RULES,
    BLOCK_RULES,
    SECTION_HEADING_RULE,
    get_rule,
    clamp_level,
    rule_to_css,
    rule_to_paragraph_style,
    apply_rule_to_docx,
)
from .defaults import (
    resolve_block,
    sort_authors,
    author_sort_key,
    normalize_table,
    keywords_line,
)
from .toc import TocEntry, build_toc

__all__ = [
    'BlockRule',
    'TITLE_RULES',
    'BLOCK_RULES',
    'SECTION_HEADING_RULE',
    'get_rule',
    'clamp_level',
    'rule_to_css',
    'rule_to_paragraph_style',
    'apply_rule_to_docx',
    'resolve_block',
    'sort_authors',
    'author_sort_key',
    'normalize_table',
    'keywords_line',
    'TocEntry',
    'build_toc',
]
