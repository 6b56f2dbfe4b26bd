#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Block Model

Canonical representation of one document unit. A document is a flat,
ordered sequence of blocks; order is the only positional signal.

Each block type is its own dataclass carrying only the fields that are
meaningful for it. All variants share ``id``, ``type`` and ``content``.

Wire format (JSON) follows the editor's camelCase shape:

    {"id": "block-1", "type": "title", "content": "Introdução", "level": 1}
    {"id": "block-2", "type": "table", "content": "",
     "tableData": {"headers": ["A", "B"], "rows": [["1", "2"]]}}
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type
import copy
import json
import uuid

from .base import BlockParseError


class BlockType(Enum):
    """Closed set of block kinds"""
    COVER = "cover"
    TITLE = "title"
    PARAGRAPH = "paragraph"
    QUOTE = "quote"
    IMAGE = "image"
    LIST = "list"
    ORDERED_LIST = "ordered-list"
    TABLE = "table"
    FOOTNOTE = "footnote"
    ABSTRACT = "abstract"
    KEYWORDS = "keywords"
    REFERENCES = "references"
    TOC = "toc"
    PAGE_BREAK = "page-break"


# At most one of each per document (enforced by the editor, tolerated here)
UNIQUE_BLOCK_TYPES = frozenset({BlockType.COVER, BlockType.ABSTRACT, BlockType.TOC})

MIN_TITLE_LEVEL = 1
MAX_TITLE_LEVEL = 5


# =============================================================================
# VALUE OBJECTS
# =============================================================================

@dataclass
class TableData:
    """Header row plus data rows; rows should match the header length."""
    headers: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def is_rectangular(self) -> bool:
        return all(len(row) == len(self.headers) for row in self.rows)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headers": list(self.headers),
            "rows": [list(row) for row in self.rows],
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['TableData']:
        if not isinstance(data, dict):
            return None
        return cls(
            headers=_string_list(data.get("headers")),
            rows=[_string_list(row) for row in data.get("rows") or [] if isinstance(row, list)],
        )


@dataclass
class CoverData:
    """Cover page fields. ``authors`` keeps the order the user typed."""
    title: str = ""
    subtitle: Optional[str] = None
    authors: List[str] = field(default_factory=list)
    institution: str = ""
    city: str = ""
    year: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "title": self.title,
            "authors": list(self.authors),
            "institution": self.institution,
            "city": self.city,
            "year": self.year,
        }
        if self.subtitle is not None:
            data["subtitle"] = self.subtitle
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['CoverData']:
        if not isinstance(data, dict):
            return None

        authors = _string_list(data.get("authors"))
        # Older documents stored a single author string
        if not authors and data.get("author"):
            authors = [str(data["author"])]

        subtitle = data.get("subtitle")
        return cls(
            title=str(data.get("title") or ""),
            subtitle=str(subtitle) if subtitle is not None else None,
            authors=authors,
            institution=str(data.get("institution") or ""),
            city=str(data.get("city") or ""),
            year=str(data.get("year") or ""),
        )


# =============================================================================
# BLOCK VARIANTS
# =============================================================================

@dataclass
class Block:
    """Base class for all blocks. ``type`` is fixed by each subclass."""
    id: str
    content: str = ""
    type: BlockType = field(init=False, default=BlockType.PARAGRAPH)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "content": self.content,
        }
        data.update(self._payload())
        return data

    def _payload(self) -> Dict[str, Any]:
        """Type-specific wire fields"""
        return {}

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Type-specific constructor kwargs parsed from wire fields"""
        return {}


@dataclass
class CoverBlock(Block):
    cover: Optional[CoverData] = None

    def __post_init__(self):
        self.type = BlockType.COVER

    def _payload(self) -> Dict[str, Any]:
        return {"coverData": self.cover.to_dict()} if self.cover else {}

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {"cover": CoverData.from_dict(data.get("coverData"))}


@dataclass
class TitleBlock(Block):
    level: Optional[int] = None

    def __post_init__(self):
        self.type = BlockType.TITLE

    def _payload(self) -> Dict[str, Any]:
        return {"level": self.level} if self.level is not None else {}

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {"level": _optional_int(data.get("level"))}


@dataclass
class ParagraphBlock(Block):
    def __post_init__(self):
        self.type = BlockType.PARAGRAPH


@dataclass
class QuoteBlock(Block):
    def __post_init__(self):
        self.type = BlockType.QUOTE


@dataclass
class AbstractBlock(Block):
    def __post_init__(self):
        self.type = BlockType.ABSTRACT


@dataclass
class ImageBlock(Block):
    image_url: Optional[str] = None
    alt: Optional[str] = None
    image_width: Optional[int] = None  # percent of content width

    def __post_init__(self):
        self.type = BlockType.IMAGE

    def _payload(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.image_url is not None:
            data["imageUrl"] = self.image_url
        if self.alt is not None:
            data["alt"] = self.alt
        if self.image_width is not None:
            data["imageWidth"] = self.image_width
        return data

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "image_url": data.get("imageUrl"),
            "alt": data.get("alt"),
            "image_width": _optional_int(data.get("imageWidth")),
        }


@dataclass
class ListBlock(Block):
    """Bulleted list, or numbered list when ``ordered`` is set."""
    items: List[str] = field(default_factory=list)
    ordered: bool = False

    def __post_init__(self):
        self.type = BlockType.ORDERED_LIST if self.ordered else BlockType.LIST

    def _payload(self) -> Dict[str, Any]:
        return {"listItems": list(self.items)}

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "items": _string_list(data.get("listItems")),
            "ordered": data.get("type") == BlockType.ORDERED_LIST.value,
        }


@dataclass
class TableBlock(Block):
    table: Optional[TableData] = None

    def __post_init__(self):
        self.type = BlockType.TABLE

    def _payload(self) -> Dict[str, Any]:
        return {"tableData": self.table.to_dict()} if self.table else {}

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {"table": TableData.from_dict(data.get("tableData"))}


@dataclass
class FootnoteBlock(Block):
    number: Optional[int] = None

    def __post_init__(self):
        self.type = BlockType.FOOTNOTE

    def _payload(self) -> Dict[str, Any]:
        return {"footnoteNumber": self.number} if self.number is not None else {}

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {"number": _optional_int(data.get("footnoteNumber"))}


@dataclass
class KeywordsBlock(Block):
    keywords: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.type = BlockType.KEYWORDS

    def _payload(self) -> Dict[str, Any]:
        return {"keywords": list(self.keywords)}

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {"keywords": _string_list(data.get("keywords"))}


@dataclass
class ReferencesBlock(Block):
    references: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.type = BlockType.REFERENCES

    def _payload(self) -> Dict[str, Any]:
        return {"references": list(self.references)}

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {"references": _string_list(data.get("references"))}


@dataclass
class TocBlock(Block):
    def __post_init__(self):
        self.type = BlockType.TOC


@dataclass
class PageBreakBlock(Block):
    def __post_init__(self):
        self.type = BlockType.PAGE_BREAK


BLOCK_CLASSES: Dict[BlockType, Type[Block]] = {
    BlockType.COVER: CoverBlock,
    BlockType.TITLE: TitleBlock,
    BlockType.PARAGRAPH: ParagraphBlock,
    BlockType.QUOTE: QuoteBlock,
    BlockType.IMAGE: ImageBlock,
    BlockType.LIST: ListBlock,
    BlockType.ORDERED_LIST: ListBlock,
    BlockType.TABLE: TableBlock,
    BlockType.FOOTNOTE: FootnoteBlock,
    BlockType.ABSTRACT: AbstractBlock,
    BlockType.KEYWORDS: KeywordsBlock,
    BlockType.REFERENCES: ReferencesBlock,
    BlockType.TOC: TocBlock,
    BlockType.PAGE_BREAK: PageBreakBlock,
}


# =============================================================================
# PARSING & SERIALIZATION
# =============================================================================

def block_from_dict(data: Dict[str, Any]) -> Block:
    """
    Build the matching Block variant from its wire dictionary.

    Raises:
        BlockParseError: if ``data`` is not a mapping, has no id, or names
            an unknown block type.
    """
    if not isinstance(data, dict):
        raise BlockParseError(f"Block must be an object, got {type(data).__name__}", data)

    raw_type = data.get("type")
    try:
        block_type = BlockType(raw_type)
    except ValueError:
        raise BlockParseError(f"Unknown block type: {raw_type!r}", data) from None

    block_id = data.get("id")
    if block_id is None or block_id == "":
        raise BlockParseError("Block is missing an id", data)

    cls = BLOCK_CLASSES[block_type]
    content = data.get("content")
    return cls(
        id=str(block_id),
        content=str(content) if content is not None else "",
        **cls._fields_from_dict(data),
    )


def blocks_from_list(items: Sequence[Dict[str, Any]]) -> List[Block]:
    if not isinstance(items, list):
        raise BlockParseError("Document must be a list of blocks", items)
    return [block_from_dict(item) for item in items]


def blocks_from_json(json_str: str) -> List[Block]:
    """Parse a JSON array of blocks (the editor's storage format)."""
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise BlockParseError(f"Invalid JSON: {e}") from e
    # Accept both a bare array and {"blocks": [...]}
    if isinstance(data, dict) and "blocks" in data:
        data = data["blocks"]
    return blocks_from_list(data)


def blocks_to_json(blocks: Sequence[Block], indent: int = 2) -> str:
    return json.dumps([b.to_dict() for b in blocks], ensure_ascii=False, indent=indent)


def snapshot(blocks: Sequence[Block]) -> Tuple[Block, ...]:
    """Frozen copy of the sequence for one render/export pass."""
    return tuple(copy.deepcopy(list(blocks)))


def create_block(block_type: BlockType, block_id: Optional[str] = None) -> Block:
    """
    Create a block with the editor's initial field values.

    Titles start at level 1, images at 100% width, lists/keywords/references
    with one empty entry, tables as 2x2 with "Coluna N" headers and covers
    with the current year.
    """
    block_id = block_id or f"block-{uuid.uuid4().hex}"

    if block_type == BlockType.TITLE:
        return TitleBlock(id=block_id, level=1)
    if block_type == BlockType.IMAGE:
        return ImageBlock(id=block_id, image_width=100)
    if block_type in (BlockType.LIST, BlockType.ORDERED_LIST):
        return ListBlock(id=block_id, items=[""], ordered=block_type == BlockType.ORDERED_LIST)
    if block_type == BlockType.KEYWORDS:
        return KeywordsBlock(id=block_id, keywords=[""])
    if block_type == BlockType.REFERENCES:
        return ReferencesBlock(id=block_id, references=[""])
    if block_type == BlockType.TABLE:
        return TableBlock(id=block_id, table=TableData(
            headers=["Coluna 1", "Coluna 2"],
            rows=[["", ""], ["", ""]],
        ))
    if block_type == BlockType.COVER:
        return CoverBlock(id=block_id, cover=CoverData(
            authors=[""],
            year=str(date.today().year),
        ))

    return BLOCK_CLASSES[block_type](id=block_id)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return ["" if item is None else str(item) for item in value]


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
