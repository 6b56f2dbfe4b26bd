#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Document container

Thin wrapper over an ordered block sequence with lookup helpers,
structural validation and JSON persistence.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterator, List, Optional
import re

from .blocks import (
    Block,
    CoverBlock,
    TableBlock,
    TitleBlock,
    UNIQUE_BLOCK_TYPES,
    MIN_TITLE_LEVEL,
    MAX_TITLE_LEVEL,
    blocks_from_json,
    blocks_to_json,
)
from .base import calculate_checksum

_YEAR_PATTERN = re.compile(r"^\d{4}$")


@dataclass
class ValidationIssue:
    """Document validation finding."""
    severity: str  # "warning"; rendering tolerates every finding
    message: str
    block_id: Optional[str] = None
    suggestion: Optional[str] = None

    def __repr__(self):
        return f"[{self.severity.upper()}] {self.message}"


@dataclass
class Document:
    """Ordered block sequence. Order is the only positional signal."""
    blocks: List[Block] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def get_block(self, block_id: str) -> Optional[Block]:
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    def titles(self) -> List[TitleBlock]:
        return [b for b in self.blocks if isinstance(b, TitleBlock)]

    def fingerprint(self) -> str:
        """Content hash; changes on any field edit, insert, removal or reorder."""
        return calculate_checksum([b.to_dict() for b in self.blocks])

    def validate(self) -> List[ValidationIssue]:
        """
        Check structural invariants.

        Checks:
        - At most one cover, abstract and toc
        - Title levels within 1..5
        - Tables are rectangular
        - Cover year is a 4-digit number

        Rendering tolerates every finding, so all are warnings.

        Returns:
            List of ValidationIssue objects
        """
        issues = []

        counts = Counter(b.type for b in self.blocks)
        for block_type in sorted(UNIQUE_BLOCK_TYPES, key=lambda t: t.value):
            if counts[block_type] > 1:
                issues.append(ValidationIssue(
                    severity="warning",
                    message=f"Document has {counts[block_type]} '{block_type.value}' blocks, expected at most one",
                    suggestion="Remove the duplicates; each one is rendered independently",
                ))

        for block in self.blocks:
            if isinstance(block, TitleBlock) and block.level is not None:
                if not MIN_TITLE_LEVEL <= block.level <= MAX_TITLE_LEVEL:
                    issues.append(ValidationIssue(
                        severity="warning",
                        message=f"Title level {block.level} out of range",
                        block_id=block.id,
                        suggestion=f"Rendered as level {min(max(block.level, MIN_TITLE_LEVEL), MAX_TITLE_LEVEL)}",
                    ))

            elif isinstance(block, TableBlock) and block.table is not None:
                if not block.table.is_rectangular():
                    issues.append(ValidationIssue(
                        severity="warning",
                        message="Table rows do not match the header length",
                        block_id=block.id,
                        suggestion="Rows are padded or truncated when rendered",
                    ))

            elif isinstance(block, CoverBlock) and block.cover is not None:
                if block.cover.year and not _YEAR_PATTERN.match(block.cover.year):
                    issues.append(ValidationIssue(
                        severity="warning",
                        message=f"Cover year '{block.cover.year}' is not a 4-digit number",
                        block_id=block.id,
                    ))

        return issues

    def to_json(self, indent: int = 2) -> str:
        return blocks_to_json(self.blocks, indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> 'Document':
        return cls(blocks=blocks_from_json(json_str))
