#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Base Renderer Interface

Defines the export result and the shared file-writing step for all
file-producing renderers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Sequence, Union
import logging
import os
import tempfile

from abnt.contracts.base import ExportError
from abnt.contracts.blocks import Block

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Outcome of one export. Backends never raise past this boundary."""
    success: bool
    path: Optional[Path] = None
    error: Optional[str] = None
    pages: Optional[int] = None

    def to_dict(self) -> Dict:
        return {
            "success": self.success,
            "path": str(self.path) if self.path else None,
            "error": self.error,
            "pages": self.pages,
        }


def write_atomic(data: bytes, output_path: Union[str, Path]) -> Path:
    """
    Write bytes to ``output_path`` via a temp file in the same directory.

    The target either keeps its previous content or holds the complete
    new content; a partial file is never left behind.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        dir=str(output_path.parent),
        prefix=f".{output_path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, output_path)
    except OSError as e:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise ExportError(f"Could not write {output_path}: {e}") from e

    return output_path


class BaseRenderer(ABC):
    """
    Abstract base class for file renderers.

    All renderers must implement:
    - FORMAT: Output format name
    - render_bytes(): Produce the complete artifact in memory
    """

    FORMAT = ""

    @abstractmethod
    def render_bytes(self, blocks: Sequence[Block]) -> bytes:
        """Render the full artifact in memory."""
        pass
