#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Image loading for the PDF export.

Resolves every image source of a document concurrently before drawing.
Sources can be data URIs, local paths (or file:// URLs) and http(s) URLs.
Each load settles independently: a failure yields None and is logged, it
never fails the export.
"""

import asyncio
import base64
import binascii
from pathlib import Path
from typing import Dict, Iterable, Optional
from urllib.parse import unquote, urlparse

import httpx

from abnt.contracts.blocks import Block, ImageBlock
from config.logging_config import get_logger
from config.settings import settings

logger = get_logger(__name__)


def decode_data_uri(uri: str) -> Optional[bytes]:
    """Bytes of a ``data:`` URI, or None if it is malformed."""
    if not uri.startswith("data:") or "," not in uri:
        return None
    header, payload = uri[5:].split(",", 1)
    try:
        if header.endswith(";base64"):
            return base64.b64decode(payload, validate=False)
        return unquote(payload).encode("latin-1")
    except (binascii.Error, ValueError, UnicodeEncodeError):
        return None


def local_image_path(source: str) -> Optional[Path]:
    """Path for a local file source (plain path or file:// URL)."""
    parsed = urlparse(source)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    # Windows drive letters parse as a one-letter scheme
    if not parsed.scheme or len(parsed.scheme) == 1:
        return Path(source)
    return None


def load_embedded_image(source: str) -> Optional[bytes]:
    """
    Synchronous load for sources that need no network (data URI, local file).

    Returns None for remote URLs and for anything unreadable.
    """
    if not source:
        return None
    if source.startswith("data:"):
        return decode_data_uri(source)

    path = local_image_path(source)
    if path is None:
        return None
    try:
        return path.read_bytes()
    except OSError as e:
        logger.warning(f"Could not read image {path}: {e}")
        return None


class ImageLoader:
    """
    Concurrent image resolver.

    Usage:
        loader = ImageLoader(timeout=10)
        images = await loader.load_all(blocks)   # {url: bytes | None}
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = timeout if timeout is not None else settings.image_fetch_timeout
        self._client = client

    @staticmethod
    def image_sources(blocks: Iterable[Block]) -> list:
        """Distinct image sources in document order."""
        seen = []
        for block in blocks:
            if isinstance(block, ImageBlock) and block.image_url and block.image_url not in seen:
                seen.append(block.image_url)
        return seen

    async def load_all(self, blocks: Iterable[Block]) -> Dict[str, Optional[bytes]]:
        """Load every image source; all loads settle before returning."""
        sources = self.image_sources(blocks)
        if not sources:
            return {}

        if self._client is not None:
            results = await asyncio.gather(*(self.load(src, self._client) for src in sources))
        else:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                results = await asyncio.gather(*(self.load(src, client) for src in sources))

        loaded = sum(1 for r in results if r is not None)
        logger.info(f"Images resolved: {loaded}/{len(sources)}")
        return dict(zip(sources, results))

    async def load(self, source: str, client: httpx.AsyncClient) -> Optional[bytes]:
        """Load one source; None on any failure."""
        scheme = urlparse(source).scheme
        if scheme not in ("http", "https"):
            return load_embedded_image(source)

        try:
            response = await client.get(source)
            response.raise_for_status()
            return response.content
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Image fetch failed for {source}: {e}")
            return None
