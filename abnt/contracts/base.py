#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Base Contract Classes

Error hierarchy and checksum helper shared by the block model,
renderers and exporters.
"""

from typing import Any
import hashlib
import json


class ContractError(Exception):
    """Base error for block model violations"""
    pass


class BlockParseError(ContractError):
    """Raised when serialized block data cannot be turned into a Block"""
    def __init__(self, message: str, payload: Any = None):
        self.payload = payload
        super().__init__(message)


class ExportError(ContractError):
    """Raised inside export backends; converted to ExportResult at the boundary"""
    pass


def calculate_checksum(data: Any) -> str:
    """Stable short checksum of JSON-serializable data"""
    json_str = json.dumps(data, sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(json_str.encode("utf-8")).hexdigest()[:16]
