#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Executor Module

Provides height estimation and pagination.
"""

from .heights import estimate_height, count_lines
from .pagination import Page, FlowState, PaginationEngine, paginate, page_number_index

__all__ = [
    "estimate_height",
    "count_lines",
    "Page",
    "FlowState",
    "PaginationEngine",
    "paginate",
    "page_number_index",
]
