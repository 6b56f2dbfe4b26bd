#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ABNT academic document builder.

Typed content blocks are paginated and rendered to an HTML preview, a PDF
and a DOCX document that follow the ABNT layout rules.

Packages:
- abnt.contracts: block model and JSON wire format
- abnt.formatting: rule table, defaults, table of contents
- abnt.layout: pagination, renderers and the LayoutAgent
"""

__version__ = "1.0.0"
