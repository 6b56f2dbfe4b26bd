#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Export CLI - Command-line interface for ABNT document export

Usage:
    abnt-export documento.json --format pdf
    abnt-export documento.json --format all --output-dir out --name tcc
    abnt-export documento.json --pages
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from abnt.contracts import BlockParseError, Document
from abnt.layout import LayoutAgent, SUPPORTED_FORMATS


def load_document(path: Path) -> Document:
    """Read a JSON block document from disk."""
    return Document.from_json(path.read_text(encoding="utf-8"))


def cmd_pages(agent: LayoutAgent, document: Document) -> int:
    """Print page membership"""
    pages = agent.paginate(document.blocks)
    print(f"\n{len(pages)} page(s)\n")
    for page in pages:
        label = " (blank)" if page.is_blank else ""
        print(f"Page {page.number}{label}: {page.height:.0f}pt")
        for block in page.blocks:
            preview = block.content[:40].replace("\n", " ")
            print(f"    {block.id:<24} {block.type.value:<14} {preview}")
    return 0


def cmd_export(agent: LayoutAgent, document: Document, formats: List[str]) -> int:
    """Export formats and report results"""
    results = agent.process(document.blocks, formats)

    exit_code = 0
    for fmt, result in results.items():
        if result.success:
            pages = f" ({result.pages} pages)" if result.pages is not None else ""
            print(f"✅ {fmt.upper()}: {result.path}{pages}")
        else:
            print(f"❌ {fmt.upper()}: {result.error}")
            exit_code = 1
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Export ABNT academic documents to PDF, DOCX and HTML",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('input', help='JSON file with the document blocks')
    parser.add_argument('--format', '-f', default='pdf',
                        choices=list(SUPPORTED_FORMATS) + ['all'], help='Output format (default: pdf)')
    parser.add_argument('--output-dir', '-o', help='Output directory (default: settings output_dir)')
    parser.add_argument('--name', '-n', help='Output file name without extension (default: documento-abnt)')
    parser.add_argument('--pages', action='store_true', help='Print page membership instead of exporting')

    args = parser.parse_args(argv)

    input_file = Path(args.input).resolve()
    if not input_file.exists():
        print(f"❌ Input file not found: {input_file}")
        return 1

    try:
        document = load_document(input_file)
    except (BlockParseError, OSError, UnicodeDecodeError) as e:
        print(f"❌ Could not read {input_file}: {e}")
        return 1

    agent = LayoutAgent(output_dir=args.output_dir, basename=args.name)

    if args.pages:
        return cmd_pages(agent, document)

    formats = list(SUPPORTED_FORMATS) if args.format == 'all' else [args.format]
    return cmd_export(agent, document, formats)


if __name__ == '__main__':
    sys.exit(main())
