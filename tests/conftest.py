"""
Pytest configuration and shared fixtures for ABNT document builder tests.
"""
import sys
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Generator, List

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from abnt.contracts import (
    Block,
    CoverBlock,
    CoverData,
    TitleBlock,
    ParagraphBlock,
    QuoteBlock,
    ListBlock,
    TableBlock,
    TableData,
    FootnoteBlock,
    AbstractBlock,
    KeywordsBlock,
    ReferencesBlock,
    TocBlock,
    PageBreakBlock,
    ImageBlock,
)
from config.settings import settings


# ============================================================================
# Fixtures: Filesystem & Settings
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def output_dir(temp_dir: Path, monkeypatch) -> Path:
    """Point the default export directory at a temp dir."""
    monkeypatch.setattr(settings, "output_dir", temp_dir)
    return temp_dir


# ============================================================================
# Fixtures: Sample Documents
# ============================================================================

@pytest.fixture
def cover_block() -> CoverBlock:
    return CoverBlock(
        id="cover",
        cover=CoverData(
            title="Estudo sobre paginação",
            subtitle="Um caso prático",
            authors=["Zeca", "ana", "Bruno"],
            institution="Universidade Federal",
            city="Recife",
            year="2024",
        ),
    )


@pytest.fixture
def scenario_blocks(cover_block) -> List[Block]:
    """Cover, table of contents, one title and one paragraph."""
    return [
        cover_block,
        TocBlock(id="toc"),
        TitleBlock(id="t1", content="Introdução", level=1),
        ParagraphBlock(id="p1", content="Texto de introdução do trabalho."),
    ]


@pytest.fixture
def full_document(cover_block) -> List[Block]:
    """One block of every type."""
    return [
        cover_block,
        AbstractBlock(id="abstract", content="Este trabalho apresenta um estudo."),
        KeywordsBlock(id="keywords", keywords=["paginação", "ABNT", "documentos"]),
        TocBlock(id="toc"),
        TitleBlock(id="t1", content="Introdução", level=1),
        ParagraphBlock(id="p1", content="Primeiro parágrafo da introdução."),
        TitleBlock(id="t2", content="Contexto", level=2),
        QuoteBlock(id="q1", content="Uma citação longa com mais de três linhas."),
        ListBlock(id="l1", items=["Primeiro", "", "Terceiro"]),
        ListBlock(id="l2", items=["Um", "Dois"], ordered=True),
        TableBlock(id="tbl", table=TableData(
            headers=["Coluna 1", "Coluna 2"],
            rows=[["a", "b"], ["c", "d"]],
        )),
        ImageBlock(id="img", image_url="https://example.invalid/figura.png", alt="Figura 1", image_width=50),
        FootnoteBlock(id="fn", content="Nota de rodapé.", number=2),
        PageBreakBlock(id="pb"),
        TitleBlock(id="t3", content="Conclusão", level=1),
        ParagraphBlock(id="p2", content=""),
        ReferencesBlock(id="refs", references=["SILVA, J. Livro. 2020.", ""]),
    ]


@pytest.fixture
def make_paragraphs():
    """Factory for short paragraphs with predictable ids (p1, p2, ...)."""
    def _make(count: int, text: str = "abc", prefix: str = "p") -> List[Block]:
        return [ParagraphBlock(id=f"{prefix}{i}", content=text) for i in range(1, count + 1)]
    return _make
