"""
Unit Tests for the Pagination Engine

Page heights are chosen so that short paragraphs ("abc") cost exactly
30pt each (one 18pt line plus the 12pt block gap).
"""

import pytest

from abnt.contracts import (
    AbstractBlock,
    CoverBlock,
    KeywordsBlock,
    PageBreakBlock,
    ParagraphBlock,
    ReferencesBlock,
    TitleBlock,
    TocBlock,
)
from abnt.layout.executor.heights import count_lines, estimate_height
from abnt.layout.executor.pagination import PaginationEngine, page_number_index, paginate


def page_ids(pages):
    return [[b.id for b in page.blocks] for page in pages]


def flat_ids(pages):
    return [b.id for page in pages for b in page.blocks]


class TestHeights:
    def test_short_paragraph_cost(self):
        assert estimate_height(ParagraphBlock(id="p", content="abc")) == pytest.approx(30)

    def test_cost_grows_with_length(self):
        short = estimate_height(ParagraphBlock(id="p", content="a" * 80))
        long = estimate_height(ParagraphBlock(id="p", content="a" * 800))
        assert long > short

    def test_markers_cost_nothing(self):
        assert estimate_height(PageBreakBlock(id="pb")) == 0
        assert estimate_height(CoverBlock(id="c")) == 0
        assert estimate_height(TocBlock(id="t")) == 0

    def test_count_lines(self):
        assert count_lines("", 80) == 1
        assert count_lines("a" * 81, 80) == 2
        assert count_lines("a\nb", 80) == 2


class TestConservation:
    """Concatenating pages reproduces the input."""

    def test_full_document(self, full_document):
        pages = paginate(full_document)
        assert flat_ids(pages) == [b.id for b in full_document]

    def test_many_paragraphs(self, make_paragraphs):
        blocks = make_paragraphs(200, text="x" * 300)
        pages = paginate(blocks)
        assert flat_ids(pages) == [b.id for b in blocks]
        assert len(pages) > 1

    def test_idempotent(self, full_document):
        assert page_ids(paginate(full_document)) == page_ids(paginate(full_document))

    def test_input_not_mutated(self, full_document):
        before = [b.to_dict() for b in full_document]
        paginate(full_document)
        assert [b.to_dict() for b in full_document] == before

    def test_empty_input(self):
        assert paginate([]) == []


class TestOverflow:
    def test_fills_until_height(self, make_paragraphs):
        engine = PaginationEngine(page_height=100)
        pages = engine.paginate(make_paragraphs(4))
        assert page_ids(pages) == [["p1", "p2", "p3"], ["p4"]]

    def test_page_numbers_sequential(self, make_paragraphs):
        pages = PaginationEngine(page_height=100).paginate(make_paragraphs(7))
        assert [p.number for p in pages] == [1, 2, 3]

    def test_oversized_block_alone(self):
        blocks = [
            ParagraphBlock(id="a", content="abc"),
            ParagraphBlock(id="huge", content="x" * 8000),
            ParagraphBlock(id="b", content="abc"),
        ]
        pages = paginate(blocks)
        assert page_ids(pages) == [["a"], ["huge"], ["b"]]

    def test_oversized_first_block(self):
        pages = paginate([ParagraphBlock(id="huge", content="x" * 8000)])
        assert page_ids(pages) == [["huge"]]


class TestForcedBreaks:
    """Cover, toc and page-break handling."""

    @pytest.mark.parametrize("special", [CoverBlock(id="s"), TocBlock(id="s")])
    def test_own_page(self, special, make_paragraphs):
        p1, p2 = make_paragraphs(2)
        pages = paginate([p1, special, p2])
        assert page_ids(pages) == [["p1"], ["s"], ["p2"]]

    def test_cover_then_toc(self):
        pages = paginate([CoverBlock(id="c"), TocBlock(id="t")])
        assert page_ids(pages) == [["c"], ["t"]]

    def test_page_break_starts_new_page(self, make_paragraphs):
        p1, p2 = make_paragraphs(2)
        pages = paginate([p1, PageBreakBlock(id="pb"), p2])
        assert page_ids(pages) == [["p1"], ["pb", "p2"]]
        assert not pages[1].is_blank

    def test_trailing_page_break_gives_blank_page(self, make_paragraphs):
        p1, = make_paragraphs(1)
        pages = paginate([p1, PageBreakBlock(id="pb")])
        assert page_ids(pages) == [["p1"], ["pb"]]
        assert pages[-1].is_blank

    def test_leading_page_break_gives_blank_page(self, make_paragraphs):
        p1, = make_paragraphs(1)
        pages = paginate([PageBreakBlock(id="pb"), p1])
        assert page_ids(pages) == [[], ["pb", "p1"]]
        assert pages[0].is_blank

    def test_consecutive_page_breaks(self, make_paragraphs):
        p1, = make_paragraphs(1)
        pages = paginate([p1, PageBreakBlock(id="a"), PageBreakBlock(id="b")])
        assert page_ids(pages) == [["p1"], ["a"], ["b"]]

    def test_block_after_break_does_not_overflow_early(self):
        engine = PaginationEngine(page_height=100)
        blocks = [PageBreakBlock(id="pb")] + [ParagraphBlock(id=f"p{i}", content="abc") for i in range(3)]
        assert page_ids(engine.paginate(blocks)) == [[], ["pb", "p0", "p1", "p2"]]

    def test_references_start_page(self, make_paragraphs):
        p1, = make_paragraphs(1)
        pages = paginate([p1, ReferencesBlock(id="refs", references=["A"])])
        assert page_ids(pages) == [["p1"], ["refs"]]

    def test_break_before_references_adds_no_blank_page(self, make_paragraphs):
        p1, = make_paragraphs(1)
        pages = paginate([p1, PageBreakBlock(id="pb"), ReferencesBlock(id="refs", references=["A"])])
        assert page_ids(pages) == [["p1"], ["pb", "refs"]]
        assert not any(page.is_blank for page in pages)

    @pytest.mark.parametrize("special", [CoverBlock(id="s"), TocBlock(id="s")])
    def test_break_before_own_page_adds_no_blank_page(self, special, make_paragraphs):
        p1, = make_paragraphs(1)
        pages = paginate([p1, PageBreakBlock(id="pb"), special])
        assert page_ids(pages) == [["p1", "pb"], ["s"]]
        assert not any(page.is_blank for page in pages)

    def test_leading_break_before_toc(self):
        pages = paginate([PageBreakBlock(id="pb"), TocBlock(id="toc")])
        assert page_ids(pages) == [["pb"], ["toc"]]
        assert pages[0].is_blank

    def test_abstract_ends_page(self):
        pages = paginate([
            AbstractBlock(id="abs", content="Resumo"),
            KeywordsBlock(id="kw", keywords=["a"]),
        ])
        assert page_ids(pages) == [["abs"], ["kw"]]


class TestPageIndex:
    def test_index(self, scenario_blocks):
        pages = paginate(scenario_blocks)
        index = page_number_index(pages)
        assert index == {"cover": 1, "toc": 2, "t1": 3, "p1": 3}

    def test_page_dict(self, scenario_blocks):
        page = paginate(scenario_blocks)[2]
        assert page.to_dict()["block_ids"] == ["t1", "p1"]
        assert page.to_dict()["blank"] is False


class TestPageHeightSetting:
    def test_default_height_from_settings(self):
        from config.settings import settings
        assert PaginationEngine().page_height == pytest.approx(settings.page_content_height_pt)

    def test_override(self, monkeypatch, make_paragraphs):
        from config.settings import settings
        monkeypatch.setattr(settings, "page_content_height_override_pt", 60.0)
        pages = paginate(make_paragraphs(4))
        assert page_ids(pages) == [["p1", "p2"], ["p3", "p4"]]

    def test_title_cost(self):
        assert estimate_height(TitleBlock(id="t", content="Intro", level=1)) == pytest.approx(42)
