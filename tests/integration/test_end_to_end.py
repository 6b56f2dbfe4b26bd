"""
End-to-end tests: one block sequence through preview, print and DOCX.
"""

import pytest

from abnt.contracts import (
    Document,
    PageBreakBlock,
    ParagraphBlock,
    TitleBlock,
    blocks_from_json,
    blocks_to_json,
)
from abnt.layout import SUPPORTED_FORMATS, LayoutAgent, PreviewRenderer, PrintRenderer
from abnt.layout.renderer.docx_exporter import DocxExporter


class TestScenario:
    """Cover, toc, title and paragraph on three pages."""

    def test_preview_pages(self, scenario_blocks):
        preview = PreviewRenderer().render(scenario_blocks)
        assert [p.block_ids for p in preview.pages] == [["cover"], ["toc"], ["t1", "p1"]]

    def test_print_matches_preview(self, scenario_blocks):
        preview = PreviewRenderer().render(scenario_blocks)
        print_pages = PrintRenderer().layout(scenario_blocks)
        assert [p.block_ids for p in print_pages] == [p.block_ids for p in preview.pages]

    def test_toc_numbering_modes(self, scenario_blocks):
        ordinal = PreviewRenderer(toc_numbering="ordinal").render(scenario_blocks).toc
        actual = PreviewRenderer(toc_numbering="actual").render(scenario_blocks).toc
        assert [e.page for e in ordinal] == [1]
        assert [e.page for e in actual] == [3]

    def test_survives_json_round_trip(self, full_document):
        restored = blocks_from_json(blocks_to_json(full_document))
        first = PreviewRenderer().render(full_document)
        second = PreviewRenderer().render(restored)
        assert first.html == second.html


class TestLayoutAgent:
    def test_process_all_formats(self, scenario_blocks, temp_dir):
        agent = LayoutAgent(output_dir=temp_dir, basename="tcc")
        results = agent.process(scenario_blocks)

        assert set(results) == {"html", "pdf", "docx"}
        assert all(r.success for r in results.values()), {k: r.error for k, r in results.items()}
        assert results["pdf"].pages == 3
        assert results["html"].pages == 3
        assert (temp_dir / "tcc.html").read_text(encoding="utf-8").count('<section class="page') == 3

    def test_formats_come_from_renderers(self):
        assert SUPPORTED_FORMATS == (PreviewRenderer.FORMAT, PrintRenderer.FORMAT, DocxExporter.FORMAT)
        assert SUPPORTED_FORMATS == ("html", "pdf", "docx")

    def test_unsupported_format(self, scenario_blocks, temp_dir):
        results = LayoutAgent(output_dir=temp_dir).process(scenario_blocks, ["odt"])
        assert results["odt"].success is False
        assert "Unsupported" in results["odt"].error

    def test_one_failure_does_not_stop_others(self, temp_dir):
        results = LayoutAgent(output_dir=temp_dir).process([], ["pdf", "docx", "html"])
        assert results["pdf"].success is False
        assert results["docx"].success is True
        assert results["html"].success is True

    def test_validation_warnings_do_not_block(self, cover_block, temp_dir):
        blocks = [cover_block, cover_block, TitleBlock(id="t", content="x", level=9)]
        agent = LayoutAgent(output_dir=temp_dir)
        messages = agent.validate(blocks)
        assert any("cover" in m for m in messages)
        assert agent.process(blocks, ["html"])["html"].success

    @pytest.mark.asyncio
    async def test_export_async(self, temp_dir):
        blocks = [ParagraphBlock(id="p", content="x"), PageBreakBlock(id="pb")]
        result = await LayoutAgent(output_dir=temp_dir).export(blocks, "PDF")
        assert result.success, result.error
        assert result.pages == 2

    def test_document_wrapper(self, full_document):
        document = Document(blocks=full_document)
        assert len(LayoutAgent().paginate(document.blocks)) == len(PrintRenderer().layout(full_document))
