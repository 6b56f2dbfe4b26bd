"""
Integration Tests for the DOCX Exporter

Exported files are reopened with python-docx and inspected.
"""

import base64
from io import BytesIO

import pytest
from docx import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from PIL import Image as PILImage

from abnt.contracts import (
    ImageBlock,
    PageBreakBlock,
    ParagraphBlock,
    QuoteBlock,
    ReferencesBlock,
    TitleBlock,
    TocBlock,
)
from abnt.layout.renderer.docx_exporter import DocxExporter


def paragraph_texts(doc):
    return [p.text for p in doc.paragraphs]


def find_paragraph(doc, text):
    for paragraph in doc.paragraphs:
        if paragraph.text == text:
            return paragraph
    raise AssertionError(f"paragraph not found: {text!r}")


def page_break_count(doc):
    return doc.element.body.xml.count('w:type="page"')


@pytest.fixture
def exported(full_document, temp_dir):
    """Export the full document and reopen it."""
    output = temp_dir / "documento.docx"
    result = DocxExporter().export(full_document, output)
    assert result.success, result.error
    return DocxDocument(str(output))


class TestDocxPageSetup:
    def test_a4_margins(self, exported):
        section = exported.sections[0]
        assert abs(section.page_width.cm - 21.0) < 0.01
        assert abs(section.page_height.cm - 29.7) < 0.01
        assert abs(section.top_margin.cm - 3) < 0.01
        assert abs(section.left_margin.cm - 3) < 0.01
        assert abs(section.bottom_margin.cm - 2) < 0.01
        assert abs(section.right_margin.cm - 2) < 0.01

    def test_metadata(self, exported):
        props = exported.core_properties
        assert props.title == "Estudo sobre paginação"
        assert props.author == "ana; Bruno; Zeca"
        assert props.language == "pt-BR"


class TestDocxBlocks:
    def test_headings(self, exported):
        intro = find_paragraph(exported, "INTRODUÇÃO")
        assert intro.style.name == "Heading 1"
        context = find_paragraph(exported, "Contexto")
        assert context.style.name == "Heading 2"

    def test_heading_styles_from_rules(self, exported):
        assert exported.styles["Heading 1"].font.size.pt == 20
        assert exported.styles["Heading 2"].font.size.pt == 16
        assert exported.styles["Heading 5"].font.bold is False

    def test_cover_authors_sorted(self, exported):
        texts = paragraph_texts(exported)
        positions = [texts.index(name) for name in ("ana", "Bruno", "Zeca")]
        assert positions == sorted(positions)
        assert "UNIVERSIDADE FEDERAL" in texts
        assert "ESTUDO SOBRE PAGINAÇÃO" in texts

    def test_paragraph_format(self, exported):
        paragraph = find_paragraph(exported, "Primeiro parágrafo da introdução.")
        pf = paragraph.paragraph_format
        assert pf.alignment == WD_ALIGN_PARAGRAPH.JUSTIFY
        assert pf.line_spacing == 1.5
        assert abs(pf.first_line_indent.cm - 1.25) < 0.01

    def test_quote_format(self, exported):
        quote = find_paragraph(exported, "Uma citação longa com mais de três linhas.")
        assert abs(quote.paragraph_format.left_indent.cm - 4) < 0.01
        assert quote.runs[0].font.size.pt == 11
        assert quote.runs[0].font.italic is True

    def test_placeholders(self, exported):
        texts = paragraph_texts(exported)
        assert "Parágrafo vazio" in texts
        assert "Item 2" in texts
        assert "Referência 2" in texts

    def test_abstract_and_keywords(self, exported):
        texts = paragraph_texts(exported)
        assert "RESUMO" in texts
        keywords = find_paragraph(exported, "Palavras-chave: paginação; ABNT; documentos.")
        assert keywords.runs[0].font.bold is True

    def test_footnote(self, exported):
        footnote = find_paragraph(exported, "2 Nota de rodapé.")
        assert footnote.runs[0].font.superscript is True
        assert footnote.runs[1].font.size.pt == 10

    def test_table(self, exported):
        assert len(exported.tables) == 1
        table = exported.tables[0]
        assert len(table.rows) == 3
        assert len(table.columns) == 2
        header = table.cell(0, 0).paragraphs[0]
        assert header.text == "Coluna 1"
        assert header.runs[0].font.bold is True
        assert table.cell(2, 1).text == "d"

    def test_remote_image_becomes_caption(self, exported):
        texts = paragraph_texts(exported)
        assert "[Figura 1]" in texts

    def test_references_start_new_page(self, exported):
        heading = find_paragraph(exported, "REFERÊNCIAS")
        assert heading.paragraph_format.page_break_before is True

    def test_toc_field(self, exported):
        xml = exported.element.xml
        assert 'TOC \\o "1-5"' in xml
        assert "SUMÁRIO" in paragraph_texts(exported)

    def test_page_breaks(self, exported):
        xml = exported.element.xml
        # cover, abstract, page-break block
        assert xml.count('w:type="page"') >= 3

class TestDocxPageBreaks:
    """Breaks follow the rule table; one boundary never becomes two."""

    def test_toc_alone_on_its_page(self):
        doc = DocxExporter().build_document([
            ParagraphBlock(id="p", content="Antes"),
            TocBlock(id="toc"),
            TitleBlock(id="t", content="Depois", level=1),
        ])
        assert page_break_count(doc) == 2

        body = doc.element.body.xml
        toc_at = body.index("SUMÁRIO")
        assert body.rfind('w:type="page"', 0, toc_at) != -1
        assert body.find('w:type="page"', toc_at) < body.index("DEPOIS")

    def test_cover_then_toc(self, cover_block):
        doc = DocxExporter().build_document([
            cover_block,
            TocBlock(id="toc"),
            ParagraphBlock(id="p", content="Texto"),
        ])
        assert page_break_count(doc) == 2

    def test_no_break_at_document_start_or_end(self):
        doc = DocxExporter().build_document([TocBlock(id="toc")])
        assert page_break_count(doc) == 0

    def test_page_break_before_toc_is_not_doubled(self):
        doc = DocxExporter().build_document([
            ParagraphBlock(id="p", content="Antes"),
            PageBreakBlock(id="pb"),
            TocBlock(id="toc"),
        ])
        assert page_break_count(doc) == 1

    def test_page_break_before_references_is_not_doubled(self):
        doc = DocxExporter().build_document([
            ParagraphBlock(id="p", content="Antes"),
            PageBreakBlock(id="pb"),
            ReferencesBlock(id="refs", references=["SILVA, J. Livro. 2020."]),
        ])
        assert page_break_count(doc) == 1
        assert find_paragraph(doc, "REFERÊNCIAS").paragraph_format.page_break_before is not True



class TestDocxExport:
    def test_embedded_image(self, temp_dir):
        buffer = BytesIO()
        PILImage.new("RGB", (40, 30), color=(0, 0, 255)).save(buffer, format="PNG")
        uri = "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")

        doc = DocxExporter().build_document([ImageBlock(id="i", image_url=uri, image_width=50)])

        assert len(doc.inline_shapes) == 1
        assert abs(doc.inline_shapes[0].width.cm - 8.0) < 0.01

    def test_undecodable_image_falls_back(self):
        uri = "data:image/png;base64," + base64.b64encode(b"not an image").decode("ascii")
        doc = DocxExporter().build_document([ImageBlock(id="i", image_url=uri, alt="Mapa")])

        assert len(doc.inline_shapes) == 0
        assert "[Mapa]" in paragraph_texts(doc)

    def test_truncated_png_falls_back(self, temp_dir):
        # Valid signature, header cut short
        truncated = b"\x89PNG\r\n\x1a\n" + b"\x00" * 4
        uri = "data:image/png;base64," + base64.b64encode(truncated).decode("ascii")
        blocks = [ImageBlock(id="i", image_url=uri, alt="Mapa")]

        result = DocxExporter().export(blocks, temp_dir / "img.docx")

        assert result.success, result.error
        doc = DocxDocument(str(temp_dir / "img.docx"))
        assert len(doc.inline_shapes) == 0
        assert "[Mapa]" in paragraph_texts(doc)

    def test_empty_document(self, temp_dir):
        result = DocxExporter().export([], temp_dir / "vazio.docx")
        assert result.success, result.error
        assert (temp_dir / "vazio.docx").exists()

    def test_default_output_path(self, output_dir):
        result = DocxExporter().export([ParagraphBlock(id="p", content="x")])
        assert result.path == output_dir / "documento-abnt.docx"
        assert result.path.exists()

    def test_failed_write_leaves_no_file(self, temp_dir):
        blocker = temp_dir / "blocker"
        blocker.write_text("x")

        result = DocxExporter().export([ParagraphBlock(id="p", content="x")], blocker / "out.docx")

        assert result.success is False
        assert result.error
        assert list(temp_dir.iterdir()) == [blocker]

    def test_input_not_mutated(self, full_document):
        before = [b.to_dict() for b in full_document]
        DocxExporter().render_bytes(full_document)
        assert [b.to_dict() for b in full_document] == before

    def test_title_level_clamped(self):
        doc = DocxExporter().build_document([TitleBlock(id="t", content="Fundo", level=9)])
        assert doc.paragraphs[0].style.name == "Heading 5"

    def test_custom_font(self):
        doc = DocxExporter(font_name="Arial").build_document([QuoteBlock(id="q", content="c")])
        assert doc.paragraphs[0].runs[0].font.name == "Arial"
