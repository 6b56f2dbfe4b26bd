"""
Integration Tests for the export command line.
"""

import pytest

from abnt.cli import main
from abnt.contracts import blocks_to_json


@pytest.fixture
def document_file(temp_dir, scenario_blocks):
    path = temp_dir / "documento.json"
    path.write_text(blocks_to_json(scenario_blocks), encoding="utf-8")
    return path


class TestCli:
    def test_missing_file(self, temp_dir, capsys):
        assert main([str(temp_dir / "nope.json")]) == 1
        assert "not found" in capsys.readouterr().out

    def test_invalid_json(self, temp_dir, capsys):
        path = temp_dir / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        assert main([str(path)]) == 1
        assert "Could not read" in capsys.readouterr().out

    def test_unknown_block_type(self, temp_dir):
        path = temp_dir / "bad.json"
        path.write_text('[{"id": "x", "type": "video"}]', encoding="utf-8")
        assert main([str(path)]) == 1

    def test_pages(self, document_file, capsys):
        assert main([str(document_file), "--pages"]) == 0
        out = capsys.readouterr().out
        assert "3 page(s)" in out
        assert "Page 3" in out
        assert "t1" in out

    def test_export_pdf(self, document_file, temp_dir, capsys):
        out_dir = temp_dir / "out"
        assert main([str(document_file), "-o", str(out_dir), "-n", "tcc"]) == 0
        assert (out_dir / "tcc.pdf").exists()
        assert "(3 pages)" in capsys.readouterr().out

    def test_export_all(self, document_file, temp_dir):
        out_dir = temp_dir / "out"
        assert main([str(document_file), "--format", "all", "--output-dir", str(out_dir)]) == 0
        for ext in ("html", "pdf", "docx"):
            assert (out_dir / f"documento-abnt.{ext}").exists()

    def test_empty_pdf_fails(self, temp_dir, capsys):
        path = temp_dir / "vazio.json"
        path.write_text("[]", encoding="utf-8")
        assert main([str(path), "-o", str(temp_dir / "out")]) == 1
        assert "❌ PDF" in capsys.readouterr().out

    def test_unsupported_format_rejected(self, document_file):
        with pytest.raises(SystemExit):
            main([str(document_file), "--format", "odt"])
