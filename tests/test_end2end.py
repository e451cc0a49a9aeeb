"""
End-to-end tests for the command-line pipeline.
"""

import csv
import json
import logging
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from tablegrid.cli import main, parse_page_range, EXIT_OK, EXIT_FAILURE, EXIT_NO_TABLES
from conftest import EXPECTED_ROWS, table_page_fragments, table_page_lines


@pytest.fixture(autouse=True)
def restore_log_level():
    """main() adjusts the root logger for --verbose/--quiet."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("TABLEGRID_DEBUG", raising=False)


class TestParsePageRange:
    """Tests for --pages parsing."""

    def test_single_and_ranges(self):
        assert parse_page_range("1-3,5") == [1, 2, 3, 5]

    def test_sorted_and_deduplicated(self):
        assert parse_page_range("4, 2, 2-3") == [2, 3, 4]

    @pytest.mark.parametrize("value", ["5-2", "abc", "0", ","])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_page_range(value)


class TestEndToEnd:
    """End-to-end integration tests."""

    def test_pdf_to_xlsx(self, table_pdf, tmp_path):
        openpyxl = pytest.importorskip("openpyxl")
        output_dir = tmp_path / "out"

        code = main(["-i", str(table_pdf), "-o", str(output_dir), "-q"])

        assert code == EXIT_OK
        ws = openpyxl.load_workbook(output_dir / "table.xlsx")["extracted_data"]
        assert ws["A2"].value == "Region name"
        assert ws["C4"].value == "11875.50"
        assert ws.max_row == len(EXPECTED_ROWS)

    def test_all_formats_with_report(self, table_pdf, tmp_path):
        pytest.importorskip("openpyxl")
        output_dir = tmp_path / "out"

        code = main([
            "-i", str(table_pdf), "-o", str(output_dir),
            "--format", "all", "--report", "-q",
        ])

        assert code == EXIT_OK
        assert (output_dir / "table.xlsx").exists()

        with open(output_dir / "table.json", encoding="utf-8") as f:
            assert json.load(f) == EXPECTED_ROWS

        with open(output_dir / "table.csv", encoding="utf-8", newline="") as f:
            csv_rows = list(csv.reader(f))
        assert csv_rows[0] == [EXPECTED_ROWS[0][0], "", ""]
        assert csv_rows[2] == EXPECTED_ROWS[2]

        with open(output_dir / "table.report.json", encoding="utf-8") as f:
            report = json.load(f)
        assert report["metrics"]["rows_total"] == len(EXPECTED_ROWS)
        assert report["pages"][0]["status"] == "success"

    def test_page_selection(self, make_pdf, tmp_path):
        path = make_pdf([[[(50, "Cover page")]], table_page_lines()], name="two.pdf")
        output_dir = tmp_path / "out"

        code = main([
            "-i", str(path), "-o", str(output_dir),
            "--format", "json", "--pages", "2", "-q",
        ])

        assert code == EXIT_OK
        with open(output_dir / "two.json", encoding="utf-8") as f:
            assert json.load(f) == EXPECTED_ROWS

    def test_fragment_json_input(self, tmp_path):
        layer = tmp_path / "layer.json"
        layer.write_text(json.dumps(
            {"pages": [[f.to_dict() for f in table_page_fragments()]]}
        ))
        output_dir = tmp_path / "out"

        code = main(["-i", str(layer), "-o", str(output_dir), "--format", "json", "-q"])

        assert code == EXIT_OK
        with open(output_dir / "layer.json", encoding="utf-8") as f:
            assert json.load(f) == EXPECTED_ROWS

    def test_preview_printed(self, tmp_path, capsys):
        layer = tmp_path / "layer.json"
        layer.write_text(json.dumps([[f.to_dict() for f in table_page_fragments()]]))

        code = main([
            "-i", str(layer), "-o", str(tmp_path / "out"),
            "--format", "csv", "--preview", "2", "-q",
        ])

        assert code == EXIT_OK
        out = capsys.readouterr().out
        assert "Region name | Units sold | Revenue" in out
        assert "(3 more rows)" in out

    def test_blank_pdf_exits_with_no_tables(self, make_pdf, tmp_path):
        path = make_pdf([[], []], name="scan.pdf")
        output_dir = tmp_path / "out"

        code = main(["-i", str(path), "-o", str(output_dir), "-q"])

        assert code == EXIT_NO_TABLES
        assert not (output_dir / "scan.xlsx").exists()

    def test_missing_input(self, tmp_path):
        code = main(["-i", str(tmp_path / "missing.pdf"), "-o", str(tmp_path / "out"), "-q"])
        assert code == EXIT_FAILURE

    def test_corrupt_pdf(self, tmp_path):
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"%PDF-1.4\nnot really a document")

        code = main(["-i", str(path), "-o", str(tmp_path / "out"), "-q"])
        assert code == EXIT_FAILURE

    def test_invalid_grid_parameter(self, table_pdf, tmp_path):
        code = main([
            "-i", str(table_pdf), "-o", str(tmp_path / "out"),
            "--row-threshold", "0", "-q",
        ])
        assert code == EXIT_FAILURE

    def test_debug_reraises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            main(["-i", str(tmp_path / "missing.pdf"), "-o", str(tmp_path / "out"),
                  "--debug", "-q"])

    def test_debug_env_reraises(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TABLEGRID_DEBUG", "true")

        with pytest.raises(FileNotFoundError):
            main(["-i", str(tmp_path / "missing.pdf"), "-o", str(tmp_path / "out"), "-q"])

    def test_max_pages(self, tmp_path):
        layer = tmp_path / "layer.json"
        layer.write_text(json.dumps([
            [f.to_dict() for f in table_page_fragments()],
            [{"x": 50, "y": 700, "width": 40, "text": "Appendix"}],
        ]))
        output_dir = tmp_path / "out"

        code = main([
            "-i", str(layer), "-o", str(output_dir),
            "--format", "json", "--max-pages", "1", "-q",
        ])

        assert code == EXIT_OK
        with open(output_dir / "layer.json", encoding="utf-8") as f:
            assert json.load(f) == EXPECTED_ROWS

    def test_pages_outside_document(self, tmp_path, caplog):
        layer = tmp_path / "layer.json"
        layer.write_text(json.dumps([[f.to_dict() for f in table_page_fragments()]]))

        with caplog.at_level(logging.ERROR, logger="tablegrid"):
            code = main([
                "-i", str(layer), "-o", str(tmp_path / "out"), "--pages", "3-4", "-q",
            ])

        assert code == EXIT_FAILURE
        assert "outside the document" in caplog.text
        assert "scanned image" not in caplog.text
