"""
Shared fixtures: synthetic PDFs and fragment builders.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tablegrid.utils.fragments import TextFragment

COLUMNS = [50, 250, 400]
ROW_HEIGHT = 24

INTRO = "Quarterly results for the northern region sales team are listed below"
NOTE = "Figures are unaudited and may change after the annual review"
TABLE = [
    ["Region name", "Units sold", "Revenue"],
    ["North east coast", "1200", "15000.00"],
    ["North west hills", "950", "11875.50"],
]
EXPECTED_ROWS = [[INTRO]] + TABLE + [[NOTE]]


def frag(text, x, y=100.0, width=None):
    """Fragment with a width proportional to its text by default."""
    if width is None:
        width = 6.0 * len(text)
    return TextFragment(x=float(x), y=float(y), width=float(width), text=text)


def words(text, x, y, char_width=6.0, space=3.0):
    """Split text into word fragments laid out left to right."""
    fragments = []
    for word in text.split():
        width = char_width * len(word)
        fragments.append(TextFragment(x=float(x), y=float(y), width=width, text=word))
        x += width + space
    return fragments


def table_page_lines():
    """The sample page as lines of (x, text) cells, top to bottom."""
    lines = [[(COLUMNS[0], INTRO)]]
    lines += [list(zip(COLUMNS, row)) for row in TABLE]
    lines.append([(COLUMNS[0], NOTE)])
    return lines


def table_page_fragments(top_y=700.0):
    """The sample page as word fragments (bottom-left origin)."""
    fragments = []
    for line_idx, cells in enumerate(table_page_lines()):
        y = top_y - line_idx * ROW_HEIGHT
        for x, value in cells:
            fragments.extend(words(value, x, y))
    return fragments


@pytest.fixture
def make_pdf(tmp_path):
    """Build a PDF from pages of lines, each line a list of (x, text) cells."""
    fpdf = pytest.importorskip("fpdf")

    def _make(pages, name="sample.pdf", top=80):
        pdf = fpdf.FPDF(unit="pt", format="A4")
        for lines in pages:
            pdf.add_page()
            pdf.set_font("Helvetica", size=11)
            for line_idx, cells in enumerate(lines):
                for x, value in cells:
                    pdf.text(x, top + line_idx * ROW_HEIGHT, value)
        path = tmp_path / name
        pdf.output(str(path))
        return path

    return _make


@pytest.fixture
def table_pdf(make_pdf):
    """A one-page PDF with a sentence, a three-column table and a note."""
    return make_pdf([table_page_lines()], name="table.pdf")
