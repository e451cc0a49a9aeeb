#!/usr/bin/env python
"""
Generate sample documents for trying the table reconstruction pipeline.

This script creates:
- A single-page invoice PDF (a sentence above and below a table)
- A two-page PDF whose table continues on the second page
- A fragment JSON file in pdf.js text-item format
- Expected output matrices for each sample

Usage:
    python examples/generate_samples.py
    tablegrid --input examples/sample_docs/sample_invoice.pdf --output ./output --format all
"""

import json
from pathlib import Path

from fpdf import FPDF

# Column x positions in points (A4 is 595 x 842 pt)
COLUMNS = [50, 250, 400, 480]
ROW_HEIGHT = 22
PAGE_HEIGHT = 842

# Prose lines matter: the cell boundary is derived from the page's typical
# word spacing, so a page needs more word gaps than column gaps.
INVOICE_INTRO = "Invoice 2024-117 issued to Northwind Trading Company for office furniture delivered in March"
INVOICE_NOTE = "Payment is due within thirty days of the invoice date by bank transfer"
CONTINUED_INTRO = "Invoice 2024-117 continued from the previous page"

INVOICE_ROWS = [
    ["Item Description", "Unit", "Qty", "Total"],
    ["Standing desk frame", "each", "2", "640.00"],
    ["Oak veneer desk top", "each", "2", "310.50"],
    ["Cable management tray", "pack of 4", "1", "24.99"],
    ["Monitor arm dual mount", "each", "3", "267.00"],
    ["Delivery and assembly", "flat", "1", "85.00"],
]

CONTINUED_ROWS = [
    ["Ergonomic office chair", "each", "4", "1196.00"],
    ["Anti fatigue floor mat", "each", "2", "79.98"],
    ["Grand total", "", "", "2603.47"],
]


def page_lines(intro, rows, note=None):
    """Every line of a sample page as a list of (x, text) cells."""
    lines = [[(COLUMNS[0], intro)]]
    lines += [[(x, value) for x, value in zip(COLUMNS, row) if value] for row in rows]
    if note:
        lines.append([(COLUMNS[0], note)])
    return lines


def _add_page(pdf: FPDF, lines, top: float = 80):
    pdf.add_page()
    pdf.set_font("Helvetica", size=11)
    for line_idx, cells in enumerate(lines):
        baseline = top + line_idx * ROW_HEIGHT
        for x, value in cells:
            pdf.text(x, baseline, value)


def create_sample_invoice(path: Path):
    """Create a one-page table PDF."""
    pdf = FPDF(unit="pt", format="A4")
    _add_page(pdf, page_lines(INVOICE_INTRO, INVOICE_ROWS, INVOICE_NOTE))
    pdf.output(str(path))


def create_sample_multipage(path: Path):
    """Create a two-page PDF; the table is split at the page break."""
    pdf = FPDF(unit="pt", format="A4")
    _add_page(pdf, page_lines(INVOICE_INTRO, INVOICE_ROWS))
    _add_page(pdf, page_lines(CONTINUED_INTRO, CONTINUED_ROWS, INVOICE_NOTE))
    pdf.output(str(path))


def create_sample_fragments() -> dict:
    """The invoice page as pdf.js text items, one item per word."""
    page = []
    lines = page_lines(INVOICE_INTRO, INVOICE_ROWS, INVOICE_NOTE)
    for line_idx, cells in enumerate(lines):
        y = PAGE_HEIGHT - 80 - line_idx * ROW_HEIGHT
        for x, value in cells:
            offset = 0.0
            for word in value.split():
                width = 5.5 * len(word)
                page.append({
                    "str": word,
                    "transform": [11, 0, 0, 11, x + offset, y],
                    "width": width,
                })
                offset += width + 3.0
    return {"pages": [page]}


def expected_rows(lines):
    return [[value for _, value in cells] for cells in lines]


def main():
    samples_dir = Path(__file__).parent / "sample_docs"
    expected_dir = Path(__file__).parent / "expected_outputs"
    samples_dir.mkdir(exist_ok=True)
    expected_dir.mkdir(exist_ok=True)

    invoice_path = samples_dir / "sample_invoice.pdf"
    create_sample_invoice(invoice_path)
    print(f"Created: {invoice_path}")

    multipage_path = samples_dir / "sample_multipage.pdf"
    create_sample_multipage(multipage_path)
    print(f"Created: {multipage_path}")

    fragments_path = samples_dir / "sample_fragments.json"
    with open(fragments_path, 'w') as f:
        json.dump(create_sample_fragments(), f, indent=2)
    print(f"Created: {fragments_path}")

    invoice = expected_rows(page_lines(INVOICE_INTRO, INVOICE_ROWS, INVOICE_NOTE))
    outputs = {
        "sample_invoice": invoice,
        "sample_multipage": (
            expected_rows(page_lines(INVOICE_INTRO, INVOICE_ROWS))
            + expected_rows(page_lines(CONTINUED_INTRO, CONTINUED_ROWS, INVOICE_NOTE))
        ),
        "sample_fragments": invoice,
    }
    for name, rows in outputs.items():
        expected_path = expected_dir / f"{name}.json"
        with open(expected_path, 'w') as f:
            json.dump(rows, f, indent=2)
        print(f"Created: {expected_path}")

    print("\nSample generation complete!")


if __name__ == "__main__":
    main()
