"""
Export module for table reconstruction.

Provides:
- Workbook export (xlsx, using openpyxl)
- Delimited text export (csv)
- Structured data export (json)

Exporters only reshape the matrix; ragged rows are padded where the
target format needs a rectangle.
"""

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config import ExportConfig

logger = logging.getLogger(__name__)

MIME_TYPES = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv",
    "json": "application/json",
}

EXPORT_FORMATS = tuple(MIME_TYPES)


def _rows_of(matrix: Any) -> List[List[str]]:
    """Accept a TableMatrix or a plain list of rows."""
    if hasattr(matrix, "rows"):
        return matrix.rows
    return [list(row) for row in matrix]


def pad_rows(rows: List[List[Any]], fill: Any = "") -> List[List[Any]]:
    """Pad short rows so every row is as wide as the widest one."""
    width = max((len(row) for row in rows), default=0)
    return [list(row) + [fill] * (width - len(row)) for row in rows]


def output_name(source_name: Union[str, Path], fmt: str) -> str:
    """``report.pdf`` -> ``report.xlsx``; falls back to ``data.<fmt>``."""
    stem = Path(str(source_name)).stem if source_name else ""
    return f"{stem or 'data'}.{fmt}"


# ============================================================================
# Workbook Exporter
# ============================================================================

class WorkbookExporter:
    """Export a matrix to an xlsx workbook with a single sheet."""

    extension = "xlsx"

    def __init__(
        self,
        sheet_name: str = "extracted_data",
        pad: bool = True,
        max_column_width: int = 60
    ):
        self.sheet_name = sheet_name
        self.pad = pad
        self.max_column_width = max_column_width

    def build_workbook(self, matrix: Any):
        try:
            import openpyxl
            from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
            from openpyxl.utils import get_column_letter
        except ImportError:
            raise ImportError(
                "openpyxl is required for xlsx export. Install with: pip install openpyxl"
            )

        rows = _rows_of(matrix)
        if self.pad:
            rows = pad_rows(rows, fill=None)

        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = self.sheet_name

        for row_idx, row in enumerate(rows, 1):
            for col_idx, value in enumerate(row, 1):
                if isinstance(value, str):
                    # Control characters are rejected by the xlsx format
                    value = ILLEGAL_CHARACTERS_RE.sub("", value)
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                # Cell text is data, never a formula
                if cell.data_type == "f":
                    cell.data_type = "s"

        # Size columns to their longest value
        widths: Dict[int, int] = {}
        for row in rows:
            for col_idx, value in enumerate(row, 1):
                if value:
                    widths[col_idx] = max(widths.get(col_idx, 0), len(str(value)))
        for col_idx, width in widths.items():
            ws.column_dimensions[get_column_letter(col_idx)].width = min(
                width + 3, self.max_column_width
            )

        return wb

    def to_bytes(self, matrix: Any) -> bytes:
        buffer = io.BytesIO()
        self.build_workbook(matrix).save(buffer)
        return buffer.getvalue()

    def export(self, matrix: Any, output_path: Union[str, Path]) -> Path:
        """
        Export matrix to an xlsx file.

        Args:
            matrix: TableMatrix or list of rows
            output_path: Output file path

        Returns:
            Path to the generated workbook
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        self.build_workbook(matrix).save(output_path)

        logger.info(f"Exported workbook to: {output_path}")
        return output_path


# ============================================================================
# CSV Exporter
# ============================================================================

class CsvExporter:
    """Export a matrix to delimited text."""

    extension = "csv"

    def __init__(self, delimiter: str = ",", pad: bool = True):
        self.delimiter = delimiter
        self.pad = pad

    def to_string(self, matrix: Any) -> str:
        rows = _rows_of(matrix)
        if self.pad:
            rows = pad_rows(rows)

        output = io.StringIO()
        writer = csv.writer(output, delimiter=self.delimiter, lineterminator="\n")
        for row in rows:
            writer.writerow(row)
        return output.getvalue()

    def to_bytes(self, matrix: Any) -> bytes:
        return self.to_string(matrix).encode("utf-8")

    def export(self, matrix: Any, output_path: Union[str, Path]) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8', newline='') as f:
            f.write(self.to_string(matrix))

        logger.info(f"Exported CSV to: {output_path}")
        return output_path


# ============================================================================
# JSON Exporter
# ============================================================================

class JsonExporter:
    """Export the ragged matrix as a JSON array of arrays."""

    extension = "json"

    def __init__(self, indent: int = 2):
        self.indent = indent

    def to_string(self, matrix: Any) -> str:
        return json.dumps(_rows_of(matrix), indent=self.indent, ensure_ascii=False)

    def to_bytes(self, matrix: Any) -> bytes:
        return self.to_string(matrix).encode("utf-8")

    def export(self, matrix: Any, output_path: Union[str, Path]) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(self.to_string(matrix))

        logger.info(f"Exported JSON to: {output_path}")
        return output_path


# ============================================================================
# Multi-Format Exporter
# ============================================================================

class TableExporter:
    """Convenience class for exporting to multiple formats."""

    def __init__(
        self,
        output_dir: Union[str, Path],
        base_name: str = "data",
        config: Optional[ExportConfig] = None
    ):
        self.output_dir = Path(output_dir)
        self.base_name = base_name
        config = config or ExportConfig()

        self.exporters = {
            "xlsx": WorkbookExporter(sheet_name=config.sheet_name, pad=config.pad_rows),
            "csv": CsvExporter(delimiter=config.csv_delimiter, pad=config.pad_rows),
            "json": JsonExporter(indent=config.json_indent),
        }

    def export(
        self,
        matrix: Any,
        formats: Optional[List[str]] = None
    ) -> Dict[str, Path]:
        """
        Export matrix to multiple formats.

        Args:
            matrix: TableMatrix or list of rows
            formats: List of formats ('xlsx', 'csv', 'json', 'all')

        Returns:
            Dictionary mapping format to output path
        """
        if formats is None:
            formats = ["xlsx"]

        if "all" in formats:
            formats = list(EXPORT_FORMATS)

        unknown = [f for f in formats if f not in self.exporters]
        if unknown:
            raise ValueError(f"Unsupported export format(s): {', '.join(unknown)}")

        self.output_dir.mkdir(parents=True, exist_ok=True)

        results = {}
        for fmt in formats:
            path = self.output_dir / f"{self.base_name}.{fmt}"
            results[fmt] = self.exporters[fmt].export(matrix, path)

        return results
