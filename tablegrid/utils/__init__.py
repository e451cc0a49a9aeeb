"""
Utility modules for the table reconstruction pipeline.
"""

from .errors import TableGridError, NoTabularTextError, FragmentFormatError
from .fragments import (
    TextFragment, FragmentSource, MemoryFragmentSource,
    JsonFragmentSource, PdfFragmentSource,
)
from .rows import Row, cluster_rows
from .gaps import gap_threshold
from .cells import assemble_cells
from .assembler import TableAssembler, TableMatrix, PageResult, MatrixMetrics, extract_table
from .export import WorkbookExporter, CsvExporter, JsonExporter, TableExporter
from .io import open_source, save_json, load_json, ensure_dir

__all__ = [
    # Errors
    "TableGridError", "NoTabularTextError", "FragmentFormatError",
    # Fragments
    "TextFragment", "FragmentSource", "MemoryFragmentSource",
    "JsonFragmentSource", "PdfFragmentSource",
    # Reconstruction
    "Row", "cluster_rows", "gap_threshold", "assemble_cells",
    # Assembly
    "TableAssembler", "TableMatrix", "PageResult", "MatrixMetrics", "extract_table",
    # Export
    "WorkbookExporter", "CsvExporter", "JsonExporter", "TableExporter",
    # IO
    "open_source", "save_json", "load_json", "ensure_dir",
]
