"""
Table Reconstruction Pipeline
=============================

Rebuilds row/cell tables from the positioned text layer of a document
and exports them as spreadsheets.

Main components:
- Fragment sources (PDF text layer via pdfminer.six, JSON, in-memory)
- Row clustering by vertical proximity
- Page-wide adaptive gap threshold
- Cell assembly
- Multi-format export (xlsx, csv, json)
"""

__version__ = "1.0.0"
__author__ = "Table Reconstruction Team"

from .utils.assembler import extract_table, TableAssembler, TableMatrix
from .utils.errors import NoTabularTextError
