"""
Table assembler module for table reconstruction.

Provides:
- Result data model (PageResult, TableMatrix, MatrixMetrics)
- Pipeline orchestration (rows -> gap threshold -> cells, page by page)
- Empty-document detection
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..config import GridConfig, JSON_SCHEMA_VERSION
from .cells import assemble_cells
from .errors import NoTabularTextError
from .fragments import FragmentSource, TextFragment
from .gaps import gap_threshold
from .rows import cluster_rows

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class PageResult:
    """Rows reconstructed from a single page."""
    page_number: int
    rows: List[List[str]] = field(default_factory=list)
    threshold: float = 0.0
    fragment_count: int = 0
    status: str = "success"  # success, empty, failed
    error: Optional[str] = None

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "page_number": self.page_number,
            "status": self.status,
            "fragment_count": self.fragment_count,
            "threshold": round(self.threshold, 3),
            "num_rows": self.num_rows,
        }
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class MatrixMetrics:
    """Metrics about table reconstruction."""
    pages_processed: int = 0
    pages_failed: int = 0
    pages_empty: int = 0
    fragments_total: int = 0
    rows_total: int = 0
    max_columns: int = 0
    processing_time_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pages": {
                "processed": self.pages_processed,
                "failed": self.pages_failed,
                "empty": self.pages_empty,
            },
            "fragments_total": self.fragments_total,
            "rows_total": self.rows_total,
            "max_columns": self.max_columns,
            "processing_time_seconds": round(self.processing_time_seconds, 2)
        }


@dataclass
class TableMatrix:
    """All pages' rows in document reading order."""
    source_file: str = ""
    pages: List[PageResult] = field(default_factory=list)
    metrics: Optional[MatrixMetrics] = None
    task_id: str = ""
    created_at: str = ""
    schema_version: str = JSON_SCHEMA_VERSION

    def __post_init__(self):
        if not self.task_id:
            self.task_id = str(uuid.uuid4())
        if not self.created_at:
            self.created_at = datetime.now().isoformat()

    @property
    def rows(self) -> List[List[str]]:
        return [row for page in self.pages for row in page.rows]

    @property
    def num_rows(self) -> int:
        return sum(page.num_rows for page in self.pages)

    @property
    def max_columns(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    def preview(self, limit: int = 50) -> List[List[str]]:
        """First ``limit`` rows, for display."""
        return self.rows[:limit]

    def padded(self, fill: str = "") -> List[List[str]]:
        """Rectangular copy of the rows, short rows padded with ``fill``."""
        width = self.max_columns
        return [row + [fill] * (width - len(row)) for row in self.rows]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self.task_id,
            "schema_version": self.schema_version,
            "source_file": self.source_file,
            "created_at": self.created_at,
            "rows": self.rows,
            "pages": [p.to_dict() for p in self.pages],
            "metrics": self.metrics.to_dict() if self.metrics else {}
        }


# ============================================================================
# Table Assembler
# ============================================================================

class TableAssembler:
    """
    Main pipeline orchestrator.

    Runs row clustering, gap statistics and cell assembly on each page
    of a fragment source, in document order, and concatenates the rows.
    Pages never share rows or statistics.
    """

    def __init__(self, config: Optional[GridConfig] = None):
        self.config = (config or GridConfig()).validate()

    def process_fragments(
        self,
        fragments: Iterable[TextFragment],
        page_number: int = 1
    ) -> PageResult:
        """
        Reconstruct the rows of a single page.

        Args:
            fragments: The page's text fragments
            page_number: Page number (1-indexed)

        Returns:
            PageResult; rows that produced no cells are dropped
        """
        cfg = self.config
        fragments = list(fragments)

        rows = cluster_rows(fragments, cfg.row_threshold)
        threshold = gap_threshold(
            rows,
            noise_floor=cfg.noise_floor,
            multiplier=cfg.gap_multiplier,
            minimum=cfg.min_gap_threshold,
            default_median=cfg.default_median_gap,
        )

        page_rows = []
        for row in rows:
            cells = assemble_cells(row, threshold, cfg.noise_floor)
            if cells:
                page_rows.append(cells)

        return PageResult(
            page_number=page_number,
            rows=page_rows,
            threshold=threshold,
            fragment_count=len(fragments),
            status="success" if page_rows else "empty",
        )

    def process_page(self, source: FragmentSource, index: int) -> PageResult:
        """
        Fetch and reconstruct one page of a source.

        A failure to extract the page is logged and yields an empty
        result with status ``failed``; it never aborts the document.
        """
        page_number = index + 1
        try:
            fragments = source.page_fragments(index)
        except Exception as e:
            logger.warning(f"Page {page_number}: fragment extraction failed: {e}")
            return PageResult(page_number=page_number, status="failed", error=str(e))

        result = self.process_fragments(fragments, page_number=page_number)
        logger.debug(
            f"Page {page_number}: {result.fragment_count} fragments -> "
            f"{result.num_rows} rows (threshold {result.threshold:.2f})"
        )
        return result

    def process_document(
        self,
        source: FragmentSource,
        source_file: str = "",
        pages: Optional[List[int]] = None,
        max_pages: Optional[int] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> TableMatrix:
        """
        Reconstruct the table matrix of a whole document.

        Args:
            source: Fragment source for the document
            source_file: Original source file path (for the JSON envelope)
            pages: Optional 1-indexed page numbers to process
            max_pages: Optional cap on the number of pages processed
            progress_callback: Called with (pages done, pages total) after each page

        Returns:
            TableMatrix with every page's rows in reading order

        Raises:
            NoTabularTextError: If no page produced any row
            ValueError: If ``pages`` selects no page of a non-empty document,
                or ``max_pages`` is below 1
        """
        start_time = time.time()

        if max_pages is not None and max_pages < 1:
            raise ValueError(f"max_pages must be at least 1, got {max_pages}")

        total = source.page_count()
        indices = self._select_pages(total, pages)
        if pages and total and not indices:
            raise ValueError(
                f"Pages {sorted(set(pages))} are outside the document (1-{total})"
            )
        if max_pages is not None:
            indices = indices[:max_pages]

        matrix = TableMatrix(source_file=source_file)

        for done, index in enumerate(indices, 1):
            matrix.pages.append(self.process_page(source, index))
            if progress_callback is not None:
                progress_callback(done, len(indices))

        matrix.metrics = self._calculate_metrics(matrix, time.time() - start_time)

        if matrix.num_rows == 0:
            raise NoTabularTextError(pages_processed=len(indices))

        logger.info(
            f"Extracted {matrix.num_rows} rows from {len(indices)} page(s) "
            f"({matrix.metrics.pages_failed} failed)"
        )
        return matrix

    def _select_pages(self, total: int, pages: Optional[List[int]]) -> List[int]:
        """Translate 1-indexed page numbers to sorted 0-based indices."""
        if not pages:
            return list(range(total))

        selected = []
        for page in sorted(set(pages)):
            if 1 <= page <= total:
                selected.append(page - 1)
            else:
                logger.warning(f"Ignoring page {page}: document has {total} pages")
        return selected

    def _calculate_metrics(
        self,
        matrix: TableMatrix,
        processing_time: float
    ) -> MatrixMetrics:
        metrics = MatrixMetrics(processing_time_seconds=processing_time)
        for page in matrix.pages:
            metrics.pages_processed += 1
            metrics.fragments_total += page.fragment_count
            if page.status == "failed":
                metrics.pages_failed += 1
            elif page.status == "empty":
                metrics.pages_empty += 1
        metrics.rows_total = matrix.num_rows
        metrics.max_columns = matrix.max_columns
        return metrics


def extract_table(
    source: FragmentSource,
    config: Optional[GridConfig] = None,
    **kwargs
) -> TableMatrix:
    """Reconstruct a document's table matrix with no UI state involved."""
    return TableAssembler(config).process_document(source, **kwargs)
