"""
Page-wide gap statistics used to decide where one cell ends and the next begins.
"""

import logging
from typing import Iterable, List

import numpy as np

from .rows import Row

logger = logging.getLogger(__name__)


def collect_gaps(rows: Iterable[Row], noise_floor: float = 2.0) -> np.ndarray:
    """
    Horizontal gaps between x-adjacent fragments of every row.

    Only gaps strictly larger than ``noise_floor`` are kept, so kerning
    between glyph runs of one word does not count.
    """
    gaps: List[float] = []
    for row in rows:
        fragments = row.sorted_fragments()
        for current, following in zip(fragments, fragments[1:]):
            gap = following.x - current.right
            if gap > noise_floor:
                gaps.append(gap)
    return np.asarray(gaps, dtype=float)


def median_gap(gaps: np.ndarray, default: float = 5.0) -> float:
    """Upper median (element ``n // 2`` of the sorted gaps), or ``default``."""
    if gaps.size == 0:
        return default
    return float(np.sort(gaps)[gaps.size // 2])


def gap_threshold(
    rows: Iterable[Row],
    noise_floor: float = 2.0,
    multiplier: float = 3.0,
    minimum: float = 20.0,
    default_median: float = 5.0
) -> float:
    """
    Adaptive cell boundary threshold for one page.

    Gaps are pooled over the whole page; the threshold is
    ``max(median * multiplier, minimum)``.

    Args:
        rows: The page's rows
        noise_floor: Gaps at or below this are ignored
        multiplier: Factor applied to the median gap
        minimum: Absolute floor for the threshold
        default_median: Median used when the page has no retained gaps

    Returns:
        Threshold in page units
    """
    gaps = collect_gaps(rows, noise_floor)
    median = median_gap(gaps, default_median)
    threshold = max(median * multiplier, minimum)
    logger.debug(
        f"Gap statistics: {gaps.size} gaps, median={median:.2f}, threshold={threshold:.2f}"
    )
    return threshold
