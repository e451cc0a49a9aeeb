"""
Row clustering: groups a page's fragments into visual rows by y proximity.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from .fragments import TextFragment

logger = logging.getLogger(__name__)


@dataclass
class Row:
    """A visual row of fragments sharing (roughly) one baseline."""
    representative_y: float
    fragments: List[TextFragment] = field(default_factory=list)

    def add(self, fragment: TextFragment):
        # Decaying running average, weighted toward the latest member.
        self.fragments.append(fragment)
        self.representative_y = (self.representative_y + fragment.y) / 2

    def sorted_fragments(self) -> List[TextFragment]:
        """Fragments in ascending x order (stable for equal x)."""
        return sorted(self.fragments, key=lambda f: f.x)

    def __len__(self) -> int:
        return len(self.fragments)


def cluster_rows(
    fragments: Iterable[TextFragment],
    row_threshold: float = 5.0
) -> List[Row]:
    """
    Group fragments into rows, top of the page first.

    Fragments are visited by descending y. Each joins the first existing
    row whose representative y is strictly closer than ``row_threshold``;
    otherwise it starts a new row. A difference exactly equal to the
    threshold does not match.

    Args:
        fragments: One page's fragments, in any order
        row_threshold: Vertical proximity limit in page units

    Returns:
        Rows in creation order, which is top-to-bottom
    """
    ordered = sorted(fragments, key=lambda f: f.y, reverse=True)
    rows: List[Row] = []

    for fragment in ordered:
        for row in rows:
            if abs(row.representative_y - fragment.y) < row_threshold:
                row.add(fragment)
                break
        else:
            rows.append(Row(representative_y=fragment.y, fragments=[fragment]))

    logger.debug(f"Clustered {len(ordered)} fragments into {len(rows)} rows")
    return rows
