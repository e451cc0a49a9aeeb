"""
Cell assembly: merges a row's fragments into cell strings.
"""

from typing import List, Optional

from .rows import Row


def assemble_cells(
    row: Row,
    threshold: float,
    noise_floor: float = 2.0
) -> List[str]:
    """
    Walk a row left to right and split it into cells.

    A gap wider than ``threshold`` starts a new cell. Within a cell,
    fragments separated by at least ``noise_floor`` are joined with a
    space and closer ones are concatenated (one word split into glyph
    runs). Blank fragments are skipped and do not move the right edge.

    Args:
        row: The row to split
        threshold: The page's cell boundary gap
        noise_floor: Minimum gap that counts as a word boundary

    Returns:
        Cell strings in ascending x order; empty if the row has no text
    """
    cells: List[str] = []
    current = ""
    last_x_right: Optional[float] = None

    for fragment in row.sorted_fragments():
        text = fragment.text.strip()
        if not text:
            continue

        if last_x_right is not None and fragment.x - last_x_right > threshold:
            cells.append(current.strip())
            current = text
        elif current and fragment.x - last_x_right >= noise_floor:
            current += " " + text
        else:
            current += text

        last_x_right = fragment.right

    if current.strip():
        cells.append(current.strip())

    return cells
