"""
Tests for row clustering.
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from tablegrid.utils.rows import Row, cluster_rows
from conftest import frag


class TestClusterRows:
    """Tests for cluster_rows."""

    def test_close_y_values_form_one_row(self):
        """Fragments at y 100, 101, 102 share a row."""
        fragments = [frag("a", 0, 100), frag("b", 50, 101), frag("c", 100, 102)]
        rows = cluster_rows(fragments, row_threshold=5)

        assert len(rows) == 1
        assert len(rows[0]) == 3

    def test_distant_y_values_form_two_rows(self):
        """Fragments at y 100 and 200 form separate rows."""
        rows = cluster_rows([frag("a", 0, 100), frag("b", 0, 200)], row_threshold=5)
        assert len(rows) == 2

    def test_rows_ordered_top_to_bottom(self):
        """Larger y is higher on the page and comes first."""
        fragments = [frag("bottom", 0, 100), frag("top", 0, 700), frag("middle", 0, 400)]
        rows = cluster_rows(fragments)

        assert [r.fragments[0].text for r in rows] == ["top", "middle", "bottom"]

    def test_empty_input(self):
        """No fragments yields no rows, not an error."""
        assert cluster_rows([]) == []

    def test_threshold_is_strict(self):
        """A difference exactly equal to the threshold starts a new row."""
        rows = cluster_rows([frag("a", 0, 105), frag("b", 0, 100)], row_threshold=5)
        assert len(rows) == 2

        rows = cluster_rows([frag("a", 0, 104.9), frag("b", 0, 100)], row_threshold=5)
        assert len(rows) == 1

    def test_representative_y_is_running_average(self):
        """Each member halves the distance between the row y and its own y."""
        rows = cluster_rows([frag("a", 0, 104), frag("b", 0, 102), frag("c", 0, 100)])

        assert len(rows) == 1
        # 104 -> (104 + 102) / 2 = 103 -> (103 + 100) / 2 = 101.5
        assert rows[0].representative_y == pytest.approx(101.5)

    def test_running_average_lets_a_row_drift(self):
        """A slowly descending run keeps joining the same row."""
        fragments = [frag(str(i), i * 10, 100 - 2 * i) for i in range(5)]
        rows = cluster_rows(fragments, row_threshold=5)

        assert len(rows) == 1
        assert len(rows[0]) == 5

    def test_members_keep_visit_order(self):
        """Members are stored in descending-y visit order."""
        rows = cluster_rows([frag("a", 0, 110), frag("b", 0, 104), frag("c", 0, 106.5)])

        # c (106.5) is visited before b (104): joins row 110 and moves it to 108.25
        assert len(rows) == 1
        assert [f.text for f in rows[0].fragments] == ["a", "c", "b"]

    def test_unordered_input(self):
        """Input order does not matter."""
        fragments = [frag("r2", 10, 50), frag("r1", 10, 80), frag("r2b", 90, 51), frag("r1b", 90, 79)]
        rows = cluster_rows(fragments)

        assert [sorted(f.text for f in r.fragments) for r in rows] == [["r1", "r1b"], ["r2", "r2b"]]


class TestRow:
    """Tests for the Row data class."""

    def test_sorted_fragments_by_x(self):
        row = Row(representative_y=100, fragments=[frag("c", 200), frag("a", 0), frag("b", 100)])
        assert [f.text for f in row.sorted_fragments()] == ["a", "b", "c"]

    def test_add_updates_representative_y(self):
        row = Row(representative_y=100, fragments=[frag("a", 0, 100)])
        row.add(frag("b", 10, 96))

        assert row.representative_y == pytest.approx(98)
        assert len(row) == 2
