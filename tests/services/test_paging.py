"""Tests for filtering and pagination."""

import pytest

from tourdesk.domain.models import Tourist
from tourdesk.services.paging import (
    clamp_page_index,
    filter_rows,
    matches,
    page_count,
    visible_page,
)

FIELDS = ("name", "email", "phone_number")


def _tourists(count: int) -> list[Tourist]:
    return [Tourist(id=i, name=f"Tourist {i}", email=f"t{i}@example.com") for i in range(1, count + 1)]


class TestMatching:
    """Tests for query matching."""

    def test_case_insensitive_substring(self):
        rows = [
            Tourist(id=1, name="John", email="a@x.io"),
            Tourist(id=2, name="Anna", email="b@x.io"),
            Tourist(id=3, name="Joanna", email="c@x.io"),
        ]
        result = visible_page(rows, "jo", 0, 10, FIELDS)
        assert [t.name for t in result.rows] == ["John", "Joanna"]
        assert result.total_filtered == 2

    def test_uppercase_query(self):
        assert matches(Tourist(id=1, name="john", email="a@x.io"), "JOHN", FIELDS)

    def test_any_field_matches(self):
        tourist = Tourist(id=1, name="Maya", email="maya@example.com", phone_number="555-0101")
        assert matches(tourist, "0101", FIELDS)
        assert matches(tourist, "EXAMPLE", FIELDS)
        assert not matches(tourist, "zzz", FIELDS)

    def test_missing_field_never_matches(self):
        tourist = Tourist(id=1, name="Maya", email="m@x.io", phone_number=None)
        assert not matches(tourist, "none", FIELDS)

    def test_empty_query_matches_everything(self):
        rows = _tourists(4)
        assert filter_rows(rows, "", FIELDS) == rows

    def test_whitespace_is_part_of_query(self):
        rows = [
            Tourist(id=1, name="John", email="a@x.io"),
            Tourist(id=2, name="Anna Lee", email="b@x.io"),
            Tourist(id=3, name="John Smith", email="c@x.io"),
        ]
        assert [t.name for t in filter_rows(rows, " ", FIELDS)] == ["Anna Lee", "John Smith"]
        assert [t.name for t in filter_rows(rows, "John ", FIELDS)] == ["John Smith"]

    def test_filter_preserves_order(self):
        rows = list(reversed(_tourists(5)))
        assert [t.id for t in filter_rows(rows, "tourist", FIELDS)] == [5, 4, 3, 2, 1]

    def test_filter_is_exact_subset(self):
        """Every returned row matches and every matching row is returned."""
        rows = _tourists(30)
        query = "1"
        result = filter_rows(rows, query, FIELDS)
        expected = [t for t in rows if any(query in str(getattr(t, f) or "").lower() for f in FIELDS)]
        assert result == expected


class TestPaging:
    """Tests for page window arithmetic."""

    def test_page_count(self):
        assert page_count(0, 10) == 1
        assert page_count(10, 10) == 1
        assert page_count(11, 10) == 2

    def test_page_count_rejects_zero_size(self):
        with pytest.raises(ValueError):
            page_count(5, 0)

    def test_clamp_page_index(self):
        assert clamp_page_index(5, 11, 5) == 2
        assert clamp_page_index(-1, 11, 5) == 0
        assert clamp_page_index(1, 0, 5) == 0

    def test_last_partial_page(self):
        result = visible_page(_tourists(12), "", 2, 5, FIELDS)
        assert [t.id for t in result.rows] == [11, 12]
        assert result.first_row_number == 11
        assert result.last_row_number == 12
        assert result.page_count == 3

    def test_stranded_page_is_clamped(self):
        """A page index past the end shows the last page instead of nothing."""
        result = visible_page(_tourists(6), "", 4, 5, FIELDS)
        assert result.page_index == 1
        assert [t.id for t in result.rows] == [6]

    def test_page_sizes_never_exceed_window(self):
        rows = _tourists(23)
        for size in (5, 10, 25):
            for index in range(page_count(len(rows), size)):
                assert len(visible_page(rows, "", index, size, FIELDS).rows) <= size

    def test_empty_result(self):
        result = visible_page(_tourists(3), "nobody", 0, 10, FIELDS)
        assert result.rows == []
        assert result.first_row_number == 0
        assert result.last_row_number == 0
