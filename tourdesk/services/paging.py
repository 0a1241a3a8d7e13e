"""Filtering and pagination of an in-memory collection.

Everything here is a pure projection of (collection, query, page window):
no state is kept between calls, so the visible page is always consistent
with the collection it was computed from.

Matching is a case-insensitive substring test across a screen-defined set
of fields. A row matches if *any* configured field contains the query; an
empty query matches everything.
"""

from dataclasses import dataclass
from math import ceil
from typing import Generic, Sequence, TypeVar

from tourdesk.domain.models import field_text

E = TypeVar("E")

PAGE_SIZE_OPTIONS = (5, 10, 25)


@dataclass(frozen=True)
class PageResult(Generic[E]):
    """One page of filtered rows.

    Attributes:
        rows: Entities on the requested page
        total_filtered: Number of entities matching the query across all pages
        page_index: Page that was actually rendered (after clamping)
        page_size: Rows per page
    """

    rows: list[E]
    total_filtered: int
    page_index: int
    page_size: int

    @property
    def first_row_number(self) -> int:
        """1-based number of the first row shown (0 when empty)."""
        if not self.rows:
            return 0
        return self.page_index * self.page_size + 1

    @property
    def last_row_number(self) -> int:
        """1-based number of the last row shown (0 when empty)."""
        if not self.rows:
            return 0
        return self.page_index * self.page_size + len(self.rows)

    @property
    def page_count(self) -> int:
        return page_count(self.total_filtered, self.page_size)


def matches(entity: object, query: str, match_fields: Sequence[str]) -> bool:
    """Check whether any configured field contains the query.

    Args:
        entity: Row to test
        query: Free-text query (compared case-insensitively)
        match_fields: Field names to search

    Returns:
        True if the query is empty or found in at least one field
    """
    needle = query.casefold()
    if not needle:
        return True
    return any(needle in field_text(entity, name).casefold() for name in match_fields)


def filter_rows(collection: Sequence[E], query: str, match_fields: Sequence[str]) -> list[E]:
    """Filter a collection, preserving its order."""
    return [entity for entity in collection if matches(entity, query, match_fields)]


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` rows (at least 1)."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return max(1, ceil(total / page_size))


def clamp_page_index(page_index: int, total_filtered: int, page_size: int) -> int:
    """Clamp a page index into the valid range for the filtered count.

    Args:
        page_index: Requested page (may be stale after rows were removed)
        total_filtered: Current number of filtered rows
        page_size: Rows per page

    Returns:
        ``min(max(page_index, 0), last_page)``, so the view never sits on an
        empty page beyond the end
    """
    last_page = page_count(total_filtered, page_size) - 1
    return min(max(page_index, 0), last_page)


def visible_page(
    collection: Sequence[E],
    query: str,
    page_index: int,
    page_size: int,
    match_fields: Sequence[str],
) -> PageResult[E]:
    """Project a collection onto one page of filtered rows.

    Args:
        collection: Full in-memory collection
        query: Free-text filter
        page_index: Requested page (clamped before slicing)
        page_size: Rows per page
        match_fields: Field names the query is matched against

    Returns:
        PageResult with the visible rows and the total filtered count

    Example:
        >>> result = visible_page(messages, "jo", 0, 10, ("name", "email"))
        >>> [m.name for m in result.rows]
        ['John', 'Joanna']
    """
    filtered = filter_rows(collection, query, match_fields)
    index = clamp_page_index(page_index, len(filtered), page_size)
    start = index * page_size
    return PageResult(
        rows=filtered[start:start + page_size],
        total_filtered=len(filtered),
        page_index=index,
        page_size=page_size,
    )
