"""Feed Pagination — pure sort normalization and page slicing.

Invariants:
    - Page size is fixed at FEED_PAGE_SIZE; callers fetch FEED_PAGE_SIZE + 1 rows
    - has_more is True iff the extra row was returned
    - Unknown sort values fall back to latest
"""

from typing import Sequence, TypeVar

from cresp.core.domain_types import FeedSort

FEED_PAGE_SIZE = 20

T = TypeVar("T")


def normalize_sort(sort: str | None) -> FeedSort:
    try:
        return FeedSort(sort or FeedSort.LATEST.value)
    except ValueError:
        return FeedSort.LATEST


def split_page(rows: Sequence[T], page_size: int = FEED_PAGE_SIZE) -> tuple[list[T], bool]:
    """Trim the look-ahead row. Returns (page, has_more)."""
    has_more = len(rows) > page_size
    return list(rows[:page_size]), has_more
