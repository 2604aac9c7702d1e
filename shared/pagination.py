"""
Offset pagination on top of a page-number store.

Document stores page by page NUMBER: "give me block N of size S". The HTTP
APIs page by absolute offset: "give me `limit` records starting at record
`offset`". An offset that is not a multiple of the limit straddles two
store pages, so we:

1. fetch page `offset // limit`
2. if the offset lands inside that page and there is a following page,
   fetch page `offset // limit + 1` as well and append it
3. drop the first `offset % limit` records and keep at most `limit`

At most two fetches happen regardless of how large the offset is. The
price is up to `limit` wasted rows when the window crosses a boundary.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from shared.data_store import Page
from shared.exceptions import ValidationFailure

logger = logging.getLogger("pagination")

T = TypeVar("T")

PageFetcher = Callable[[int, int], Page]


@dataclass
class PageSlice(Generic[T]):
    """A window of records plus the size of the whole collection."""
    items: list[T]
    total: int


def paginate(fetch_page: PageFetcher, limit: int, offset: int) -> PageSlice:
    """
    Return up to `limit` records starting at absolute position `offset`.

    Args:
        fetch_page: Callable taking (page_number, page_size) and returning a Page
        limit: Maximum number of records to return (>= 1)
        offset: Number of records to skip (>= 0)

    Returns:
        PageSlice with the records and the collection's total count

    Raises:
        ValidationFailure: If limit or offset are out of range
    """
    if limit < 1:
        raise ValidationFailure("limit must be greater than or equal to 1")
    if offset < 0:
        raise ValidationFailure("offset must be greater than or equal to 0")

    page_number = offset // limit
    skip_within_page = offset % limit

    page = fetch_page(page_number, limit)
    items = list(page.items)

    if skip_within_page > 0 and page.has_next:
        logger.debug(
            f"Offset {offset} crosses a page boundary, fetching page {page_number + 1}"
        )
        next_page = fetch_page(page_number + 1, limit)
        items.extend(next_page.items)

    return PageSlice(
        items=items[skip_within_page:skip_within_page + limit],
        total=page.total_elements,
    )
