"""Pagination arithmetic for sitemap documents.

Every row of a resource expands into one `<url>` per route, so the number of
rows that fit on a page is the item limit divided by the route fan-out.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PageWindow:
    """Row window (offset + limit) read for one sitemap page."""

    offset: int
    limit: int


def resources_per_page(page_item_limit: int, route_count: int) -> int:
    """Return how many rows fit on one page.

    Args:
        page_item_limit: Maximum `<url>` entries per page (positive).
        route_count: Routes emitted per row. Zero routes yields zero rows.

    Raises:
        ValueError: When the limit is not positive or route_count is negative.
    """

    if page_item_limit <= 0:
        raise ValueError(f"page_item_limit must be positive, got {page_item_limit}")
    if route_count < 0:
        raise ValueError(f"route_count must be non-negative, got {route_count}")
    if route_count == 0:
        return 0
    return page_item_limit // route_count


def page_count(total_rows: int, per_page: int) -> int:
    """Return the number of pages needed to cover `total_rows`.

    The count is rounded up so trailing rows always get a page.

    Raises:
        ValueError: When total_rows is negative, or rows exist but no row fits
            on a page.
    """

    if total_rows < 0:
        raise ValueError(f"total_rows must be non-negative, got {total_rows}")
    if total_rows == 0:
        return 0
    if per_page <= 0:
        raise ValueError("page_item_limit is smaller than the number of routes per row")
    return math.ceil(total_rows / per_page)


def page_window(page: int, per_page: int) -> PageWindow:
    """Return the row window for a zero-based page index.

    Raises:
        ValueError: When the page index is negative.
    """

    if page < 0:
        raise ValueError(f"page must be non-negative, got {page}")
    return PageWindow(offset=page * per_page, limit=per_page)


def plan_pages(
    totals: Mapping[str, int], route_counts: Mapping[str, int], *, page_item_limit: int
) -> dict[str, int]:
    """Return page counts per resource.

    Resources without routes contribute zero pages regardless of their totals.
    """

    pages: dict[str, int] = {}
    for resource, routes in route_counts.items():
        if routes == 0:
            pages[resource] = 0
            continue
        per_page = resources_per_page(page_item_limit, routes)
        pages[resource] = page_count(totals.get(resource, 0), per_page)
    return pages
