"""
Page selector parsing.

A selector is either ``"all"`` or a comma-separated list of 1-based page
numbers and ``start-end`` ranges, e.g. ``"1,3,5-8"``. The result is always
sorted ascending and free of duplicates.
"""

from __future__ import annotations

import re

from .errors import InvalidRangeError

_SINGLE_PAGE = re.compile(r"-?\d+")


def resolve_pages(selector: str, total_pages: int, page_cap: int) -> list[int]:
    """
    Resolve a page selector into concrete page numbers.

    Pages outside ``1..total_pages`` or above ``page_cap`` are dropped
    silently; only malformed syntax is an error.

    Args:
        selector: Page selector string
        total_pages: Number of pages in the document
        page_cap: Configured maximum page count

    Returns:
        Sorted, duplicate-free list of page numbers (possibly empty)

    Raises:
        InvalidRangeError: If a token is not an integer or ``start-end`` range,
            or a range has start > end
    """
    selector = selector.strip()
    limit = min(total_pages, page_cap)

    if selector.lower() == "all":
        return list(range(1, limit + 1))

    pages: list[int] = []
    seen: set[int] = set()

    def add(page: int) -> None:
        if 0 < page <= limit and page not in seen:
            seen.add(page)
            pages.append(page)

    for token in selector.split(","):
        token = token.strip()

        # A lone negative number is a single (out-of-range) page, not a range
        if _SINGLE_PAGE.fullmatch(token):
            add(int(token))
            continue

        if "-" not in token:
            raise InvalidRangeError(f"Invalid page number: {token!r}")

        bounds = token.split("-")
        if len(bounds) != 2:
            raise InvalidRangeError(f"Invalid page range format: {token}")

        try:
            start = int(bounds[0].strip())
            end = int(bounds[1].strip())
        except ValueError as e:
            raise InvalidRangeError(f"Invalid page range format: {token}") from e

        if start > end:
            raise InvalidRangeError(f"Invalid page range: start > end ({token})")

        for page in range(max(start, 1), min(end, limit) + 1):
            add(page)

    pages.sort()
    return pages
