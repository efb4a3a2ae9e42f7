"""Offset pagination over single-page Jira endpoints.

Turns a page-fetch coroutine into a lazy async stream of items. Exactly one
page is requested per pull; the next page is never requested before the
current page's items have been yielded.
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from .models import Page

logger = logging.getLogger("jiralite.pagination")

__all__ = ["PageFetcher", "paginate"]

PageFetcher = Callable[..., Awaitable[dict[str, Any]]]


async def paginate(
    fetch_page: PageFetcher,
    *args: Any,
    key: str,
    page_size: int,
) -> AsyncIterator[Any]:
    """Yield every item across all pages of an offset-paginated endpoint.

    ``fetch_page`` is called as
    ``fetch_page(*args, Page(starts_at=p * page_size, max_results=page_size))``
    for p = 0, 1, 2, ... and must return a dict holding ``total`` and a list
    under ``key``. Iteration stops once ``p * page_size`` reaches ``total``.

    A None page, a page missing ``total`` (counted as 0) and a page
    missing ``key`` (no items) all end the stream, so an endpoint's
    failure sentinel stops iteration instead of raising. Exceptions raised
    by ``fetch_page`` propagate to the consumer.

    The generator is single-use: build a new one to iterate again.

    Args:
        fetch_page: Coroutine function returning one page
        *args: Positional arguments forwarded to every call
        key: Name of the item list in each page
        page_size: Offset step between consecutive calls

    Raises:
        ValueError: If page_size is not a positive integer

    Example:
        >>> async for issue in paginate(client.search_issues_page, "project = X",
        ...                             SearchIssuesConfig(), key="issues", page_size=100):
        ...     print(issue["key"])
    """
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
        raise ValueError(f"page_size must be a positive integer, got {page_size!r}")

    page = 0
    crawling = True
    while crawling:
        cursor = Page(starts_at=page * page_size, max_results=page_size)
        response = await fetch_page(*args, cursor) or {}
        page += 1
        total = response.get("total") or 0
        items = response.get(key) or []
        crawling = total > page * page_size

        logger.debug(
            "jira_page_fetched",
            extra={
                "page_key": key,
                "page_number": page,
                "page_items": len(items),
                "total": total,
                "has_more": crawling,
            },
        )

        for item in items:
            yield item
