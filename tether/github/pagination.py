"""Follow ``Link: rel="next"`` relations to assemble multi-page results."""

from __future__ import annotations

import collections.abc as cabc
import inspect
import typing as typ

from .models import RequestOptions, Result

type DoneCallback = cabc.Callable[[], None]
type PageCallback = cabc.Callable[[Result, DoneCallback], object]

# Wrapper fields GitHub adds next to the item list on search and
# installation listing endpoints.
_PAGE_METADATA_KEYS = frozenset(
    {"total_count", "incomplete_results", "repository_selection", "total_commits"}
)


class _SupportsRequest(typ.Protocol):
    async def request(self, route: RequestOptions) -> Result: ...


def normalize_page(result: Result) -> list[typ.Any]:
    """Return the items carried by one page of a listing response.

    List bodies are returned as-is. Wrapped bodies such as
    ``{"total_count": 2, "items": [...]}`` yield their single list-valued
    field. Anything else is treated as one item.
    """
    data = result.data
    if data is None:
        return []
    if isinstance(data, list):
        return list(data)
    if isinstance(data, dict):
        lists = [
            value
            for key, value in data.items()
            if key not in _PAGE_METADATA_KEYS and isinstance(value, list)
        ]
        if len(lists) == 1:
            return list(lists[0])
    return [data]


def _default_callback(result: Result, done: DoneCallback) -> list[typ.Any]:
    del done
    return normalize_page(result)


def _accumulate(collection: list[typ.Any], page: object) -> None:
    if page is None:
        return
    if isinstance(page, list | tuple):
        collection.extend(page)
        return
    collection.append(page)


async def paginate(
    github: _SupportsRequest,
    response: cabc.Awaitable[Result] | Result,
    callback: PageCallback | None = None,
) -> list[typ.Any]:
    """Collect every page of a listing response.

    Parameters
    ----------
    github
        Client used to fetch follow-up pages; each fetch runs the full hook
        pipeline.
    response
        The first page, or an awaitable resolving to it.
    callback
        Called as ``callback(result, done)`` once per page; may be a coroutine
        function. Its return value is accumulated: lists and tuples are
        concatenated, ``None`` is skipped and other values are appended.
        Calling ``done()`` stops pagination after the current page. Defaults
        to :func:`normalize_page`.

        When an ``error`` hook recovers a page request with a value other than
        a :class:`Result`, that value is accumulated and pagination stops.

    Returns
    -------
    list
        Accumulated values in page order.

    Raises
    ------
    PlatformError
        If fetching any page fails and no ``error`` hook recovers it; nothing
        accumulated so far is returned.

    """
    page_callback = callback or _default_callback
    stopped = False

    def done() -> None:
        nonlocal stopped
        stopped = True

    result = await response if inspect.isawaitable(response) else response
    collection: list[typ.Any] = []
    while True:
        if not isinstance(result, Result):
            # an error hook recovered the request with a substitute value
            _accumulate(collection, result)
            return collection
        page = page_callback(result, done)
        if inspect.isawaitable(page):
            page = await page
        _accumulate(collection, page)

        next_url = result.next_url
        if stopped or next_url is None:
            return collection
        result = await github.request(RequestOptions(method="GET", url=next_url))
