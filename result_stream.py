"""Lazy, forward-only stream of results across feed pages."""

from __future__ import annotations

import logging
import threading
from enum import Enum

from arxiv_feed import parse_total_results, result_from_entry
from arxiv_query import ARXIV_QUERY_URL, format_url
from feed_fetcher import FeedFetcher
from models import FeedPage, Result, Search

LOGGER = logging.getLogger(__name__)


class StreamState(Enum):
    HAS_CURRENT_PAGE = "has_current_page"
    PAGE_EXHAUSTED = "page_exhausted"
    EXHAUSTED = "exhausted"


class ResultStream:
    """Iterate over every result of one search, fetching pages on demand.

    The first page is fetched on construction. Later pages are fetched only
    by ``next()`` when the cursor reaches the end of the current page and the
    server still has results; ``has_next()`` never touches the network.

    The stream yields at most ``min(server total - offset, search.max_results)``
    results.
    """

    def __init__(
        self,
        fetcher: FeedFetcher,
        search: Search,
        offset: int = 0,
        page_size: int = 100,
        base_url: str = ARXIV_QUERY_URL,
    ) -> None:
        if offset < 0:
            raise ValueError(f"offset must be non-negative, got {offset}")
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")

        self._fetcher = fetcher
        self._search = search
        self._start = offset
        self._page_size = page_size
        self._base_url = base_url
        self._lock = threading.Lock()

        self._page = FeedPage(start=offset)
        self._index = 0
        self._offset = offset
        self._yielded = 0
        self._limit = 0 if search.max_results is None else search.max_results

        if self._next_page_size() > 0:
            self._load_page(first_page=True)
        else:
            LOGGER.info("Search cap already satisfied; no request made")

    @property
    def state(self) -> StreamState:
        if self._yielded >= self._limit:
            return StreamState.EXHAUSTED
        if self._index < len(self._page.entries):
            return StreamState.HAS_CURRENT_PAGE
        if self._page.total_results is not None and self._offset < self._page.total_results:
            return StreamState.PAGE_EXHAUSTED
        return StreamState.EXHAUSTED

    @property
    def total_results(self) -> int | None:
        """Total reported by the server on the first page, if one was fetched."""
        return self._page.total_results

    @property
    def page_start(self) -> int:
        """Result offset the current page was requested at."""
        return self._page.start

    @property
    def yielded(self) -> int:
        return self._yielded

    def has_next(self) -> bool:
        with self._lock:
            return self.state is not StreamState.EXHAUSTED

    def next_result(self) -> Result:
        """Return the next result; raises ``StopIteration`` once exhausted."""
        return next(self)

    def __iter__(self) -> ResultStream:
        return self

    def __next__(self) -> Result:
        with self._lock:
            state = self.state
            if state is StreamState.EXHAUSTED:
                raise StopIteration
            if state is StreamState.PAGE_EXHAUSTED:
                self._load_page(first_page=False)

            entry = self._page.entries[self._index]
            # A malformed entry is consumed so the caller can move past it.
            self._index += 1
            result = result_from_entry(entry)
            self._yielded += 1
            return result

    def _next_page_size(self) -> int:
        if self._search.max_results is None:
            return self._page_size
        return min(self._page_size, self._search.max_results - self._yielded)

    def _load_page(self, first_page: bool) -> None:
        """Fetch the page at the running offset and make it current.

        Stream state is only replaced after the fetch succeeded, so a failed or
        interrupted fetch leaves the previous state in place.
        """
        url = format_url(self._search, self._offset, self._next_page_size(), self._base_url)
        feed = self._fetcher.fetch(url, first_page=first_page)
        entries = list(feed.entries)

        if first_page:
            server_total = parse_total_results(feed)
            available = max(server_total - self._start, 0) if entries else 0
            cap = self._search.max_results
            limit = available if cap is None else min(available, cap)
            LOGGER.info(
                "Got first page: %s entries of %s total results (max: %s)",
                len(entries),
                server_total,
                "unlimited" if cap is None else cap,
            )
        else:
            server_total = self._page.total_results
            limit = self._limit

        self._page = FeedPage(start=self._offset, entries=entries, total_results=server_total)
        if not first_page:
            LOGGER.info("Got page at offset %s: %s entries", self._page.start, len(self._page.entries))
        self._index = 0
        self._offset += len(entries)
        self._limit = limit
