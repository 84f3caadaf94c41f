"""Rate-limited page fetching with a bounded retry loop."""

from __future__ import annotations

import logging

import feedparser
import requests

from arxiv_feed import parse_feed
from errors import HTTPStatusError, RetriesExhaustedError, UnexpectedEmptyPageError
from rate_limiter import RateLimiter

LOGGER = logging.getLogger(__name__)

# Failures worth re-issuing the same URL for. Parse errors are not among them.
_RETRYABLE_ERRORS = (HTTPStatusError, UnexpectedEmptyPageError, requests.RequestException)


class FeedFetcher:
    """Fetches and decodes feed pages through a shared ``RateLimiter``."""

    def __init__(
        self,
        session: requests.Session,
        limiter: RateLimiter,
        num_retries: int = 3,
        timeout_seconds: float = 10.0,
    ) -> None:
        if num_retries < 0:
            raise ValueError(f"num_retries must be non-negative, got {num_retries}")
        self.session = session
        self.limiter = limiter
        self.num_retries = num_retries
        self.timeout_seconds = timeout_seconds

    def fetch(self, url: str, first_page: bool = False) -> feedparser.FeedParserDict:
        """Return the decoded feed at ``url``.

        The request is attempted once and then retried up to ``num_retries``
        times on a non-200 status, a transport error, or an empty non-first
        page.

        Raises:
            RetriesExhaustedError: when every attempt failed. The last failure
                is chained as ``__cause__``.
            FeedParseError: when a page body is not well-formed. Not retried.
        """
        last_error: Exception | None = None

        for attempt in range(self.num_retries + 1):
            try:
                return self._try_fetch(url, first_page, attempt)
            except _RETRYABLE_ERRORS as exc:
                last_error = exc
                LOGGER.debug("Got error (try %s): %s", attempt, exc)

        attempts = self.num_retries + 1
        LOGGER.warning("Giving up on %s after %s attempts: %s", url, attempts, last_error)
        raise RetriesExhaustedError(url, attempts, last_error) from last_error

    def _try_fetch(self, url: str, first_page: bool, attempt: int) -> feedparser.FeedParserDict:
        with self.limiter.slot():
            LOGGER.info("Requesting page (first=%s, try=%s): %s", first_page, attempt, url)
            response = self.session.get(url, timeout=self.timeout_seconds)

        if response.status_code != 200:
            raise HTTPStatusError(url, attempt, response.status_code)

        feed = parse_feed(response.content)
        if not feed.entries and not first_page:
            raise UnexpectedEmptyPageError(url, attempt)
        return feed
