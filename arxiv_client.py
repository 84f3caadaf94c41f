"""Client facade for searching arXiv and downloading result PDFs."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import requests

from arxiv_query import ARXIV_QUERY_URL
from config import (
    DEFAULT_DELAY_SECONDS,
    DEFAULT_NUM_RETRIES,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    ClientSettings,
)
from downloader import ArtifactDownloader
from feed_fetcher import FeedFetcher
from models import Result, Search
from rate_limiter import RateLimiter
from result_stream import ResultStream

LOGGER = logging.getLogger(__name__)


class Client:
    """Paginated, rate-limited access to the arXiv query API.

    One client owns one HTTP session and one rate limiter; result streams
    and downloads created from it share both, so the aggregate request rate
    to arXiv stays bounded by ``delay_seconds``.
    """

    def __init__(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        num_retries: int = DEFAULT_NUM_RETRIES,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        session: requests.Session | None = None,
        base_url: str = ARXIV_QUERY_URL,
    ) -> None:
        # Validates the option values.
        self.settings = ClientSettings(
            page_size=page_size,
            delay_seconds=delay_seconds,
            num_retries=num_retries,
            timeout_seconds=timeout_seconds,
            user_agent=user_agent,
        )
        self.base_url = base_url
        # A caller-supplied session is used as is, headers included.
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": user_agent})
        self.session = session
        self.limiter = RateLimiter(delay_seconds)
        self.fetcher = FeedFetcher(
            self.session,
            self.limiter,
            num_retries=num_retries,
            timeout_seconds=timeout_seconds,
        )
        self.downloader = ArtifactDownloader(
            self.session,
            self.limiter,
            timeout_seconds=timeout_seconds,
        )

    @classmethod
    def from_settings(cls, settings: ClientSettings, session: requests.Session | None = None) -> Client:
        return cls(
            page_size=settings.page_size,
            delay_seconds=settings.delay_seconds,
            num_retries=settings.num_retries,
            timeout_seconds=settings.timeout_seconds,
            user_agent=settings.user_agent,
            session=session,
        )

    def results(self, search: Search, offset: int = 0) -> ResultStream:
        """Start a stream over ``search``'s results, skipping the first ``offset``.

        The first page is requested immediately.
        """
        LOGGER.debug("Starting result stream: search=%s offset=%s", search, offset)
        return ResultStream(
            self.fetcher,
            search,
            offset=offset,
            page_size=self.settings.page_size,
            base_url=self.base_url,
        )

    def download_pdf(
        self,
        result: Result,
        dirpath: str | os.PathLike[str] = ".",
        filename: str | None = None,
    ) -> Path:
        """Download ``result``'s PDF into ``dirpath``; see ``ArtifactDownloader.download``."""
        return self.downloader.download(result, dirpath, filename)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
