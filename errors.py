"""Exceptions raised by the arXiv feed client."""

from __future__ import annotations


class ArxivClientError(RuntimeError):
    """Base class for every error raised by this package."""


class HTTPStatusError(ArxivClientError):
    """The API answered with a non-200 status."""

    def __init__(self, url: str, attempt: int, status: int) -> None:
        self.url = url
        self.attempt = attempt
        self.status = status
        super().__init__(f"Page request failed with HTTP {status} (try {attempt}): {url}")


class UnexpectedEmptyPageError(ArxivClientError):
    """A page after the first one came back with no entries."""

    def __init__(self, url: str, attempt: int) -> None:
        self.url = url
        self.attempt = attempt
        super().__init__(f"Page of results was unexpectedly empty (try {attempt}): {url}")


class RetriesExhaustedError(ArxivClientError):
    """A page could not be fetched within the retry bound."""

    def __init__(self, url: str, attempts: int, last_error: Exception | None) -> None:
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed to fetch feed after {attempts} attempts: {url}: {last_error}")


class FeedParseError(ArxivClientError):
    """The feed document or one of its entries is malformed."""


class ArtifactUnavailableError(ArxivClientError):
    """The result has no downloadable artifact."""


class DownloadError(ArxivClientError):
    """Fetching or persisting an artifact failed."""

    def __init__(self, message: str, url: str, status: int | None = None) -> None:
        self.url = url
        self.status = status
        super().__init__(message)
