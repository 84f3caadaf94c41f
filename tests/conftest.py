from __future__ import annotations

from collections.abc import Callable
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest

from arxiv_feed import parse_feed

_FEED_HEAD = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom"
      xmlns:opensearch="http://a9.com/-/spec/opensearch/1.1/"
      xmlns:arxiv="http://arxiv.org/schemas/atom">
  <link href="http://arxiv.org/api/query" rel="self" type="application/atom+xml"/>
  <title type="html">ArXiv Query</title>
  <id>http://arxiv.org/api/test</id>
  <updated>2024-01-01T00:00:00-05:00</updated>
"""


def build_entry(
    arxiv_id: str = "2101.00001v1",
    title: str = "Test Paper",
    summary: str = "A short abstract.",
    updated: str = "2021-01-02T10:00:00Z",
    published: str = "2021-01-01T09:00:00Z",
    authors: tuple[str, ...] = ("Ada Lovelace", "Alan Turing"),
    categories: tuple[str, ...] = ("cs.LG", "stat.ML"),
    primary_category: str | None = "cs.LG",
    comment: str | None = None,
    journal_ref: str | None = None,
    doi: str | None = None,
    with_pdf: bool = True,
) -> str:
    """Return one Atom ``<entry>`` element shaped like the arXiv API's."""
    parts = [
        "<entry>",
        f"<id>http://arxiv.org/abs/{arxiv_id}</id>",
        f"<updated>{updated}</updated>",
        f"<published>{published}</published>",
        f"<title>{title}</title>",
        f"<summary>{summary}</summary>",
    ]
    parts += [f"<author><name>{name}</name></author>" for name in authors]
    if comment is not None:
        parts.append(f"<arxiv:comment>{comment}</arxiv:comment>")
    if journal_ref is not None:
        parts.append(f"<arxiv:journal_ref>{journal_ref}</arxiv:journal_ref>")
    if doi is not None:
        parts.append(f"<arxiv:doi>{doi}</arxiv:doi>")
    parts.append(f'<link href="http://arxiv.org/abs/{arxiv_id}" rel="alternate" type="text/html"/>')
    if with_pdf:
        parts.append(
            f'<link title="pdf" href="http://arxiv.org/pdf/{arxiv_id}" rel="related" type="application/pdf"/>'
        )
    if primary_category is not None:
        parts.append(
            f'<arxiv:primary_category term="{primary_category}" scheme="http://arxiv.org/schemas/atom"/>'
        )
    parts += [
        f'<category term="{term}" scheme="http://arxiv.org/schemas/atom"/>' for term in categories
    ]
    parts.append("</entry>")
    return "\n".join(parts)


def build_feed(entries: list[str], total_results: int | str | None = None) -> bytes:
    """Return a full feed document; ``total_results`` defaults to the entry count."""
    if total_results is None:
        total_results = len(entries)
    body = _FEED_HEAD
    body += f"<opensearch:totalResults>{total_results}</opensearch:totalResults>\n"
    body += "<opensearch:startIndex>0</opensearch:startIndex>\n"
    body += f"<opensearch:itemsPerPage>{len(entries)}</opensearch:itemsPerPage>\n"
    body += "\n".join(entries)
    body += "\n</feed>\n"
    return body.encode("utf-8")


def build_feed_without_total(entries: list[str]) -> bytes:
    body = _FEED_HEAD + "\n".join(entries) + "\n</feed>\n"
    return body.encode("utf-8")


def mock_response(content: bytes = b"", status_code: int = 200) -> MagicMock:
    """Return a mock ``requests.Response``."""
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    response.iter_content.return_value = [content]
    return response


class FakeArchive:
    """Serves slices of ``total`` synthetic entries the way the query endpoint does.

    Records every (start, max_results, first_page) request it receives.
    ``ignore_max_results`` makes it return ``page_override`` entries per page
    regardless of what was asked for.
    """

    def __init__(
        self,
        total: int,
        ignore_max_results: bool = False,
        page_override: int = 0,
    ) -> None:
        self.total = total
        self.ignore_max_results = ignore_max_results
        self.page_override = page_override
        self.requests: list[tuple[int, int, bool]] = []
        self.failures: list[Exception] = []

    def fetch(self, url: str, first_page: bool = False):
        query = parse_qs(urlparse(url).query)
        start = int(query["start"][0])
        max_results = int(query["max_results"][0])
        self.requests.append((start, max_results, first_page))
        if self.failures:
            raise self.failures.pop(0)

        size = self.page_override if self.ignore_max_results else max_results
        ids = range(start, min(start + size, self.total))
        entries = [build_entry(arxiv_id=f"2101.{i:05d}v1", title=f"Paper {i}") for i in ids]
        return parse_feed(build_feed(entries, total_results=self.total))


@pytest.fixture
def make_entry() -> Callable[..., str]:
    return build_entry


@pytest.fixture
def make_feed() -> Callable[..., bytes]:
    return build_feed


@pytest.fixture
def make_feed_without_total() -> Callable[[list[str]], bytes]:
    return build_feed_without_total


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    return mock_response


@pytest.fixture
def fake_archive() -> Callable[..., FakeArchive]:
    return FakeArchive


class FakeClock:
    """Monotonic clock whose ``sleep`` advances time instead of blocking."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
