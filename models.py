"""Shared typed models for the arXiv feed client."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from feedparser import FeedParserDict

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')


class SortCriterion(Enum):
    """Field the API sorts results by."""

    RELEVANCE = "relevance"
    LAST_UPDATED_DATE = "lastUpdatedDate"
    SUBMITTED_DATE = "submittedDate"


class SortOrder(Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass(frozen=True, slots=True)
class Search:
    """A search request against the arXiv query endpoint.

    ``max_results`` caps how many records a stream yields in total; ``None``
    means "everything the server reports".
    """

    query: str = ""
    id_list: tuple[str, ...] = ()
    max_results: int | None = None
    sort_by: SortCriterion = SortCriterion.RELEVANCE
    sort_order: SortOrder = SortOrder.DESCENDING

    def __post_init__(self) -> None:
        if self.max_results is not None and self.max_results < 0:
            raise ValueError(f"max_results must be non-negative, got {self.max_results}")
        # Accept any iterable of ids but store an immutable tuple.
        object.__setattr__(self, "id_list", tuple(self.id_list))

    def url_args(self) -> dict[str, str]:
        """Return a fresh dict of query parameters in a stable order."""
        return {
            "search_query": self.query,
            "id_list": ",".join(self.id_list),
            "sort_by": self.sort_by.value,
            "sortOrder": self.sort_order.value,
        }


@dataclass(frozen=True, slots=True)
class Author:
    name: str


@dataclass(frozen=True, slots=True)
class Link:
    href: str
    title: str | None = None
    rel: str | None = None
    content_type: str | None = None


@dataclass(frozen=True, slots=True)
class Result:
    """One parsed feed entry."""

    entry_id: str
    title: str
    summary: str
    updated: datetime
    published: datetime
    authors: tuple[Author, ...] = ()
    categories: tuple[str, ...] = ()
    primary_category: str | None = None
    links: tuple[Link, ...] = ()
    comment: str | None = None
    journal_ref: str | None = None
    doi: str | None = None

    @property
    def pdf_url(self) -> str | None:
        """URL of the PDF artifact, if the entry links one."""
        for link in self.links:
            if link.title == "pdf":
                return link.href
        for link in self.links:
            if link.content_type == "application/pdf":
                return link.href
        return None

    def get_short_id(self) -> str:
        """Return the identifier without the ``https://arxiv.org/abs/`` prefix.

        Versioned ids keep their version suffix, e.g. ``2107.05580v1``. Old-style
        ids keep their archive, e.g. ``quant-ph/0201082v1``.
        """
        return self.entry_id.split("arxiv.org/abs/")[-1]

    def default_filename(self, extension: str = "pdf") -> str:
        short_id = _UNSAFE_FILENAME_CHARS.sub("_", self.get_short_id())
        return f"{short_id}.{extension}"


@dataclass(slots=True)
class FeedPage:
    """A single fetched page, owned by the stream that requested it.

    ``start`` is the result offset the page was requested at.
    """

    start: int
    entries: list[FeedParserDict] = field(default_factory=list)
    total_results: int | None = None
