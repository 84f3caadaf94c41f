"""Decoding of arXiv Atom feed pages into typed results."""

from __future__ import annotations

import io
from datetime import datetime
from typing import Any

import feedparser

from errors import FeedParseError
from models import Author, Link, Result


def parse_feed(content: bytes) -> feedparser.FeedParserDict:
    """Decode one raw page body.

    Raises:
        FeedParseError: when the body is not well-formed XML. feedparser would
            otherwise return whatever entries it recovered, with fields missing.
    """
    # A file-like object keeps feedparser from treating the body as a path or URL.
    feed = feedparser.parse(io.BytesIO(content))
    if feed.bozo and not isinstance(feed.get("bozo_exception"), feedparser.CharacterEncodingOverride):
        exc = feed.get("bozo_exception")
        raise FeedParseError(f"Malformed feed document: {exc}") from exc
    return feed


def parse_total_results(feed: feedparser.FeedParserDict) -> int:
    """Return the ``opensearch:totalResults`` value declared by a first page."""
    raw = feed.feed.get("opensearch_totalresults")
    if raw is None:
        raise FeedParseError("Feed has no opensearch:totalResults element")
    try:
        total = int(str(raw).strip())
    except ValueError as exc:
        raise FeedParseError(f"Malformed opensearch:totalResults value: {raw!r}") from exc
    if total < 0:
        raise FeedParseError(f"Negative opensearch:totalResults value: {total}")
    return total


def result_from_entry(entry: Any) -> Result:
    """Build a ``Result`` from one feedparser entry.

    Raises:
        FeedParseError: when the id, title, or either timestamp is missing or
            malformed.
    """
    entry_id = _as_str(entry.get("id"))
    if not entry_id:
        raise FeedParseError("Feed entry has no id")

    title = entry.get("title")
    if title is None:
        raise FeedParseError(f"Feed entry {entry_id} has no title")

    return Result(
        entry_id=entry_id,
        title=normalize_whitespace(title),
        summary=entry.get("summary", ""),
        updated=_parse_timestamp(entry.get("updated"), "updated", entry_id),
        published=_parse_timestamp(entry.get("published"), "published", entry_id),
        authors=tuple(
            Author(name=author["name"])
            for author in entry.get("authors", [])
            if author.get("name")
        ),
        categories=_categories(entry),
        primary_category=_primary_category(entry),
        links=tuple(
            Link(
                href=link.get("href", ""),
                title=link.get("title"),
                rel=link.get("rel"),
                content_type=link.get("type"),
            )
            for link in entry.get("links", [])
        ),
        comment=_as_str(entry.get("arxiv_comment")),
        journal_ref=_as_str(entry.get("arxiv_journal_ref")),
        doi=_as_str(entry.get("arxiv_doi")),
    )


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space."""
    return " ".join(text.split())


def _categories(entry: Any) -> tuple[str, ...]:
    terms: list[str] = []
    for tag in entry.get("tags", []):
        term = _as_str(tag.get("term"))
        if term and term not in terms:
            terms.append(term)
    return tuple(terms)


def _primary_category(entry: Any) -> str | None:
    primary = entry.get("arxiv_primary_category")
    if not isinstance(primary, dict):
        return None
    return _as_str(primary.get("term"))


def _parse_timestamp(raw: Any, field_name: str, entry_id: str) -> datetime:
    value = _as_str(raw)
    if not value:
        raise FeedParseError(f"Feed entry {entry_id} has no {field_name} timestamp")

    # The API emits RFC 3339 timestamps with a trailing Z.
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise FeedParseError(
            f"Feed entry {entry_id} has malformed {field_name} timestamp {value!r}"
        ) from exc

    if parsed.tzinfo is None:
        raise FeedParseError(
            f"Feed entry {entry_id} has {field_name} timestamp without offset: {value!r}"
        )
    return parsed


def _as_str(value: Any) -> str | None:
    return value.strip() if isinstance(value, str) and value.strip() else None
