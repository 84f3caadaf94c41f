"""Conversion of results into (content, metadata) pairs for record sinks."""

from __future__ import annotations

from typing import Any

from models import Result


def to_document(result: Result) -> tuple[str, dict[str, Any]]:
    """Return ``(content, metadata)`` for one result.

    Content is the abstract; metadata carries every other field in plain,
    serializable types.
    """
    metadata: dict[str, Any] = {
        "entry_id": result.entry_id,
        "short_id": result.get_short_id(),
        "title": result.title,
        "authors": [author.name for author in result.authors],
        "published": result.published.isoformat(),
        "updated": result.updated.isoformat(),
        "primary_category": result.primary_category,
        "categories": list(result.categories),
        "pdf_url": result.pdf_url,
        "comment": result.comment,
        "journal_ref": result.journal_ref,
        "doi": result.doi,
    }
    return result.summary.strip(), metadata
