"""CSV record sink for (content, metadata) documents."""

from __future__ import annotations

import csv
import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

DEFAULT_CSV_OUTPUT_PATH = "arxiv_results.csv"

LOGGER = logging.getLogger(__name__)

CSV_COLUMNS = [
    "entry_id",
    "short_id",
    "title",
    "authors",           # JSON list of names
    "published",
    "updated",
    "primary_category",
    "categories",        # JSON list of terms
    "pdf_url",
    "comment",
    "journal_ref",
    "doi",
    "content",
    "created_at",
]

_LIST_COLUMNS = frozenset({"authors", "categories"})


def output_path(csv_path: str | None = None) -> Path:
    """Return ``csv_path``, else ``CSV_OUTPUT_PATH`` as set when called, else the default."""
    return Path(csv_path or os.getenv("CSV_OUTPUT_PATH", DEFAULT_CSV_OUTPUT_PATH))


def document_already_exists(entry_id: str, csv_path: str | None = None) -> bool:
    """Return True if a row with ``entry_id`` already exists in the CSV."""
    path = output_path(csv_path)
    if not path.exists():
        return False

    with path.open(newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        for row in reader:
            if row.get("entry_id") == entry_id:
                return True
    return False


def write_document(content: str, metadata: dict[str, Any], csv_path: str | None = None) -> None:
    """Append one document as a CSV row (creating the file with a header if needed).

    Args:
        content:  Document body text.
        metadata: Field mapping as produced by ``documents.to_document``.
                  Keys outside ``CSV_COLUMNS`` are ignored.
        csv_path: Optional override for the ``CSV_OUTPUT_PATH`` env var.
    """
    path = output_path(csv_path)
    write_header = not path.exists() or path.stat().st_size == 0

    row: dict[str, Any] = {}
    for column in CSV_COLUMNS:
        value = metadata.get(column)
        if column in _LIST_COLUMNS:
            row[column] = json.dumps(list(value or []))
        else:
            row[column] = "" if value is None else value
    row["content"] = content
    row["created_at"] = datetime.now(UTC).isoformat()

    with path.open("a", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=CSV_COLUMNS)
        if write_header:
            writer.writeheader()
        writer.writerow(row)

    LOGGER.info("Wrote CSV row for entry_id=%s to %s", metadata.get("entry_id"), path)
