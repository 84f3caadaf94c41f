"""Request URL construction for the arXiv query endpoint."""

from __future__ import annotations

from urllib.parse import urlencode

from models import Search

ARXIV_QUERY_URL = "https://export.arxiv.org/api/query"


def format_url(search: Search, start: int, page_size: int, base_url: str = ARXIV_QUERY_URL) -> str:
    """Return the full page URL for ``search`` starting at ``start``.

    The search's own parameters come first in a fixed order, followed by
    ``start`` and ``max_results``. Values are UTF-8 percent-encoded.
    """
    args = search.url_args()
    args["start"] = str(start)
    args["max_results"] = str(page_size)
    return f"{base_url}?{urlencode(args, encoding='utf-8')}"
