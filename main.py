"""CLI entrypoint: stream arXiv search results into the CSV sink."""

from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv

from arxiv_client import Client
from config import load_settings
from csv_sink import document_already_exists, write_document
from documents import to_document
from models import Search, SortCriterion, SortOrder


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Search arXiv and write results to CSV")
    parser.add_argument("query", nargs="?", default="", help="arXiv search query, e.g. 'cat:cs.LG AND ti:agents'")
    parser.add_argument("--id-list", nargs="*", default=[], help="Restrict the search to these arXiv ids")
    parser.add_argument("--max-results", type=int, default=None, help="Maximum number of results to stream")
    parser.add_argument("--start", type=int, default=0, help="Offset of the first result")
    parser.add_argument(
        "--sort-by",
        choices=[c.value for c in SortCriterion],
        default=SortCriterion.RELEVANCE.value,
    )
    parser.add_argument(
        "--sort-order",
        choices=[o.value for o in SortOrder],
        default=SortOrder.DESCENDING.value,
    )
    parser.add_argument("--download-dir", default=None, help="Also download each new result's PDF here")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only log what would be written, without CSV writes or downloads",
    )
    return parser.parse_args(argv)


def run(
    client: Client,
    search: Search,
    start: int = 0,
    download_dir: str | None = None,
    dry_run: bool = False,
) -> dict[str, int]:
    """Stream one search into the sink and return the run counters."""
    counts = {"written": 0, "skipped": 0, "downloaded": 0, "failed": 0}

    for result in client.results(search, offset=start):
        if document_already_exists(result.entry_id):
            counts["skipped"] += 1
            logging.info("Skipping existing entry_id=%s", result.entry_id)
            continue

        if dry_run:
            counts["written"] += 1
            logging.info("[dry-run] Would write: %s", result.title)
            continue

        content, metadata = to_document(result)
        write_document(content, metadata)
        counts["written"] += 1

        if download_dir is None:
            continue
        try:
            client.download_pdf(result, download_dir)
            counts["downloaded"] += 1
        except Exception as exc:  # one bad PDF should not stop the run
            counts["failed"] += 1
            logging.exception("Failed downloading entry_id=%s: %s", result.entry_id, exc)

    logging.info(
        "Run complete. written=%s skipped=%s downloaded=%s failed=%s",
        counts["written"],
        counts["skipped"],
        counts["downloaded"],
        counts["failed"],
    )
    return counts


def main(argv: list[str] | None = None) -> None:
    """Initialize config and execute one search."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    if not args.query and not args.id_list:
        raise SystemExit("Either a query or --id-list is required")

    search = Search(
        query=args.query,
        id_list=tuple(args.id_list),
        max_results=args.max_results,
        sort_by=SortCriterion(args.sort_by),
        sort_order=SortOrder(args.sort_order),
    )

    with Client.from_settings(load_settings()) as client:
        run(
            client,
            search,
            start=args.start,
            download_dir=args.download_dir,
            dry_run=args.dry_run,
        )


if __name__ == "__main__":
    main()
