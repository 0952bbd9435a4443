from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO

from pydantic import ValidationError

from campus_feed.config import FeedConfig
from campus_feed.feed import SORT_OPTIONS, score_breakdown
from campus_feed.feed.scoring import utcnow
from campus_feed.filters import FilterSpec
from campus_feed.models import as_utc
from campus_feed.repositories import InMemoryListingStore, load_listings
from campus_feed.services import FeedEntry, FeedQuery, FeedService
from campus_feed.utils.log import setup_logging


def _parse_now(value: str) -> datetime:
    try:
        return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO timestamp: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rank a listings JSON file the way the feed would")
    parser.add_argument("file", type=Path, help="Path to listings.json")
    parser.add_argument("--college", required=True, help="College id to rank listings for")
    parser.add_argument("--sort", default="priority", help=", ".join(o["value"] for o in SORT_OPTIONS))
    parser.add_argument("--category")
    parser.add_argument("--min-price", type=float)
    parser.add_argument("--max-price", type=float)
    parser.add_argument("--condition")
    parser.add_argument("--search")
    parser.add_argument("--limit", type=int, default=20, help="Number of listings to print")
    parser.add_argument("--now", type=_parse_now, help="Evaluate as of this ISO timestamp (default: now)")
    parser.add_argument("--explain", action="store_true", help="Print the sub-scores of each listing")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def format_entry(entry: FeedEntry, now: Optional[datetime] = None, explain: bool = False) -> str:
    l = entry.listing
    tags = ",".join(t.type.value for t in entry.tags) or "-"
    line = f"{entry.score:6.2f}  {tags:<20}  {l.price:>10.2f}  {l.title}"
    if explain:
        b = score_breakdown(l, now)
        line += (
            f"  [recency={b.recency} engagement={b.engagement} price={b.price}"
            f" image={b.image} completeness={b.completeness}]"
        )
    return line


def main(argv: Optional[List[str]] = None, out: TextIO = sys.stdout) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        filters = FilterSpec(
            category=args.category,
            min_price=args.min_price,
            max_price=args.max_price,
            condition=args.condition,
            search=args.search,
        )
    except ValidationError as e:
        parser.error(str(e))

    now = args.now or utcnow()
    limit = max(1, args.limit)
    store = InMemoryListingStore(load_listings(args.file))
    service = FeedService(store, FeedConfig(default_page_size=limit, max_page_size=limit))
    query = FeedQuery(college_id=args.college, filters=filters, sort=args.sort)
    result = service.get_feed(query, now=now)

    for entry in result.items:
        print(format_entry(entry, now, args.explain), file=out)
    print(f"{len(result.items)} of {result.total} listings", file=out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
