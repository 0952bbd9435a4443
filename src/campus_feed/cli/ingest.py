from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from campus_feed.config import FeedConfig
from campus_feed.errors import FeedError
from campus_feed.repositories import load_listings
from campus_feed.repositories.postgres import PostgresListingStore
from campus_feed.utils.log import setup_logging


logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None, out: TextIO = sys.stdout) -> int:
    parser = argparse.ArgumentParser(description="Ingest listings JSON into Postgres")
    parser.add_argument("file", type=Path, help="Path to listings.json")
    args = parser.parse_args(argv)

    config = FeedConfig()
    setup_logging(config.log_level)

    items = load_listings(args.file)
    store = PostgresListingStore(config.db_url)
    try:
        store.init_schema()
        n = store.upsert_many(items)
    except FeedError as e:
        logger.error("Ingest of %s failed: %s", args.file, e)
        return 1
    logger.info("Inserted/updated %d listings", n)
    print(f"Inserted/updated {n} listings", file=out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
