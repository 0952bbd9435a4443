"""Listing stores: where feed candidates come from."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Protocol

from pydantic import ValidationError

from campus_feed.config import FeedConfig
from campus_feed.models import Listing

from .memory import InMemoryListingStore


logger = logging.getLogger(__name__)


class ListingStore(Protocol):
    def candidates(self, college_id: str) -> List[Listing]: ...

    def get(self, listing_id: str) -> Listing: ...

    def record_view(self, listing_id: str) -> Listing: ...

    def upsert_many(self, items: Iterable[Listing]) -> int: ...


def load_listings(path: Path) -> List[Listing]:
    """Read a JSON array of listings, skipping records that fail validation."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    items: List[Listing] = []
    for obj in data or []:
        try:
            items.append(Listing.model_validate(obj))
        except ValidationError as e:
            logger.warning("Skipping invalid listing %r: %s", obj.get("id") if isinstance(obj, dict) else obj, e)
    return items


def load_store(config: FeedConfig) -> ListingStore:
    """PostgreSQL when ``DB_URL`` is configured, else memory seeded from the listings file."""
    if config.db_url:
        from .postgres import PostgresListingStore

        return PostgresListingStore(config.db_url)
    listings: List[Listing] = []
    if config.listings_file.exists():
        try:
            listings = load_listings(config.listings_file)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Could not read %s: %s", config.listings_file, e)
    logger.info("Serving %d listings from memory", len(listings))
    return InMemoryListingStore(listings)


__all__ = ["InMemoryListingStore", "ListingStore", "load_listings", "load_store"]
