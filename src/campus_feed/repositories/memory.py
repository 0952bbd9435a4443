from __future__ import annotations

import threading
from typing import Dict, Iterable, List

from campus_feed.errors import ListingNotFound
from campus_feed.models import Listing, ListingStatus


class InMemoryListingStore:
    """Dict-backed listing store for development, tests and the CLI.

    Listings are kept in insertion order; ``candidates`` returns the active
    listings of one college.
    """

    def __init__(self, listings: Iterable[Listing] = ()) -> None:
        self._items: Dict[str, Listing] = {}
        self._lock = threading.Lock()
        self.upsert_many(listings)

    def __len__(self) -> int:
        return len(self._items)

    def candidates(self, college_id: str) -> List[Listing]:
        with self._lock:
            return [
                l
                for l in self._items.values()
                if l.college_id == college_id and l.status == ListingStatus.ACTIVE
            ]

    def get(self, listing_id: str) -> Listing:
        try:
            return self._items[listing_id]
        except KeyError:
            raise ListingNotFound(listing_id) from None

    def record_view(self, listing_id: str) -> Listing:
        with self._lock:
            current = self._items.get(listing_id)
            if current is None:
                raise ListingNotFound(listing_id)
            updated = current.model_copy(update={"view_count": current.view_count + 1})
            self._items[listing_id] = updated
            return updated

    def upsert_many(self, items: Iterable[Listing]) -> int:
        n = 0
        with self._lock:
            for l in items:
                self._items[l.id] = l
                n += 1
        return n
