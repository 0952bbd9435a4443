from __future__ import annotations


class FeedError(Exception):
    """Base error for the feed service and its collaborators."""

    code = "FEED_ERROR"


class StoreError(FeedError):
    """The listing store could not be read or written."""

    code = "FETCH_ERROR"


class ListingNotFound(FeedError):
    code = "NOT_FOUND"

    def __init__(self, listing_id: str) -> None:
        super().__init__(f"Listing {listing_id!r} not found")
        self.listing_id = listing_id
