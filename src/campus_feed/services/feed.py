from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field

from campus_feed.config import FeedConfig
from campus_feed.feed import Tag, priority_score, sort_listings, tag_listings
from campus_feed.feed.scoring import utcnow
from campus_feed.filters import FilterSpec, filter_listings
from campus_feed.models import Listing
from campus_feed.repositories import ListingStore


logger = logging.getLogger(__name__)


class FeedQuery(BaseModel):
    college_id: str
    filters: FilterSpec = Field(default_factory=FilterSpec)
    # Kept as a plain string: unknown modes fall back to priority ordering
    sort: str = "priority"
    page: int = Field(default=1, ge=1)
    page_size: Optional[int] = Field(default=None, ge=1)


class FeedEntry(BaseModel):
    listing: Listing
    score: float
    tags: List[Tag] = Field(default_factory=list)


class FeedPage(BaseModel):
    items: List[FeedEntry]
    total: int
    page: int
    page_size: int
    next_page: Optional[int] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_more(self) -> bool:
        return self.next_page is not None


class FeedService:
    """Compose store → filter → sort → page → tag for one feed request."""

    def __init__(self, store: ListingStore, config: Optional[FeedConfig] = None) -> None:
        self.store = store
        self.config = config or FeedConfig()

    def get_feed(self, query: FeedQuery, now: Optional[datetime] = None) -> FeedPage:
        now = now if now is not None else utcnow()
        page_size = self.config.clamp_page_size(query.page_size)

        candidates = self.store.candidates(query.college_id)
        visible = filter_listings(candidates, query.filters)
        ordered = sort_listings(visible, query.sort, now)

        start = (query.page - 1) * page_size
        end = start + page_size
        window = ordered[start:end]
        # Relative tags ("top 20% by views") compare against everything visible
        tags = tag_listings(window, now=now, comparison=visible)

        logger.debug(
            "feed college=%s sort=%s page=%d: %d candidates, %d visible, %d on page",
            query.college_id, query.sort, query.page, len(candidates), len(visible), len(window),
        )
        return FeedPage(
            items=[FeedEntry(listing=l, score=priority_score(l, now), tags=t) for l, t in zip(window, tags)],
            total=len(visible),
            page=query.page,
            page_size=page_size,
            next_page=query.page + 1 if end < len(visible) else None,
        )

    def search(self, college_id: str, text: str, page: int = 1, now: Optional[datetime] = None) -> FeedPage:
        query = FeedQuery(college_id=college_id, filters=FilterSpec(search=text), page=page)
        return self.get_feed(query, now=now)

    def view_listing(
        self,
        listing_id: str,
        comparison_college: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> FeedEntry:
        """Count a detail view and return the listing with its score and tags.

        Tags are computed against the active listings of ``comparison_college``,
        which defaults to the listing's own college.
        """
        now = now if now is not None else utcnow()
        listing = self.store.record_view(listing_id)
        comparison = self.store.candidates(comparison_college or listing.college_id)
        tags = tag_listings([listing], now=now, comparison=comparison)[0]
        return FeedEntry(listing=listing, score=priority_score(listing, now), tags=tags)
