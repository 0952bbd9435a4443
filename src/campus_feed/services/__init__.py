"""Service layer for the campus marketplace feed."""

from .feed import FeedEntry, FeedPage, FeedQuery, FeedService

__all__ = ["FeedEntry", "FeedPage", "FeedQuery", "FeedService"]
