from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

from campus_feed.models import Listing

from .scoring import priority_score, utcnow


logger = logging.getLogger(__name__)


class SortMode(str, Enum):
    PRIORITY = "priority"
    NEWEST = "newest"
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"
    POPULAR = "popular"


SORT_LABELS: Dict[SortMode, str] = {
    SortMode.PRIORITY: "Best Match",
    SortMode.NEWEST: "Newest First",
    SortMode.PRICE_LOW: "Price: Low to High",
    SortMode.PRICE_HIGH: "Price: High to Low",
    SortMode.POPULAR: "Most Popular",
}

SORT_OPTIONS: List[Dict[str, str]] = [{"value": m.value, "label": label} for m, label in SORT_LABELS.items()]


def resolve_mode(mode: Union[SortMode, str, None]) -> SortMode:
    """Map a user-supplied mode to a ``SortMode``; anything unknown means priority."""
    if isinstance(mode, SortMode):
        return mode
    if not mode:
        return SortMode.PRIORITY
    try:
        return SortMode(str(mode).strip().lower())
    except ValueError:
        logger.warning("Unknown sort mode %r, falling back to %s", mode, SortMode.PRIORITY.value)
        return SortMode.PRIORITY


def sort_label(mode: Union[SortMode, str, None]) -> str:
    return SORT_LABELS[resolve_mode(mode)]


def sort_listings(
    listings: Iterable[Listing],
    mode: Union[SortMode, str, None] = SortMode.PRIORITY,
    now: Optional[datetime] = None,
) -> List[Listing]:
    """Return a new list ordered by ``mode``.

    Python's sort is stable (also with ``reverse=True``), so listings that
    compare equal keep their input order.
    """
    items = list(listings)
    resolved = resolve_mode(mode)

    if resolved is SortMode.NEWEST:
        return sorted(items, key=lambda l: l.created_at, reverse=True)
    if resolved is SortMode.PRICE_LOW:
        return sorted(items, key=lambda l: l.price)
    if resolved is SortMode.PRICE_HIGH:
        return sorted(items, key=lambda l: l.price, reverse=True)
    if resolved is SortMode.POPULAR:
        return sorted(items, key=lambda l: l.view_count, reverse=True)

    # Score each listing once rather than on every comparison
    now = now if now is not None else utcnow()
    scores = [priority_score(l, now) for l in items]
    order = sorted(range(len(items)), key=lambda i: scores[i], reverse=True)
    return [items[i] for i in order]
