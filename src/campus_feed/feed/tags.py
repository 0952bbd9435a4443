"""Display tags ("badges") derived from a listing's age, views, price and condition."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel

from campus_feed.models import Condition, Listing

from .scoring import elapsed_hours, utcnow


MAX_TAGS = 2

FRESH_MAX_HOURS = 24
TRENDING_MAX_HOURS = 48
TRENDING_MIN_VIEWS = 50
HOT_MIN_VIEWS = 100
# Used when there is no comparison set to rank against
HOT_FALLBACK_VIEWS = 200
PREMIUM_MIN_PRICE = 10000
QUICK_SALE_MAX_PRICE = 1000


class TagType(str, Enum):
    FRESH = "fresh"
    HOT = "hot"
    PRICE_DROP = "price_drop"
    NEGOTIABLE = "negotiable"
    QUICK_SALE = "quick_sale"
    PREMIUM = "premium"
    VERIFIED = "verified"
    TRENDING = "trending"


class Tag(BaseModel):
    type: TagType
    label: str
    color: str
    bg_color: str
    icon: Optional[str] = None


# label, foreground, background, icon
_TAG_CONFIGS: Dict[TagType, tuple] = {
    TagType.FRESH: ("FRESH", "#059669", "#D1FAE5", "✨"),
    TagType.HOT: ("HOT", "#DC2626", "#FEE2E2", "🔥"),
    TagType.PRICE_DROP: ("PRICE DROP", "#7C3AED", "#EDE9FE", "📉"),
    TagType.NEGOTIABLE: ("NEGOTIABLE", "#2563EB", "#DBEAFE", "💬"),
    TagType.QUICK_SALE: ("QUICK SALE", "#EA580C", "#FFEDD5", "⚡"),
    TagType.PREMIUM: ("PREMIUM", "#B45309", "#FEF3C7", "👑"),
    TagType.VERIFIED: ("VERIFIED", "#0891B2", "#CFFAFE", "✓"),
    TagType.TRENDING: ("TRENDING", "#DB2777", "#FCE7F3", "📈"),
}


def tag_config(tag_type: TagType) -> Tag:
    label, color, bg_color, icon = _TAG_CONFIGS[TagType(tag_type)]
    return Tag(type=tag_type, label=label, color=color, bg_color=bg_color, icon=icon)


def hot_threshold(view_counts: Iterable[int]) -> Optional[int]:
    """Smallest view count inside the top 20% of ``view_counts``.

    The top slice holds ceil(N / 5) listings. Returns None for an empty set so
    callers fall back to the absolute threshold.
    """
    ranked = sorted(view_counts, reverse=True)
    if not ranked:
        return None
    top_n = -(-len(ranked) // 5)
    return ranked[top_n - 1]


def _is_hot(view_count: int, threshold: Optional[int]) -> bool:
    if threshold is None:
        return view_count >= HOT_FALLBACK_VIEWS
    return view_count >= threshold and view_count >= HOT_MIN_VIEWS


def derive_tags(
    listing: Listing,
    comparison: Optional[Sequence[Listing]] = None,
    now: Optional[datetime] = None,
    threshold: Optional[int] = None,
) -> List[Tag]:
    """Return at most two tags for ``listing``, in precedence order.

    ``threshold`` is a precomputed ``hot_threshold`` for the visible set; when
    it is not given it is computed from ``comparison``. With neither, a
    listing is hot only past the absolute fallback view count.
    """
    if threshold is None and comparison:
        threshold = hot_threshold(l.view_count for l in comparison)

    hours = elapsed_hours(listing.created_at, now if now is not None else utcnow())
    found: List[TagType] = []

    if hours <= FRESH_MAX_HOURS:
        found.append(TagType.FRESH)

    hot = _is_hot(listing.view_count, threshold)
    if hot:
        found.append(TagType.HOT)

    # hot and trending never both
    if not hot and hours <= TRENDING_MAX_HOURS and listing.view_count >= TRENDING_MIN_VIEWS:
        found.append(TagType.TRENDING)

    if listing.price >= PREMIUM_MIN_PRICE:
        found.append(TagType.PREMIUM)

    if listing.price <= QUICK_SALE_MAX_PRICE and listing.condition == Condition.LIKE_NEW:
        found.append(TagType.QUICK_SALE)

    return [tag_config(t) for t in found[:MAX_TAGS]]


def tag_listings(
    listings: Sequence[Listing],
    now: Optional[datetime] = None,
    comparison: Optional[Sequence[Listing]] = None,
) -> List[List[Tag]]:
    """Tag every listing of a feed pass against one shared hot threshold.

    ``comparison`` defaults to ``listings`` itself.
    """
    now = now if now is not None else utcnow()
    pool = listings if comparison is None else comparison
    threshold = hot_threshold(l.view_count for l in pool)
    return [derive_tags(l, now=now, threshold=threshold) for l in listings]
