"""Priority score for the default feed ordering.

The score is a weighted sum of five sub-scores, each in [0, 100]:

1. Recency - newer listings rank higher
2. Engagement - view count, with diminishing returns
3. Price attractiveness - price relative to the category's reference average
4. Image quality - more photos rank higher
5. Completeness - description, seller avatar, hostel name and title quality
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

from campus_feed.models import Category, Listing, as_category, as_utc


WEIGHTS: Dict[str, float] = {
    "recency": 0.35,
    "engagement": 0.20,
    "price": 0.15,
    "image": 0.15,
    "completeness": 0.15,
}

CATEGORY_AVG_PRICES: Dict[Category, float] = {
    Category.ELECTRONICS: 15000,
    Category.FURNITURE: 4000,
    Category.BOOKS: 500,
    Category.CLOTHING: 1500,
    Category.SPORTS: 3000,
    Category.KITCHEN: 2000,
    Category.DECOR: 1000,
    Category.CYCLES: 6000,
    Category.OTHER: 2000,
}

# Reference price for categories missing from the table above.
DEFAULT_CATEGORY_AVG_PRICE = CATEGORY_AVG_PRICES[Category.OTHER]

# (upper bound in hours, score); first bound that fits wins
_RECENCY_STEPS = (
    (1, 100),
    (6, 95),
    (12, 90),
    (24, 85),
    (48, 75),
    (72, 65),
    (168, 50),  # 1 week
    (336, 35),  # 2 weeks
    (720, 20),  # 1 month
)

# (minimum views, score)
_ENGAGEMENT_STEPS = ((500, 100), (300, 90), (200, 80), (100, 70), (50, 60), (25, 50), (10, 40), (5, 30))

# (maximum price / category average, score)
_PRICE_STEPS = ((0.3, 100), (0.5, 90), (0.7, 80), (0.9, 70), (1.1, 60), (1.3, 50), (1.5, 40))

# (minimum image count, score)
_IMAGE_STEPS = ((5, 100), (4, 90), (3, 80), (2, 60), (1, 40))


@dataclass(frozen=True)
class ScoreBreakdown:
    recency: int
    engagement: int
    price: int
    image: int
    completeness: int
    total: float


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def elapsed_hours(created_at: datetime, now: Optional[datetime] = None) -> float:
    """Hours between ``created_at`` and ``now``, never negative.

    Future timestamps are clamped to zero so they land in the freshest bucket.
    """
    now = as_utc(now) if now is not None else utcnow()
    hours = (now - as_utc(created_at)).total_seconds() / 3600.0
    return max(0.0, hours)


def recency_score(created_at: datetime, now: Optional[datetime] = None) -> int:
    hours = elapsed_hours(created_at, now)
    for bound, score in _RECENCY_STEPS:
        if hours <= bound:
            return score
    return 10


def engagement_score(view_count: int) -> int:
    # 0 views still scores 20
    for minimum, score in _ENGAGEMENT_STEPS:
        if view_count >= minimum:
            return score
    return 20


def category_avg_price(category: object) -> float:
    cat = as_category(category)
    if cat is None:
        return DEFAULT_CATEGORY_AVG_PRICE
    return CATEGORY_AVG_PRICES.get(cat, DEFAULT_CATEGORY_AVG_PRICE)


def price_score(price: float, category: object) -> int:
    """Cheaper than the category average scores higher."""
    ratio = price / category_avg_price(category)
    for bound, score in _PRICE_STEPS:
        if ratio <= bound:
            return score
    return 30


def image_score(image_count: int) -> int:
    for minimum, score in _IMAGE_STEPS:
        if image_count >= minimum:
            return score
    return 10


def completeness_score(
    description: str,
    has_avatar: bool,
    has_hostel_name: bool,
    title: str,
) -> int:
    score = 0

    desc_len = len(description or "")
    if desc_len >= 200:
        score += 40
    elif desc_len >= 100:
        score += 30
    elif desc_len >= 50:
        score += 20
    else:
        score += 10

    if has_avatar:
        score += 20
    if has_hostel_name:
        score += 20

    title_len = len(title or "")
    if 20 <= title_len <= 60:
        score += 20
    elif title_len >= 10:
        score += 10

    return score


def score_breakdown(listing: Listing, now: Optional[datetime] = None) -> ScoreBreakdown:
    now = now if now is not None else utcnow()
    parts = {
        "recency": recency_score(listing.created_at, now),
        "engagement": engagement_score(listing.view_count),
        "price": price_score(listing.price, listing.category),
        "image": image_score(listing.image_count),
        "completeness": completeness_score(
            listing.description,
            listing.has_seller_avatar,
            listing.has_hostel_name,
            listing.title,
        ),
    }
    total = sum(parts[name] * weight for name, weight in WEIGHTS.items())
    return ScoreBreakdown(total=round(total, 2), **parts)


def priority_score(listing: Listing, now: Optional[datetime] = None) -> float:
    """Weighted priority score in [0, 100], rounded to two decimals."""
    return score_breakdown(listing, now).total
