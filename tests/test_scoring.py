from __future__ import annotations

import math
from datetime import datetime, timedelta

import pytest

from campus_feed.feed.scoring import (
    DEFAULT_CATEGORY_AVG_PRICE,
    WEIGHTS,
    category_avg_price,
    completeness_score,
    engagement_score,
    image_score,
    price_score,
    priority_score,
    recency_score,
    score_breakdown,
)


def test_weights_sum_to_one():
    assert math.isclose(sum(WEIGHTS.values()), 1.0, abs_tol=1e-12)


def test_brand_new_bare_listing_scores_51(make_listing, now):
    listing = make_listing(
        age_hours=0.5,
        title="Notes",
        description="",
        price=500,
        category="books",
        images=[],
        view_count=0,
    )
    b = score_breakdown(listing, now)
    assert (b.recency, b.engagement, b.price, b.image, b.completeness) == (100, 20, 60, 10, 10)
    assert priority_score(listing, now) == 51.0


def test_complete_listing_scores_100(make_listing, now):
    listing = make_listing(
        age_hours=0.2,
        title="MacBook Air M1 2020 with box",
        description="x" * 250,
        seller_avatar="https://example.com/a.png",
        hostel_name="Kumaon",
        price=1000,
        category="electronics",
        images=["a", "b", "c", "d", "e"],
        view_count=900,
    )
    assert priority_score(listing, now) == 100.0


@pytest.mark.parametrize(
    "hours,expected",
    [
        (0, 100),
        (1, 100),
        (1.01, 95),
        (6, 95),
        (12, 90),
        (24, 85),
        (24.5, 75),
        (72, 65),
        (168, 50),
        (336, 35),
        (720, 20),
        (721, 10),
    ],
)
def test_recency_steps(now, hours, expected):
    assert recency_score(now - timedelta(hours=hours), now) == expected


def test_future_timestamp_clamps_to_freshest_bucket(now):
    assert recency_score(now + timedelta(days=3), now) == 100


def test_naive_timestamps_are_read_as_utc(now):
    naive = datetime(2026, 1, 15, 3, 0)
    assert recency_score(naive, now) == 90


@pytest.mark.parametrize(
    "views,expected",
    [(0, 20), (4, 20), (5, 30), (10, 40), (25, 50), (50, 60), (100, 70), (200, 80), (300, 90), (499, 90), (500, 100)],
)
def test_engagement_steps(views, expected):
    assert engagement_score(views) == expected


@pytest.mark.parametrize(
    "price,expected",
    [(150, 100), (250, 90), (350, 80), (450, 70), (550, 60), (650, 50), (750, 40), (751, 30)],
)
def test_price_steps_relative_to_books_average(price, expected):
    assert price_score(price, "books") == expected


def test_unknown_category_uses_default_reference_price():
    assert category_avg_price("gadgets") == DEFAULT_CATEGORY_AVG_PRICE
    assert price_score(DEFAULT_CATEGORY_AVG_PRICE, "gadgets") == 60


def test_unknown_category_listing_scores(make_listing, now):
    listing = make_listing(category="gadgets", price=2000)
    assert listing.category == "gadgets"
    assert score_breakdown(listing, now).price == 60


@pytest.mark.parametrize("count,expected", [(0, 10), (1, 40), (2, 60), (3, 80), (4, 90), (5, 100), (8, 100)])
def test_image_steps(count, expected):
    assert image_score(count) == expected


def test_completeness_components():
    assert completeness_score("", False, False, "Lamp") == 10
    assert completeness_score("x" * 50, False, False, "Lamp") == 20
    assert completeness_score("x" * 100, True, False, "Desk lamp") == 50
    assert completeness_score("x" * 200, True, True, "A" * 20) == 100
    # over-long titles still earn partial credit
    assert completeness_score("x" * 200, True, True, "A" * 61) == 90
    assert completeness_score("x" * 200, True, True, "A" * 10) == 90


def test_score_is_deterministic_and_bounded(make_listing, now):
    listings = [
        make_listing(age_hours=h, view_count=v, price=p, images=["i"] * n)
        for h in (0, 30, 2000)
        for v in (0, 120, 800)
        for p in (1, 2000, 90000)
        for n in (0, 3, 6)
    ]
    for l in listings:
        s = priority_score(l, now)
        assert s == priority_score(l, now)
        assert 0 <= s <= 100
