from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from campus_feed.models import Listing


NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_listing() -> Callable[..., Listing]:
    """Factory for listings; ``age_hours`` sets ``created_at`` relative to NOW."""
    counter = itertools.count(1)

    def _make(age_hours: float = 240, **overrides: object) -> Listing:
        n = next(counter)
        data: dict[str, object] = {
            "id": f"prod-{n}",
            "title": f"Listing number {n}",
            "description": "",
            "price": 1000,
            "category": "other",
            "condition": "good",
            "images": [],
            "seller_id": "user-1",
            "seller_name": "Rahul Sharma",
            "college_id": "iit-delhi",
            "college_name": "IIT Delhi",
            "status": "active",
            "created_at": NOW - timedelta(hours=age_hours),
            "view_count": 0,
        }
        data.update(overrides)
        return Listing(**data)

    return _make
