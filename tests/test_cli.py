from __future__ import annotations

import io
import json

import pytest

from campus_feed.cli import ingest
from campus_feed.cli.rank import main
from campus_feed.errors import StoreError


@pytest.fixture
def listings_file(tmp_path):
    data = [
        {
            "id": "prod-1",
            "title": "MacBook Air M1 2020",
            "price": 65000,
            "category": "electronics",
            "condition": "like_new",
            "college_id": "iit-delhi",
            "created_at": "2026-01-15T09:00:00Z",
            "view_count": 156,
        },
        {
            "id": "prod-2",
            "title": "Physics notes",
            "price": 200,
            "category": "books",
            "condition": "like_new",
            "college_id": "iit-delhi",
            "created_at": "2026-01-05T09:00:00Z",
        },
        {"id": "broken", "title": "No price", "college_id": "iit-delhi", "created_at": "2026-01-05T09:00:00Z"},
        {
            "id": "prod-3",
            "title": "Hero cycle",
            "price": 3000,
            "category": "cycles",
            "college_id": "iit-bombay",
            "created_at": "2026-01-15T09:00:00Z",
        },
    ]
    path = tmp_path / "listings.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_rank_prints_scored_listings(listings_file):
    out = io.StringIO()
    code = main([str(listings_file), "--college", "iit-delhi", "--now", "2026-01-15T12:00:00Z"], out=out)
    lines = out.getvalue().splitlines()
    assert code == 0
    assert "MacBook Air M1 2020" in lines[0]
    assert "fresh,hot" in lines[0]
    assert "quick_sale" in lines[1]
    assert lines[-1] == "2 of 2 listings"


def test_rank_filters_limits_and_explains(listings_file):
    out = io.StringIO()
    argv = [str(listings_file), "--college", "iit-delhi", "--category", "books", "--limit", "1", "--explain"]
    main(argv + ["--now", "2026-01-15T12:00:00Z"], out=out)
    lines = out.getvalue().splitlines()
    assert "Physics notes" in lines[0]
    assert "recency=35" in lines[0]
    assert lines[-1] == "1 of 1 listings"


def test_rank_rejects_bad_price_band(listings_file):
    with pytest.raises(SystemExit):
        main([str(listings_file), "--college", "iit-delhi", "--min-price", "10", "--max-price", "1"], out=io.StringIO())


class FakeStore:
    instances: list = []

    def __init__(self, url=None, fail=False):
        self.url = url
        self.fail = fail
        self.schema_ready = False
        self.saved = []
        FakeStore.instances.append(self)

    def init_schema(self):
        if self.fail:
            raise StoreError("could not connect to server")
        self.schema_ready = True

    def upsert_many(self, items):
        self.saved.extend(items)
        return len(self.saved)


@pytest.fixture
def fake_store(monkeypatch):
    FakeStore.instances = []
    monkeypatch.setenv("DB_URL", "postgresql://campus@localhost/campus")
    monkeypatch.setattr(ingest, "PostgresListingStore", FakeStore)
    return FakeStore


def test_ingest_loads_valid_listings(listings_file, fake_store):
    out = io.StringIO()
    assert ingest.main([str(listings_file)], out=out) == 0
    store = fake_store.instances[0]
    assert store.url == "postgresql://campus@localhost/campus"
    assert store.schema_ready
    assert [l.id for l in store.saved] == ["prod-1", "prod-2", "prod-3"]
    assert out.getvalue().strip() == "Inserted/updated 3 listings"


def test_ingest_store_failure_exits_non_zero(listings_file, monkeypatch, caplog):
    monkeypatch.setattr(ingest, "PostgresListingStore", lambda url=None: FakeStore(url, fail=True))
    out = io.StringIO()
    with caplog.at_level("ERROR", logger="campus_feed.cli.ingest"):
        assert ingest.main([str(listings_file)], out=out) == 1
    assert out.getvalue() == ""
    assert "could not connect" in caplog.text
