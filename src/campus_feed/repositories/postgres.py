from __future__ import annotations

import json
import logging
import os
from contextlib import contextmanager
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import psycopg2
import psycopg2.extras

from campus_feed.errors import ListingNotFound, StoreError
from campus_feed.models import Listing


logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, title, description, price, category, condition, images, seller_id, seller_name, "
    "seller_avatar, hostel_name, college_id, college_name, status, created_at, updated_at, view_count"
)


def db_url() -> str:
    return os.environ.get("DB_URL", "postgresql://campus:campus@db:5432/campus")


@contextmanager
def connect(url: Optional[str] = None):
    try:
        conn = psycopg2.connect(url or db_url())
    except psycopg2.Error as e:
        raise StoreError(f"Could not connect to database: {e}") from e
    try:
        yield conn
    finally:
        conn.close()


def _row_to_listing(row: Sequence[object]) -> Listing:
    (
        lid, title, description, price, category, condition, images, seller_id, seller_name,
        seller_avatar, hostel_name, college_id, college_name, status, created_at, updated_at, view_count,
    ) = row
    if isinstance(images, str):
        images = json.loads(images)
    return Listing(
        id=str(lid),
        title=title,
        description=description or "",
        price=float(price),
        category=category,
        condition=condition,
        images=list(images or []),
        seller_id=seller_id or "",
        seller_name=seller_name or "",
        seller_avatar=seller_avatar,
        hostel_name=hostel_name,
        college_id=college_id,
        college_name=college_name or "",
        status=status,
        created_at=created_at,
        updated_at=updated_at,
        view_count=int(view_count or 0),
    )


def _listing_row(l: Listing) -> Tuple[object, ...]:
    return (
        l.id,
        l.title,
        l.description,
        float(l.price),
        str(getattr(l.category, "value", l.category)),
        l.condition.value,
        json.dumps(l.images),
        l.seller_id,
        l.seller_name,
        l.seller_avatar,
        l.hostel_name,
        l.college_id,
        l.college_name,
        l.status.value,
        l.created_at,
        l.updated_at,
        l.view_count,
    )


class PostgresListingStore:
    """Listing store on PostgreSQL.

    Only active listings of the requested college are returned as feed
    candidates; ordering is left to the feed.
    """

    def __init__(self, url: Optional[str] = None) -> None:
        self.url = url or db_url()

    def init_schema(self) -> None:
        with connect(self.url) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    CREATE TABLE IF NOT EXISTS listings (
                      id TEXT PRIMARY KEY,
                      title TEXT NOT NULL,
                      description TEXT NOT NULL DEFAULT '',
                      price DOUBLE PRECISION NOT NULL CHECK (price > 0),
                      category TEXT NOT NULL,
                      condition TEXT NOT NULL,
                      images JSONB NOT NULL DEFAULT '[]',
                      seller_id TEXT,
                      seller_name TEXT,
                      seller_avatar TEXT,
                      hostel_name TEXT,
                      college_id TEXT NOT NULL,
                      college_name TEXT,
                      status TEXT NOT NULL,
                      created_at TIMESTAMPTZ NOT NULL,
                      updated_at TIMESTAMPTZ,
                      view_count INTEGER NOT NULL DEFAULT 0
                    );
                    CREATE INDEX IF NOT EXISTS listings_college_status_idx ON listings(college_id, status);
                    """
                )
            conn.commit()

    def upsert_many(self, items: Iterable[Listing]) -> int:
        # De-duplicate by id to avoid ON CONFLICT affecting the same row twice
        rows_by_id: Dict[str, Tuple[object, ...]] = {l.id: _listing_row(l) for l in items}
        rows = list(rows_by_id.values())
        if not rows:
            return 0
        try:
            with connect(self.url) as conn:
                with conn.cursor() as cur:
                    psycopg2.extras.execute_values(
                        cur,
                        f"""
                        INSERT INTO listings ({_COLUMNS})
                        VALUES %s
                        ON CONFLICT (id) DO UPDATE SET
                          title = EXCLUDED.title,
                          description = EXCLUDED.description,
                          price = EXCLUDED.price,
                          category = EXCLUDED.category,
                          condition = EXCLUDED.condition,
                          images = EXCLUDED.images,
                          seller_avatar = EXCLUDED.seller_avatar,
                          hostel_name = EXCLUDED.hostel_name,
                          status = EXCLUDED.status,
                          updated_at = EXCLUDED.updated_at,
                          view_count = GREATEST(listings.view_count, EXCLUDED.view_count)
                        """,
                        rows,
                        page_size=200,
                    )
                conn.commit()
        except psycopg2.Error as e:
            raise StoreError(f"Failed to upsert listings: {e}") from e
        return len(rows)

    def candidates(self, college_id: str) -> List[Listing]:
        sql = f"SELECT {_COLUMNS} FROM listings WHERE college_id = %s AND status = 'active'"
        try:
            with connect(self.url) as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (college_id,))
                    rows = cur.fetchall()
        except psycopg2.Error as e:
            raise StoreError(f"Failed to fetch listings: {e}") from e

        out: List[Listing] = []
        for row in rows:
            try:
                out.append(_row_to_listing(row))
            except ValueError as e:
                # pydantic's ValidationError is a ValueError
                logger.warning("Skipping malformed listing row %r: %s", row[0], e)
        return out

    def get(self, listing_id: str) -> Listing:
        try:
            with connect(self.url) as conn:
                with conn.cursor() as cur:
                    cur.execute(f"SELECT {_COLUMNS} FROM listings WHERE id = %s", (listing_id,))
                    row = cur.fetchone()
        except psycopg2.Error as e:
            raise StoreError(f"Failed to fetch listing {listing_id!r}: {e}") from e
        if row is None:
            raise ListingNotFound(listing_id)
        return _row_to_listing(row)

    def record_view(self, listing_id: str) -> Listing:
        try:
            with connect(self.url) as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        f"UPDATE listings SET view_count = view_count + 1 WHERE id = %s RETURNING {_COLUMNS}",
                        (listing_id,),
                    )
                    row = cur.fetchone()
                conn.commit()
        except psycopg2.Error as e:
            raise StoreError(f"Failed to record view for {listing_id!r}: {e}") from e
        if row is None:
            raise ListingNotFound(listing_id)
        return _row_to_listing(row)
