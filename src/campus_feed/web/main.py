from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from campus_feed.config import FeedConfig
from campus_feed.errors import FeedError, ListingNotFound
from campus_feed.feed import SORT_OPTIONS
from campus_feed.filters import FilterSpec
from campus_feed.models import Category, Condition, category_icon, category_label, condition_description, condition_label
from campus_feed.repositories import load_store
from campus_feed.services import FeedQuery, FeedService
from campus_feed.utils.jsonify import jsonify
from campus_feed.utils.log import setup_logging


logger = logging.getLogger(__name__)

config = FeedConfig()
service = FeedService(load_store(config), config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.log_level)
    yield


app = FastAPI(title="Campus Marketplace Feed", lifespan=lifespan)


def _error(status: int, code: str, message: str, details: Any = None) -> JSONResponse:
    body: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        body["details"] = details
    return JSONResponse({"error": body}, status_code=status)


def _blank(s: Optional[str]) -> Optional[str]:
    # Forms send empty strings for untouched fields
    return s if s not in (None, "") else None


@app.get("/feed")
def feed(
    college_id: str = Query(..., description="College whose listings are shown"),
    category: Optional[str] = Query(None),
    min_price: Optional[str] = Query(None),
    max_price: Optional[str] = Query(None),
    condition: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None, description="priority, newest, price_low, price_high or popular"),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None),
) -> JSONResponse:
    try:
        filters = FilterSpec(
            category=_blank(category),
            min_price=_blank(min_price),
            max_price=_blank(max_price),
            condition=_blank(condition),
            search=search,
        )
        query = FeedQuery(
            college_id=college_id,
            filters=filters,
            sort=_blank(sort) or "priority",
            page=_blank(page) or 1,
            page_size=_blank(page_size),
        )
    except ValidationError as e:
        details = [{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()]
        return _error(422, "INVALID_FILTERS", "Invalid feed query", details)

    try:
        result = service.get_feed(query)
    except FeedError as e:
        logger.error("Feed fetch failed for college %s: %s", college_id, e)
        return _error(503, e.code, "Failed to fetch listings")
    return JSONResponse(jsonify(result))


@app.get("/listings/{listing_id}")
def listing_detail(listing_id: str) -> JSONResponse:
    try:
        entry = service.view_listing(listing_id)
    except ListingNotFound as e:
        return _error(404, e.code, "Listing not found")
    except FeedError as e:
        logger.error("Listing fetch failed for %s: %s", listing_id, e)
        return _error(503, e.code, "Failed to fetch listing")
    return JSONResponse(jsonify(entry))


@app.get("/sort-options")
def sort_options() -> JSONResponse:
    return JSONResponse(SORT_OPTIONS)


@app.get("/categories")
def categories() -> JSONResponse:
    return JSONResponse(
        [{"value": c.value, "label": category_label(c), "icon": category_icon(c)} for c in Category]
    )


@app.get("/conditions")
def conditions() -> JSONResponse:
    return JSONResponse(
        [{"value": c.value, "label": condition_label(c), "description": condition_description(c)} for c in Condition]
    )
