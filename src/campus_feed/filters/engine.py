from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from campus_feed.models import Category, Condition, Listing, as_category


class FilterSpec(BaseModel):
    """Optional feed constraints; a missing field places no constraint.

    A blank or whitespace-only ``search`` counts as missing, so it matches
    every listing.
    """

    category: Optional[Union[Category, str]] = Field(default=None, union_mode="left_to_right")
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, ge=0)
    condition: Optional[Condition] = None
    search: Optional[str] = None

    @field_validator("condition", "search", mode="before")
    @classmethod
    def _blank_is_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("category", mode="before")
    @classmethod
    def _known_category(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        cat = as_category(v)
        return cat if cat is not None else v

    @model_validator(mode="after")
    def _check_price_band(self) -> "FilterSpec":
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price must not exceed max_price")
        return self

    def is_empty(self) -> bool:
        return all(v is None for v in self.model_dump().values())


@dataclass
class FilterResult:
    included: bool
    reasons: List[str] = field(default_factory=list)


class FilterEngine:
    """Apply the conjunctive predicates of a ``FilterSpec`` to single listings."""

    def __init__(self, spec: Optional[FilterSpec] = None) -> None:
        self.spec = spec or FilterSpec()
        self._search = self.spec.search.lower() if self.spec.search else None

    def apply(self, listing: Listing) -> FilterResult:
        spec = self.spec

        if spec.category is not None and listing.category != spec.category:
            return FilterResult(False, ["category_mismatch"])

        # Price band, both bounds inclusive
        if spec.min_price is not None and listing.price < spec.min_price:
            return FilterResult(False, ["price_below_min"])
        if spec.max_price is not None and listing.price > spec.max_price:
            return FilterResult(False, ["price_above_max"])

        if spec.condition is not None and listing.condition != spec.condition:
            return FilterResult(False, ["condition_mismatch"])

        if self._search is not None:
            if self._search not in listing.title.lower() and self._search not in (listing.description or "").lower():
                return FilterResult(False, ["search_miss"])

        return FilterResult(True)


def filter_listings(listings: Iterable[Listing], spec: Optional[FilterSpec] = None) -> List[Listing]:
    """Keep the listings matching ``spec``, preserving their order."""
    if spec is None or spec.is_empty():
        return list(listings)
    engine = FilterEngine(spec)
    return [l for l in listings if engine.apply(l).included]
