"""Data models for marketplace listings."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class Category(str, Enum):
    ELECTRONICS = "electronics"
    FURNITURE = "furniture"
    BOOKS = "books"
    CLOTHING = "clothing"
    SPORTS = "sports"
    KITCHEN = "kitchen"
    DECOR = "decor"
    CYCLES = "cycles"
    OTHER = "other"


class Condition(str, Enum):
    NEW = "new"
    LIKE_NEW = "like_new"
    GOOD = "good"
    FAIR = "fair"


class ListingStatus(str, Enum):
    DRAFT = "draft"
    PENDING_PAYMENT = "pending_payment"
    ACTIVE = "active"
    SOLD = "sold"
    EXPIRED = "expired"


CATEGORY_LABELS = {
    Category.ELECTRONICS: ("Electronics", "📱"),
    Category.FURNITURE: ("Furniture", "🪑"),
    Category.BOOKS: ("Books", "📚"),
    Category.CLOTHING: ("Clothing", "👕"),
    Category.SPORTS: ("Sports", "🏀"),
    Category.KITCHEN: ("Kitchen", "🍳"),
    Category.DECOR: ("Decor", "🖼️"),
    Category.CYCLES: ("Cycles", "🚲"),
    Category.OTHER: ("Other", "📦"),
}

CONDITION_LABELS = {
    Condition.NEW: ("New", "Brand new, unused item with tags"),
    Condition.LIKE_NEW: ("Like New", "Used only once or twice, excellent condition"),
    Condition.GOOD: ("Good", "Used but well maintained, minor wear"),
    Condition.FAIR: ("Fair", "Shows visible wear, fully functional"),
}


def as_category(value: object) -> Optional[Category]:
    """Return the ``Category`` for ``value`` or None when it is not a known one."""
    if isinstance(value, Category):
        return value
    try:
        return Category(str(value).strip().lower())
    except ValueError:
        return None


def category_label(value: object) -> str:
    cat = as_category(value)
    return CATEGORY_LABELS[cat][0] if cat else str(value)


def category_icon(value: object) -> str:
    cat = as_category(value)
    return CATEGORY_LABELS[cat][1] if cat else CATEGORY_LABELS[Category.OTHER][1]


def condition_label(value: Condition) -> str:
    return CONDITION_LABELS[value][0]


def condition_description(value: Condition) -> str:
    return CONDITION_LABELS[value][1]


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Listing(BaseModel):
    """A single marketplace item offered to students of one college.

    Unknown categories are kept as plain strings rather than rejected so a
    single odd record cannot take the whole feed down; scoring falls back to a
    default reference price for them.
    """

    id: str
    title: str
    description: str = ""
    price: float = Field(gt=0)
    category: Union[Category, str] = Field(default=Category.OTHER, union_mode="left_to_right")
    condition: Condition = Condition.GOOD
    images: List[str] = Field(default_factory=list)
    seller_id: str = ""
    seller_name: str = ""
    seller_avatar: Optional[str] = None
    hostel_name: Optional[str] = None
    college_id: str = ""
    college_name: str = ""
    status: ListingStatus = ListingStatus.ACTIVE
    created_at: datetime
    updated_at: Optional[datetime] = None
    view_count: int = Field(default=0, ge=0)

    @field_validator("category", mode="before")
    @classmethod
    def _known_category(cls, v: object) -> object:
        # "Books" and " books" are the books category
        cat = as_category(v)
        return cat if cat is not None else v

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else None

    @property
    def has_seller_avatar(self) -> bool:
        return bool(self.seller_avatar)

    @property
    def has_hostel_name(self) -> bool:
        return bool(self.hostel_name)

    @property
    def image_count(self) -> int:
        return len(self.images)
