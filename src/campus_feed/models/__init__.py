from .listing import (
    CATEGORY_LABELS,
    CONDITION_LABELS,
    Category,
    Condition,
    Listing,
    ListingStatus,
    as_category,
    as_utc,
    category_icon,
    category_label,
    condition_description,
    condition_label,
)

__all__ = [
    "CATEGORY_LABELS",
    "CONDITION_LABELS",
    "Category",
    "Condition",
    "Listing",
    "ListingStatus",
    "as_category",
    "as_utc",
    "category_icon",
    "category_label",
    "condition_description",
    "condition_label",
]
