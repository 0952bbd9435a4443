"""Feed ranking: priority scoring, sort modes and display tags."""

from .scoring import ScoreBreakdown, priority_score, score_breakdown
from .sorting import SORT_OPTIONS, SortMode, sort_label, sort_listings
from .tags import Tag, TagType, derive_tags, hot_threshold, tag_listings

__all__ = [
    "SORT_OPTIONS",
    "ScoreBreakdown",
    "SortMode",
    "Tag",
    "TagType",
    "derive_tags",
    "hot_threshold",
    "priority_score",
    "score_breakdown",
    "sort_label",
    "sort_listings",
    "tag_listings",
]
