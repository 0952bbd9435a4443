from .engine import FilterEngine, FilterResult, FilterSpec, filter_listings

__all__ = ["FilterEngine", "FilterResult", "FilterSpec", "filter_listings"]
