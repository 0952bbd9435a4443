from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except (TypeError, ValueError):
        return default


@dataclass
class FeedConfig:
    default_page_size: int = field(default_factory=lambda: _env_int("FEED_DEFAULT_PAGE_SIZE", 10))
    max_page_size: int = field(default_factory=lambda: _env_int("FEED_MAX_PAGE_SIZE", 50))
    # Unset means listings are served from memory (loaded from listings_file)
    db_url: Optional[str] = field(default_factory=lambda: os.environ.get("DB_URL") or None)
    listings_file: Path = field(default_factory=lambda: Path(os.environ.get("LISTINGS_FILE", "listings.json")))
    log_level: str = field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO"))

    def clamp_page_size(self, page_size: Optional[int]) -> int:
        if not page_size or page_size < 1:
            return min(self.default_page_size, self.max_page_size)
        return min(page_size, self.max_page_size)
