"""Trending-related data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class TrendingEntry:
    """One row of the ranking function's output."""

    listing_id: str
    is_trending: bool


@dataclass(frozen=True)
class TrendingSnapshot:
    """Trending listing ids as of ``fetched_at``. Replaced, never mutated."""

    listing_ids: tuple[str, ...]
    fetched_at: datetime
