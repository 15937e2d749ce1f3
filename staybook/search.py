"""
Search panel state and the browse grid's filtering.

Everything here except RecentSearches is a pure function of its inputs;
tags and filtered listings are recomputed on read rather than stored.
"""

import calendar
from collections.abc import Iterable
from dataclasses import replace
from datetime import date, datetime

from staybook.logging import get_logger
from staybook.storage import LocalStore
from staybook.timeutil import utc_now
from staybook.types.listings import Listing
from staybook.types.search import GuestCounts, SearchParams, SearchTag

logger = get_logger("search")

GUEST_LIMITS: dict[str, tuple[int, int]] = {
    "adults": (1, 16),
    "children": (0, 15),
    "infants": (0, 5),
}

RECENT_SEARCHES_KEY = "recent_searches"
RECENT_SEARCHES_LIMIT = 5

TRENDING_CATEGORY = "trending"
NEW_CATEGORY = "new"


def clamp_guests(guests: GuestCounts) -> GuestCounts:
    """Bring each guest count within its bounds."""
    values = {}
    for kind, (low, high) in GUEST_LIMITS.items():
        values[kind] = max(low, min(getattr(guests, kind), high))
    return GuestCounts(**values)


def adjust_guests(guests: GuestCounts, kind: str, increment: bool = True) -> GuestCounts:
    """
    Step one guest count by one, clamped to its bounds.

    Raises:
        ValueError: For a kind other than adults, children or infants
    """
    if kind not in GUEST_LIMITS:
        raise ValueError(f"Unknown guest kind: {kind}")
    value = getattr(guests, kind) + (1 if increment else -1)
    return clamp_guests(replace(guests, **{kind: value}))


def format_day(day: date) -> str:
    return f"{day:%b} {day.day}"


def search_tags(params: SearchParams) -> list[SearchTag]:
    """
    The removable chips shown for a search.

    Location when an address is set, dates once both ends are chosen
    (``"Jun 1 - Jun 5"``), guests when more than one.
    """
    tags = []
    if params.location is not None and params.location.address:
        tags.append(SearchTag("location", params.location.address, params.location))
    if params.check_in is not None and params.check_out is not None:
        label = f"{format_day(params.check_in)} - {format_day(params.check_out)}"
        tags.append(SearchTag("dates", label, (params.check_in, params.check_out)))
    total = params.guests.total
    if total > 1:
        tags.append(SearchTag("guests", f"{total} guests", params.guests))
    return tags


def remove_tag(params: SearchParams, tag: SearchTag) -> SearchParams:
    """The search with the part behind ``tag`` reset."""
    if tag.tag_type == "location":
        return replace(params, location=None)
    if tag.tag_type == "dates":
        return replace(params, check_in=None, check_out=None)
    if tag.tag_type == "guests":
        return replace(params, guests=GuestCounts())
    raise ValueError(f"Unknown tag type: {tag.tag_type}")


class RecentSearches:
    """
    The last few searched addresses, most recent first.

    The list lives in LocalStore and is read and replaced wholesale on
    every change.
    """

    def __init__(
        self,
        store: LocalStore,
        key: str = RECENT_SEARCHES_KEY,
        limit: int = RECENT_SEARCHES_LIMIT,
    ) -> None:
        self.store = store
        self.key = key
        self.limit = limit

    def items(self) -> list[str]:
        stored = self.store.get(self.key) or []
        if not isinstance(stored, list):
            logger.warning("Ignoring malformed recent searches")
            return []
        return [item for item in stored if isinstance(item, str)][: self.limit]

    def add(self, address: str) -> list[str]:
        """Put ``address`` first, dropping any earlier copy and the oldest overflow."""
        address = address.strip()
        if not address:
            return self.items()
        updated = [address, *(item for item in self.items() if item != address)][: self.limit]
        self.store.set(self.key, updated)
        return updated

    def remove(self, address: str) -> list[str]:
        updated = [item for item in self.items() if item != address]
        self.store.set(self.key, updated)
        return updated

    def clear(self) -> None:
        self.store.remove(self.key)


def one_month_before(now: datetime) -> datetime:
    """Same day and time a calendar month earlier, clamped to the month's end."""
    year, month = (now.year, now.month - 1) if now.month > 1 else (now.year - 1, 12)
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def matches_category(
    listing: Listing,
    category: str,
    trending_ids: Iterable[str],
    now: datetime,
) -> bool:
    if category == TRENDING_CATEGORY:
        return listing.listing_id in set(trending_ids)
    if listing.property_type == category:
        return True
    if category in listing.amenities or category in listing.highlights:
        return True
    if category == NEW_CATEGORY:
        return listing.created_at is not None and listing.created_at > one_month_before(now)
    return False


def filter_listings(
    listings: Iterable[Listing],
    location: str | None = None,
    category: str | None = None,
    trending_ids: Iterable[str] = (),
    now: datetime | None = None,
) -> list[Listing]:
    """
    Narrow the browse grid.

    Args:
        listings: Published listings
        location: Case-insensitive substring of the address
        category: One filter: "trending", "new", a property type, an amenity
                  or a highlight
        trending_ids: Current trending listing ids (from TrendingCache)
        now: Reference time for "new"; defaults to the current UTC time

    Returns:
        The listings that pass, in their original order
    """
    now = now or utc_now()
    needle = location.strip().lower() if location else ""
    trending = set(trending_ids)

    result = []
    for listing in listings:
        if needle and needle not in listing.address.lower():
            continue
        if category and not matches_category(listing, category, trending, now):
            continue
        result.append(listing)
    return result
