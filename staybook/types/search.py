"""Search-related data models."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass(frozen=True)
class GuestCounts:
    """Guests of a search; bounds are enforced by ``staybook.search``."""

    adults: int = 1
    children: int = 0
    infants: int = 0

    @property
    def total(self) -> int:
        return self.adults + self.children + self.infants


@dataclass(frozen=True)
class Location:
    """A searched place."""

    address: str
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class SearchParams:
    """Everything the search panel collects."""

    location: Location | None = None
    check_in: date | None = None
    check_out: date | None = None
    guests: GuestCounts = field(default_factory=GuestCounts)


@dataclass(frozen=True)
class SearchTag:
    """A removable chip summarising one part of the search."""

    tag_type: str  # "location", "dates" or "guests"
    label: str
    value: Any
