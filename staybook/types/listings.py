"""Listing-related data models."""

from dataclasses import dataclass, field
from datetime import datetime

from staybook.types.reservations import Reservation


@dataclass
class Listing:
    """A rentable unit."""

    listing_id: str
    user_id: str
    title: str
    description: str
    property_type: str
    access_type: str
    address: str
    latitude: float | None
    longitude: float | None
    max_guests: int
    bedrooms: int
    beds: int
    bathrooms: float
    price_per_night: float
    currency: str
    status: str  # "published" or "draft"
    amenities: list[str] = field(default_factory=list)
    photos: list[str] = field(default_factory=list)
    highlights: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    host_username: str | None = None
    reservations: list[Reservation] = field(default_factory=list)


@dataclass(frozen=True)
class ListingBasics:
    """Capacity counts collected by the wizard's basic-details step."""

    max_guests: int = 1
    bedrooms: int = 1
    beds: int = 1
    bathrooms: float = 1.0


@dataclass
class ListingDraft:
    """The listing wizard's form state, published as one row."""

    property_type: str = ""
    space_type: str = ""
    address: str = ""
    latitude: float | None = None
    longitude: float | None = None
    basics: ListingBasics = field(default_factory=ListingBasics)
    amenities: list[str] = field(default_factory=list)
    photos: list[str] = field(default_factory=list)
    highlights: list[str] = field(default_factory=list)
    title: str = ""
    description: str = ""
    price_per_night: float = 0.0
    currency: str = "USD"


@dataclass(frozen=True)
class ListingSummary:
    """What the review step shows."""

    title: str
    property_type: str
    space_type: str
    address: str
    max_guests: int
    bedrooms: int
    beds: int
    bathrooms: float
    price_per_night: float
    currency: str
    photo_count: int
    amenity_count: int
    highlight_count: int
