"""StayBook SDK type definitions.

This module exports all data model types used by the SDK.
"""

from staybook.types.auth import AuthEvent, Session, User
from staybook.types.listings import Listing, ListingBasics, ListingDraft, ListingSummary
from staybook.types.realtime import ChangeEvent, ChangeEventType
from staybook.types.reservations import DateRange, Reservation, ReservationStatus
from staybook.types.search import GuestCounts, Location, SearchParams, SearchTag
from staybook.types.trending import TrendingEntry, TrendingSnapshot

__all__ = [
    # Auth types
    "AuthEvent",
    "Session",
    "User",
    # Listing types
    "Listing",
    "ListingBasics",
    "ListingDraft",
    "ListingSummary",
    # Reservation types
    "DateRange",
    "Reservation",
    "ReservationStatus",
    # Change feed types
    "ChangeEvent",
    "ChangeEventType",
    # Search types
    "GuestCounts",
    "Location",
    "SearchParams",
    "SearchTag",
    # Trending types
    "TrendingEntry",
    "TrendingSnapshot",
]
