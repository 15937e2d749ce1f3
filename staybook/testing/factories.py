"""Sample-data builders for tests."""

from datetime import date, datetime, timezone
from typing import Any

from staybook.types.listings import Listing
from staybook.types.reservations import Reservation, ReservationStatus


def create_mock_listing(
    listing_id: str = "test-listing-id",
    user_id: str = "test-host-id",
    title: str = "Cozy cabin",
    **kwargs: Any,
) -> Listing:
    """
    Create a Listing with customizable fields.

    Args:
        listing_id: Listing ID
        user_id: Host user ID
        title: Listing title
        **kwargs: Additional fields to override

    Returns:
        Listing object
    """
    defaults = {
        "description": "A quiet place in the woods",
        "property_type": "cabin",
        "access_type": "entire",
        "address": "1 Forest Road, Asheville, NC",
        "latitude": 35.59,
        "longitude": -82.55,
        "max_guests": 4,
        "bedrooms": 2,
        "beds": 2,
        "bathrooms": 1.0,
        "price_per_night": 100.0,
        "currency": "USD",
        "status": "published",
        "amenities": ["wifi", "kitchen"],
        "photos": [],
        "highlights": ["peaceful"],
        "created_at": datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
    }
    defaults.update(kwargs)
    return Listing(
        listing_id=listing_id,
        user_id=user_id,
        title=title,
        **defaults,
    )


def create_mock_reservation(
    reservation_id: str = "test-reservation-id",
    listing_id: str = "test-listing-id",
    check_in: date = date(2024, 6, 1),
    check_out: date = date(2024, 6, 5),
    **kwargs: Any,
) -> Reservation:
    """
    Create a Reservation with customizable fields.

    Args:
        reservation_id: Reservation ID
        listing_id: Listing ID
        check_in: Check-in day
        check_out: Check-out day
        **kwargs: Additional fields to override

    Returns:
        Reservation object
    """
    defaults = {
        "user_id": "test-guest-id",
        "guests": 2,
        "total_price": 460.0,
        "status": ReservationStatus.CONFIRMED,
        "created_at": datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc),
    }
    defaults.update(kwargs)
    return Reservation(
        reservation_id=reservation_id,
        listing_id=listing_id,
        check_in=check_in,
        check_out=check_out,
        **defaults,
    )
