"""
Host dashboard: a host's listings, their booking metrics and management.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any

from staybook.exceptions import ValidationError
from staybook.logging import get_logger
from staybook.pricing import to_cents
from staybook.timeutil import utc_now
from staybook.types.listings import Listing
from staybook.types.reservations import Reservation, ReservationStatus

if TYPE_CHECKING:
    from staybook.clients.listings import ListingsClient

logger = get_logger("host")

OCCUPANCY_WINDOW_DAYS = 30

ALL_STATUSES = "all"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)

SORT_KEYS = {
    "newest": (lambda listing: listing.created_at or _EPOCH, True),
    "oldest": (lambda listing: listing.created_at or _EPOCH, False),
    "price-high": (lambda listing: listing.price_per_night, True),
    "price-low": (lambda listing: listing.price_per_night, False),
}


@dataclass(frozen=True)
class ReservationMetrics:
    upcoming: int
    completed: int
    revenue: Decimal


def reservation_metrics(reservations: Iterable[Reservation], now: datetime) -> ReservationMetrics:
    """
    Count a listing's bookings.

    Upcoming are confirmed stays that have not started; revenue is the sum
    of completed stays only.
    """
    today = now.date()
    upcoming = 0
    completed = 0
    revenue = Decimal("0")
    for reservation in reservations:
        if reservation.status is ReservationStatus.CONFIRMED and reservation.check_in > today:
            upcoming += 1
        elif reservation.status is ReservationStatus.COMPLETED:
            completed += 1
            revenue += Decimal(str(reservation.total_price))
    return ReservationMetrics(upcoming=upcoming, completed=completed, revenue=to_cents(revenue))


def occupancy_rate(
    reservations: Iterable[Reservation],
    now: datetime,
    window_days: int = OCCUPANCY_WINDOW_DAYS,
) -> int:
    """
    Percentage of the last ``window_days`` nights that were booked.

    The window is the ``window_days`` nights before today; confirmed and
    completed stays count, each night once however many stays cover it.
    """
    if window_days <= 0:
        raise ValueError("window_days must be positive")
    window_end = now.date()
    window_start = window_end - timedelta(days=window_days)

    booked: set[date] = set()
    for reservation in reservations:
        if not reservation.status.blocks_availability:
            continue
        night = max(reservation.check_in, window_start)
        last = min(reservation.check_out, window_end)
        while night < last:
            booked.add(night)
            night += timedelta(days=1)

    rate = Decimal(len(booked) * 100) / Decimal(window_days)
    return int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def filter_and_sort(
    listings: Iterable[Listing],
    status: str = ALL_STATUSES,
    sort: str = "newest",
) -> list[Listing]:
    """
    Filter a host's listings by status and order them.

    Args:
        status: "all", "published" or "draft"
        sort: "newest", "oldest", "price-high" or "price-low"

    Raises:
        ValueError: For an unknown sort
    """
    if sort not in SORT_KEYS:
        raise ValueError(f"Unknown sort: {sort}")
    key, reverse = SORT_KEYS[sort]
    kept = [listing for listing in listings if status == ALL_STATUSES or listing.status == status]
    return sorted(kept, key=key, reverse=reverse)


def confirm_delete(listing: Listing, typed_title: str) -> None:
    """
    Check the host typed the listing's title exactly.

    Raises:
        ValidationError: If the typed text differs
    """
    if typed_title != listing.title:
        raise ValidationError(
            "Please type the listing title exactly to confirm deletion",
            code="DELETE_NOT_CONFIRMED",
        )


class HostDashboard:
    """A host's listings with their reservations."""

    def __init__(
        self,
        listings: "ListingsClient",
        user_id: str,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.client = listings
        self.user_id = user_id
        self.clock = clock
        self.listings: list[Listing] = []

    def load(self) -> list[Listing]:
        """Fetch the host's listings, replacing what was loaded before."""
        self.listings = self.client.list_for_host(self.user_id)
        return self.listings

    def view(self, status: str = ALL_STATUSES, sort: str = "newest") -> list[Listing]:
        return filter_and_sort(self.listings, status, sort)

    def metrics(self, listing: Listing) -> ReservationMetrics:
        return reservation_metrics(listing.reservations, self.clock())

    def occupancy(self, listing: Listing) -> int:
        return occupancy_rate(listing.reservations, self.clock())

    def edit(self, listing_id: str, changes: dict[str, Any]) -> Listing:
        """Apply an edit and swap the updated listing into the loaded list."""
        updated = self.client.update(listing_id, changes)
        for index, listing in enumerate(self.listings):
            if listing.listing_id == listing_id:
                # The update response carries no reservations
                updated.reservations = listing.reservations
                self.listings[index] = updated
        return updated

    def delete(self, listing: Listing, typed_title: str) -> None:
        """
        Delete a listing once its title is confirmed.

        Raises:
            ValidationError: If the typed title does not match
            RemoteRejection: If the backend declines
        """
        confirm_delete(listing, typed_title)
        self.client.delete(listing.listing_id)
        self.listings = [item for item in self.listings if item.listing_id != listing.listing_id]
        logger.info("Deleted listing %s", listing.listing_id)
