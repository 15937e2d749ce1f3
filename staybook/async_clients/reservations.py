"""Async reservations resource client."""

from typing import TYPE_CHECKING, Any

from staybook.availability import validate_range
from staybook.clients.reservations import TABLE, reservation_from_row, reservation_row
from staybook.exceptions import RemoteRejection
from staybook.types.reservations import DateRange, Reservation, ReservationStatus

if TYPE_CHECKING:
    from staybook.async_clients.store import AsyncTableStore


class AsyncReservationsClient:
    """Async client for reservation reads and bookings."""

    def __init__(self, store: "AsyncTableStore") -> None:
        """
        Initialize the async reservations client.

        Args:
            store: Async table store for making requests
        """
        self.store = store

    async def list_for_listing(
        self,
        listing_id: str,
        include_cancelled: bool = False,
    ) -> list[Reservation]:
        """Get the reservations of a listing, ordered by check-in."""
        filters: dict[str, Any] = {"listing_id": listing_id}
        if not include_cancelled:
            filters["status"] = ("neq", ReservationStatus.CANCELLED.value)

        rows = await self.store.select(TABLE, filters=filters, order="check_in_date")
        return [reservation_from_row(row) for row in rows]

    async def get(self, reservation_id: str) -> Reservation:
        row = await self.store.select(TABLE, filters={"id": reservation_id}, single=True)
        return reservation_from_row(row)

    async def create(
        self,
        listing_id: str,
        user_id: str,
        stay: DateRange,
        guests: int,
        total_price: Any,
    ) -> Reservation:
        """
        Book a stay.

        Raises:
            ValidationError: If the range is empty or reversed
            ConflictError: If the dates were taken server-side
        """
        validate_range(stay)
        rows = await self.store.insert(
            TABLE, reservation_row(listing_id, user_id, stay, guests, total_price)
        )
        if not rows:
            raise RemoteRejection("NO_DATA", "No data returned from the server")
        return reservation_from_row(rows[0])
