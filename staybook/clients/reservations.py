"""Reservations resource client."""

from typing import TYPE_CHECKING, Any

from staybook.availability import validate_range
from staybook.exceptions import RemoteRejection
from staybook.timeutil import parse_day, parse_timestamp
from staybook.types.reservations import DateRange, Reservation, ReservationStatus

if TYPE_CHECKING:
    from staybook.clients.store import TableStore

TABLE = "reservations"


def reservation_from_row(row: dict[str, Any]) -> Reservation:
    """Build a Reservation from a ``reservations`` row."""
    return Reservation(
        reservation_id=row["id"],
        listing_id=row.get("listing_id", ""),
        user_id=row.get("user_id", ""),
        check_in=parse_day(row["check_in_date"]),
        check_out=parse_day(row["check_out_date"]),
        guests=row.get("guests", 1),
        total_price=float(row.get("total_price") or 0),
        status=ReservationStatus(row.get("status", "confirmed")),
        created_at=parse_timestamp(row.get("created_at")),
    )


def reservation_row(
    listing_id: str,
    user_id: str,
    stay: DateRange,
    guests: int,
    total_price: Any,
) -> dict[str, Any]:
    return {
        "listing_id": listing_id,
        "user_id": user_id,
        "check_in_date": stay.start.isoformat(),
        "check_out_date": stay.end.isoformat(),
        "guests": guests,
        "total_price": float(total_price),
        "status": ReservationStatus.CONFIRMED.value,
    }


class ReservationsClient:
    """Client for reservation reads and bookings."""

    def __init__(self, store: "TableStore") -> None:
        """
        Initialize the reservations client.

        Args:
            store: Table store for making requests
        """
        self.store = store

    def list_for_listing(
        self,
        listing_id: str,
        include_cancelled: bool = False,
    ) -> list[Reservation]:
        """
        Get the reservations of a listing.

        Args:
            listing_id: The listing identifier
            include_cancelled: Also return cancelled reservations

        Returns:
            Reservations ordered by check-in
        """
        filters: dict[str, Any] = {"listing_id": listing_id}
        if not include_cancelled:
            filters["status"] = ("neq", ReservationStatus.CANCELLED.value)

        rows = self.store.select(TABLE, filters=filters, order="check_in_date")
        return [reservation_from_row(row) for row in rows]

    def get(self, reservation_id: str) -> Reservation:
        """
        Get a reservation by id.

        Raises:
            NotFoundError: If no such reservation is visible to the user
        """
        row = self.store.select(TABLE, filters={"id": reservation_id}, single=True)
        return reservation_from_row(row)

    def get_with_listing(self, reservation_id: str) -> dict[str, Any]:
        """
        Get a reservation joined with its listing and host, as shown on the
        confirmation page.

        Returns:
            The raw row with an embedded ``listings`` object
        """
        return self.store.select(
            TABLE,
            filters={"id": reservation_id},
            columns=(
                "*, listings(title, address, photos, property_type, "
                "profiles:user_id(username))"
            ),
            single=True,
        )

    def create(
        self,
        listing_id: str,
        user_id: str,
        stay: DateRange,
        guests: int,
        total_price: Any,
    ) -> Reservation:
        """
        Book a stay.

        The backend enforces non-overlap too; losing a race to another
        booking raises ConflictError.

        Args:
            listing_id: The listing identifier
            user_id: The guest's user id
            stay: Check-in and check-out dates
            guests: Number of guests
            total_price: Price including the service fee

        Returns:
            The confirmed Reservation

        Raises:
            ValidationError: If the range is empty or reversed
            ConflictError: If the dates were taken server-side
        """
        validate_range(stay)
        rows = self.store.insert(
            TABLE, reservation_row(listing_id, user_id, stay, guests, total_price)
        )
        if not rows:
            raise RemoteRejection("NO_DATA", "No data returned from the server")
        return reservation_from_row(rows[0])
