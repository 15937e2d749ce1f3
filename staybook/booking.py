"""
Booking flow for a single listing.

BookingSession holds what the reservation widget holds: the pending date
range, the guest count, the listing's blocking reservations and the last
error message. It moves through

    SELECTING_DATES -> SELECTING_GUESTS -> SUBMITTING -> CONFIRMED
                                                     +-> REJECTED -> SELECTING_DATES

Example:
    ```python
    booking = BookingSession(listing, client.reservations, client.auth)
    booking.load()
    booking.select_day(date(2024, 6, 1))
    booking.select_day(date(2024, 6, 4))
    booking.set_guests(2)
    reservation = booking.submit()
    ```
"""

from collections.abc import Callable
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from staybook.availability import blocked_days, blocking_ranges, has_overlap
from staybook.exceptions import (
    AuthExpiredError,
    ConflictError,
    RemoteRejection,
    TransientNetworkError,
    ValidationError,
)
from staybook.logging import get_logger
from staybook.pricing import PriceQuote, quote
from staybook.types.auth import Session
from staybook.types.listings import Listing
from staybook.types.reservations import DateRange, Reservation

if TYPE_CHECKING:
    from staybook.clients.reservations import ReservationsClient

logger = get_logger("booking")

OVERLAP_MESSAGE = "Selected dates overlap with an existing reservation"
MISSING_DATES_MESSAGE = "Please select check-in and check-out dates"
LOGIN_MESSAGE = "Please log in to make a reservation"


class SessionProvider(Protocol):
    def get_session(self) -> Session | None: ...


class BookingState(str, Enum):
    """Where a booking attempt stands."""

    SELECTING_DATES = "selecting_dates"
    SELECTING_GUESTS = "selecting_guests"
    SUBMITTING = "submitting"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class BookingSession:
    """State of one guest's attempt to book one listing."""

    def __init__(
        self,
        listing: Listing,
        reservations: "ReservationsClient",
        sessions: SessionProvider,
        today: Callable[[], date] = date.today,
        on_auth_expired: Callable[[], None] | None = None,
    ) -> None:
        """
        Args:
            listing: The listing being booked
            reservations: Client used to read and create reservations
            sessions: Source of the signed-in session (usually ``client.auth``)
            today: Returns the current date; injectable for tests
            on_auth_expired: Called when the backend rejects the session token
                             (usually ``client.auth.sign_out``)
        """
        self.listing = listing
        self.reservations = reservations
        self.sessions = sessions
        self.today = today
        self.on_auth_expired = on_auth_expired

        self.state = BookingState.SELECTING_DATES
        self.check_in: date | None = None
        self.check_out: date | None = None
        self.guests = 1
        self.error: str | None = None
        self.existing: list[DateRange] = []
        self.unavailable_days: set[date] = set()
        self.reservation: Reservation | None = None
        self.rejection: RemoteRejection | None = None

    def load(self) -> None:
        """Fetch the listing's reservations that still hold their dates."""
        booked = self.reservations.list_for_listing(self.listing.listing_id)
        self.existing = blocking_ranges(booked)
        self.unavailable_days = blocked_days(booked)

    @property
    def stay(self) -> DateRange | None:
        if self.check_in is None or self.check_out is None:
            return None
        return DateRange(self.check_in, self.check_out)

    @property
    def max_guests(self) -> int:
        return max(self.listing.max_guests, 1)

    def select_day(self, day: date) -> BookingState:
        """
        Handle a click on a calendar day.

        Past days are ignored. The first click (or any click once a range is
        complete, or one before the pending check-in) starts a new range;
        the next click completes it if the dates are free.

        Returns:
            The state after the click
        """
        if day < self.today() or self.state in (BookingState.SUBMITTING, BookingState.CONFIRMED):
            return self.state

        if self.check_in is None or self.check_out is not None or day < self.check_in:
            self.check_in = day
            self.check_out = None
            self.error = None
            self.state = BookingState.SELECTING_DATES
            return self.state

        try:
            conflict = has_overlap(DateRange(self.check_in, day), self.existing)
        except ValidationError as e:
            self.error = e.message
            return self.state

        if conflict:
            self.error = OVERLAP_MESSAGE
            return self.state

        self.check_out = day
        self.error = None
        self.state = BookingState.SELECTING_GUESTS
        return self.state

    def set_guests(self, count: int) -> int:
        """Set the guest count, clamped to 1..max_guests."""
        self.guests = clamp(count, 1, self.max_guests)
        return self.guests

    def increment_guests(self) -> int:
        return self.set_guests(self.guests + 1)

    def decrement_guests(self) -> int:
        return self.set_guests(self.guests - 1)

    def quote(self) -> PriceQuote | None:
        """Price breakdown of the selected range, or None until it is complete."""
        stay = self.stay
        if stay is None:
            return None
        return quote(self.listing.price_per_night, stay)

    @property
    def confirmation_path(self) -> str | None:
        """Where the confirmation view lives once booked."""
        if self.reservation is None:
            return None
        return f"/reservations/{self.reservation.reservation_id}"

    def submit(self) -> Reservation:
        """
        Create the reservation.

        A confirmed booking is final: submitting again returns the same
        reservation without another request.

        Returns:
            The confirmed reservation

        Raises:
            ValidationError: If no full range is selected, it became
                             unavailable, or a submission is in flight
            AuthExpiredError: If nobody is signed in or the session was
                              rejected (``on_auth_expired`` is called first)
            RemoteRejection: If the backend declined (the attempt resets to
                             date selection with ``error`` set)
            TransientNetworkError: If the backend could not be reached (the
                                   selection is kept so the user can retry)
        """
        if self.state is BookingState.CONFIRMED and self.reservation is not None:
            return self.reservation
        if self.state is BookingState.SUBMITTING:
            raise ValidationError("Reservation is already being submitted", code="SUBMIT_IN_PROGRESS")

        stay = self.stay
        if stay is None:
            self.error = MISSING_DATES_MESSAGE
            raise ValidationError(MISSING_DATES_MESSAGE, code="MISSING_DATES")

        if has_overlap(stay, self.existing):
            self.error = OVERLAP_MESSAGE
            self.check_out = None
            self.state = BookingState.SELECTING_DATES
            raise ValidationError(OVERLAP_MESSAGE, code="DATES_UNAVAILABLE")

        session = self.sessions.get_session()
        if session is None:
            self.error = LOGIN_MESSAGE
            raise AuthExpiredError("NO_SESSION", LOGIN_MESSAGE)

        self.state = BookingState.SUBMITTING
        self.error = None
        price = quote(self.listing.price_per_night, stay)
        guests = self.set_guests(self.guests)

        try:
            reservation = self.reservations.create(
                listing_id=self.listing.listing_id,
                user_id=session.user.user_id,
                stay=stay,
                guests=guests,
                total_price=price.total,
            )
        except RemoteRejection as e:
            self._reject(e)
            raise
        except AuthExpiredError as e:
            self.error = LOGIN_MESSAGE
            self.state = BookingState.SELECTING_GUESTS
            logger.warning("Session rejected while booking listing %s: %s", self.listing.listing_id, e)
            if self.on_auth_expired is not None:
                self.on_auth_expired()
            raise
        except TransientNetworkError as e:
            self.error = e.message
            self.state = BookingState.SELECTING_GUESTS
            raise

        self.reservation = reservation
        self.existing.append(reservation.date_range)
        self.state = BookingState.CONFIRMED
        logger.info(
            "Reservation %s confirmed for listing %s",
            reservation.reservation_id,
            self.listing.listing_id,
        )
        return reservation

    def _reject(self, rejection: RemoteRejection) -> None:
        self.rejection = rejection
        self.state = BookingState.REJECTED
        logger.warning("Reservation rejected for listing %s: %s", self.listing.listing_id, rejection)

        self.error = OVERLAP_MESSAGE if isinstance(rejection, ConflictError) else (
            rejection.message or "Failed to make reservation"
        )
        self.check_out = None
        self.state = BookingState.SELECTING_DATES
