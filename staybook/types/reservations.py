"""Reservation-related data models."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class ReservationStatus(str, Enum):
    """Lifecycle status of a reservation."""

    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    @property
    def blocks_availability(self) -> bool:
        return self is not ReservationStatus.CANCELLED


@dataclass(frozen=True)
class DateRange:
    """A stay from ``start`` (check-in) up to ``end`` (check-out)."""

    start: date
    end: date

    @property
    def nights(self) -> int:
        return (self.end - self.start).days


@dataclass
class Reservation:
    """A booking of a listing for a date range."""

    reservation_id: str
    listing_id: str
    user_id: str
    check_in: date
    check_out: date
    guests: int
    total_price: float
    status: ReservationStatus
    created_at: datetime | None = None

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.check_in, self.check_out)
