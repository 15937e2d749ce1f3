"""
Reservation availability checks.

A stay occupies the nights from check-in up to (not including) check-out.
Two stays conflict when they share a night, and also when one ends on the
day the other starts: same-day turnovers are not offered.
"""

from collections.abc import Iterable
from datetime import date, timedelta

from staybook.exceptions import ValidationError
from staybook.types.reservations import DateRange, Reservation


def validate_range(candidate: DateRange) -> None:
    """
    Reject a range that does not span at least one night.

    Raises:
        ValidationError: If ``candidate.start >= candidate.end``
    """
    if candidate.start >= candidate.end:
        raise ValidationError(
            f"Check-out ({candidate.end.isoformat()}) must be after "
            f"check-in ({candidate.start.isoformat()})",
            code="INVALID_DATE_RANGE",
        )


def ranges_conflict(a: DateRange, b: DateRange) -> bool:
    """True if ``a`` and ``b`` share a night or touch at a boundary day."""
    return a.start <= b.end and b.start <= a.end


def has_overlap(candidate: DateRange, existing: Iterable[DateRange]) -> bool:
    """
    Check a proposed stay against a listing's blocking reservations.

    Args:
        candidate: Proposed stay
        existing: Ranges of the listing's non-cancelled reservations

    Returns:
        True if the candidate conflicts with any existing range

    Raises:
        ValidationError: If the candidate is empty or reversed
    """
    validate_range(candidate)
    return any(ranges_conflict(candidate, other) for other in existing)


def blocking_ranges(reservations: Iterable[Reservation]) -> list[DateRange]:
    """Ranges of the reservations that still hold their dates."""
    return [r.date_range for r in reservations if r.status.blocks_availability]


def blocked_days(reservations: Iterable[Reservation]) -> set[date]:
    """Every night held by a blocking reservation, for greying out a calendar."""
    days: set[date] = set()
    for stay in blocking_ranges(reservations):
        current = stay.start
        while current < stay.end:
            days.add(current)
            current += timedelta(days=1)
    return days
