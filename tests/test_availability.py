"""
Property-based tests for the availability checker.
"""

from datetime import date, timedelta

import pytest
from hypothesis import HealthCheck, assume, given, settings
from hypothesis import strategies as st

from staybook.availability import blocked_days, blocking_ranges, has_overlap, validate_range
from staybook.exceptions import ValidationError
from staybook.testing import create_mock_reservation
from staybook.types.reservations import DateRange, ReservationStatus

day_strategy = st.dates(min_value=date(2024, 1, 1), max_value=date(2026, 12, 31))
nights_strategy = st.integers(min_value=1, max_value=30)


@st.composite
def range_strategy(draw) -> DateRange:
    start = draw(day_strategy)
    return DateRange(start, start + timedelta(days=draw(nights_strategy)))


def nights(stay: DateRange) -> set[date]:
    return {stay.start + timedelta(days=n) for n in range(stay.nights)}


class TestBoundaries:
    def test_turnover_day_counts_as_overlap(self) -> None:
        candidate = DateRange(date(2024, 6, 1), date(2024, 6, 5))
        existing = [DateRange(date(2024, 6, 5), date(2024, 6, 10))]

        assert has_overlap(candidate, existing) is True

    def test_gap_of_one_day_is_free(self) -> None:
        candidate = DateRange(date(2024, 6, 1), date(2024, 6, 5))
        existing = [DateRange(date(2024, 6, 6), date(2024, 6, 10))]

        assert has_overlap(candidate, existing) is False

    def test_same_start_overlaps(self) -> None:
        candidate = DateRange(date(2024, 6, 1), date(2024, 6, 3))
        existing = [DateRange(date(2024, 6, 1), date(2024, 6, 10))]

        assert has_overlap(candidate, existing) is True

    def test_same_end_overlaps(self) -> None:
        candidate = DateRange(date(2024, 6, 8), date(2024, 6, 10))
        existing = [DateRange(date(2024, 6, 1), date(2024, 6, 10))]

        assert has_overlap(candidate, existing) is True

    def test_no_existing_reservations(self) -> None:
        assert has_overlap(DateRange(date(2024, 6, 1), date(2024, 6, 2)), []) is False

    @pytest.mark.parametrize(
        "start,end",
        [
            (date(2024, 6, 5), date(2024, 6, 5)),
            (date(2024, 6, 5), date(2024, 6, 1)),
        ],
    )
    def test_empty_or_reversed_range_rejected(self, start: date, end: date) -> None:
        with pytest.raises(ValidationError) as exc_info:
            has_overlap(DateRange(start, end), [])

        assert exc_info.value.code == "INVALID_DATE_RANGE"

    def test_invalid_range_rejected_before_comparing(self) -> None:
        class Exploding:
            def __iter__(self):
                raise AssertionError("existing ranges must not be read")

        with pytest.raises(ValidationError):
            has_overlap(DateRange(date(2024, 6, 5), date(2024, 6, 1)), Exploding())


@given(a=range_strategy(), b=range_strategy())
@settings(max_examples=100, suppress_health_check=[HealthCheck.filter_too_much])
def test_sharing_a_night_is_overlap(a: DateRange, b: DateRange) -> None:
    """Ranges that share any night always overlap."""
    assume(nights(a) & nights(b))

    assert has_overlap(a, [b]) is True


@given(a=range_strategy(), gap=st.integers(min_value=1, max_value=60), b_nights=nights_strategy)
@settings(max_examples=100)
def test_separated_ranges_do_not_overlap(a: DateRange, gap: int, b_nights: int) -> None:
    """A range starting at least one full day after another ends is free."""
    b_start = a.end + timedelta(days=gap)
    b = DateRange(b_start, b_start + timedelta(days=b_nights))

    assert has_overlap(a, [b]) is False
    assert has_overlap(b, [a]) is False


@given(a=range_strategy(), b=range_strategy())
@settings(max_examples=100)
def test_overlap_is_symmetric(a: DateRange, b: DateRange) -> None:
    assert has_overlap(a, [b]) == has_overlap(b, [a])


@given(candidate=range_strategy(), existing=st.lists(range_strategy(), max_size=10))
@settings(max_examples=100)
def test_overlap_with_any(candidate: DateRange, existing: list[DateRange]) -> None:
    """Checking a list equals checking each element."""
    assert has_overlap(candidate, existing) == any(has_overlap(candidate, [e]) for e in existing)


@given(stay=range_strategy())
@settings(max_examples=50)
def test_valid_ranges_pass_validation(stay: DateRange) -> None:
    validate_range(stay)


class TestBlockedDays:
    def test_cancelled_reservations_do_not_block(self) -> None:
        reservations = [
            create_mock_reservation("a", check_in=date(2024, 6, 1), check_out=date(2024, 6, 3)),
            create_mock_reservation(
                "b",
                check_in=date(2024, 6, 10),
                check_out=date(2024, 6, 12),
                status=ReservationStatus.CANCELLED,
            ),
            create_mock_reservation(
                "c",
                check_in=date(2024, 5, 1),
                check_out=date(2024, 5, 2),
                status=ReservationStatus.COMPLETED,
            ),
        ]

        assert blocked_days(reservations) == {date(2024, 6, 1), date(2024, 6, 2), date(2024, 5, 1)}
        assert len(blocking_ranges(reservations)) == 2

    def test_check_out_day_is_not_blocked(self) -> None:
        reservations = [create_mock_reservation(check_in=date(2024, 6, 1), check_out=date(2024, 6, 5))]

        assert date(2024, 6, 5) not in blocked_days(reservations)
        assert date(2024, 6, 4) in blocked_days(reservations)
