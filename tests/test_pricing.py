"""
Tests for stay pricing.
"""

from datetime import date, timedelta
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from staybook.pricing import SERVICE_FEE_RATE, quote
from staybook.types.reservations import DateRange


def test_three_nights_at_100() -> None:
    price = quote(100, DateRange(date(2024, 6, 1), date(2024, 6, 4)))

    assert price.nights == 3
    assert price.subtotal == Decimal("300.00")
    assert price.service_fee == Decimal("45.00")
    assert price.total == Decimal("345.00")


def test_rounds_half_up_to_cents() -> None:
    # 1 night at 0.10: fee 0.015 rounds up to 0.02
    price = quote("0.10", DateRange(date(2024, 6, 1), date(2024, 6, 2)))

    assert price.service_fee == Decimal("0.02")
    assert price.total == Decimal("0.12")


def test_float_rate_has_no_binary_noise() -> None:
    price = quote(99.9, DateRange(date(2024, 6, 1), date(2024, 6, 3)))

    assert price.subtotal == Decimal("199.80")
    assert price.total == Decimal("229.77")


@given(
    cents=st.integers(min_value=100, max_value=1_000_000),
    nights=st.integers(min_value=1, max_value=60),
)
@settings(max_examples=100)
def test_total_is_subtotal_plus_fee(cents: int, nights: int) -> None:
    """The total is the rounded nightly sum plus 15%, to the cent."""
    rate = Decimal(cents) / 100
    start = date(2024, 1, 1)
    price = quote(rate, DateRange(start, start + timedelta(days=nights)))

    exact = rate * nights * (1 + SERVICE_FEE_RATE)
    assert price.nights == nights
    assert price.subtotal == rate * nights
    assert abs(price.total - exact) <= Decimal("0.005")
    assert price.total.as_tuple().exponent == -2
