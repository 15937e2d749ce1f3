"""Stay pricing."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from staybook.types.reservations import DateRange

SERVICE_FEE_RATE = Decimal("0.15")
_CENTS = Decimal("0.01")


def to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PriceQuote:
    """Breakdown shown under the calendar and sent with the reservation."""

    nights: int
    price_per_night: Decimal
    subtotal: Decimal
    service_fee: Decimal
    total: Decimal


def quote(price_per_night: float | Decimal | str, stay: DateRange) -> PriceQuote:
    """
    Price a stay: nights at the nightly rate plus the service fee.

    Args:
        price_per_night: Nightly rate of the listing
        stay: Check-in and check-out dates

    Returns:
        PriceQuote with every amount rounded to cents
    """
    # str() keeps float rates such as 99.9 from picking up binary noise
    rate = Decimal(str(price_per_night))
    nights = max(stay.nights, 0)
    subtotal = rate * nights
    service_fee = subtotal * SERVICE_FEE_RATE
    return PriceQuote(
        nights=nights,
        price_per_night=to_cents(rate),
        subtotal=to_cents(subtotal),
        service_fee=to_cents(service_fee),
        total=to_cents(subtotal + service_fee),
    )
