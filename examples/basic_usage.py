#!/usr/bin/env python3
"""
Basic StayBook SDK usage example.

The first part runs offline against the mock client. The second part talks
to a real project when STAYBOOK_URL and STAYBOOK_ANON_KEY are set.
Run with: python examples/basic_usage.py
"""

import os
from datetime import date

from staybook import ConfigurationError, StayBookClient, StayBookError, has_overlap, quote
from staybook.testing import MockStayBookClient, create_mock_listing, create_mock_reservation
from staybook.types.reservations import DateRange

print("=== StayBook SDK Basic Usage Example ===\n")

# 1. Exception hierarchy
print("1. Exception classes...")
try:
    raise ConfigurationError("STAYBOOK_URL environment variable not set")
except StayBookError as e:
    print(f"   Caught StayBookError: {e}")
    print(f"   Code: {e.code}, Message: {e.message}")

# 2. Pricing and availability
print("\n2. Pricing and availability...")
stay = DateRange(date(2024, 6, 1), date(2024, 6, 4))
price = quote(100, stay)
print(f"   {price.nights} nights: subtotal {price.subtotal}, fee {price.service_fee}, total {price.total}")

booked = [DateRange(date(2024, 6, 4), date(2024, 6, 8))]
print(f"   Conflicts with a stay starting on check-out day: {has_overlap(stay, booked)}")

# 3. Booking flow against the mock client
print("\n3. Booking flow (mock)...")
mock = MockStayBookClient(user_id="guest-1")
listing = create_mock_listing()
mock.reservations.configure(
    "list_for_listing",
    response=[create_mock_reservation(check_in=date(2030, 6, 10), check_out=date(2030, 6, 15))],
)

booking = mock.booking(listing)
booking.load()
booking.select_day(date(2030, 6, 1))
booking.select_day(date(2030, 6, 4))
booking.set_guests(2)
booking.submit()
print(f"   State: {booking.state.value}, confirmation at {booking.confirmation_path}")
print(f"   Total sent: {mock.get_calls('reservations.create')[0].kwargs['total_price']}")

# 4. Live project
print("\n4. Live project...")
if not (os.environ.get("STAYBOOK_URL") and os.environ.get("STAYBOOK_ANON_KEY")):
    print("   Skipped: set STAYBOOK_URL and STAYBOOK_ANON_KEY to run")
else:
    with StayBookClient.from_env() as client:
        listings = client.listings.list_published()
        print(f"   Published listings: {len(listings)}")
        trending = client.trending_cache.get()
        print(f"   Trending listings: {trending[:5]}")
