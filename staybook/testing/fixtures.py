"""
Pytest fixtures for StayBook SDK testing.

Provides common fixtures for testing applications that use the StayBook SDK.
"""

from collections.abc import Generator
from datetime import date

import pytest

from staybook.testing.factories import create_mock_listing, create_mock_reservation
from staybook.testing.mock import MockStayBookClient
from staybook.types.listings import Listing
from staybook.types.reservations import Reservation, ReservationStatus
from staybook.types.trending import TrendingEntry


# ============================================================================
# Mock Client Fixtures
# ============================================================================


@pytest.fixture
def mock_client() -> Generator[MockStayBookClient, None, None]:
    """
    Provide a signed-out MockStayBookClient.

    Example:
        ```python
        def test_my_feature(mock_client):
            mock_client.listings.configure("list_published", response=[listing])
            result = my_function(mock_client)
            assert mock_client.was_called("listings.list_published")
        ```
    """
    client = MockStayBookClient()
    yield client
    client.reset()


@pytest.fixture
def mock_guest_id() -> str:
    """Provide a test guest user ID."""
    return "test-guest-id"


@pytest.fixture
def mock_host_id() -> str:
    """Provide a test host user ID."""
    return "test-host-id"


@pytest.fixture
def signed_in_client(mock_guest_id: str) -> Generator[MockStayBookClient, None, None]:
    """Provide a MockStayBookClient signed in as the test guest."""
    client = MockStayBookClient(user_id=mock_guest_id)
    yield client
    client.reset()


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_listing() -> Listing:
    """Provide a sample Listing at 100 per night for up to 4 guests."""
    return create_mock_listing()


@pytest.fixture
def sample_reservation() -> Reservation:
    """Provide a confirmed Reservation from 2024-06-01 to 2024-06-05."""
    return create_mock_reservation()


@pytest.fixture
def sample_reservations() -> list[Reservation]:
    """Provide one reservation of each status for the sample listing."""
    return [
        create_mock_reservation("r-confirmed", check_in=date(2024, 6, 1), check_out=date(2024, 6, 5)),
        create_mock_reservation(
            "r-cancelled",
            check_in=date(2024, 6, 10),
            check_out=date(2024, 6, 12),
            status=ReservationStatus.CANCELLED,
        ),
        create_mock_reservation(
            "r-completed",
            check_in=date(2024, 5, 20),
            check_out=date(2024, 5, 23),
            status=ReservationStatus.COMPLETED,
            total_price=345.0,
        ),
    ]


@pytest.fixture
def sample_trending_entries() -> list[TrendingEntry]:
    """Provide ranking output with two trending listings."""
    return [
        TrendingEntry(listing_id="listing-a", is_trending=True),
        TrendingEntry(listing_id="listing-b", is_trending=False),
        TrendingEntry(listing_id="listing-c", is_trending=True),
    ]


# ============================================================================
# Pre-configured Mock Client Fixtures
# ============================================================================


@pytest.fixture
def mock_client_with_listing(
    signed_in_client: MockStayBookClient,
    sample_listing: Listing,
    sample_reservation: Reservation,
) -> MockStayBookClient:
    """Provide a signed-in mock client whose sample listing has one booking."""
    signed_in_client.listings.configure("get", response=sample_listing)
    signed_in_client.listings.configure("list_published", response=[sample_listing])
    signed_in_client.reservations.configure("list_for_listing", response=[sample_reservation])
    return signed_in_client
