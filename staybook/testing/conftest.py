"""
Pytest plugin for StayBook SDK testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest when this package is installed.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["staybook.testing.conftest"]

Or import the fixtures directly:

    from staybook.testing.fixtures import mock_client, sample_listing
"""

# Re-export all fixtures for pytest auto-discovery
from staybook.testing.fixtures import (
    mock_client,
    mock_client_with_listing,
    mock_guest_id,
    mock_host_id,
    sample_listing,
    sample_reservation,
    sample_reservations,
    sample_trending_entries,
    signed_in_client,
)

__all__ = [
    "mock_client",
    "mock_guest_id",
    "mock_host_id",
    "signed_in_client",
    "sample_listing",
    "sample_reservation",
    "sample_reservations",
    "sample_trending_entries",
    "mock_client_with_listing",
]
