"""StayBook SDK testing utilities.

Provides mock clients and fixtures for testing applications that use the StayBook SDK.
"""

from staybook.testing.factories import create_mock_listing, create_mock_reservation
from staybook.testing.mock import MockCall, MockResponse, MockStayBookClient

__all__ = [
    # Mock client
    "MockStayBookClient",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_mock_listing",
    "create_mock_reservation",
]
