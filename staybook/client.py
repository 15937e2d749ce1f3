"""
StayBook SDK main client.

Provides the primary interface for the rental marketplace backend.
"""

import os
from typing import Any

from staybook.booking import BookingSession
from staybook.clients import (
    AuthClient,
    FavoritesClient,
    ImagesClient,
    ListingsClient,
    ReservationsClient,
    TableStore,
    TrendingClient,
)
from staybook.clients.images import IMAGE_HOST_URL
from staybook.exceptions import ConfigurationError
from staybook.favorites import FavoritesStore
from staybook.host import HostDashboard
from staybook.realtime import ChangeFeed
from staybook.search import RecentSearches
from staybook.storage import LocalStore
from staybook.transport import HTTPTransport, RetryConfig
from staybook.trending import TrendingCache
from staybook.types.listings import Listing
from staybook.wizard import ListingWizard


class StayBookClient:
    """
    Main client for the rental marketplace.

    Aggregates the resource clients, the local state store, the change
    feed and the process-wide trending cache.

    Example:
        ```python
        from staybook import StayBookClient

        client = StayBookClient(
            base_url="https://xyz.supabase.co",
            api_key="public-anon-key",
        )

        # Or create from environment variables
        client = StayBookClient.from_env()

        client.auth.sign_in("alice", "secret")
        listings = client.listings.list_published()
        trending = client.trending_cache.get()
        ```
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        base_url: str,
        api_key: str,
        image_client_id: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        storage: LocalStore | None = None,
    ) -> None:
        """
        Initialize the StayBook client.

        Args:
            base_url: Project URL of the hosted backend
            api_key: Public (anon) API key of the project
            image_client_id: Image host client id; photo uploads are
                             unavailable without it
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (default: no retries)
            storage: Local state; in memory when omitted
        """
        self.base_url = base_url
        self.timeout = timeout
        self.storage = storage or LocalStore()

        self._transport = HTTPTransport(
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            retry_config=retry_config,
        )
        self._image_transport: HTTPTransport | None = None
        if image_client_id:
            self._image_transport = HTTPTransport(
                base_url=IMAGE_HOST_URL,
                api_key=image_client_id,
                timeout=timeout,
                retry_config=retry_config,
                api_key_header=None,
                auth_scheme="Client-ID",
            )

        # Initialize resource clients
        self.store = TableStore(self._transport)
        self.auth = AuthClient(self._transport, self.storage)
        self.listings = ListingsClient(self.store)
        self.reservations = ReservationsClient(self.store)
        self.favorites = FavoritesClient(self.store)
        self.trending = TrendingClient(self.store)
        self.images = ImagesClient(self._image_transport) if self._image_transport else None

        self.feed = ChangeFeed()
        self.trending_cache = TrendingCache(self.trending)
        self.recent_searches = RecentSearches(self.storage)

    @classmethod
    def from_env(
        cls,
        retry_config: RetryConfig | None = None,
    ) -> "StayBookClient":
        """
        Create a client from environment variables.

        Environment variables:
            STAYBOOK_URL: Project URL of the hosted backend (required)
            STAYBOOK_ANON_KEY: Public API key (required)
            STAYBOOK_IMAGE_CLIENT_ID: Image host client id (optional)
            STAYBOOK_STATE_PATH: JSON file for local state (optional, default: in memory)
            STAYBOOK_TIMEOUT: Request timeout in seconds (optional, default: 30)

        Raises:
            ConfigurationError: If required environment variables are missing
                                or a value is malformed
        """
        base_url = os.environ.get("STAYBOOK_URL")
        api_key = os.environ.get("STAYBOOK_ANON_KEY")

        if not base_url:
            raise ConfigurationError("STAYBOOK_URL environment variable not set")

        if not api_key:
            raise ConfigurationError("STAYBOOK_ANON_KEY environment variable not set")

        timeout_value = os.environ.get("STAYBOOK_TIMEOUT")
        try:
            timeout = float(timeout_value) if timeout_value else cls.DEFAULT_TIMEOUT
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid STAYBOOK_TIMEOUT: {timeout_value}. Must be a number of seconds"
            ) from e

        state_path = os.environ.get("STAYBOOK_STATE_PATH")

        return cls(
            base_url=base_url,
            api_key=api_key,
            image_client_id=os.environ.get("STAYBOOK_IMAGE_CLIENT_ID") or None,
            timeout=timeout,
            retry_config=retry_config,
            storage=LocalStore(state_path) if state_path else None,
        )

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def booking(self, listing: Listing) -> BookingSession:
        """Start a booking attempt for ``listing``."""
        return BookingSession(listing, self.reservations, self.auth, on_auth_expired=self.auth.sign_out)

    def listing_wizard(self) -> ListingWizard:
        return ListingWizard(self.listings, self.images)

    def favorites_store(self) -> FavoritesStore:
        """Favorites of the current user, following the change feed."""
        session = self.auth.current_session
        return FavoritesStore(self.favorites, session.user.user_id if session else None, self.feed)

    def host_dashboard(self) -> HostDashboard:
        """
        Dashboard of the signed-in host.

        Raises:
            AuthExpiredError: When signed out
        """
        session = self.auth.require_session()
        return HostDashboard(self.listings, session.user.user_id)

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()
        if self._image_transport is not None:
            self._image_transport.close()

    def __enter__(self) -> "StayBookClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit - closes the client."""
        self.close()
