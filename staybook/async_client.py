"""
StayBook SDK async client.

Provides the async interface for the rental marketplace backend.
"""

import os
from typing import Any

from staybook.async_clients import (
    AsyncAuthClient,
    AsyncFavoritesClient,
    AsyncImagesClient,
    AsyncListingsClient,
    AsyncReservationsClient,
    AsyncTableStore,
    AsyncTrendingClient,
)
from staybook.async_transport import AsyncHTTPTransport
from staybook.clients.images import IMAGE_HOST_URL
from staybook.exceptions import ConfigurationError
from staybook.realtime import ChangeFeed
from staybook.search import RecentSearches
from staybook.storage import LocalStore
from staybook.transport import RetryConfig
from staybook.trending import AsyncTrendingCache


class AsyncStayBookClient:
    """
    Async client for the rental marketplace.

    Aggregates the async resource clients. Uses httpx for async HTTP
    operations; concurrent trending reads share one refresh.

    Example:
        ```python
        import asyncio
        from staybook import AsyncStayBookClient

        async def main():
            async with AsyncStayBookClient.from_env() as client:
                await client.auth.sign_in("alice", "secret")
                listings, trending = await asyncio.gather(
                    client.listings.list_published(),
                    client.trending_cache.get(),
                )

        asyncio.run(main())
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
        Initialize the async StayBook client.

        Args:
            base_url: Project URL of the hosted backend
            api_key: Public (anon) API key of the project
            image_client_id: Image host client id (optional)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (default: no retries)
            storage: Local state; in memory when omitted
        """
        self.base_url = base_url
        self.timeout = timeout
        self.storage = storage or LocalStore()

        self._transport = AsyncHTTPTransport(
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            retry_config=retry_config,
        )
        self._image_transport: AsyncHTTPTransport | None = None
        if image_client_id:
            self._image_transport = AsyncHTTPTransport(
                base_url=IMAGE_HOST_URL,
                api_key=image_client_id,
                timeout=timeout,
                retry_config=retry_config,
                api_key_header=None,
                auth_scheme="Client-ID",
            )

        # Initialize async resource clients
        self.store = AsyncTableStore(self._transport)
        self.auth = AsyncAuthClient(self._transport, self.storage)
        self.listings = AsyncListingsClient(self.store)
        self.reservations = AsyncReservationsClient(self.store)
        self.favorites = AsyncFavoritesClient(self.store)
        self.trending = AsyncTrendingClient(self.store)
        self.images = AsyncImagesClient(self._image_transport) if self._image_transport else None

        self.feed = ChangeFeed()
        self.trending_cache = AsyncTrendingCache(self.trending)
        self.recent_searches = RecentSearches(self.storage)

    @classmethod
    def from_env(
        cls,
        retry_config: RetryConfig | None = None,
    ) -> "AsyncStayBookClient":
        """
        Create an async client from environment variables.

        Reads the same variables as StayBookClient.from_env.

        Raises:
            ConfigurationError: If required environment variables are missing
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
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying async HTTP transport (for advanced use cases)."""
        return self._transport

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()
        if self._image_transport is not None:
            await self._image_transport.close()

    async def __aenter__(self) -> "AsyncStayBookClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit - closes the client."""
        await self.close()
