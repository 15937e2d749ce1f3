"""StayBook SDK async resource clients."""

from staybook.async_clients.auth import AsyncAuthClient
from staybook.async_clients.favorites import AsyncFavoritesClient
from staybook.async_clients.images import AsyncImagesClient
from staybook.async_clients.listings import AsyncListingsClient
from staybook.async_clients.reservations import AsyncReservationsClient
from staybook.async_clients.store import AsyncTableStore
from staybook.async_clients.trending import AsyncTrendingClient

__all__ = [
    "AsyncAuthClient",
    "AsyncTableStore",
    "AsyncListingsClient",
    "AsyncReservationsClient",
    "AsyncFavoritesClient",
    "AsyncTrendingClient",
    "AsyncImagesClient",
]
