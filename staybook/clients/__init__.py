"""StayBook SDK resource clients."""

from staybook.clients.auth import AuthClient
from staybook.clients.favorites import FavoritesClient
from staybook.clients.images import ImagesClient, UploadBatch
from staybook.clients.listings import ListingsClient
from staybook.clients.reservations import ReservationsClient
from staybook.clients.store import TableStore
from staybook.clients.trending import TrendingClient

__all__ = [
    "AuthClient",
    "TableStore",
    "ListingsClient",
    "ReservationsClient",
    "FavoritesClient",
    "TrendingClient",
    "ImagesClient",
    "UploadBatch",
]
