"""StayBook SDK - Python client for the StayBook rental marketplace."""

from staybook.async_client import AsyncStayBookClient
from staybook.availability import blocked_days, has_overlap
from staybook.booking import BookingSession, BookingState
from staybook.client import StayBookClient
from staybook.exceptions import (
    AuthExpiredError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    RateLimitedError,
    RemoteRejection,
    ServerError,
    StayBookError,
    TransientNetworkError,
    ValidationError,
)
from staybook.favorites import FavoritesStore, sort_wishlist
from staybook.host import HostDashboard
from staybook.logging import configure_logging, get_logger
from staybook.pricing import PriceQuote, quote
from staybook.realtime import ChangeFeed, Subscription
from staybook.search import RecentSearches, filter_listings, search_tags
from staybook.storage import LocalStore
from staybook.transport import HTTPTransport, RetryConfig
from staybook.trending import AsyncTrendingCache, TrendingCache
from staybook.wizard import ListingWizard

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main Clients
    "StayBookClient",
    "AsyncStayBookClient",
    # Availability and pricing
    "has_overlap",
    "blocked_days",
    "PriceQuote",
    "quote",
    # Trending
    "TrendingCache",
    "AsyncTrendingCache",
    # Flows
    "BookingSession",
    "BookingState",
    "ListingWizard",
    "HostDashboard",
    "FavoritesStore",
    "sort_wishlist",
    "RecentSearches",
    "filter_listings",
    "search_tags",
    # Change feed and local state
    "ChangeFeed",
    "Subscription",
    "LocalStore",
    # Exceptions
    "StayBookError",
    "ValidationError",
    "RemoteRejection",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "AuthExpiredError",
    "TransientNetworkError",
    "RateLimitedError",
    "ServerError",
    "ConfigurationError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
