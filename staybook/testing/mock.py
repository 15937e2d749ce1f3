"""
Mock StayBook client for testing.

Provides a MockStayBookClient that mimics the real client interface
without making actual API calls.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar

from staybook.booking import BookingSession
from staybook.clients.images import ImageSource, UploadBatch, read_image
from staybook.exceptions import AuthExpiredError, StayBookError
from staybook.favorites import FavoritesStore
from staybook.host import HostDashboard
from staybook.realtime import ChangeFeed, Subscription
from staybook.search import RecentSearches
from staybook.storage import LocalStore
from staybook.testing.factories import create_mock_listing, create_mock_reservation
from staybook.trending import TrendingCache
from staybook.types.auth import AuthEvent, Session, User
from staybook.types.listings import Listing
from staybook.types.reservations import DateRange, Reservation, ReservationStatus
from staybook.types.trending import TrendingEntry
from staybook.wizard import ListingWizard

T = TypeVar("T")


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class MockResponse:
    """Configuration for a mock response."""

    data: Any
    error: Exception | None = None
    call_count: int = 0


@dataclass
class MockCall:
    """Record of a method call."""

    method: str
    args: tuple[Any, ...]
    kwargs: dict[str, Any]
    timestamp: datetime = field(default_factory=_now)


class _MockResource:
    """Configured responses and call recording shared by the mock clients."""

    name = ""

    def __init__(self, mock_client: "MockStayBookClient") -> None:
        self._mock = mock_client
        self._responses: dict[str, MockResponse] = {}

    def configure(
        self,
        method: str,
        response: Any = None,
        error: Exception | None = None,
    ) -> None:
        """Configure the response (or error) for calls to ``method``."""
        self._responses[method] = MockResponse(data=response, error=error)

    def _record(self, method: str, *args: Any, **kwargs: Any) -> None:
        self._mock._record_call(f"{self.name}.{method}", args, kwargs)

    def _get_response(self, method: str, default: T) -> T:
        """Get configured response or default."""
        if method in self._responses:
            resp = self._responses[method]
            resp.call_count += 1
            if resp.error:
                raise resp.error
            if resp.data is not None:
                return resp.data
        return default


class MockAuthClient(_MockResource):
    """Mock auth client holding a session in memory."""

    name = "auth"

    def __init__(self, mock_client: "MockStayBookClient") -> None:
        super().__init__(mock_client)
        self._session: Session | None = None
        self._listeners: list[Callable[[AuthEvent, Session | None], None]] = []

    def sign_in_as(self, user_id: str, username: str | None = None) -> Session:
        """Start a session for ``user_id`` without recording a call."""
        self._session = Session(
            access_token=f"mock-access-{user_id}",
            refresh_token=f"mock-refresh-{user_id}",
            expires_at=_now() + timedelta(hours=1),
            user=User(user_id=user_id, email=f"{user_id}@example.com", username=username),
        )
        return self._session

    @property
    def current_session(self) -> Session | None:
        return self._session

    def on_auth_state_change(self, callback: Callable[[AuthEvent, Session | None], None]) -> Subscription:
        self._listeners.append(callback)
        return Subscription(lambda _: self._listeners.remove(callback))

    def get_session(self) -> Session | None:
        self._record("get_session")
        return self._get_response("get_session", self._session)

    def require_session(self) -> Session:
        session = self.get_session()
        if session is None:
            raise AuthExpiredError("NO_SESSION", "Please log in to continue")
        return session

    def sign_in(self, identity: str, secret: str) -> Session:
        self._record("sign_in", identity)
        session = self._get_response("sign_in", None) or self.sign_in_as("mock-user-id", identity)
        self._session = session
        self._notify(AuthEvent.SIGNED_IN, session)
        return session

    def sign_up(
        self,
        identity: str,
        secret: str,
        profile_fields: dict[str, Any] | None = None,
    ) -> Session:
        self._record("sign_up", identity, profile_fields=profile_fields)
        session = self._get_response("sign_up", None) or self.sign_in_as("mock-user-id", identity)
        self._session = session
        self._notify(AuthEvent.SIGNED_IN, session)
        return session

    def refresh_session(self) -> Session:
        self._record("refresh_session")
        try:
            session = self._get_response("refresh_session", self._session)
        except AuthExpiredError:
            self._session = None
            self._notify(AuthEvent.TOKEN_REFRESHED, None)
            raise
        if session is None:
            raise AuthExpiredError("NO_SESSION", "Please log in to continue")
        self._session = session
        self._notify(AuthEvent.TOKEN_REFRESHED, session)
        return session

    def sign_out(self) -> None:
        self._record("sign_out")
        self._session = None
        self._notify(AuthEvent.SIGNED_OUT, None)

    def _notify(self, event: AuthEvent, session: Session | None) -> None:
        for listener in list(self._listeners):
            listener(event, session)


class MockListingsClient(_MockResource):
    """Mock listings client for testing."""

    name = "listings"

    def list_published(self) -> list[Listing]:
        self._record("list_published")
        return self._get_response("list_published", [])

    def list_for_host(self, user_id: str) -> list[Listing]:
        self._record("list_for_host", user_id)
        return self._get_response("list_for_host", [])

    def get(self, listing_id: str) -> Listing:
        self._record("get", listing_id)
        return self._get_response("get", create_mock_listing(listing_id=listing_id))

    def create(self, row: dict[str, Any]) -> Listing:
        self._record("create", row)
        return self._get_response(
            "create", create_mock_listing(**{"listing_id": "mock-listing-id", **row})
        )

    def update(self, listing_id: str, changes: dict[str, Any]) -> Listing:
        self._record("update", listing_id, changes)
        return self._get_response("update", create_mock_listing(listing_id=listing_id, **changes))

    def delete(self, listing_id: str) -> None:
        self._record("delete", listing_id)
        self._get_response("delete", None)


class MockReservationsClient(_MockResource):
    """Mock reservations client for testing."""

    name = "reservations"

    def list_for_listing(self, listing_id: str, include_cancelled: bool = False) -> list[Reservation]:
        self._record("list_for_listing", listing_id, include_cancelled=include_cancelled)
        return self._get_response("list_for_listing", [])

    def get(self, reservation_id: str) -> Reservation:
        self._record("get", reservation_id)
        return self._get_response("get", create_mock_reservation(reservation_id=reservation_id))

    def create(
        self,
        listing_id: str,
        user_id: str,
        stay: DateRange,
        guests: int,
        total_price: Any,
    ) -> Reservation:
        self._record(
            "create",
            listing_id=listing_id,
            user_id=user_id,
            stay=stay,
            guests=guests,
            total_price=total_price,
        )
        return self._get_response("create", Reservation(
            reservation_id="mock-reservation-id",
            listing_id=listing_id,
            user_id=user_id,
            check_in=stay.start,
            check_out=stay.end,
            guests=guests,
            total_price=float(total_price),
            status=ReservationStatus.CONFIRMED,
            created_at=_now(),
        ))


class MockFavoritesClient(_MockResource):
    """Mock favorites client keeping saved ids in memory."""

    name = "favorites"

    def __init__(self, mock_client: "MockStayBookClient") -> None:
        super().__init__(mock_client)
        self.saved: dict[str, set[str]] = {}

    def list_ids(self, user_id: str) -> set[str]:
        self._record("list_ids", user_id)
        return self._get_response("list_ids", set(self.saved.get(user_id, set())))

    def list_listings(self, user_id: str) -> list[Listing]:
        self._record("list_listings", user_id)
        return self._get_response("list_listings", [])

    def add(self, user_id: str, listing_id: str) -> None:
        self._record("add", user_id, listing_id)
        self._get_response("add", None)
        self.saved.setdefault(user_id, set()).add(listing_id)

    def remove(self, user_id: str, listing_id: str) -> None:
        self._record("remove", user_id, listing_id)
        self._get_response("remove", None)
        self.saved.get(user_id, set()).discard(listing_id)


class MockTrendingClient(_MockResource):
    """Mock trending client for testing."""

    name = "trending"

    def get_trending(self, window_days: int = 7) -> list[TrendingEntry]:
        self._record("get_trending", window_days=window_days)
        return self._get_response("get_trending", [])

    def record_click(self, listing_id: str) -> bool:
        self._record("record_click", listing_id)
        return self._get_response("record_click", True)


class MockImagesClient(_MockResource):
    """Mock image host client returning predictable URLs."""

    name = "images"

    def upload(self, source: ImageSource) -> str:
        self._record("upload")
        read_image(source)
        count = self._mock.call_count("images.upload")
        return self._get_response("upload", f"https://i.example.com/mock-{count}.jpg")

    def upload_many(self, sources: Iterable[ImageSource]) -> UploadBatch:
        batch = UploadBatch()
        for index, source in enumerate(sources):
            try:
                batch.urls.append(self.upload(source))
            except StayBookError as e:
                batch.failures.append((index, e))
        return batch


class MockStayBookClient:
    """
    Mock StayBook client for testing.

    Provides the same interface as StayBookClient but returns configurable
    mock responses instead of making real API calls.

    Example:
        ```python
        from staybook.testing import MockStayBookClient, create_mock_listing

        mock = MockStayBookClient(user_id="guest-1")
        mock.listings.configure("list_published", response=[create_mock_listing()])

        listings = mock.listings.list_published()
        assert mock.was_called("listings.list_published")
        assert mock.call_count("listings.list_published") == 1
        ```
    """

    def __init__(self, user_id: str | None = None) -> None:
        """
        Initialize the mock client.

        Args:
            user_id: Start signed in as this user; signed out when None
        """
        self._calls: list[MockCall] = []

        # Initialize mock resource clients
        self.auth = MockAuthClient(self)
        self.listings = MockListingsClient(self)
        self.reservations = MockReservationsClient(self)
        self.favorites = MockFavoritesClient(self)
        self.trending = MockTrendingClient(self)
        self.images = MockImagesClient(self)

        self.storage = LocalStore()
        self.feed = ChangeFeed()
        self.trending_cache = TrendingCache(self.trending)
        self.recent_searches = RecentSearches(self.storage)

        if user_id:
            self.auth.sign_in_as(user_id)

    def _resources(self) -> list[_MockResource]:
        return [
            self.auth,
            self.listings,
            self.reservations,
            self.favorites,
            self.trending,
            self.images,
        ]

    def _record_call(
        self,
        method: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> None:
        """Record a method call for verification."""
        self._calls.append(MockCall(method=method, args=args, kwargs=kwargs))

    def was_called(self, method: str) -> bool:
        """
        Check if a method was called.

        Args:
            method: Method name (e.g., "reservations.create")
        """
        return any(call.method == method for call in self._calls)

    def call_count(self, method: str) -> int:
        """Get the number of times a method was called."""
        return sum(1 for call in self._calls if call.method == method)

    def get_calls(self, method: str | None = None) -> list[MockCall]:
        """Get recorded calls, optionally filtered by method."""
        if method is None:
            return list(self._calls)
        return [call for call in self._calls if call.method == method]

    def reset(self) -> None:
        """Reset all recorded calls and configured responses."""
        self._calls.clear()
        for resource in self._resources():
            resource._responses.clear()

    def booking(self, listing: Listing) -> BookingSession:
        return BookingSession(listing, self.reservations, self.auth, on_auth_expired=self.auth.sign_out)

    def listing_wizard(self) -> ListingWizard:
        return ListingWizard(self.listings, self.images)

    def favorites_store(self) -> FavoritesStore:
        session = self.auth.current_session
        return FavoritesStore(self.favorites, session.user.user_id if session else None, self.feed)

    def host_dashboard(self) -> HostDashboard:
        session = self.auth.require_session()
        return HostDashboard(self.listings, session.user.user_id)

    def close(self) -> None:
        """No-op for compatibility with real client."""
        pass

    def __enter__(self) -> "MockStayBookClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()


__all__ = [
    "MockStayBookClient",
    "MockCall",
    "MockResponse",
]
