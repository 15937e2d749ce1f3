"""
Tests for StayBook SDK testing utilities.

Verifies that MockStayBookClient and fixtures work correctly.
"""

from datetime import date

import pytest

from staybook.booking import BookingState
from staybook.exceptions import AuthExpiredError, NotFoundError
from staybook.testing import MockStayBookClient, create_mock_listing, create_mock_reservation
from staybook.types.auth import AuthEvent
from staybook.types.listings import Listing
from staybook.types.reservations import Reservation, ReservationStatus
from staybook.types.trending import TrendingEntry


class TestMockStayBookClient:
    """Tests for MockStayBookClient."""

    def test_default_responses(self) -> None:
        mock = MockStayBookClient(user_id="guest-1")

        assert mock.listings.list_published() == []
        assert mock.listings.get("l1").listing_id == "l1"
        assert mock.trending.get_trending() == []
        assert mock.trending.record_click("l1") is True
        assert mock.auth.get_session().user.user_id == "guest-1"

    def test_configured_responses(self) -> None:
        mock = MockStayBookClient()
        custom = create_mock_listing("custom-id", price_per_night=250.0)
        mock.listings.configure("get", response=custom)

        listing = mock.listings.get("any-id")

        assert listing.listing_id == "custom-id"
        assert listing.price_per_night == 250.0

    def test_configured_errors(self) -> None:
        mock = MockStayBookClient()
        mock.listings.configure("get", error=NotFoundError("PGRST116", "Listing not found"))

        with pytest.raises(NotFoundError) as exc_info:
            mock.listings.get("missing")

        assert exc_info.value.code == "PGRST116"

    def test_call_tracking(self) -> None:
        mock = MockStayBookClient()

        mock.listings.list_published()
        mock.listings.list_published()
        mock.favorites.add("u1", "l1")

        assert mock.was_called("listings.list_published")
        assert mock.call_count("listings.list_published") == 2
        assert mock.get_calls("favorites.add")[0].args == ("u1", "l1")
        assert not mock.was_called("listings.delete")
        assert len(mock.get_calls()) == 3

    def test_reset(self) -> None:
        mock = MockStayBookClient()
        mock.listings.configure("list_published", response=[create_mock_listing()])
        mock.listings.list_published()

        mock.reset()

        assert not mock.was_called("listings.list_published")
        assert mock.listings.list_published() == []

    def test_auth_flow(self) -> None:
        mock = MockStayBookClient()
        events: list[AuthEvent] = []
        mock.auth.on_auth_state_change(lambda event, session: events.append(event))

        mock.auth.sign_in("alice", "secret")
        mock.auth.sign_out()

        assert events == [AuthEvent.SIGNED_IN, AuthEvent.SIGNED_OUT]
        with pytest.raises(AuthExpiredError):
            mock.auth.require_session()

    def test_failed_refresh_signs_out(self) -> None:
        mock = MockStayBookClient(user_id="guest-1")
        mock.auth.configure("refresh_session", error=AuthExpiredError("invalid_grant", "expired"))
        events: list[tuple[AuthEvent, object]] = []
        mock.auth.on_auth_state_change(lambda event, session: events.append((event, session)))

        with pytest.raises(AuthExpiredError):
            mock.auth.refresh_session()

        assert mock.auth.current_session is None
        assert events == [(AuthEvent.TOKEN_REFRESHED, None)]

    def test_image_urls_are_numbered(self) -> None:
        mock = MockStayBookClient()

        batch = mock.images.upload_many([b"a", b"b"])

        assert batch.urls == ["https://i.example.com/mock-1.jpg", "https://i.example.com/mock-2.jpg"]

    def test_context_manager(self) -> None:
        with MockStayBookClient() as mock:
            mock.listings.list_published()


class TestFactories:
    def test_create_mock_listing_overrides(self) -> None:
        listing = create_mock_listing("l9", title="Loft", max_guests=2, amenities=[])

        assert isinstance(listing, Listing)
        assert (listing.listing_id, listing.title, listing.max_guests) == ("l9", "Loft", 2)
        assert listing.amenities == []

    def test_create_mock_reservation_defaults(self) -> None:
        reservation = create_mock_reservation()

        assert isinstance(reservation, Reservation)
        assert reservation.status is ReservationStatus.CONFIRMED
        assert reservation.date_range.nights == 4


class TestFixtures:
    def test_mock_client_is_signed_out(self, mock_client: MockStayBookClient) -> None:
        assert mock_client.auth.current_session is None

    def test_signed_in_client(self, signed_in_client: MockStayBookClient, mock_guest_id: str) -> None:
        assert signed_in_client.auth.current_session.user.user_id == mock_guest_id

    def test_sample_reservations_cover_each_status(self, sample_reservations: list[Reservation]) -> None:
        assert {r.status for r in sample_reservations} == set(ReservationStatus)

    def test_sample_trending_entries(self, sample_trending_entries: list[TrendingEntry]) -> None:
        assert [e.listing_id for e in sample_trending_entries if e.is_trending] == ["listing-a", "listing-c"]

    def test_mock_client_with_listing_books(
        self,
        mock_client_with_listing: MockStayBookClient,
        sample_listing: Listing,
    ) -> None:
        booking = mock_client_with_listing.booking(sample_listing)
        booking.today = lambda: date(2024, 5, 1)
        booking.load()

        booking.select_day(date(2024, 6, 10))
        booking.select_day(date(2024, 6, 13))
        booking.submit()

        assert booking.state is BookingState.CONFIRMED
        assert mock_client_with_listing.was_called("reservations.create")
