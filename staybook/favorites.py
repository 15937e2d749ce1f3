"""
A user's saved listings, kept in step with the backend.

FavoritesStore holds the set of favorited listing ids. It refetches the
whole set whenever the change feed reports a change to the user's
favorites, so saves made in another session show up here too.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from staybook.exceptions import StayBookError
from staybook.logging import get_logger
from staybook.realtime import ChangeFeed, Subscription
from staybook.types.listings import Listing
from staybook.types.realtime import ChangeEvent

if TYPE_CHECKING:
    from staybook.clients.favorites import FavoritesClient

logger = get_logger("favorites")

FAVORITES_TABLE = "favorites"

WISHLIST_SORTS = ("newest", "price-high", "price-low")


def sort_wishlist(listings: Iterable[Listing], sort: str = "newest") -> list[Listing]:
    """
    Order the wishlist page.

    "newest" keeps the order the favorites were fetched in.

    Raises:
        ValueError: For an unknown sort
    """
    if sort not in WISHLIST_SORTS:
        raise ValueError(f"Unknown sort: {sort}")
    listings = list(listings)
    if sort == "price-high":
        return sorted(listings, key=lambda listing: listing.price_per_night, reverse=True)
    if sort == "price-low":
        return sorted(listings, key=lambda listing: listing.price_per_night)
    return listings


class FavoritesStore:
    """The signed-in user's favorites."""

    def __init__(
        self,
        client: "FavoritesClient",
        user_id: str | None,
        feed: ChangeFeed | None = None,
    ) -> None:
        """
        Args:
            client: Favorites resource client
            user_id: The signed-in user, or None when signed out
            feed: Change feed to follow; None disables live refresh
        """
        self.client = client
        self.user_id = user_id
        self._ids: set[str] = set()
        self._subscription: Subscription | None = None
        if user_id and feed is not None:
            self._subscription = feed.subscribe(
                FAVORITES_TABLE,
                self._on_change,
                row_filter=f"user_id=eq.{user_id}",
            )

    @property
    def favorites(self) -> frozenset[str]:
        return frozenset(self._ids)

    def is_favorited(self, listing_id: str) -> bool:
        return listing_id in self._ids

    def load(self) -> frozenset[str]:
        """
        Fetch the favorites, replacing the held set.

        Raises:
            StayBookError: If the fetch fails
        """
        if not self.user_id:
            self._ids = set()
        else:
            self._ids = self.client.list_ids(self.user_id)
        return self.favorites

    def wishlist(self) -> list[Listing]:
        """The favorited listings themselves; empty when signed out."""
        if not self.user_id:
            return []
        return self.client.list_listings(self.user_id)

    def toggle(self, listing_id: str) -> bool:
        """
        Save or unsave a listing.

        Returns:
            True if the change was stored; False when signed out or the
            backend refused (the held set is then unchanged)
        """
        if not self.user_id:
            return False
        try:
            if listing_id in self._ids:
                self.client.remove(self.user_id, listing_id)
                self._ids.discard(listing_id)
            else:
                self.client.add(self.user_id, listing_id)
                self._ids.add(listing_id)
        except StayBookError as e:
            logger.warning("Could not toggle favorite %s: %s", listing_id, e)
            return False
        return True

    def _on_change(self, change: ChangeEvent) -> None:
        if self._subscription is None or not self._subscription.active:
            return
        logger.debug("Favorites changed (%s), refetching", change.event_type.value)
        self.load()

    def close(self) -> None:
        """Stop following the change feed."""
        if self._subscription is not None:
            self._subscription.unsubscribe()

    def __enter__(self) -> "FavoritesStore":
        return self

    def __exit__(self, *args) -> None:
        self.close()
