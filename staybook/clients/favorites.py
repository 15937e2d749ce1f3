"""Favorites resource client."""

from typing import TYPE_CHECKING

from staybook.clients.listings import listing_from_row
from staybook.types.listings import Listing

if TYPE_CHECKING:
    from staybook.clients.store import TableStore

TABLE = "favorites"

WISHLIST_COLUMNS = (
    "listing_id, listings(id, title, address, photos, price_per_night, "
    "property_type, profiles:user_id(username))"
)


class FavoritesClient:
    """Client for a user's saved listings."""

    def __init__(self, store: "TableStore") -> None:
        """
        Initialize the favorites client.

        Args:
            store: Table store for making requests
        """
        self.store = store

    def list_ids(self, user_id: str) -> set[str]:
        """
        Get the ids of the listings a user saved.

        Returns:
            Listing ids; empty if nothing is saved yet
        """
        rows = self.store.select(TABLE, filters={"user_id": user_id}, columns="listing_id")
        return {row["listing_id"] for row in rows}

    def list_listings(self, user_id: str) -> list[Listing]:
        """
        Get the saved listings themselves, for the wishlist page.

        Favorites whose listing was deleted are skipped.
        """
        rows = self.store.select(
            TABLE, filters={"user_id": user_id}, columns=WISHLIST_COLUMNS
        )
        return [listing_from_row(row["listings"]) for row in rows if row.get("listings")]

    def add(self, user_id: str, listing_id: str) -> None:
        """Save a listing."""
        self.store.insert(TABLE, {"user_id": user_id, "listing_id": listing_id})

    def remove(self, user_id: str, listing_id: str) -> None:
        """Unsave a listing."""
        self.store.delete(TABLE, filters={"user_id": user_id, "listing_id": listing_id})
