"""Listings resource client."""

from typing import TYPE_CHECKING, Any

from staybook.clients.reservations import reservation_from_row
from staybook.exceptions import RemoteRejection
from staybook.timeutil import parse_timestamp, utc_now
from staybook.types.listings import Listing

if TYPE_CHECKING:
    from staybook.clients.store import TableStore

TABLE = "listings"

HOST_COLUMNS = (
    "*, reservations(id, check_in_date, check_out_date, guests, total_price, status)"
)
DETAIL_COLUMNS = "*, profiles:user_id(username)"

# Columns a host may change after publishing
EDITABLE_FIELDS = {
    "title",
    "description",
    "price_per_night",
    "status",
    "amenities",
    "photos",
    "max_guests",
    "bedrooms",
    "beds",
    "bathrooms",
}


def listing_from_row(row: dict[str, Any]) -> Listing:
    """Build a Listing from a ``listings`` row, with any embedded relations."""
    profile = row.get("profiles") or {}
    return Listing(
        listing_id=row["id"],
        user_id=row.get("user_id", ""),
        title=row.get("title") or "",
        description=row.get("description") or "",
        property_type=row.get("property_type") or "",
        access_type=row.get("access_type") or "",
        address=row.get("address") or "",
        latitude=row.get("latitude"),
        longitude=row.get("longitude"),
        max_guests=row.get("max_guests") or 1,
        bedrooms=row.get("bedrooms") or 0,
        beds=row.get("beds") or 0,
        bathrooms=float(row.get("bathrooms") or 0),
        price_per_night=float(row.get("price_per_night") or 0),
        currency=row.get("currency") or "USD",
        status=row.get("status") or "draft",
        amenities=list(row.get("amenities") or []),
        photos=list(row.get("photos") or []),
        highlights=list(row.get("highlights") or []),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
        host_username=profile.get("username") if isinstance(profile, dict) else None,
        reservations=[reservation_from_row(r) for r in row.get("reservations") or []],
    )


def edit_patch(changes: dict[str, Any]) -> dict[str, Any]:
    """
    Restrict an edit to the editable columns and stamp ``updated_at``.

    Raises:
        ValueError: If a non-editable column is included
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
    patch = dict(changes)
    patch["updated_at"] = utc_now().isoformat()
    return patch


class ListingsClient:
    """Client for listing browsing and host management."""

    def __init__(self, store: "TableStore") -> None:
        """
        Initialize the listings client.

        Args:
            store: Table store for making requests
        """
        self.store = store

    def list_published(self) -> list[Listing]:
        """
        Get every published listing, newest first.

        Returns:
            Listings for the browse grid
        """
        rows = self.store.select(
            TABLE, filters={"status": "published"}, order="created_at", ascending=False
        )
        return [listing_from_row(row) for row in rows]

    def list_for_host(self, user_id: str) -> list[Listing]:
        """
        Get a host's listings with their reservations, newest first.

        Args:
            user_id: The host's user id
        """
        rows = self.store.select(
            TABLE,
            filters={"user_id": user_id},
            order="created_at",
            ascending=False,
            columns=HOST_COLUMNS,
        )
        return [listing_from_row(row) for row in rows]

    def get(self, listing_id: str) -> Listing:
        """
        Get a listing with its host's username.

        Raises:
            NotFoundError: If the listing does not exist
        """
        row = self.store.select(
            TABLE, filters={"id": listing_id}, columns=DETAIL_COLUMNS, single=True
        )
        return listing_from_row(row)

    def create(self, row: dict[str, Any]) -> Listing:
        """
        Insert a listing row.

        Returns:
            The stored Listing

        Raises:
            RemoteRejection: If the backend declines or returns nothing
        """
        rows = self.store.insert(TABLE, row)
        if not rows:
            raise RemoteRejection("NO_DATA", "No data returned from the server")
        return listing_from_row(rows[0])

    def update(self, listing_id: str, changes: dict[str, Any]) -> Listing:
        """
        Edit a listing.

        Args:
            listing_id: The listing identifier
            changes: Column values to change (see EDITABLE_FIELDS)

        Returns:
            The updated Listing
        """
        rows = self.store.update(TABLE, edit_patch(changes), filters={"id": listing_id})
        if not rows:
            raise RemoteRejection("NO_DATA", "No data returned from the server")
        return listing_from_row(rows[0])

    def delete(self, listing_id: str) -> None:
        """Delete a listing."""
        self.store.delete(TABLE, filters={"id": listing_id})
