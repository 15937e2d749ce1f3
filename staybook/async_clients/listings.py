"""Async listings resource client."""

from typing import TYPE_CHECKING, Any

from staybook.clients.listings import (
    DETAIL_COLUMNS,
    HOST_COLUMNS,
    TABLE,
    edit_patch,
    listing_from_row,
)
from staybook.exceptions import RemoteRejection
from staybook.types.listings import Listing

if TYPE_CHECKING:
    from staybook.async_clients.store import AsyncTableStore


class AsyncListingsClient:
    """Async client for listing browsing and host management."""

    def __init__(self, store: "AsyncTableStore") -> None:
        """
        Initialize the async listings client.

        Args:
            store: Async table store for making requests
        """
        self.store = store

    async def list_published(self) -> list[Listing]:
        """Get every published listing, newest first."""
        rows = await self.store.select(
            TABLE, filters={"status": "published"}, order="created_at", ascending=False
        )
        return [listing_from_row(row) for row in rows]

    async def list_for_host(self, user_id: str) -> list[Listing]:
        """Get a host's listings with their reservations, newest first."""
        rows = await self.store.select(
            TABLE,
            filters={"user_id": user_id},
            order="created_at",
            ascending=False,
            columns=HOST_COLUMNS,
        )
        return [listing_from_row(row) for row in rows]

    async def get(self, listing_id: str) -> Listing:
        """
        Get a listing with its host's username.

        Raises:
            NotFoundError: If the listing does not exist
        """
        row = await self.store.select(
            TABLE, filters={"id": listing_id}, columns=DETAIL_COLUMNS, single=True
        )
        return listing_from_row(row)

    async def create(self, row: dict[str, Any]) -> Listing:
        rows = await self.store.insert(TABLE, row)
        if not rows:
            raise RemoteRejection("NO_DATA", "No data returned from the server")
        return listing_from_row(rows[0])

    async def update(self, listing_id: str, changes: dict[str, Any]) -> Listing:
        rows = await self.store.update(TABLE, edit_patch(changes), filters={"id": listing_id})
        if not rows:
            raise RemoteRejection("NO_DATA", "No data returned from the server")
        return listing_from_row(rows[0])

    async def delete(self, listing_id: str) -> None:
        await self.store.delete(TABLE, filters={"id": listing_id})
