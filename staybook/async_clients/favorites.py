"""Async favorites resource client."""

from typing import TYPE_CHECKING

from staybook.clients.favorites import TABLE, WISHLIST_COLUMNS
from staybook.clients.listings import listing_from_row
from staybook.types.listings import Listing

if TYPE_CHECKING:
    from staybook.async_clients.store import AsyncTableStore


class AsyncFavoritesClient:
    """Async client for a user's saved listings."""

    def __init__(self, store: "AsyncTableStore") -> None:
        self.store = store

    async def list_ids(self, user_id: str) -> set[str]:
        rows = await self.store.select(TABLE, filters={"user_id": user_id}, columns="listing_id")
        return {row["listing_id"] for row in rows}

    async def list_listings(self, user_id: str) -> list[Listing]:
        rows = await self.store.select(
            TABLE, filters={"user_id": user_id}, columns=WISHLIST_COLUMNS
        )
        return [listing_from_row(row["listings"]) for row in rows if row.get("listings")]

    async def add(self, user_id: str, listing_id: str) -> None:
        await self.store.insert(TABLE, {"user_id": user_id, "listing_id": listing_id})

    async def remove(self, user_id: str, listing_id: str) -> None:
        await self.store.delete(TABLE, filters={"user_id": user_id, "listing_id": listing_id})
