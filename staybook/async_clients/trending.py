"""Async trending ranking client."""

from typing import TYPE_CHECKING

from staybook.clients.trending import (
    GET_TRENDING_FUNCTION,
    RECORD_CLICK_FUNCTION,
    entries_from_rows,
)
from staybook.types.trending import TrendingEntry

if TYPE_CHECKING:
    from staybook.async_clients.store import AsyncTableStore


class AsyncTrendingClient:
    """Async client for the server-side ranking functions."""

    def __init__(self, store: "AsyncTableStore") -> None:
        """
        Initialize the async trending client.

        Args:
            store: Async table store for making requests
        """
        self.store = store

    async def get_trending(self, window_days: int = 7) -> list[TrendingEntry]:
        """Run the ranking function; read through an AsyncTrendingCache."""
        rows = await self.store.rpc(GET_TRENDING_FUNCTION, {"days_window": window_days})
        return entries_from_rows(rows)

    async def record_click(self, listing_id: str) -> bool:
        await self.store.rpc(RECORD_CLICK_FUNCTION, {"listing_id_param": listing_id})
        return True
