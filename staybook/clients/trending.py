"""Trending ranking client."""

from typing import TYPE_CHECKING, Any

from staybook.types.trending import TrendingEntry

if TYPE_CHECKING:
    from staybook.clients.store import TableStore

GET_TRENDING_FUNCTION = "get_trending_listings"
RECORD_CLICK_FUNCTION = "increment_listing_click"


def entries_from_rows(rows: list[dict[str, Any]] | None) -> list[TrendingEntry]:
    return [
        TrendingEntry(
            listing_id=row["listing_id"],
            is_trending=bool(row.get("is_trending")),
        )
        for row in rows or []
    ]


class TrendingClient:
    """Client for the server-side ranking functions."""

    def __init__(self, store: "TableStore") -> None:
        """
        Initialize the trending client.

        Args:
            store: Table store for making requests
        """
        self.store = store

    def get_trending(self, window_days: int = 7) -> list[TrendingEntry]:
        """
        Run the ranking function.

        This call is expensive; read through a TrendingCache instead of
        calling it per render.

        Args:
            window_days: Look-back window in days

        Returns:
            Ranked entries, each flagged trending or not
        """
        rows = self.store.rpc(GET_TRENDING_FUNCTION, {"days_window": window_days})
        return entries_from_rows(rows)

    def record_click(self, listing_id: str) -> bool:
        """
        Count a click on a listing.

        Returns:
            True once the click is recorded

        Raises:
            StayBookError: If the backend rejects or cannot be reached
        """
        self.store.rpc(RECORD_CLICK_FUNCTION, {"listing_id_param": listing_id})
        return True
