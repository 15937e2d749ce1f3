"""
Trending listings cache.

The ranking function is expensive, so its result is kept for an hour and
shared by every listing grid in the process. Build one cache per process
and hand it to whatever needs it:

    ```python
    cache = TrendingCache(client.trending)
    grid_ids = cache.get()
    cache.record_interaction(listing_id)
    ```

Neither ``get`` nor ``record_interaction`` raises: a failed refresh falls
back to the last snapshot (or an empty list), a failed click report
returns False.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Protocol

from staybook.logging import get_logger
from staybook.timeutil import utc_now
from staybook.types.trending import TrendingEntry, TrendingSnapshot

logger = get_logger("trending")

DEFAULT_FRESHNESS = timedelta(hours=1)
DEFAULT_WINDOW_DAYS = 7


class TrendingSource(Protocol):
    """Ranking RPCs consumed by TrendingCache."""

    def get_trending(self, window_days: int) -> list[TrendingEntry]: ...

    def record_click(self, listing_id: str) -> bool: ...


class AsyncTrendingSource(Protocol):
    """Ranking RPCs consumed by AsyncTrendingCache."""

    async def get_trending(self, window_days: int) -> list[TrendingEntry]: ...

    async def record_click(self, listing_id: str) -> bool: ...


def trending_ids(entries: list[TrendingEntry]) -> tuple[str, ...]:
    """Ids flagged as trending, in ranking order, without repeats."""
    seen: dict[str, None] = {}
    for entry in entries:
        if entry.is_trending:
            seen.setdefault(entry.listing_id, None)
    return tuple(seen)


class _SnapshotHolder:
    """Freshness and fallback rules shared by both cache flavours."""

    def __init__(
        self,
        clock: Callable[[], datetime],
        freshness: timedelta,
        window_days: int,
    ) -> None:
        self.clock = clock
        self.freshness = freshness
        self.window_days = window_days
        self._snapshot: TrendingSnapshot | None = None

    @property
    def snapshot(self) -> TrendingSnapshot | None:
        """The current snapshot, fresh or not."""
        return self._snapshot

    def invalidate(self) -> None:
        """Drop the snapshot so the next read refreshes."""
        self._snapshot = None

    def _fresh_ids(self) -> list[str] | None:
        snapshot = self._snapshot
        if snapshot is not None and self.clock() - snapshot.fetched_at < self.freshness:
            return list(snapshot.listing_ids)
        return None

    def _store(self, entries: list[TrendingEntry]) -> list[str]:
        self._snapshot = TrendingSnapshot(
            listing_ids=trending_ids(entries),
            fetched_at=self.clock(),
        )
        logger.debug("Trending snapshot refreshed: %d listings", len(self._snapshot.listing_ids))
        return list(self._snapshot.listing_ids)

    def _fallback(self) -> list[str]:
        snapshot = self._snapshot
        if snapshot is not None and snapshot.listing_ids:
            logger.warning("Serving stale trending snapshot from %s", snapshot.fetched_at.isoformat())
            return list(snapshot.listing_ids)
        return []


class TrendingCache(_SnapshotHolder):
    """Time-boxed cache of trending listing ids over a blocking source."""

    def __init__(
        self,
        source: TrendingSource,
        clock: Callable[[], datetime] = utc_now,
        freshness: timedelta = DEFAULT_FRESHNESS,
        window_days: int = DEFAULT_WINDOW_DAYS,
    ) -> None:
        """
        Initialize the cache.

        Args:
            source: Ranking RPCs (usually ``client.trending``)
            clock: Returns the current time; injectable for tests
            freshness: How long a snapshot is served before refreshing
            window_days: Look-back window passed to the ranking function
        """
        super().__init__(clock, freshness, window_days)
        self.source = source

    def get(self) -> list[str]:
        """
        Get trending listing ids.

        Returns:
            Ids from a fresh snapshot, refreshing first if needed. On refresh
            failure, the previous snapshot's ids or an empty list.
        """
        ids = self._fresh_ids()
        if ids is not None:
            return ids

        try:
            entries = self.source.get_trending(self.window_days)
        except Exception:
            logger.exception("Error fetching trending listings")
            return self._fallback()

        return self._store(entries)

    def record_interaction(self, listing_id: str) -> bool:
        """
        Report a click on a listing to the ranking source.

        Returns:
            True if the click was recorded
        """
        try:
            return bool(self.source.record_click(listing_id))
        except Exception:
            logger.warning("Error recording click for listing %s", listing_id, exc_info=True)
            return False


class AsyncTrendingCache(_SnapshotHolder):
    """
    Time-boxed cache of trending listing ids over an async source.

    Concurrent reads of a stale cache share one in-flight refresh.
    """

    def __init__(
        self,
        source: AsyncTrendingSource,
        clock: Callable[[], datetime] = utc_now,
        freshness: timedelta = DEFAULT_FRESHNESS,
        window_days: int = DEFAULT_WINDOW_DAYS,
    ) -> None:
        super().__init__(clock, freshness, window_days)
        self.source = source
        self._inflight: asyncio.Task[list[str]] | None = None

    async def get(self) -> list[str]:
        """
        Get trending listing ids.

        Returns:
            Same as TrendingCache.get
        """
        ids = self._fresh_ids()
        if ids is not None:
            return ids

        if self._inflight is None:
            task = asyncio.ensure_future(self._refresh())
            task.add_done_callback(self._clear_inflight)
            self._inflight = task

        # A cancelled caller must not cancel the refresh others wait on
        return await asyncio.shield(self._inflight)

    async def record_interaction(self, listing_id: str) -> bool:
        """
        Report a click on a listing to the ranking source.

        Returns:
            True if the click was recorded
        """
        try:
            return bool(await self.source.record_click(listing_id))
        except Exception:
            logger.warning("Error recording click for listing %s", listing_id, exc_info=True)
            return False

    async def _refresh(self) -> list[str]:
        try:
            entries = await self.source.get_trending(self.window_days)
        except Exception:
            logger.exception("Error fetching trending listings")
            return self._fallback()
        return self._store(entries)

    def _clear_inflight(self, task: "asyncio.Task[list[str]]") -> None:
        if self._inflight is task:
            self._inflight = None
