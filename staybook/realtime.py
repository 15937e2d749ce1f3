"""
Change-feed subscriptions.

The backend pushes row changes over its realtime connection; this module is
the consumer side. Views register a callback per table (optionally narrowed
by event type and a ``column=eq.value`` filter) and unsubscribe on teardown.
Whatever carries the feed hands each raw message to ``ChangeFeed.dispatch``.
"""

from collections.abc import Callable
from typing import Any

from staybook.logging import get_logger
from staybook.timeutil import parse_timestamp
from staybook.types.realtime import ChangeEvent, ChangeEventType

logger = get_logger("realtime")

ChangeCallback = Callable[[ChangeEvent], None]

ALL_EVENTS = "*"


class Subscription:
    """Handle returned by a subscribe call."""

    def __init__(self, cancel: Callable[["Subscription"], None]) -> None:
        self._cancel = cancel
        self.active = True

    def unsubscribe(self) -> None:
        """Stop delivery. Safe to call more than once."""
        if self.active:
            self.active = False
            self._cancel(self)


def parse_filter(row_filter: str | None) -> tuple[str, str] | None:
    """
    Parse a ``column=eq.value`` filter.

    Raises:
        ValueError: For filters other than equality
    """
    if not row_filter:
        return None
    column, _, rest = row_filter.partition("=")
    operator, _, value = rest.partition(".")
    if not column or operator != "eq":
        raise ValueError(f"Unsupported change filter: {row_filter!r}")
    return column, value


class _Registration:
    def __init__(
        self,
        table: str,
        event: str,
        row_filter: tuple[str, str] | None,
        callback: ChangeCallback,
    ) -> None:
        self.table = table
        self.event = event
        self.row_filter = row_filter
        self.callback = callback
        self.subscription: Subscription | None = None

    def matches(self, change: ChangeEvent) -> bool:
        if change.table != self.table:
            return False
        if self.event != ALL_EVENTS and change.event_type.value != self.event:
            return False
        if self.row_filter is not None:
            column, value = self.row_filter
            row = change.old if change.event_type is ChangeEventType.DELETE else change.new
            if str(row.get(column)) != value:
                return False
        return True


def decode_change(payload: dict[str, Any]) -> ChangeEvent:
    """
    Decode a ``postgres_changes`` message into a ChangeEvent.

    Accepts either the bare change record or one wrapped in ``{"data": ...}``.
    """
    data = payload.get("data", payload)
    return ChangeEvent(
        table=data["table"],
        event_type=ChangeEventType(data.get("eventType") or data["type"]),
        new=data.get("new") or data.get("record") or {},
        old=data.get("old") or data.get("old_record") or {},
        commit_timestamp=parse_timestamp(data.get("commit_timestamp")),
    )


class ChangeFeed:
    """Registry of change callbacks keyed by table, event and row filter."""

    def __init__(self) -> None:
        self._registrations: list[_Registration] = []

    def subscribe(
        self,
        table: str,
        callback: ChangeCallback,
        event: str = ALL_EVENTS,
        row_filter: str | None = None,
    ) -> Subscription:
        """
        Register a callback for row changes.

        Args:
            table: Table name (e.g., "favorites")
            callback: Called with each matching ChangeEvent
            event: "INSERT", "UPDATE", "DELETE" or "*" for all
            row_filter: Optional ``column=eq.value`` filter

        Returns:
            Subscription; call ``unsubscribe()`` on teardown
        """
        if event != ALL_EVENTS:
            ChangeEventType(event)
        registration = _Registration(table, event, parse_filter(row_filter), callback)
        subscription = Subscription(lambda _: self._remove(registration))
        registration.subscription = subscription
        self._registrations.append(registration)
        return subscription

    def _remove(self, registration: _Registration) -> None:
        if registration in self._registrations:
            self._registrations.remove(registration)

    @property
    def subscription_count(self) -> int:
        return len(self._registrations)

    def dispatch(self, payload: dict[str, Any] | ChangeEvent) -> int:
        """
        Deliver one change to every matching subscriber.

        A callback that raises is logged and does not stop delivery to the
        others.

        Returns:
            Number of callbacks invoked
        """
        change = payload if isinstance(payload, ChangeEvent) else decode_change(payload)
        delivered = 0
        for registration in list(self._registrations):
            subscription = registration.subscription
            if subscription is None or not subscription.active:
                continue
            if not registration.matches(change):
                continue
            try:
                registration.callback(change)
            except Exception:
                logger.exception("Change callback failed for %s %s", change.event_type.value, change.table)
            delivered += 1
        return delivered
