"""Async table store client."""

from typing import TYPE_CHECKING, Any

from staybook.clients.store import REST_PREFIX, FilterValue, encode_filters, encode_order

if TYPE_CHECKING:
    from staybook.async_transport import AsyncHTTPTransport


class AsyncTableStore:
    """Async client for table CRUD and remote procedure calls."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async table store.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def select(
        self,
        table: str,
        filters: dict[str, FilterValue] | None = None,
        order: str | None = None,
        ascending: bool = True,
        columns: str = "*",
        single: bool = False,
    ) -> Any:
        """
        Read rows. See TableStore.select.

        Raises:
            NotFoundError: If ``single`` and no row matched
        """
        params: dict[str, Any] = {"select": columns}
        params.update(encode_filters(filters))
        params.update(encode_order(order, ascending))
        headers = {"Accept": "application/vnd.pgrst.object+json"} if single else None

        rows = await self.transport.request(
            "GET", f"{REST_PREFIX}/{table}", params=params, headers=headers
        )
        if single:
            return rows
        return rows or []

    async def insert(
        self,
        table: str,
        rows: dict[str, Any] | list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        body = [rows] if isinstance(rows, dict) else rows
        return await self.transport.request(
            "POST",
            f"{REST_PREFIX}/{table}",
            body=body,
            headers={"Prefer": "return=representation"},
        ) or []

    async def update(
        self,
        table: str,
        patch: dict[str, Any],
        filters: dict[str, FilterValue],
    ) -> list[dict[str, Any]]:
        if not filters:
            raise ValueError("update() requires at least one filter")
        return await self.transport.request(
            "PATCH",
            f"{REST_PREFIX}/{table}",
            params=encode_filters(filters),
            body=patch,
            headers={"Prefer": "return=representation"},
        ) or []

    async def delete(self, table: str, filters: dict[str, FilterValue]) -> None:
        if not filters:
            raise ValueError("delete() requires at least one filter")
        await self.transport.request(
            "DELETE",
            f"{REST_PREFIX}/{table}",
            params=encode_filters(filters),
        )

    async def rpc(self, function: str, params: dict[str, Any] | None = None) -> Any:
        """Call a database function."""
        return await self.transport.request(
            "POST", f"{REST_PREFIX}/rpc/{function}", body=params or {}
        )
