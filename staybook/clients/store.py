"""Table store client.

Row-level access to the hosted database through its REST interface. Filters
are plain mappings, never query strings built by callers:

    ```python
    store.select("reservations", filters={
        "listing_id": listing_id,
        "status": ("neq", "cancelled"),
    })
    ```
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from staybook.transport import HTTPTransport

REST_PREFIX = "/rest/v1"

# A bare value, or an (operator, value) pair
FilterValue = Any

_OPERATORS = {"eq", "neq", "gt", "gte", "lt", "lte", "like", "ilike", "is", "in"}


def encode_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def encode_filters(filters: dict[str, FilterValue] | None) -> dict[str, str]:
    """
    Encode filters as ``column=operator.value`` query parameters.

    A bare value means equality (``None`` means ``is.null``); a tuple names
    the operator. ``in`` takes an iterable.

    Raises:
        ValueError: On an unknown operator
    """
    params: dict[str, str] = {}
    for column, condition in (filters or {}).items():
        if isinstance(condition, tuple):
            operator, value = condition
        else:
            operator, value = ("is", None) if condition is None else ("eq", condition)
        if operator not in _OPERATORS:
            raise ValueError(f"Unknown filter operator: {operator}")
        if operator == "in":
            params[column] = "in.(" + ",".join(encode_value(v) for v in value) + ")"
        else:
            params[column] = f"{operator}.{encode_value(value)}"
    return params


def encode_order(order: str | None, ascending: bool) -> dict[str, str]:
    if not order:
        return {}
    return {"order": f"{order}.{'asc' if ascending else 'desc'}"}


class TableStore:
    """Client for table CRUD and remote procedure calls."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the table store.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def select(
        self,
        table: str,
        filters: dict[str, FilterValue] | None = None,
        order: str | None = None,
        ascending: bool = True,
        columns: str = "*",
        single: bool = False,
    ) -> Any:
        """
        Read rows.

        Args:
            table: Table name
            filters: Column filters
            order: Column to order by
            ascending: Order direction
            columns: Column list, including embedded relations
                     (e.g., "*, reservations(id, status)")
            single: Expect exactly one row and return it as a dict

        Returns:
            List of row dicts, or one row dict when ``single``

        Raises:
            NotFoundError: If ``single`` and no row matched
        """
        params: dict[str, Any] = {"select": columns}
        params.update(encode_filters(filters))
        params.update(encode_order(order, ascending))
        headers = {"Accept": "application/vnd.pgrst.object+json"} if single else None

        rows = self.transport.request(
            "GET", f"{REST_PREFIX}/{table}", params=params, headers=headers
        )
        if single:
            return rows
        return rows or []

    def insert(
        self,
        table: str,
        rows: dict[str, Any] | list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        """
        Insert rows and return them as stored.

        Returns:
            Inserted rows, including server-generated columns
        """
        body = [rows] if isinstance(rows, dict) else rows
        return self.transport.request(
            "POST",
            f"{REST_PREFIX}/{table}",
            body=body,
            headers={"Prefer": "return=representation"},
        ) or []

    def update(
        self,
        table: str,
        patch: dict[str, Any],
        filters: dict[str, FilterValue],
    ) -> list[dict[str, Any]]:
        """
        Update the rows matching ``filters``.

        Raises:
            ValueError: If no filters are given
        """
        if not filters:
            raise ValueError("update() requires at least one filter")
        return self.transport.request(
            "PATCH",
            f"{REST_PREFIX}/{table}",
            params=encode_filters(filters),
            body=patch,
            headers={"Prefer": "return=representation"},
        ) or []

    def delete(self, table: str, filters: dict[str, FilterValue]) -> None:
        """
        Delete the rows matching ``filters``.

        Raises:
            ValueError: If no filters are given
        """
        if not filters:
            raise ValueError("delete() requires at least one filter")
        self.transport.request(
            "DELETE",
            f"{REST_PREFIX}/{table}",
            params=encode_filters(filters),
        )

    def rpc(self, function: str, params: dict[str, Any] | None = None) -> Any:
        """Call a database function."""
        return self.transport.request(
            "POST", f"{REST_PREFIX}/rpc/{function}", body=params or {}
        )
