"""
Record client: list, create and update rows through generated bindings.

The client is generic over any BaserowRecord subclass and relies only on the
capability contract (table id, identifier, identifier field tag) plus the
record's wire (de)serialization.

Usage:
    from baserow_bindings.client import BaserowClient
    from bindings.shop import Orders

    with BaserowClient(token="...") as client:
        orders = client.list(Orders)
        client.update(orders[0].model_copy(update={"name": "Renamed"}))

Every call is all-or-nothing: an update whose lookup does not match exactly
one row fails before anything is patched.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Optional, Type, TypeVar

import httpx

from baserow_bindings.config import Settings
from baserow_bindings.errors import LookupCardinalityError, MissingIdentifierError, TransportError
from baserow_bindings.infrastructure.http_factory import build_http_client
from baserow_bindings.infrastructure.urls import UrlBuilder, lookup_params
from baserow_bindings.runtime.record import BaserowRecord
from baserow_bindings.utils.logging import get_logger

log = get_logger(__name__)

R = TypeVar("R", bound=BaserowRecord)

DEFAULT_PAGE_SIZE = 100


class BaserowClient:
    """
    Synchronous Baserow row client.

    Parameters
    ----------
    token : str
        Database token.
    base_url : str | None
        Instance URL; defaults to Baserow cloud.
    timeout_seconds : float
        Per-request timeout.
    transport : httpx.BaseTransport | None
        Transport override, mainly for tests.
    """

    def __init__(
        self,
        token: str,
        base_url: Optional[str] = None,
        *,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._urls = UrlBuilder(base_url)
        self._http = build_http_client(token, timeout_seconds=timeout_seconds, transport=transport)

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: Optional[httpx.BaseTransport] = None
    ) -> "BaserowClient":
        return cls(
            settings.token,
            settings.base_url,
            timeout_seconds=settings.http_timeout_seconds,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "BaserowClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _request(
        self,
        method: str,
        url: httpx.URL | str,
        *,
        operation: str,
        table_id: int,
        identifier: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        """Send one request and return its JSON body, wrapping failures with context."""
        log.debug(
            f"[{operation.upper()}] {method} {url}",
            extra={"operation": operation, "table_id": table_id, "identifier": identifier},
        )
        try:
            response = self._http.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            raise TransportError(
                f"{operation} on table {table_id} failed: {exc}",
                operation=operation,
                table_id=table_id,
                identifier=identifier,
            ) from exc
        except ValueError as exc:
            raise TransportError(
                f"{operation} on table {table_id} returned a non-JSON body: {exc}",
                operation=operation,
                table_id=table_id,
                identifier=identifier,
            ) from exc

    def _iter_pages(self, record_type: Type[R], page_size: int) -> Iterator[dict]:
        table_id = record_type.get_static_table_id()
        url: Optional[str | httpx.URL] = self._urls.records_url(table_id)
        params: Optional[dict] = {"size": page_size}
        while url:
            page = self._request("GET", url, operation="list", table_id=table_id, params=params)
            yield page
            # `next` already carries the page and size parameters.
            url, params = page.get("next"), None

    def list(self, record_type: Type[R], page_size: int = DEFAULT_PAGE_SIZE) -> List[R]:
        """
        Return every row of the record type's table, following page links.

        Raises
        ------
        TransportError
            If any page request fails.
        pydantic.ValidationError
            If a row does not decode into `record_type`.
        """
        records: List[R] = []
        for page in self._iter_pages(record_type, page_size):
            records.extend(record_type.from_wire(row) for row in page.get("results", []))
        log.info(
            f"[LIST] {record_type.__name__}: {len(records)} row(s)",
            extra={"table_id": record_type.get_static_table_id(), "rows": len(records)},
        )
        return records

    def create(self, record: R) -> R:
        """Create a row from `record` and return the stored row."""
        table_id = record.get_table_id()
        row = self._request(
            "POST",
            self._urls.records_url(table_id),
            operation="create",
            table_id=table_id,
            json=record.to_payload(),
        )
        log.info(f"[CREATE] {type(record).__name__}", extra={"table_id": table_id})
        return type(record).from_wire(row)

    def find_row_id(self, record: BaserowRecord) -> int:
        """
        Internal row id of the single row whose primary value matches `record`.

        Raises
        ------
        MissingIdentifierError
            If the record has no primary value.
        LookupCardinalityError
            If zero or several rows match.
        """
        table_id = record.get_table_id()
        identifier = record.get_id().as_filter_value()
        if identifier is None:
            raise MissingIdentifierError(
                f"{type(record).__name__} has no primary value to look up",
                operation="update",
                table_id=table_id,
            )
        result = self._request(
            "GET",
            self._urls.records_url(table_id),
            operation="lookup",
            table_id=table_id,
            identifier=identifier,
            params=lookup_params(record.get_table_id_field(), identifier),
        )
        count = result.get("count", len(result.get("results", [])))
        rows = result.get("results", [])
        if count != 1 or len(rows) != 1:
            raise LookupCardinalityError(
                f"Expected exactly one row of table {table_id} with "
                f"{record.get_table_id_field()} = {identifier!r}, found {count}",
                count=count,
                operation="update",
                table_id=table_id,
                identifier=identifier,
            )
        return int(rows[0]["id"])

    def update(self, record: R, *, exclude_unset: bool = False) -> R:
        """
        Patch the row whose primary value matches `record` and return it.

        The row is located by primary value; nothing is patched unless exactly
        one row matches.

        Parameters
        ----------
        record : BaserowRecord
            The new row values, including its primary value.
        exclude_unset : bool
            Send only the attributes that were set on `record`. By default every
            writable attribute is sent, so attributes left at None clear their
            column; pass True for a partial update built from a fresh record.
        """
        table_id = record.get_table_id()
        row_id = self.find_row_id(record)
        identifier = record.get_id().as_filter_value()
        row = self._request(
            "PATCH",
            self._urls.record_url(table_id, row_id),
            operation="update",
            table_id=table_id,
            identifier=identifier,
            json=record.to_payload(exclude_unset=exclude_unset),
        )
        log.info(
            f"[UPDATE] {type(record).__name__} row {row_id}",
            extra={"table_id": table_id, "row_id": row_id, "identifier": identifier},
        )
        return type(record).from_wire(row)


__all__ = ["BaserowClient", "DEFAULT_PAGE_SIZE"]
