"""
Schema Fetcher: reads tables and field descriptors from Baserow.

Two endpoints are used:

- `api/database/tables/all-tables/` lists every table the token can see,
  across databases;
- `api/database/fields/table/<id>/` lists one table's field descriptors.

A failed field fetch only affects its own table: `list_table_fields` returns
None and the caller decides what to do with the table. Transient transport
errors are retried with exponential backoff before giving up.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from baserow_bindings.config import Settings
from baserow_bindings.domain.models import Table, TableField
from baserow_bindings.errors import SchemaFetchError
from baserow_bindings.infrastructure.http_factory import http_client_from_settings
from baserow_bindings.infrastructure.urls import UrlBuilder
from baserow_bindings.utils.logging import get_logger

log = get_logger(__name__)


class SchemaFetcher:
    """
    Fetches the remote schema through an httpx client.

    Parameters
    ----------
    http : httpx.Client
        Client carrying the token header.
    urls : UrlBuilder
        Endpoint builder for the target instance.
    owns_client : bool
        Whether `close()` should close `http`.
    """

    def __init__(self, http: httpx.Client, urls: UrlBuilder, owns_client: bool = False) -> None:
        self._http = http
        self._urls = urls
        self._owns_client = owns_client

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: Optional[httpx.BaseTransport] = None
    ) -> "SchemaFetcher":
        return cls(
            http_client_from_settings(settings, transport=transport),
            UrlBuilder(settings.base_url),
            owns_client=True,
        )

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "SchemaFetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    def _get_json(self, url: httpx.URL) -> Any:
        response = self._http.get(url)
        response.raise_for_status()
        return response.json()

    def list_tables(self) -> List[Table]:
        """
        List every table visible to the token, fields not attached.

        Raises
        ------
        SchemaFetchError
            If the request fails or the payload is not a list of tables.
        """
        url = self._urls.tables_url()
        try:
            payload = self._get_json(url)
            tables = [Table.model_validate(item) for item in payload]
        except (httpx.HTTPError, ValueError, TypeError) as exc:
            raise SchemaFetchError(
                f"Could not list tables from {url}: {exc}", {"url": str(url)}
            ) from exc
        log.info(f"[TABLES FETCHED] {len(tables)} table(s)", extra={"tables": len(tables)})
        return tables

    def list_table_fields(self, table_id: int) -> Optional[List[TableField]]:
        """
        List the field descriptors of one table, or None if the fetch failed.
        """
        url = self._urls.table_fields_url(table_id)
        try:
            payload = self._get_json(url)
            fields = [TableField.model_validate(item) for item in payload]
        except (httpx.HTTPError, ValueError, TypeError) as exc:
            log.warning(
                f"[FIELDS FETCH FAILED] table {table_id}",
                extra={"table_id": table_id, "error": str(exc)},
            )
            return None
        log.debug(
            f"[FIELDS FETCHED] table {table_id}",
            extra={"table_id": table_id, "fields": len(fields)},
        )
        return fields

    def fetch_fields(
        self, tables: Sequence[Table], concurrency: int = 1
    ) -> Dict[int, Optional[List[TableField]]]:
        """
        Fetch field schemas for many tables, keyed by table id.

        Tables are independent, so with `concurrency > 1` the requests run on a
        thread pool; results are still returned keyed by table id.
        """
        if concurrency <= 1 or len(tables) <= 1:
            return {table.id: self.list_table_fields(table.id) for table in tables}
        with ThreadPoolExecutor(max_workers=concurrency, thread_name_prefix="fields") as pool:
            results = list(pool.map(lambda table: self.list_table_fields(table.id), tables))
        return {table.id: fields for table, fields in zip(tables, results)}


__all__ = ["SchemaFetcher"]
