"""
Endpoint construction for the Baserow REST API.

All endpoint paths live here, derived from one configured base URL rather
than hard-coded absolute strings.
"""

from __future__ import annotations

from typing import Optional

import httpx

from baserow_bindings.config import CLOUD_URL
from baserow_bindings.errors import ConfigurationError

RECORDS_PATH = "api/database/rows/table/"
ALL_TABLES_PATH = "api/database/tables/all-tables/"
TABLE_FIELDS_PATH = "api/database/fields/table/"


class UrlBuilder:
    """
    Builds endpoint URLs relative to a Baserow instance.

    Parameters
    ----------
    base_url : str | None
        Instance URL; defaults to Baserow cloud.

    Raises
    ------
    ConfigurationError
        If the base URL is not an absolute http(s) URL.
    """

    def __init__(self, base_url: Optional[str] = None) -> None:
        raw = base_url or CLOUD_URL
        try:
            url = httpx.URL(raw)
        except (httpx.InvalidURL, TypeError) as exc:
            raise ConfigurationError(f"Invalid Baserow base url '{raw}': {exc}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError(f"Invalid Baserow base url '{raw}': expected http(s)://host/")
        # Keep a trailing slash so joins append instead of replacing the last segment.
        if not url.path.endswith("/"):
            url = url.copy_with(path=f"{url.path}/")
        self.base_url = url

    def _join(self, path: str) -> httpx.URL:
        return self.base_url.join(path)

    def records_url(self, table_id: int) -> httpx.URL:
        """List/create endpoint of one table's rows."""
        return self._join(f"{RECORDS_PATH}{table_id}/")

    def record_url(self, table_id: int, row_id: int) -> httpx.URL:
        """Endpoint of one row, used to patch it."""
        return self._join(f"{RECORDS_PATH}{table_id}/{row_id}/")

    def tables_url(self) -> httpx.URL:
        return self._join(ALL_TABLES_PATH)

    def table_fields_url(self, table_id: int) -> httpx.URL:
        return self._join(f"{TABLE_FIELDS_PATH}{table_id}/")


def lookup_params(field_tag: str, value: str) -> dict:
    """Query parameters matching rows whose `field_tag` equals `value`."""
    return {f"filter__{field_tag}__equal": value}


__all__ = ["CLOUD_URL", "UrlBuilder", "lookup_params"]
