"""
Infrastructure package for Baserow Bindings.

Centralizes HTTP concerns (client construction, endpoint URLs, schema
fetching). Keep this layer focused on I/O, decoupled from code generation.
"""

from baserow_bindings.infrastructure.http_factory import (
    build_headers,
    build_http_client,
    http_client_from_settings,
)
from baserow_bindings.infrastructure.schema_fetcher import SchemaFetcher
from baserow_bindings.infrastructure.urls import UrlBuilder, lookup_params

__all__ = [
    "SchemaFetcher",
    "UrlBuilder",
    "build_headers",
    "build_http_client",
    "http_client_from_settings",
    "lookup_params",
]
