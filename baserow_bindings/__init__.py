"""
Baserow Bindings - typed Python records for Baserow tables.

This package has two halves:

- a generator that reads the remote schema (tables, fields, field types) and
  writes one pydantic record type per table, grouped in one module per
  database;
- a generic record client that lists, creates and updates rows through those
  generated types, addressing rows by their primary field's value.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from baserow_bindings.client import BaserowClient
from baserow_bindings.config import FieldFetchPolicy, Settings, get_settings
from baserow_bindings.domain import DatabaseConfig, Identifier, IdentifierKind, Table, TableField
from baserow_bindings.errors import (
    BaserowBindingsError,
    DecodeError,
    LookupCardinalityError,
    SchemaError,
    TransportError,
)
from baserow_bindings.generator import GenerationReport, generate_bindings
from baserow_bindings.infrastructure.schema_fetcher import SchemaFetcher
from baserow_bindings.runtime import BaserowObject, BaserowRecord
from baserow_bindings.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "FieldFetchPolicy",
    "Settings",
    "get_settings",
    # Domain
    "DatabaseConfig",
    "Identifier",
    "IdentifierKind",
    "Table",
    "TableField",
    # Generation
    "GenerationReport",
    "SchemaFetcher",
    "generate_bindings",
    # Records
    "BaserowClient",
    "BaserowObject",
    "BaserowRecord",
    # Errors
    "BaserowBindingsError",
    "DecodeError",
    "LookupCardinalityError",
    "SchemaError",
    "TransportError",
    # Logging
    "configure_logging",
    "get_logger",
]
