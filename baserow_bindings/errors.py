"""
Exception hierarchy for Baserow Bindings.

Three families exist:

- schema errors, raised while turning one table's field schema into a binding
  (fatal for that table only, the pipeline records them and moves on);
- client errors, raised by the record client for one list/create/update call;
- DecodeError, raised while a generated record is decoded from the wire. It is
  a ValueError so pydantic reports it as a regular validation error.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class BaserowBindingsError(Exception):
    """Base class for every error raised on purpose by this package."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(BaserowBindingsError):
    """Invalid or inconsistent configuration (base URL, database list, ...)."""


# Schema errors


class SchemaError(BaserowBindingsError):
    """A table's schema cannot be turned into a binding."""

    def __init__(
        self,
        message: str,
        *,
        table_id: Optional[int] = None,
        field_id: Optional[int] = None,
    ) -> None:
        super().__init__(message, {"table_id": table_id, "field_id": field_id})
        self.table_id = table_id
        self.field_id = field_id


class UnknownFieldType(SchemaError):
    """The field's type tag is not one the mapper recognizes."""


class PrimaryFieldCardinality(SchemaError):
    """A table has zero or several fields flagged as primary."""


class MissingFieldSchema(SchemaError):
    """A table has no field sequence attached."""


class UnsupportedPrimaryType(SchemaError):
    """The primary field's type cannot be expressed as an Identifier."""


class FieldNameCollision(SchemaError):
    """Two fields of one table normalize to the same attribute name."""


class TypeNameCollision(SchemaError):
    """A generated class name is already taken inside the same output unit."""


class SchemaFetchError(BaserowBindingsError):
    """The schema could not be retrieved from the remote service."""


# Decode errors


class DecodeError(ValueError):
    """A wire value does not match the encoding its field expects."""


# Client errors


class ClientError(BaserowBindingsError):
    """A record client call failed; carries which operation and which row."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        table_id: Optional[int] = None,
        identifier: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            {"operation": operation, "table_id": table_id, "identifier": identifier},
        )
        self.operation = operation
        self.table_id = table_id
        self.identifier = identifier


class TransportError(ClientError):
    """The HTTP exchange failed or returned an error status."""


class LookupCardinalityError(ClientError):
    """A lookup by primary value matched zero or several rows."""

    def __init__(self, message: str, *, count: int, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.count = count
        self.details["count"] = count


class MissingIdentifierError(ClientError):
    """The record has no primary value to look it up by."""


__all__ = [
    "BaserowBindingsError",
    "ConfigurationError",
    "SchemaError",
    "UnknownFieldType",
    "PrimaryFieldCardinality",
    "MissingFieldSchema",
    "UnsupportedPrimaryType",
    "FieldNameCollision",
    "TypeNameCollision",
    "SchemaFetchError",
    "DecodeError",
    "ClientError",
    "TransportError",
    "LookupCardinalityError",
    "MissingIdentifierError",
]
