"""
Domain package for Baserow Bindings.

Exports the schema descriptors consumed by the generator and the Identifier
shared by generated bindings and the record client. Keep this package focused
on data definitions and validation concerns.
"""

from baserow_bindings.domain.identifier import Identifier, IdentifierKind
from baserow_bindings.domain.models import DatabaseConfig, SelectOption, Table, TableField

__all__ = [
    "DatabaseConfig",
    "Identifier",
    "IdentifierKind",
    "SelectOption",
    "Table",
    "TableField",
]
