"""
Primary Field Resolver and Identifier Variant Selector.

A record is addressed by the value of its table's single primary field. This
module picks that field, decides which Identifier shape can carry its value
and renders the expression the generated `get_id()` returns.
"""

from __future__ import annotations

from baserow_bindings.codegen.type_mapper import MappedType, TypeKind
from baserow_bindings.domain.identifier import IdentifierKind
from baserow_bindings.domain.models import Table, TableField
from baserow_bindings.errors import (
    MissingFieldSchema,
    PrimaryFieldCardinality,
    UnsupportedPrimaryType,
)

_IDENTIFIER_KINDS = {
    TypeKind.UNSIGNED: IdentifierKind.UNSIGNED,
    TypeKind.SIGNED: IdentifierKind.SIGNED,
    TypeKind.FLOAT: IdentifierKind.FLOAT,
    TypeKind.TEXT: IdentifierKind.TEXT,
}

_CONSTRUCTORS = {
    IdentifierKind.UNSIGNED: "Identifier.unsigned",
    IdentifierKind.SIGNED: "Identifier.signed",
    IdentifierKind.FLOAT: "Identifier.floating",
    IdentifierKind.TEXT: "Identifier.text",
}


def resolve_primary_field(table: Table) -> TableField:
    """
    Return the unique primary field of `table`.

    Raises
    ------
    MissingFieldSchema
        If no field sequence was attached to the table.
    PrimaryFieldCardinality
        If zero or several fields are flagged primary.
    """
    if table.fields is None:
        raise MissingFieldSchema(
            f"Table '{table.name}' ({table.id}) has no field schema", table_id=table.id
        )
    primaries = [field for field in table.fields if field.primary]
    if len(primaries) != 1:
        raise PrimaryFieldCardinality(
            f"Table '{table.name}' ({table.id}) has {len(primaries)} primary fields, "
            "expected exactly one",
            table_id=table.id,
        )
    return primaries[0]


def select_identifier_kind(mapped: MappedType, field: TableField) -> IdentifierKind:
    """
    Identifier shape for a primary field of the given mapped type.

    Only the four scalar kinds can be expressed as a lookup filter value;
    enumerations, structures and booleans are rejected.
    """
    try:
        return _IDENTIFIER_KINDS[mapped.kind]
    except KeyError:
        raise UnsupportedPrimaryType(
            f"Primary field '{field.name}' ({field.id}) of kind '{mapped.kind.value}' "
            "cannot be used as an identifier",
            table_id=field.table_id,
            field_id=field.id,
        ) from None


def render_identifier_expression(kind: IdentifierKind, attribute: str) -> str:
    """
    Python expression building the Identifier from `self.<attribute>`.

    Numeric kinds keep the optional value; text substitutes an empty string
    for an absent value.
    """
    constructor = _CONSTRUCTORS[kind]
    if kind is IdentifierKind.TEXT:
        return f'{constructor}(self.{attribute} if self.{attribute} is not None else "")'
    return f"{constructor}(self.{attribute})"


__all__ = [
    "render_identifier_expression",
    "resolve_primary_field",
    "select_identifier_kind",
]
