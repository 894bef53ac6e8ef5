"""
Binding Emitter: one table schema -> Python source of its record type.

For each table the emitter produces the auxiliary enums/structures its
fields need followed by one BaserowRecord subclass:

    class Orders(BaserowRecord):
        READ_ONLY_FIELDS: ClassVar[FrozenSet[str]] = frozenset()

        order_id: UnsignedOrNull = Field(default=None, alias='field_1001', description='Order Id')

        @classmethod
        def get_static_table_id(cls) -> int:
            return 101

        def get_id(self) -> Identifier:
            return Identifier.unsigned(self.order_id)

        def get_table_id_field(self) -> str:
            return 'field_1001'

Wire tags are derived from remote field ids, never from display names, so
renaming a column in Baserow does not break deployed bindings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from baserow_bindings.codegen.identifiers import (
    render_identifier_expression,
    resolve_primary_field,
    select_identifier_kind,
)
from baserow_bindings.codegen.type_mapper import MappedType, TypeKind, map_field
from baserow_bindings.domain.identifier import IdentifierKind
from baserow_bindings.domain.models import Table, TableField
from baserow_bindings.errors import FieldNameCollision, TypeNameCollision
from baserow_bindings.runtime.record import BaserowRecord
from baserow_bindings.utils.naming import enum_member_name, safe_identifier

INDENT = "    "

# Row metadata keys present in every row payload next to the field tags.
ROW_METADATA_KEYS = frozenset({"id", "order"})

# Module-level names every generated unit imports or defines; a generated
# class or attribute with one of these names would shadow it for the rest of
# the unit.
UNIT_NAMES = frozenset(
    {
        "Enum",
        "Annotated",
        "ClassVar",
        "FrozenSet",
        "List",
        "Optional",
        "BeforeValidator",
        "Field",
        "Identifier",
        "FloatOrNull",
        "SignedOrNull",
        "UnsignedOrNull",
        "multiple_select",
        "single_select",
        "BaserowRecord",
        "FileItem",
        "LinkItem",
        "SelectItem",
        "UserItem",
        "RECORDS",
    }
)

# Builtins referenced from generated class bodies.
ANNOTATION_BUILTINS = frozenset({"str", "bool", "int", "float", "frozenset"})

RESERVED_ATTRIBUTES = (
    frozenset(dir(BaserowRecord)) | ROW_METADATA_KEYS | UNIT_NAMES | ANNOTATION_BUILTINS
)


@dataclass(frozen=True)
class GeneratedField:
    field_id: int
    display_name: str
    attribute: str
    mapped: MappedType

    @property
    def wire_tag(self) -> str:
        return f"field_{self.field_id}"


@dataclass(frozen=True)
class TableBinding:
    """Emitted source of one table plus the names it defines."""

    table_id: int
    table_name: str
    database_id: int
    class_name: str
    aux_names: Tuple[str, ...]
    fields: Tuple[GeneratedField, ...]
    primary_wire_tag: str
    identifier_kind: IdentifierKind
    source: str

    @property
    def defined_names(self) -> Tuple[str, ...]:
        return self.aux_names + (self.class_name,)


def field_attribute_name(field: TableField) -> str:
    return safe_identifier(field.name, fallback=f"field_{field.id}", reserved=RESERVED_ATTRIBUTES)


def _docstring(text: str) -> str:
    cleaned = " ".join(text.replace("\\", "/").replace('"', "'").split())
    return f'"""{cleaned}"""'


def _render_enum(field: GeneratedField, class_name: str) -> str:
    mapped = field.mapped
    lines = [
        f"class {mapped.aux_name}(str, Enum):",
        INDENT + _docstring(f"Options of {class_name}.{field.attribute} ({field.wire_tag})."),
    ]
    used: Dict[str, int] = {}
    members: List[str] = []
    for option in mapped.options:
        member = enum_member_name(option.value, option.id)
        while member in used:
            member = f"{member}_{option.id}"
        used[member] = option.id
        members.append(f"{INDENT}{member} = {option.value!r}")
    if members:
        lines.append("")
        lines.extend(members)
    return "\n".join(lines)


def _render_struct(field: GeneratedField, class_name: str) -> str:
    mapped = field.mapped
    return "\n".join(
        [
            f"class {mapped.aux_name}({mapped.aux_base}):",
            INDENT + _docstring(f"Item of {class_name}.{field.attribute} ({field.wire_tag})."),
        ]
    )


def _render_record(
    table: Table,
    class_name: str,
    fields: Tuple[GeneratedField, ...],
    primary: GeneratedField,
    identifier_kind: IdentifierKind,
) -> str:
    read_only = sorted(f.wire_tag for f in fields if f.mapped.read_only)
    read_only_literal = (
        "frozenset({" + ", ".join(repr(tag) for tag in read_only) + "})"
        if read_only
        else "frozenset()"
    )
    body = [
        f"class {class_name}(BaserowRecord):",
        INDENT + _docstring(f"Row of Baserow table {table.name} ({table.id})."),
        "",
        f"{INDENT}READ_ONLY_FIELDS: ClassVar[FrozenSet[str]] = {read_only_literal}",
        "",
    ]
    for field in fields:
        body.append(
            f"{INDENT}{field.attribute}: {field.mapped.annotation} = Field("
            f"default=None, alias={field.wire_tag!r}, description={field.display_name!r})"
        )
    body.extend(
        [
            "",
            f"{INDENT}@classmethod",
            f"{INDENT}def get_static_table_id(cls) -> int:",
            f"{INDENT * 2}return {table.id}",
            "",
            f"{INDENT}def get_id(self) -> Identifier:",
            f"{INDENT * 2}return {render_identifier_expression(identifier_kind, primary.attribute)}",
            "",
            f"{INDENT}def get_table_id_field(self) -> str:",
            f"{INDENT * 2}return {primary.wire_tag!r}",
        ]
    )
    return "\n".join(body)


def _generate_fields(table: Table, class_name: str) -> Tuple[GeneratedField, ...]:
    generated: List[GeneratedField] = []
    seen: Dict[str, TableField] = {}
    for field in table.fields or []:
        attribute = field_attribute_name(field)
        if attribute in seen:
            other = seen[attribute]
            raise FieldNameCollision(
                f"Fields '{other.name}' ({other.id}) and '{field.name}' ({field.id}) of table "
                f"'{table.name}' both normalize to '{attribute}'",
                table_id=table.id,
                field_id=field.id,
            )
        seen[attribute] = field
        generated.append(
            GeneratedField(
                field_id=field.id,
                display_name=field.name,
                attribute=attribute,
                mapped=map_field(field, class_name),
            )
        )
    return tuple(generated)


def emit_table(table: Table) -> TableBinding:
    """
    Emit the record type (and auxiliary types) of one table.

    Raises
    ------
    SchemaError
        Any of MissingFieldSchema, PrimaryFieldCardinality, UnknownFieldType,
        UnsupportedPrimaryType, FieldNameCollision or TypeNameCollision.
    """
    primary_field = resolve_primary_field(table)
    class_name = table.type_name
    fields = _generate_fields(table, class_name)
    primary = next(f for f in fields if f.field_id == primary_field.id)
    identifier_kind = select_identifier_kind(primary.mapped, primary_field)

    aux_sources: List[str] = []
    aux_names: List[str] = []
    for field in fields:
        mapped = field.mapped
        if mapped.aux_name is None:
            continue
        if mapped.aux_name in aux_names or mapped.aux_name == class_name:
            raise TypeNameCollision(
                f"Auxiliary type '{mapped.aux_name}' of field '{field.display_name}' "
                f"({field.field_id}) clashes with another type of table '{table.name}'",
                table_id=table.id,
                field_id=field.field_id,
            )
        aux_names.append(mapped.aux_name)
        if mapped.kind is TypeKind.ENUM:
            aux_sources.append(_render_enum(field, class_name))
        else:
            aux_sources.append(_render_struct(field, class_name))

    record_source = _render_record(table, class_name, fields, primary, identifier_kind)
    return TableBinding(
        table_id=table.id,
        table_name=table.name,
        database_id=table.database_id,
        class_name=class_name,
        aux_names=tuple(aux_names),
        fields=fields,
        primary_wire_tag=primary.wire_tag,
        identifier_kind=identifier_kind,
        source="\n\n\n".join(aux_sources + [record_source]),
    )


__all__ = [
    "GeneratedField",
    "RESERVED_ATTRIBUTES",
    "UNIT_NAMES",
    "TableBinding",
    "emit_table",
    "field_attribute_name",
]
