"""
Field Type Mapper: one Baserow field descriptor -> one generated attribute type.

The mapping is decided entirely at generation time and produces a closed
MappedType. Unrecognized type tags are errors: defaulting them to text would
emit a binding that silently disagrees with the wire payload.

Kinds and their generated annotations:

    UNSIGNED  UnsignedOrNull              number (0 decimals, no negatives), rating, count, autonumber
    SIGNED    SignedOrNull                number (0 decimals, negatives allowed)
    FLOAT     FloatOrNull                 number (decimals), duration
    TEXT      Optional[str]               text family, dates
    BOOLEAN   Optional[bool]              boolean
    ENUM      Optional[<Enum>] / list     single_select, multiple_select
    STRUCT    Optional[<Item>] / list     link_row, lookup, file, collaborators
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple

from baserow_bindings.domain.models import SelectOption, TableField
from baserow_bindings.errors import UnknownFieldType
from baserow_bindings.utils.naming import to_pascal


class TypeKind(str, enum.Enum):
    UNSIGNED = "unsigned"
    SIGNED = "signed"
    FLOAT = "float"
    TEXT = "text"
    BOOLEAN = "boolean"
    ENUM = "enum"
    STRUCT = "struct"


class DecodePolicy(str, enum.Enum):
    UNSIGNED_OR_NULL = "unsigned_or_null"
    SIGNED_OR_NULL = "signed_or_null"
    FLOAT_OR_NULL = "float_or_null"
    OPTIONAL = "optional"
    SINGLE_SELECT = "single_select"
    MULTIPLE_SELECT = "multiple_select"


TEXT_TYPES = frozenset(
    {
        "text",
        "long_text",
        "url",
        "email",
        "phone_number",
        "date",
        "last_modified",
        "created_on",
        "uuid",
    }
)

UNSIGNED_TYPES = frozenset({"rating", "count", "autonumber"})

# Computed by Baserow; never sent back on create/update.
READ_ONLY_TYPES = frozenset(
    {
        "formula",
        "rollup",
        "lookup",
        "count",
        "autonumber",
        "uuid",
        "created_on",
        "last_modified",
        "created_by",
        "last_modified_by",
    }
)

FORMULA_TEXT_TYPES = frozenset(
    {"text", "char", "date", "date_interval", "duration", "link", "button"}
)

# Runtime base of each auxiliary structure shape.
STRUCT_BASES = {
    "link_row": "LinkItem",
    "lookup": "LinkItem",
    "file": "FileItem",
    "created_by": "UserItem",
    "last_modified_by": "UserItem",
    "multiple_collaborators": "UserItem",
}

SINGLE_STRUCT_TYPES = frozenset({"created_by", "last_modified_by"})

_NUMERIC_ANNOTATIONS = {
    TypeKind.UNSIGNED: "UnsignedOrNull",
    TypeKind.SIGNED: "SignedOrNull",
    TypeKind.FLOAT: "FloatOrNull",
}

_NUMERIC_POLICIES = {
    TypeKind.UNSIGNED: DecodePolicy.UNSIGNED_OR_NULL,
    TypeKind.SIGNED: DecodePolicy.SIGNED_OR_NULL,
    TypeKind.FLOAT: DecodePolicy.FLOAT_OR_NULL,
}


@dataclass(frozen=True)
class MappedType:
    """
    Target type chosen for one field, always rendered as optional.

    `aux_name` names the table-specific enum or structure the field needs
    (None for scalars); `aux_base` is the runtime base class of a structure.
    """

    kind: TypeKind
    decode: DecodePolicy
    multiple: bool = False
    read_only: bool = False
    aux_name: Optional[str] = None
    aux_base: Optional[str] = None
    options: Tuple[SelectOption, ...] = ()

    @property
    def annotation(self) -> str:
        if self.kind in _NUMERIC_ANNOTATIONS:
            return _NUMERIC_ANNOTATIONS[self.kind]
        if self.kind is TypeKind.TEXT:
            return "Optional[str]"
        if self.kind is TypeKind.BOOLEAN:
            return "Optional[bool]"
        if self.kind is TypeKind.ENUM:
            if self.multiple:
                return (
                    f"Annotated[Optional[List[{self.aux_name}]], "
                    f"BeforeValidator(multiple_select({self.aux_name}))]"
                )
            return (
                f"Annotated[Optional[{self.aux_name}], "
                f"BeforeValidator(single_select({self.aux_name}))]"
            )
        if self.multiple:
            return f"Optional[List[{self.aux_name}]]"
        return f"Optional[{self.aux_name}]"


def _numeric(kind: TypeKind, read_only: bool) -> MappedType:
    return MappedType(kind=kind, decode=_NUMERIC_POLICIES[kind], read_only=read_only)


def _number_kind(decimal_places: Optional[int], negative: Optional[bool]) -> TypeKind:
    if decimal_places:
        return TypeKind.FLOAT
    return TypeKind.SIGNED if negative else TypeKind.UNSIGNED


def aux_type_name(field: TableField, owner_type_name: str) -> str:
    """Class name of the auxiliary type a field needs inside its table."""
    suffix = to_pascal(field.name, fallback=f"Field{field.id}", digit_prefix="Field")
    return f"{owner_type_name}{suffix}"


def _map_formula(field: TableField, owner_type_name: str) -> MappedType:
    formula_type = field.formula_type
    if formula_type == "number":
        kind = TypeKind.FLOAT if field.number_decimal_places else TypeKind.SIGNED
        return _numeric(kind, read_only=True)
    if formula_type in FORMULA_TEXT_TYPES:
        return MappedType(kind=TypeKind.TEXT, decode=DecodePolicy.OPTIONAL, read_only=True)
    if formula_type == "boolean":
        return MappedType(kind=TypeKind.BOOLEAN, decode=DecodePolicy.OPTIONAL, read_only=True)
    if formula_type in ("array", "single_select"):
        is_array = formula_type == "array"
        return MappedType(
            kind=TypeKind.STRUCT,
            decode=DecodePolicy.OPTIONAL,
            multiple=is_array,
            read_only=True,
            aux_name=f"{aux_type_name(field, owner_type_name)}Item",
            aux_base="LinkItem" if is_array else "SelectItem",
        )
    raise UnknownFieldType(
        f"Field '{field.name}' ({field.id}) has unsupported {field.type} result type "
        f"'{formula_type}'",
        table_id=field.table_id,
        field_id=field.id,
    )


def map_field(field: TableField, owner_type_name: str) -> MappedType:
    """
    Map one field descriptor to its MappedType.

    Parameters
    ----------
    field : TableField
        Descriptor as returned by the fields endpoint.
    owner_type_name : str
        Class name of the table's record type; prefixes auxiliary type names.

    Raises
    ------
    UnknownFieldType
        If the type tag (or a formula's result type) is not recognized.
    """
    tag = field.type
    read_only = field.read_only or tag in READ_ONLY_TYPES

    if tag in TEXT_TYPES:
        return MappedType(kind=TypeKind.TEXT, decode=DecodePolicy.OPTIONAL, read_only=read_only)
    if tag == "boolean":
        return MappedType(kind=TypeKind.BOOLEAN, decode=DecodePolicy.OPTIONAL, read_only=read_only)
    if tag == "number":
        kind = _number_kind(field.number_decimal_places, field.number_negative)
        return _numeric(kind, read_only)
    if tag in UNSIGNED_TYPES:
        return _numeric(TypeKind.UNSIGNED, read_only)
    if tag == "duration":
        return _numeric(TypeKind.FLOAT, read_only)
    if tag in ("single_select", "multiple_select"):
        multiple = tag == "multiple_select"
        return MappedType(
            kind=TypeKind.ENUM,
            decode=DecodePolicy.MULTIPLE_SELECT if multiple else DecodePolicy.SINGLE_SELECT,
            multiple=multiple,
            read_only=read_only,
            aux_name=aux_type_name(field, owner_type_name),
            options=tuple(field.select_options),
        )
    if tag in STRUCT_BASES:
        return MappedType(
            kind=TypeKind.STRUCT,
            decode=DecodePolicy.OPTIONAL,
            multiple=tag not in SINGLE_STRUCT_TYPES,
            read_only=read_only,
            aux_name=f"{aux_type_name(field, owner_type_name)}Item",
            aux_base=STRUCT_BASES[tag],
        )
    if tag in ("formula", "rollup"):
        return _map_formula(field, owner_type_name)

    raise UnknownFieldType(
        f"Field '{field.name}' ({field.id}) has unknown type '{tag}'",
        table_id=field.table_id,
        field_id=field.id,
    )


__all__ = [
    "DecodePolicy",
    "MappedType",
    "TypeKind",
    "aux_type_name",
    "map_field",
]
