"""
Code generation package for Baserow Bindings.

Turns a fetched table schema into Python source: type mapping, primary field
and identifier resolution, per-table emission and per-database organization.
Nothing in here performs network I/O.
"""

from baserow_bindings.codegen.emitter import GeneratedField, TableBinding, emit_table
from baserow_bindings.codegen.identifiers import (
    render_identifier_expression,
    resolve_primary_field,
    select_identifier_kind,
)
from baserow_bindings.codegen.organizer import ModuleOrganizer
from baserow_bindings.codegen.type_mapper import DecodePolicy, MappedType, TypeKind, map_field

__all__ = [
    # Type mapping
    "DecodePolicy",
    "MappedType",
    "TypeKind",
    "map_field",
    # Identification
    "render_identifier_expression",
    "resolve_primary_field",
    "select_identifier_kind",
    # Emission
    "GeneratedField",
    "TableBinding",
    "emit_table",
    "ModuleOrganizer",
]
