"""
Module Organizer: group emitted bindings into one module per database.

Bindings are appended to a list keyed by database id, so a failing table
never touches another database's unit. Tables of databases outside the
configured scope are dropped without error.

Output layout (the only state the generator persists):

    <target>/__init__.py      manifest importing every database module
    <target>/<database>.py    one per configured database
"""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from baserow_bindings.codegen.emitter import UNIT_NAMES, TableBinding
from baserow_bindings.domain.models import DatabaseConfig
from baserow_bindings.errors import ConfigurationError, TypeNameCollision
from baserow_bindings.utils.logging import get_logger
from baserow_bindings.utils.naming import module_name

log = get_logger(__name__)

GENERATED_HEADER = '''"""
Baserow bindings for database "{name}" (id {id}).

Generated by baserow-bindings. Do not edit manually; rerun the generator to
pick up schema changes.
"""
# flake8: noqa

from enum import Enum
from typing import Annotated, ClassVar, FrozenSet, List, Optional

from pydantic import BeforeValidator, Field

from baserow_bindings.domain.identifier import Identifier
from baserow_bindings.runtime.decoders import (
    FloatOrNull,
    SignedOrNull,
    UnsignedOrNull,
    multiple_select,
    single_select,
)
from baserow_bindings.runtime.record import (
    BaserowRecord,
    FileItem,
    LinkItem,
    SelectItem,
    UserItem,
)
'''

MANIFEST_HEADER = '''"""
Baserow bindings package.

Generated by baserow-bindings. Do not edit manually.
"""
'''


class ModuleOrganizer:
    """
    Collects TableBindings per configured database and renders/writes units.

    Parameters
    ----------
    databases : Iterable[DatabaseConfig]
        The configured scope; its order is the order of the manifest.

    Raises
    ------
    ConfigurationError
        If two databases normalize to the same module name.
    """

    def __init__(self, databases: Iterable[DatabaseConfig]) -> None:
        self._databases: Dict[int, DatabaseConfig] = {}
        self._module_names: Dict[int, str] = {}
        self._bindings: Dict[int, List[TableBinding]] = {}
        self._names: Dict[int, Dict[str, Optional[int]]] = {}

        taken: Dict[str, DatabaseConfig] = {}
        for database in databases:
            name = module_name(database.name, database.id)
            if name in taken and taken[name].id != database.id:
                raise ConfigurationError(
                    f"Databases '{taken[name].name}' ({taken[name].id}) and "
                    f"'{database.name}' ({database.id}) both map to module '{name}'"
                )
            taken[name] = database
            self._databases[database.id] = database
            self._module_names[database.id] = name
            self._bindings.setdefault(database.id, [])
            # Imported runtime names are taken before any table is added.
            self._names.setdefault(database.id, dict.fromkeys(UNIT_NAMES))

    def in_scope(self, database_id: int) -> bool:
        return database_id in self._databases

    def module_name_for(self, database_id: int) -> Optional[str]:
        return self._module_names.get(database_id)

    def add(self, binding: TableBinding) -> bool:
        """
        Append a binding to its database's unit.

        Returns False (and drops the binding) when the database is not configured.

        Raises
        ------
        TypeNameCollision
            If one of the binding's class names is already defined in the unit,
            either by another table or by the unit's own imports.
        """
        if not self.in_scope(binding.database_id):
            return False
        names = self._names[binding.database_id]
        unit = self._module_names[binding.database_id]
        for name in binding.defined_names:
            if name not in names:
                continue
            owner = names[name]
            where = "imported by every binding module" if owner is None else f"defined by table {owner}"
            raise TypeNameCollision(
                f"Type '{name}' of table '{binding.table_name}' ({binding.table_id}) is "
                f"already {where} in module '{unit}'",
                table_id=binding.table_id,
            )
        for name in binding.defined_names:
            names[name] = binding.table_id
        self._bindings[binding.database_id].append(binding)
        return True

    def bindings_for(self, database_id: int) -> List[TableBinding]:
        return list(self._bindings.get(database_id, []))

    def render_unit(self, database_id: int) -> str:
        database = self._databases[database_id]
        bindings = self._bindings[database_id]
        parts = [GENERATED_HEADER.format(name=_clean(database.name), id=database.id)]
        parts.extend(binding.source for binding in bindings)

        records = [binding.class_name for binding in bindings]
        exported = sorted(name for binding in bindings for name in binding.defined_names)
        records_literal = "(" + ", ".join(records) + ",)" if records else "()"
        footer = [f"RECORDS = {records_literal}"]
        footer.append("")
        footer.append("__all__ = [")
        footer.extend(f"    {name!r}," for name in ["RECORDS", *exported])
        footer.append("]")
        parts.append("\n".join(footer))

        source = "\n\n".join(part.strip("\n") for part in parts) + "\n"
        _validate(source, self._module_names[database_id])
        return source

    def render_units(self) -> Dict[str, str]:
        """Render every configured database as `{module_name: source}`."""
        return {
            self._module_names[database_id]: self.render_unit(database_id)
            for database_id in self._databases
        }

    def render_manifest(self) -> str:
        modules = [self._module_names[database_id] for database_id in self._databases]
        lines = [MANIFEST_HEADER]
        lines.extend(f"from . import {name}" for name in modules)
        lines.append("")
        lines.append("__all__ = [")
        lines.extend(f"    {name!r}," for name in modules)
        lines.append("]")
        source = "\n".join(lines) + "\n"
        _validate(source, "__init__")
        return source

    def write(self, target_directory: Path) -> List[Path]:
        """
        Write every unit plus the manifest; returns the written paths, manifest last.
        """
        target_directory.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []
        for name, source in self.render_units().items():
            path = target_directory / f"{name}.py"
            path.write_text(source, encoding="utf-8")
            written.append(path)
            log.info(
                f"[UNIT WRITTEN] {path}",
                extra={"unit": name, "path": str(path)},
            )
        manifest = target_directory / "__init__.py"
        manifest.write_text(self.render_manifest(), encoding="utf-8")
        written.append(manifest)
        log.info(f"[MANIFEST WRITTEN] {manifest}", extra={"path": str(manifest)})
        return written


def _clean(text: str) -> str:
    return " ".join(text.replace("\\", "/").replace('"', "'").split())


def _validate(source: str, unit: str) -> None:
    """Parse generated source; a syntax error here is a generator bug."""
    try:
        ast.parse(source, filename=f"{unit}.py")
    except SyntaxError as exc:
        raise RuntimeError(f"Generated module '{unit}' is not valid Python: {exc}") from exc


__all__ = ["ModuleOrganizer", "GENERATED_HEADER"]
