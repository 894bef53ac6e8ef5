"""
Generation pipeline: remote schema -> per-database binding modules.

Usage (example from CLI):
    from baserow_bindings.generator import generate_bindings

    with SchemaFetcher.from_settings(settings) as fetcher:
        report = generate_bindings(settings, fetcher)

Steps, in order:
1. list every table visible to the token;
2. keep the tables of configured databases;
3. attach each table's field schema (sequential or thread pool);
4. emit one binding per table; a schema error skips that table only;
5. write one module per database plus the manifest package `__init__.py`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from baserow_bindings.codegen.emitter import emit_table
from baserow_bindings.codegen.organizer import ModuleOrganizer
from baserow_bindings.config import FieldFetchPolicy, Settings
from baserow_bindings.domain.models import Table
from baserow_bindings.errors import SchemaError, SchemaFetchError
from baserow_bindings.infrastructure.schema_fetcher import SchemaFetcher
from baserow_bindings.utils.logging import get_logger

log = get_logger(__name__)

FETCH_FAILED = "FieldFetchFailed"


@dataclass(frozen=True)
class TableOutcome:
    table_id: int
    table_name: str
    database_id: int
    class_name: Optional[str] = None
    module: Optional[str] = None
    error: Optional[str] = None
    reason: Optional[str] = None


@dataclass
class GenerationReport:
    """What a generation run emitted, skipped and wrote."""

    emitted: List[TableOutcome] = field(default_factory=list)
    skipped: List[TableOutcome] = field(default_factory=list)
    units: List[Path] = field(default_factory=list)
    manifest: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return not self.skipped


def _attach_field_schemas(
    tables: List[Table],
    fetcher: SchemaFetcher,
    settings: Settings,
    report: GenerationReport,
) -> List[Table]:
    """Attach fields to every table; returns the tables that have them."""
    schemas = fetcher.fetch_fields(tables, concurrency=settings.fetch_concurrency)
    ready: List[Table] = []
    for table in tables:
        fields = schemas.get(table.id)
        if fields is None:
            if settings.on_field_fetch_failure is FieldFetchPolicy.ABORT:
                raise SchemaFetchError(
                    f"Could not fetch fields of table '{table.name}' ({table.id}); aborting",
                    {"table_id": table.id},
                )
            log.warning(
                f"[TABLE SKIPPED] {table.name}: field schema unavailable",
                extra={"table_id": table.id, "reason": FETCH_FAILED},
            )
            report.skipped.append(
                TableOutcome(
                    table_id=table.id,
                    table_name=table.name,
                    database_id=table.database_id,
                    error=FETCH_FAILED,
                    reason="field schema could not be fetched",
                )
            )
            continue
        table.attach_fields(fields)
        ready.append(table)
    return ready


def _emit_into(table: Table, organizer: ModuleOrganizer, report: GenerationReport) -> None:
    try:
        binding = emit_table(table)
        organizer.add(binding)
    except SchemaError as exc:
        log.warning(
            f"[TABLE SKIPPED] {table.name}: {exc.message}",
            extra={"table_id": table.id, "reason": type(exc).__name__},
        )
        report.skipped.append(
            TableOutcome(
                table_id=table.id,
                table_name=table.name,
                database_id=table.database_id,
                error=type(exc).__name__,
                reason=exc.message,
            )
        )
        return

    unit = organizer.module_name_for(table.database_id)
    log.info(
        f"[TABLE EMITTED] {table.name} -> {unit}.{binding.class_name}",
        extra={"table_id": table.id, "class_name": binding.class_name, "unit": unit},
    )
    report.emitted.append(
        TableOutcome(
            table_id=table.id,
            table_name=table.name,
            database_id=table.database_id,
            class_name=binding.class_name,
            module=unit,
        )
    )


def generate_bindings(
    settings: Settings,
    fetcher: SchemaFetcher,
    target_directory: Optional[Path] = None,
) -> GenerationReport:
    """
    Run the whole pipeline and write the binding package.

    Parameters
    ----------
    settings : Settings
        Configured database scope, fetch policy and concurrency.
    fetcher : SchemaFetcher
        Source of the remote schema.
    target_directory : Path | None
        Output package directory; defaults to settings.target_directory.

    Returns
    -------
    GenerationReport
        Emitted and skipped tables plus the written paths.

    Raises
    ------
    SchemaFetchError
        If the table list cannot be fetched, or a field fetch fails under
        FieldFetchPolicy.ABORT. Nothing is written in that case.
    ConfigurationError
        If two configured databases map to the same module name.
    """
    target = Path(target_directory or settings.target_directory)
    organizer = ModuleOrganizer(settings.databases)
    report = GenerationReport()

    log.info(
        "[GENERATION START]",
        extra={
            "databases": [database.id for database in settings.databases],
            "target": str(target),
        },
    )

    tables = [table for table in fetcher.list_tables() if organizer.in_scope(table.database_id)]
    tables.sort(key=lambda table: (table.database_id, table.order, table.id))
    log.info(f"[SCOPE] {len(tables)} table(s) in configured databases", extra={"tables": len(tables)})

    for table in _attach_field_schemas(tables, fetcher, settings, report):
        _emit_into(table, organizer, report)

    written = organizer.write(target)
    report.units = written[:-1]
    report.manifest = written[-1]

    log.info(
        f"[GENERATION COMPLETE] {len(report.emitted)} emitted, {len(report.skipped)} skipped",
        extra={"emitted": len(report.emitted), "skipped": len(report.skipped)},
    )
    return report


__all__ = ["GenerationReport", "TableOutcome", "generate_bindings"]
