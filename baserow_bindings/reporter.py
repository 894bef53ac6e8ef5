from __future__ import annotations

from typing import List

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from baserow_bindings.domain.models import Table as SchemaTable
from baserow_bindings.generator import GenerationReport


def print_report(report: GenerationReport, console: Console | None = None) -> None:
    """
    Render a generation report as a rich table.

    Emitted tables come first, then skipped ones with the error that caused it.
    """
    console = console or Console()

    if not report.emitted and not report.skipped:
        console.print("[yellow]No tables found in the configured databases.[/yellow]")

    table = Table(
        title="Baserow Bindings",
        box=box.ROUNDED,
        caption=f"{len(report.emitted)} emitted, {len(report.skipped)} skipped",
    )
    table.add_column("Table", style="cyan", no_wrap=True)
    table.add_column("Id", justify="right", style="magenta")
    table.add_column("Database", justify="right", style="blue")
    table.add_column("Binding", style="green")
    table.add_column("Status")

    for outcome in sorted(report.emitted, key=lambda o: (o.database_id, o.table_id)):
        table.add_row(
            escape(outcome.table_name),
            str(outcome.table_id),
            str(outcome.database_id),
            f"{outcome.module}.{outcome.class_name}",
            "[bold green]emitted[/bold green]",
        )
    for outcome in sorted(report.skipped, key=lambda o: (o.database_id, o.table_id)):
        table.add_row(
            escape(outcome.table_name),
            str(outcome.table_id),
            str(outcome.database_id),
            "-",
            f"[red]{outcome.error}[/red]: {escape(outcome.reason or '')}",
        )

    console.print(table)
    if report.manifest is not None:
        console.print(f"[dim]Manifest: {report.manifest}[/dim]")


def print_tables(tables: List[SchemaTable], console: Console | None = None) -> None:
    """Render the tables visible to the token, grouped by database."""
    console = console or Console()

    if not tables:
        console.print("[yellow]No tables visible to this token.[/yellow]")
        return

    table = Table(title="Visible Tables", box=box.ROUNDED)
    table.add_column("Database", justify="right", style="blue")
    table.add_column("Id", justify="right", style="magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Class", style="green")

    for item in sorted(tables, key=lambda t: (t.database_id, t.order, t.id)):
        table.add_row(str(item.database_id), str(item.id), escape(item.name), item.type_name)

    console.print(table)


__all__ = ["print_report", "print_tables"]
