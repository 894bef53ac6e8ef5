from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import typer

from baserow_bindings.config import FieldFetchPolicy, Settings, get_settings
from baserow_bindings.domain.models import DatabaseConfig
from baserow_bindings.errors import BaserowBindingsError
from baserow_bindings.generator import generate_bindings
from baserow_bindings.infrastructure.schema_fetcher import SchemaFetcher
from baserow_bindings.reporter import print_report, print_tables
from baserow_bindings.utils.logging import configure_logging

app = typer.Typer(help="Generate typed Python bindings for Baserow tables.")


def parse_database_option(value: str) -> DatabaseConfig:
    """Parse a `NAME=ID` database option."""
    name, sep, raw_id = value.rpartition("=")
    if not sep or not name.strip() or not raw_id.strip().isdigit():
        raise typer.BadParameter(f"expected NAME=ID, got '{value}'", param_hint="--database")
    return DatabaseConfig(name=name.strip(), id=int(raw_id))


def _fail(exc: BaserowBindingsError) -> None:
    typer.echo(f"Error: {exc.message}", err=True)
    raise typer.Exit(code=1)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    databases = ", ".join(f"{d.name}={d.id}" for d in settings.databases) or "-"
    typer.echo(
        f"URL={settings.base_url} | token={settings.masked_token or '-'} | "
        f"target={settings.target_directory} | databases={databases} | "
        f"concurrency={settings.fetch_concurrency} "
        f"on_field_fetch_failure={settings.on_field_fetch_failure.value}"
    )


@app.command()
def tables() -> None:
    """
    List the tables visible to the configured token.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    try:
        with SchemaFetcher.from_settings(settings) as fetcher:
            print_tables(fetcher.list_tables())
    except BaserowBindingsError as exc:
        _fail(exc)


@app.command()
def generate(
    target: Optional[Path] = typer.Option(
        None,
        "--target",
        "-t",
        help="Output package directory (default from settings).",
    ),
    database: Optional[List[str]] = typer.Option(
        None,
        "--database",
        "-d",
        help="Database to generate as NAME=ID; repeatable. Replaces the configured list.",
    ),
    concurrency: Optional[int] = typer.Option(
        None,
        "--concurrency",
        "-c",
        min=1,
        help="Parallel field-schema requests (default from settings).",
    ),
    abort_on_fetch_failure: bool = typer.Option(
        False,
        "--abort-on-fetch-failure",
        help="Abort the run when a table's field schema cannot be fetched instead of skipping it.",
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON."),
) -> None:
    """
    Fetch the schema and write one binding module per database.
    """
    settings = _override(
        get_settings(),
        target=target,
        databases=[parse_database_option(value) for value in database or []],
        concurrency=concurrency,
        abort_on_fetch_failure=abort_on_fetch_failure,
        json_logs=json_logs,
    )
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)

    if not settings.databases:
        typer.echo("No databases configured; pass --database NAME=ID or set BASEROW_DATABASES.", err=True)
        raise typer.Exit(code=2)

    typer.echo(
        f"Generating bindings for {len(settings.databases)} database(s) "
        f"into {settings.target_directory}."
    )
    try:
        with SchemaFetcher.from_settings(settings) as fetcher:
            report = generate_bindings(settings, fetcher)
    except BaserowBindingsError as exc:
        _fail(exc)
    print_report(report)


def _override(
    settings: Settings,
    *,
    target: Optional[Path],
    databases: List[DatabaseConfig],
    concurrency: Optional[int],
    abort_on_fetch_failure: bool,
    json_logs: bool,
) -> Settings:
    """Apply CLI options on top of the loaded settings."""
    update: dict = {}
    if target is not None:
        update["target_directory"] = target
    if databases:
        update["databases"] = databases
    if concurrency is not None:
        update["fetch_concurrency"] = concurrency
    if abort_on_fetch_failure:
        update["on_field_fetch_failure"] = FieldFetchPolicy.ABORT
    if json_logs:
        update["json_logs"] = True
    return settings.model_copy(update=update)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
