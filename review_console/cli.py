"""
CLI commands for inspecting migrations from a terminal.

Registered on ``app.cli`` as the ``migration`` group, e.g.
``flask migration show dump.sql``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click
from flask import current_app
from flask.cli import with_appcontext

from review_console.client import BackendError, get_backend_client
from review_console.services import render_export, summarize


@click.group(name="migration")
def migration_cli():
    """Inspect migrations held by the backend service."""


@migration_cli.command("show")
@click.argument("import_id")
@click.option("--json", "as_json", is_flag=True, help="Emit the summary as JSON.")
@with_appcontext
def show_command(import_id: str, as_json: bool):
    """Print the status and issue counts for IMPORT_ID."""
    try:
        record = get_backend_client().get_import(import_id)
    except BackendError as exc:
        raise click.ClickException(str(exc)) from exc

    metadata = record.import_metadata
    summary = summarize(metadata.statements)
    if as_json:
        click.echo(
            json.dumps(
                {
                    "id": record.id,
                    "status": metadata.status,
                    "message": metadata.message,
                    "database": metadata.database,
                    **summary.as_dict(),
                }
            )
        )
        return

    click.echo(f"Import {record.id or import_id}")
    click.echo(f"  status:   {metadata.status or '-'}")
    click.echo(f"  message:  {metadata.message or '-'}")
    click.echo(f"  database: {metadata.database or '-'}")
    click.echo(f"  {summary.statements} statements found.")
    click.echo(f"  {summary.fixes_required} fixes required.")
    click.echo(f"  {summary.optional_audits} optional audits.")


@migration_cli.command("export")
@click.argument("import_id")
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the export to a file instead of stdout.",
)
@with_appcontext
def export_command(import_id: str, output_path: Optional[Path]):
    """Print the raw export (PostgreSQL source as comments, CockroachDB SQL) for IMPORT_ID."""
    try:
        record = get_backend_client().get_import(import_id)
    except BackendError as exc:
        raise click.ClickException(str(exc)) from exc

    text = render_export(record.statements)
    if output_path is None:
        click.echo(text, nl=False)
        return
    output_path.write_text(text, encoding="utf-8")
    current_app.logger.info(f"Exported import {import_id} to {output_path}")
    click.echo(f"Wrote {len(record.statements)} statements to {output_path}")


@migration_cli.command("sql")
@click.argument("database")
@click.argument("statement")
@with_appcontext
def sql_command(database: str, statement: str):
    """Execute STATEMENT against the temporary DATABASE and print the result."""
    try:
        result = get_backend_client().execute_sql(database, statement)
    except BackendError as exc:
        raise click.ClickException(str(exc)) from exc

    if result.failed:
        raise click.ClickException(f"Error: {result.error}")
    if not result.has_rows:
        click.echo("statement executed successfully")
        return
    click.echo("\t".join(result.columns))
    for row in result.rows:
        click.echo("\t".join(row))


def init_cli(app):
    """Attach the migration command group, replacing any earlier registration."""
    if migration_cli.name in app.cli.commands:
        app.cli.commands.pop(migration_cli.name)
    app.cli.add_command(migration_cli)
