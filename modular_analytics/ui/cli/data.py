"""
CLI commands for exporting, importing, and clearing the whole state.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from modular_analytics.core.config.loader import ConfigError
from modular_analytics.core.persistence.state_file import (
    clear_state,
    export_state,
    import_state_file,
)
from modular_analytics.core.use_cases.workspace import resolve_state_path
from modular_analytics.ui.cli.common import current_state


def _state_path(ctx: click.Context) -> Path:
    try:
        return resolve_state_path(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@click.group()
def data() -> None:
    """Export, import, or clear all sectors, clients, and modules."""


@data.command("export")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Write to a file.")
@click.pass_context
def export(ctx: click.Context, output: str | None) -> None:
    """Export the state as JSON (stdout by default)."""
    text = export_state(current_state(ctx))
    if output is None:
        click.echo(text, nl=False)
        return
    Path(output).write_text(text, encoding="utf-8")
    click.secho(f"✅ Exported to {output}", fg="green")


@data.command("import")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.pass_context
def import_(ctx: click.Context, source) -> None:
    """Replace the state with an exported JSON file ('-' for stdin)."""
    if import_state_file(source.read(), _state_path(ctx)):
        click.secho("✅ Data imported", fg="green")
    else:
        click.secho("❌ Failed to import data. Please check the JSON format.", fg="red")
        sys.exit(1)


@data.command("clear")
@click.option("--yes", is_flag=True, help="Don't ask for confirmation.")
@click.pass_context
def clear(ctx: click.Context, yes: bool) -> None:
    """Delete every sector, client, and module."""
    if not yes:
        click.confirm("Clear all data? This cannot be undone.", abort=True)
    clear_state(_state_path(ctx))
    click.secho("✅ All data cleared", fg="green")
