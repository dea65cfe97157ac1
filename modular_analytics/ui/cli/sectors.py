"""
CLI commands for sectors.

Thin wrappers over ``core.services.entities``; module instance commands
come from ``ui.cli.instances``.
"""

from __future__ import annotations

import json

import click

from modular_analytics.core.models import Sector
from modular_analytics.core.services.entities import add_sector, delete_sector, update_sector
from modular_analytics.ui.cli.common import commit, current_state
from modular_analytics.ui.cli.instances import register_instance_commands


@click.group()
def sector() -> None:
    """Sectors — default module configuration for groups of clients."""


@sector.command("add")
@click.argument("sector_id")
@click.option("--name", default="", help="Display name.")
@click.option("--description", default="", help="Free-text description.")
@click.pass_context
def add(ctx: click.Context, sector_id: str, name: str, description: str) -> None:
    """Create a sector."""
    new = Sector(id=sector_id, name=name or sector_id, description=description)
    commit(ctx, lambda s: add_sector(s, new))
    click.secho(f"✅ Sector {sector_id} created", fg="green")


@sector.command("update")
@click.argument("sector_id")
@click.option("--name", default=None, help="New display name.")
@click.option("--description", default=None, help="New description.")
@click.pass_context
def update(ctx: click.Context, sector_id: str, name: str | None, description: str | None) -> None:
    """Edit a sector's name or description."""
    changes = {k: v for k, v in {"name": name, "description": description}.items() if v is not None}
    commit(ctx, lambda s: update_sector(s, sector_id, **changes))
    click.secho(f"✅ Sector {sector_id} updated", fg="green")


@sector.command("delete")
@click.argument("sector_id")
@click.pass_context
def delete(ctx: click.Context, sector_id: str) -> None:
    """Delete a sector. Linked clients keep their settings."""
    commit(ctx, lambda s: delete_sector(s, sector_id))
    click.secho(f"✅ Sector {sector_id} deleted", fg="green")


@sector.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_sectors(ctx: click.Context, as_json: bool) -> None:
    """List sectors with their assigned modules."""
    state = current_state(ctx)

    if as_json:
        data = [s.model_dump(mode="json") for s in state.sectors]
        click.echo(json.dumps(data, indent=2))
        return

    if not state.sectors:
        click.echo("No sectors defined.")
        return

    for s in state.sectors:
        clients = len(state.clients_in_sector(s.id))
        click.secho(f"   • {s.id}", bold=True, nl=False)
        click.echo(f"  {s.name}  ({len(s.modules)} modules, {clients} clients)")
        for module_id, instance in s.modules.items():
            marker = "●" if instance.is_active else "○"
            module = state.get_module(module_id)
            click.echo(f"       {marker} {module_id} {module.name if module else '?'}")


register_instance_commands(sector, "sector")
