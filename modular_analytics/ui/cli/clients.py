"""
CLI commands for clients.

Thin wrappers over ``core.services.entities`` and ``config_editor``;
module instance commands come from ``ui.cli.instances``.
"""

from __future__ import annotations

import json

import click

from modular_analytics.core.models import Client
from modular_analytics.core.services.config_editor import copy_sector_config, set_override
from modular_analytics.core.services.entities import add_client, delete_client, update_client
from modular_analytics.ui.cli.common import commit, current_state
from modular_analytics.ui.cli.instances import register_instance_commands


@click.group()
def client() -> None:
    """Clients — per-client module instances and sector overrides."""


@client.command("add")
@click.argument("client_id")
@click.option("--name", default="", help="Display name.")
@click.option("--project-id", type=int, default=0, help="Numeric project id.")
@click.option("--category", default="", help="Client category.")
@click.option("--sector", "sector_id", default=None, help="Sector to inherit configuration from.")
@click.pass_context
def add(
    ctx: click.Context,
    client_id: str,
    name: str,
    project_id: int,
    category: str,
    sector_id: str | None,
) -> None:
    """Create a client."""
    new = Client(
        client_id=client_id,
        name=name or client_id,
        project_id=project_id,
        category=category,
        sector_id=sector_id,
    )
    commit(ctx, lambda s: add_client(s, new))
    click.secho(f"✅ Client {client_id} created", fg="green")


@client.command("update")
@click.argument("client_id")
@click.option("--name", default=None, help="New display name.")
@click.option("--project-id", type=int, default=None, help="New project id.")
@click.option("--category", default=None, help="New category.")
@click.option("--sector", "sector_id", default=None, help="New sector link ('' to unlink).")
@click.pass_context
def update(
    ctx: click.Context,
    client_id: str,
    name: str | None,
    project_id: int | None,
    category: str | None,
    sector_id: str | None,
) -> None:
    """Edit a client's attributes or sector link."""
    changes = {
        k: v
        for k, v in {
            "name": name,
            "project_id": project_id,
            "category": category,
            "sector_id": sector_id,
        }.items()
        if v is not None
    }
    commit(ctx, lambda s: update_client(s, client_id, **changes))
    click.secho(f"✅ Client {client_id} updated", fg="green")


@client.command("delete")
@click.argument("client_id")
@click.pass_context
def delete(ctx: click.Context, client_id: str) -> None:
    """Delete a client and its module instances."""
    commit(ctx, lambda s: delete_client(s, client_id))
    click.secho(f"✅ Client {client_id} deleted", fg="green")


@client.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_clients(ctx: click.Context, as_json: bool) -> None:
    """List clients with their sector and module instances."""
    state = current_state(ctx)

    if as_json:
        data = [c.model_dump(mode="json") for c in state.clients]
        click.echo(json.dumps(data, indent=2))
        return

    if not state.clients:
        click.echo("No clients defined.")
        return

    for c in state.clients:
        sector_label = ""
        if c.sector_id is not None:
            missing = " (missing)" if state.get_sector(c.sector_id) is None else ""
            sector_label = f" [sector {c.sector_id}{missing}]"
        click.secho(f"   • {c.client_id}", bold=True, nl=False)
        click.echo(f"  {c.name}{sector_label}  ({len(c.modules)} modules)")
        for module_id, instance in c.modules.items():
            marker = "●" if instance.is_active else "○"
            override = " override" if instance.overrides else ""
            module = state.get_module(module_id)
            click.echo(f"       {marker} {module_id} {module.name if module else '?'}{override}")


@client.command("copy-sector")
@click.argument("client_id")
@click.argument("module_id", type=int)
@click.pass_context
def copy_sector(ctx: click.Context, client_id: str, module_id: int) -> None:
    """Copy the sector's config into the client and start overriding."""
    before = current_state(ctx)
    after = commit(ctx, lambda s: copy_sector_config(s, client_id, module_id))
    if after == before:
        click.secho("⊘ Nothing copied (no sector config for this module)", fg="yellow")
    else:
        click.secho(f"✅ Sector config copied into client {client_id}", fg="green")


@client.command("override")
@click.argument("client_id")
@click.argument("module_id", type=int)
@click.option("--off", "disable", is_flag=True, help="Follow the sector again.")
@click.pass_context
def override(ctx: click.Context, client_id: str, module_id: int, disable: bool) -> None:
    """Override the sector configuration (or follow it again with --off)."""
    commit(ctx, lambda s: set_override(s, client_id, module_id, not disable))
    mode = "follows its sector" if disable else "overrides its sector"
    click.secho(f"✅ Client {client_id} {mode} for module {module_id}", fg="green")


register_instance_commands(client, "client")
