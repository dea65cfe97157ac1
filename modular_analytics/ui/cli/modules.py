"""
CLI commands for master modules.

Thin wrappers over ``core.services.schema_registry`` and the module
definition loader.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from modular_analytics.core.config.loader import ConfigError, load_module_definition
from modular_analytics.core.models import MasterModule
from modular_analytics.core.services.schema_registry import (
    add_module,
    delete_module,
    next_module_id,
    update_module,
)
from modular_analytics.ui.cli.common import commit, current_state


def _split_metrics(text: str) -> list[str]:
    return [m.strip() for m in text.split(",") if m.strip()]


def _read_definition(path: str) -> dict:
    try:
        return load_module_definition(Path(path))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@click.group()
def module() -> None:
    """Master modules — reusable analytics definitions and their schemas."""


@module.command("add")
@click.option(
    "--file",
    "-f",
    "file",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="YAML or JSON module definition.",
)
@click.pass_context
def add(ctx: click.Context, file: str) -> None:
    """Create a master module from a definition file."""
    definition = _read_definition(file)
    created: dict[str, int] = {}

    def _add(state):
        module_id = definition.get("id") or next_module_id(state)
        created["id"] = module_id
        return add_module(state, MasterModule.model_validate({**definition, "id": module_id}))

    commit(ctx, _add)
    click.secho(f"✅ Module {created['id']} created", fg="green")


@module.command("update")
@click.argument("module_id", type=int)
@click.option("--name", default=None, help="New name.")
@click.option("--query-name", default=None, help="New query name.")
@click.option("--tab", default=None, help="New tab.")
@click.option("--description", default=None, help="New description.")
@click.option("--metrics", default=None, help="Comma-separated metrics.")
@click.option(
    "--file",
    "-f",
    "file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Definition file whose attributes (including config_schema) replace the module's.",
)
@click.pass_context
def update(
    ctx: click.Context,
    module_id: int,
    name: str | None,
    query_name: str | None,
    tab: str | None,
    description: str | None,
    metrics: str | None,
    file: str | None,
) -> None:
    """Edit a master module. Stored config values are not migrated."""
    changes: dict = _read_definition(file) if file else {}
    flags = {"name": name, "query_name": query_name, "tab": tab, "description": description}
    changes.update({k: v for k, v in flags.items() if v is not None})
    if metrics is not None:
        changes["metrics"] = _split_metrics(metrics)

    commit(ctx, lambda s: update_module(s, module_id, **changes))
    click.secho(f"✅ Module {module_id} updated", fg="green")


@module.command("delete")
@click.argument("module_id", type=int)
@click.pass_context
def delete(ctx: click.Context, module_id: int) -> None:
    """Delete a master module and every sector/client instance of it."""
    commit(ctx, lambda s: delete_module(s, module_id))
    click.secho(f"✅ Module {module_id} deleted", fg="green")


@module.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_modules(ctx: click.Context, as_json: bool) -> None:
    """List master modules."""
    state = current_state(ctx)

    if as_json:
        data = [m.model_dump(mode="json") for m in state.master_modules]
        click.echo(json.dumps(data, indent=2))
        return

    if not state.master_modules:
        click.echo("No master modules defined.")
        return

    for m in state.master_modules:
        tab = f" [{m.tab}]" if m.tab else ""
        click.secho(f"   • {m.id}", bold=True, nl=False)
        click.echo(f"  {m.name}{tab}  ({len(m.config_schema)} fields)")
        if m.metrics:
            click.echo(f"       metrics: {', '.join(m.metrics)}")


@module.command("show")
@click.argument("module_id", type=int)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, module_id: int, as_json: bool) -> None:
    """Show a master module's schema."""
    state = current_state(ctx)
    m = state.get_module(module_id)
    if m is None:
        click.secho(f"❌ No module with id {module_id}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(m.model_dump(mode="json"), indent=2))
        return

    click.secho(f"\n📦 {m.name} ({m.id})", fg="cyan", bold=True)
    if m.description:
        click.echo(f"   {m.description}")
    if m.query_name:
        click.echo(f"   Query: {m.query_name}")
    click.echo()
    for f in m.config_schema:
        required = " *" if f.required else ""
        default = f" = {json.dumps(f.default)}" if f.has_default else ""
        options = f"  options: {', '.join(f.options)}" if f.options else ""
        click.echo(f"   {f.name}{required} ({f.type}){default}{options}")
    click.echo()
