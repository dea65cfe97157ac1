"""
Module instance commands shared by the ``sector`` and ``client`` groups.

Thin wrappers over ``core.services.instances``, ``config_editor``, and
``resolution``.
"""

from __future__ import annotations

import json
import sys

import click

from modular_analytics.core.models import EntityKind
from modular_analytics.core.services.config_editor import save_config
from modular_analytics.core.services.field_types import format_for_edit
from modular_analytics.core.services.instances import (
    assign_module,
    toggle_active,
    unassign_module,
    update_prompt,
)
from modular_analytics.core.services.resolution import resolve_effective_config
from modular_analytics.ui.cli.common import commit, current_state, parse_assignments

_SOURCE_LABELS = {
    "stored": "",
    "sector": " (inherited from sector)",
    "default": " (default)",
    "zero": " (empty)",
}


def register_instance_commands(group: click.Group, kind: EntityKind) -> None:
    """Attach assign/unassign/toggle/prompt/configure/resolve to a group."""

    @group.command("assign")
    @click.argument("entity_id")
    @click.argument("module_id", type=int)
    @click.pass_context
    def assign(ctx: click.Context, entity_id: str, module_id: int) -> None:
        """Assign a master module."""
        before = current_state(ctx)
        after = commit(ctx, lambda s: assign_module(s, kind, entity_id, module_id))
        if after == before:
            click.secho(f"⊘ Nothing assigned (unknown {kind}/module or already assigned)", fg="yellow")
        else:
            click.secho(f"✅ Module {module_id} assigned to {kind} {entity_id}", fg="green")

    @group.command("unassign")
    @click.argument("entity_id")
    @click.argument("module_id", type=int)
    @click.pass_context
    def unassign(ctx: click.Context, entity_id: str, module_id: int) -> None:
        """Remove a module instance."""
        before = current_state(ctx)
        after = commit(ctx, lambda s: unassign_module(s, kind, entity_id, module_id))
        if after == before:
            click.secho(f"⊘ Module {module_id} is not assigned to {kind} {entity_id}", fg="yellow")
        else:
            click.secho(f"✅ Module {module_id} unassigned from {kind} {entity_id}", fg="green")

    @group.command("toggle")
    @click.argument("entity_id")
    @click.argument("module_id", type=int)
    @click.pass_context
    def toggle(ctx: click.Context, entity_id: str, module_id: int) -> None:
        """Activate or deactivate a module instance."""
        state = commit(ctx, lambda s: toggle_active(s, kind, entity_id, module_id))
        entity = state.get_entity(kind, entity_id)
        instance = entity.modules.get(module_id) if entity else None
        if instance is None:
            click.secho(f"⊘ Module {module_id} is not assigned to {kind} {entity_id}", fg="yellow")
            return
        label = "active" if instance.is_active else "inactive"
        click.secho(f"✅ Module {module_id} is now {label}", fg="green")

    @group.command("prompt")
    @click.argument("entity_id")
    @click.argument("module_id", type=int)
    @click.argument("text")
    @click.pass_context
    def prompt(ctx: click.Context, entity_id: str, module_id: int, text: str) -> None:
        """Set the prompt text of a module instance."""
        commit(ctx, lambda s: update_prompt(s, kind, entity_id, module_id, text))
        click.secho(f"✅ Prompt updated for module {module_id}", fg="green")

    @group.command("configure")
    @click.argument("entity_id")
    @click.argument("module_id", type=int)
    @click.option("--set", "pairs", multiple=True, help="Field value as key=value (repeatable).")
    @click.option(
        "--override/--no-override",
        default=None,
        help="Clients only: override the sector configuration or follow it.",
    )
    @click.pass_context
    def configure(
        ctx: click.Context,
        entity_id: str,
        module_id: int,
        pairs: tuple[str, ...],
        override: bool | None,
    ) -> None:
        """Save config values for a module instance."""
        values = parse_assignments(pairs)
        commit(ctx, lambda s: save_config(s, kind, entity_id, module_id, values, override))
        click.secho(f"✅ Configuration saved for module {module_id}", fg="green")

    @group.command("resolve")
    @click.argument("entity_id")
    @click.argument("module_id", type=int)
    @click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
    @click.pass_context
    def resolve(ctx: click.Context, entity_id: str, module_id: int, as_json: bool) -> None:
        """Show the effective configuration of a module instance."""
        state = current_state(ctx)
        resolved = resolve_effective_config(state, kind, entity_id, module_id)
        if resolved is None:
            if as_json:
                click.echo(json.dumps({"error": "not assigned"}))
            else:
                click.secho(f"❌ Module {module_id} is not assigned to {kind} {entity_id}", fg="red")
            sys.exit(1)

        if as_json:
            click.echo(json.dumps(resolved.to_dict(), indent=2, default=str))
            return

        module = state.get_module(module_id)
        click.secho(f"\n⚙️  {module.name} — {kind} {entity_id}", fg="cyan", bold=True)
        if resolved.has_sector_tier:
            mode = "overriding sector" if resolved.is_override else "following sector"
            click.echo(f"   Mode: {mode}")
        click.echo()
        for f in resolved.fields:
            lock = "🔒 " if f.locked else "   "
            config_field = module.get_field(f.name)
            shown = format_for_edit(config_field, f.value)
            if isinstance(shown, str) and "\n" in shown:
                shown = shown.replace("\n", "\n        ")
            click.echo(f"   {lock}{f.name} = {shown}{_SOURCE_LABELS.get(f.source, '')}")
        click.echo()
