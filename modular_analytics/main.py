"""
Modular Analytics — CLI entrypoint.

Usage:
    python -m modular_analytics.main --help
    python -m modular_analytics.main status
    python -m modular_analytics.main client resolve acme 7
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from modular_analytics import __version__
from modular_analytics.core.observability.logging_config import level_from_flags, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="analytics")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to analytics.yml (default: auto-detect).",
)
@click.option(
    "--state",
    "-s",
    "state_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to the state file (overrides analytics.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    state_path: str | None,
) -> None:
    """Modular Analytics — manage analytics modules for sectors and clients."""
    from modular_analytics.core.config.loader import ConfigError, load_settings
    from modular_analytics.core.context import set_state_path

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # Register the state file in core context (used by every use case)
    set_state_path(Path(state_path).resolve() if state_path else None)

    try:
        settings = load_settings(ctx.obj["config_path"])
        configured_level = settings.log_level
        log_file, log_file_level = settings.log_path(), settings.log_file_level
    except ConfigError:
        # Reported by the command that needs the settings
        configured_level = os.environ.get("MA_LOG_LEVEL")
        log_file, log_file_level = None, None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=level_from_flags(debug, verbose, quiet, fallback=configured_level),
        log_file=log_file,
        log_file_level=log_file_level,
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show a summary of sectors, clients, and modules."""
    from modular_analytics.core.use_cases.status import get_status

    result = get_status(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if not ctx.obj.get("quiet"):
        click.secho("\n📊 Modular Analytics", fg="cyan", bold=True)
        click.echo(f"   State: {result.state_path}")
        click.echo()

    click.echo(f"   Sectors:        {result.sector_count}")
    click.echo(f"   Clients:        {result.client_count}")
    if result.unlinked_clients:
        click.echo(f"     without sector: {result.unlinked_clients}")
    click.echo(f"   Master modules: {result.module_count}")
    click.echo(
        f"   Active configs: {result.active_client_instances} client / "
        f"{result.active_sector_instances} sector"
    )
    click.echo(f"   Overrides:      {result.overriding_client_instances}")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, as_json: bool) -> None:
    """Check the state for dangling links and schema drift."""
    from modular_analytics.core.use_cases.state_check import check_state_file

    result = check_state_file(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if not result.valid:
        click.secho("❌ Cannot check state:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")
        sys.exit(1)

    if result.warnings:
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")
    else:
        click.secho("✅ State is consistent", fg="green", bold=True)
    click.echo()


# ── Register sub-command groups from modular_analytics/ui/cli/ ───

from modular_analytics.ui.cli.clients import client  # noqa: E402
from modular_analytics.ui.cli.data import data  # noqa: E402
from modular_analytics.ui.cli.modules import module  # noqa: E402
from modular_analytics.ui.cli.sectors import sector  # noqa: E402

cli.add_command(module)
cli.add_command(sector)
cli.add_command(client)
cli.add_command(data)


if __name__ == "__main__":
    cli()
