"""
Shared helpers for the CLI command groups.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import Any

import click
import yaml

from modular_analytics.core.config.loader import ConfigError
from modular_analytics.core.models import AppState
from modular_analytics.core.services.errors import ConfigValidationError, ModularAnalyticsError


def commit(ctx: click.Context, operation: Callable[[AppState], AppState]) -> AppState:
    """Apply one state operation and save it, exiting 1 on any core error."""
    from modular_analytics.core.use_cases.workspace import apply_and_save

    try:
        return apply_and_save(operation, config_path=ctx.obj.get("config_path"))
    except ConfigValidationError as e:
        click.secho("❌ Configuration not saved:", fg="red", bold=True)
        for name, message in sorted(e.errors.items()):
            click.echo(f"   • {name}: {message}")
        sys.exit(1)
    except (ConfigError, ModularAnalyticsError, ValueError) as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


def current_state(ctx: click.Context) -> AppState:
    """Load the current state, exiting 1 if the settings are invalid."""
    from modular_analytics.core.use_cases.workspace import open_state

    try:
        state, _path = open_state(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    return state


def parse_value(text: str) -> Any:
    """Interpret a command-line value as YAML so numbers and booleans keep their type.

    Text that is not valid YAML is returned as-is (a json field with a
    typo is reported by the save, not here).
    """
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return text


def parse_assignments(pairs: tuple[str, ...]) -> dict[str, Any]:
    """Turn ``key=value`` pairs into a mapping."""
    values: dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"Expected key=value, got {pair!r}", param_hint="--set")
        key, _, raw = pair.partition("=")
        values[key.strip()] = parse_value(raw)
    return values
