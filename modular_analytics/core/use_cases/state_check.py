"""
State check use case — report inconsistencies the engine tolerates.

None of these stop the engine from working: dangling sector links
resolve to "no sector tier", orphaned instances are ignored, stale keys
are skipped, and missing keys are filled at read time. The check makes
them visible so an operator can tidy up.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from modular_analytics.core.config.loader import ConfigError
from modular_analytics.core.models import AppState
from modular_analytics.core.use_cases.workspace import open_state


@dataclass
class StateCheckResult:
    """Result of a state consistency check."""

    state_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "state_path": str(self.state_path) if self.state_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
        }


def check_state(state: AppState) -> StateCheckResult:
    """Inspect a state for dangling references and schema drift."""
    result = StateCheckResult()
    modules = {m.id: m for m in state.master_modules}

    for client in state.clients:
        if client.sector_id is not None and state.get_sector(client.sector_id) is None:
            result.warnings.append(
                f"Client '{client.client_id}' links to missing sector '{client.sector_id}'"
            )

    owners = [("sector", s.id, s.modules) for s in state.sectors]
    owners += [("client", c.client_id, c.modules) for c in state.clients]
    for kind, entity_id, instances in owners:
        for module_id, instance in instances.items():
            module = modules.get(module_id)
            if module is None:
                result.warnings.append(
                    f"{kind.capitalize()} '{entity_id}' holds module {module_id}, "
                    "which no longer exists"
                )
                continue
            schema_names = set(module.field_names)
            stored_names = set(instance.config_values)
            stale = sorted(stored_names - schema_names)
            missing = sorted(schema_names - stored_names)
            if stale:
                result.warnings.append(
                    f"{kind.capitalize()} '{entity_id}' module {module_id}: "
                    f"stale config keys {', '.join(stale)}"
                )
            if missing:
                result.warnings.append(
                    f"{kind.capitalize()} '{entity_id}' module {module_id}: "
                    f"config keys filled from defaults: {', '.join(missing)}"
                )
            if kind == "sector" and instance.is_override is not None:
                result.warnings.append(
                    f"Sector '{entity_id}' module {module_id} carries an override flag, "
                    "which sectors ignore"
                )

    for module in state.master_modules:
        if not module.name:
            result.warnings.append(f"Module {module.id} has no name")
        for f in module.config_schema:
            if f.required and not f.has_default:
                result.warnings.append(
                    f"Module {module.id} field '{f.name}' is required but has no default"
                )

    return result


def check_state_file(config_path: Path | None = None) -> StateCheckResult:
    """Load the state file and check it."""
    try:
        state, path = open_state(config_path)
    except ConfigError as e:
        return StateCheckResult(errors=[str(e)])
    result = check_state(state)
    result.state_path = path
    return result
