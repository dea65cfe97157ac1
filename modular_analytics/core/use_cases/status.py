"""
Status use case — dashboard counts for sectors, clients, and modules.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from modular_analytics.core.config.loader import ConfigError
from modular_analytics.core.models import AppState
from modular_analytics.core.use_cases.workspace import open_state


@dataclass
class StatusResult:
    """Aggregated state summary."""

    state_path: Path | None = None
    error: str | None = None

    # Summary counts
    sector_count: int = 0
    client_count: int = 0
    module_count: int = 0
    active_client_instances: int = 0
    active_sector_instances: int = 0
    overriding_client_instances: int = 0
    unlinked_clients: int = 0

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        if self.error:
            return {"error": self.error}
        return {
            "state_path": str(self.state_path) if self.state_path else None,
            "sectors": self.sector_count,
            "clients": {
                "total": self.client_count,
                "without_sector": self.unlinked_clients,
            },
            "modules": self.module_count,
            "active_configs": {
                "clients": self.active_client_instances,
                "sectors": self.active_sector_instances,
            },
            "overrides": self.overriding_client_instances,
        }


def summarize(state: AppState) -> StatusResult:
    """Count entities and instances in a state."""
    result = StatusResult(
        sector_count=len(state.sectors),
        client_count=len(state.clients),
        module_count=len(state.master_modules),
    )
    for client in state.clients:
        if client.sector_id is None:
            result.unlinked_clients += 1
        for instance in client.modules.values():
            if instance.is_active:
                result.active_client_instances += 1
            if instance.overrides:
                result.overriding_client_instances += 1
    for sector in state.sectors:
        result.active_sector_instances += sum(
            1 for instance in sector.modules.values() if instance.is_active
        )
    return result


def get_status(config_path: Path | None = None) -> StatusResult:
    """Load the state file and summarize it."""
    try:
        state, path = open_state(config_path)
    except ConfigError as e:
        return StatusResult(error=str(e))
    result = summarize(state)
    result.state_path = path
    return result
