"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from modular_analytics.core.context import set_state_path
from modular_analytics.core.models import (
    AppState,
    Client,
    ConfigField,
    MasterModule,
    ModuleInstance,
    Sector,
)


@pytest.fixture(autouse=True)
def reset_state_context():
    """Keep the process-wide state path from leaking between tests."""
    set_state_path(None)
    yield
    set_state_path(None)


@pytest.fixture
def limit_module() -> MasterModule:
    """A module with a single numeric field defaulting to 10."""
    return MasterModule(
        id=7,
        name="Limits",
        config_schema=[ConfigField(name="limit", type="number", default=10)],
    )


@pytest.fixture
def report_module() -> MasterModule:
    """A module exercising every field type."""
    return MasterModule(
        id=42,
        name="Sales Report",
        query_name="sales_report",
        tab="sales",
        description="Weekly sales numbers",
        metrics=["revenue", "orders"],
        config_schema=[
            ConfigField(name="title", label="Title", type="text", default="Weekly"),
            ConfigField(name="notes", type="textarea"),
            ConfigField(name="top_n", type="number", default=5),
            ConfigField(name="include_returns", type="checkbox"),
            ConfigField(name="region", type="select", options=["emea", "apac", "amer"]),
            ConfigField(name="channels", type="multi-select", options=["web", "store", "phone"]),
            ConfigField(name="start", type="date"),
            ConfigField(name="filters", type="json"),
        ],
    )


@pytest.fixture
def state(limit_module: MasterModule, report_module: MasterModule) -> AppState:
    """Two modules, one sector, a linked client, and an unlinked client."""
    return AppState(
        master_modules=[limit_module, report_module],
        sectors=[Sector(id="retail", name="Retail")],
        clients=[
            Client(client_id="acme", name="Acme", project_id=1, sector_id="retail"),
            Client(client_id="solo", name="Solo", project_id=2),
        ],
    )


@pytest.fixture
def state_with_sector_config(state: AppState) -> AppState:
    """``state`` with module 7 configured on the retail sector (limit=25)."""
    new_state = state.model_copy(deep=True)
    new_state.get_sector("retail").modules[7] = ModuleInstance(
        is_active=True,
        prompt="Summarize limits",
        config_values={"limit": 25},
    )
    return new_state


@pytest.fixture
def state_file(tmp_path: Path) -> Path:
    """Return a temporary state file path (not created)."""
    return tmp_path / ".state" / "analytics.json"
