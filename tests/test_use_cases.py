"""
Tests for use cases — status summary, state check, and the load/apply/save cycle.
"""

from pathlib import Path

import pytest

from modular_analytics.core.context import set_state_path
from modular_analytics.core.models import ConfigField, MasterModule, ModuleInstance
from modular_analytics.core.persistence.state_file import load_state, save_state
from modular_analytics.core.services.config_editor import save_config
from modular_analytics.core.services.errors import ConfigValidationError
from modular_analytics.core.services.instances import assign_module, toggle_active
from modular_analytics.core.use_cases.state_check import check_state, check_state_file
from modular_analytics.core.use_cases.status import get_status, summarize
from modular_analytics.core.use_cases.workspace import apply_and_save, resolve_state_path


class TestStatus:
    def test_counts(self, state_with_sector_config):
        st = assign_module(state_with_sector_config, "client", "acme", 7)
        st = assign_module(st, "client", "solo", 42)
        st = toggle_active(st, "client", "solo", 42)

        result = summarize(st)
        assert result.sector_count == 1
        assert result.client_count == 2
        assert result.module_count == 2
        assert result.unlinked_clients == 1
        assert result.active_sector_instances == 1
        # acme inherited the active sector instance, solo was toggled on
        assert result.active_client_instances == 2
        assert result.overriding_client_instances == 1

    def test_to_dict(self, state):
        data = summarize(state).to_dict()
        assert data["clients"] == {"total": 2, "without_sector": 1}
        assert data["active_configs"] == {"clients": 0, "sectors": 0}

    def test_get_status_from_context(self, state, state_file: Path):
        save_state(state, state_file)
        set_state_path(state_file)
        result = get_status()
        assert result.error is None
        assert result.state_path == state_file
        assert result.client_count == 2

    def test_get_status_bad_config(self, tmp_path: Path):
        result = get_status(tmp_path / "missing.yml")
        assert result.error is not None
        assert result.to_dict() == {"error": result.error}


class TestStateCheck:
    def test_clean_state(self, state):
        result = check_state(state)
        assert result.valid
        assert result.warnings == []

    def test_dangling_sector(self, state):
        st = state.model_copy(deep=True)
        st.get_client("acme").sector_id = "ghost"
        warnings = check_state(st).warnings
        assert any("missing sector 'ghost'" in w for w in warnings)

    def test_orphaned_instance(self, state):
        st = state.model_copy(deep=True)
        st.get_client("solo").modules[555] = ModuleInstance()
        assert any("module 555" in w for w in check_state(st).warnings)

    def test_schema_drift(self, state):
        st = assign_module(state, "client", "solo", 7)
        st.get_client("solo").modules[7].config_values = {"old": 1}
        warnings = check_state(st).warnings
        assert any("stale config keys old" in w for w in warnings)
        assert any("filled from defaults: limit" in w for w in warnings)

    def test_sector_override_flag(self, state):
        st = assign_module(state, "sector", "retail", 7)
        st.get_sector("retail").modules[7].is_override = True
        assert any("override flag" in w for w in check_state(st).warnings)

    def test_required_field_without_default(self, state):
        st = state.model_copy(deep=True)
        st.master_modules.append(
            MasterModule(id=9, name="Req", config_schema=[ConfigField(name="key", required=True)])
        )
        assert any("required but has no default" in w for w in check_state(st).warnings)

    def test_check_state_file(self, state, state_file: Path):
        save_state(state, state_file)
        set_state_path(state_file)
        result = check_state_file()
        assert result.valid
        assert result.to_dict()["state_path"] == str(state_file)


class TestWorkspace:
    def test_context_path_wins(self, state_file: Path):
        set_state_path(state_file)
        assert resolve_state_path() == state_file

    def test_apply_and_save(self, state, state_file: Path):
        save_state(state, state_file)
        set_state_path(state_file)
        apply_and_save(lambda s: assign_module(s, "sector", "retail", 7))
        assert 7 in load_state(state_file).get_sector("retail").modules

    def test_noop_does_not_write(self, state, state_file: Path):
        save_state(state, state_file)
        set_state_path(state_file)
        mtime = state_file.stat().st_mtime_ns
        apply_and_save(lambda s: s)
        assert state_file.stat().st_mtime_ns == mtime

    def test_failed_operation_saves_nothing(self, state, state_file: Path):
        st = assign_module(state, "client", "solo", 42)
        save_state(st, state_file)
        set_state_path(state_file)
        before = state_file.read_text()
        with pytest.raises(ConfigValidationError):
            apply_and_save(lambda s: save_config(s, "client", "solo", 42, {"filters": "{"}))
        assert state_file.read_text() == before
