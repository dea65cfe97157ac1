"""
Tests for domain models — validation, lookups, serialization.
"""

import pytest
from pydantic import ValidationError

from modular_analytics.core.models import (
    AppState,
    Client,
    ConfigField,
    MasterModule,
    ModuleInstance,
    Sector,
)


class TestConfigField:
    """ConfigField validation."""

    def test_label_defaults_to_name(self):
        f = ConfigField(name="limit", type="number")
        assert f.label == "limit"

    def test_select_requires_options(self):
        with pytest.raises(ValidationError):
            ConfigField(name="region", type="select")

    def test_multi_select_requires_non_empty_options(self):
        with pytest.raises(ValidationError):
            ConfigField(name="channels", type="multi-select", options=[])

    def test_options_dropped_for_other_types(self):
        f = ConfigField(name="title", type="text", options=["a", "b"])
        assert f.options is None

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            ConfigField(name="x", type="color")

    def test_has_default(self):
        assert ConfigField(name="a", default=0, type="number").has_default is True
        assert ConfigField(name="a", default=False, type="checkbox").has_default is True
        assert ConfigField(name="a").has_default is False


class TestMasterModule:
    """MasterModule validation and lookups."""

    def test_duplicate_field_names_rejected(self):
        with pytest.raises(ValidationError):
            MasterModule(
                id=1,
                name="dup",
                config_schema=[ConfigField(name="a"), ConfigField(name="a")],
            )

    def test_get_field(self, report_module):
        assert report_module.get_field("top_n").type == "number"
        assert report_module.get_field("missing") is None

    def test_field_names_keep_schema_order(self, report_module):
        assert report_module.field_names[:3] == ["title", "notes", "top_n"]


class TestModuleInstance:
    def test_defaults(self):
        inst = ModuleInstance()
        assert inst.is_active is False
        assert inst.prompt == ""
        assert inst.config_values == {}
        assert inst.is_override is None
        assert inst.overrides is False

    def test_overrides_only_when_true(self):
        assert ModuleInstance(is_override=True).overrides is True
        assert ModuleInstance(is_override=False).overrides is False


class TestEntities:
    def test_blank_sector_id_is_none(self):
        c = Client(client_id="c1", sector_id="")
        assert c.sector_id is None

    def test_module_keys_parsed_from_strings(self):
        """Persisted maps use stringified ids; in memory they are ints."""
        s = Sector.model_validate({"id": "s1", "modules": {"7": {"is_active": True}}})
        assert list(s.modules) == [7]
        assert s.modules[7].is_active is True


class TestAppState:
    def test_empty(self):
        st = AppState()
        assert st.sectors == []
        assert st.clients == []
        assert st.master_modules == []

    def test_master_modules_alias(self, limit_module):
        st = AppState.model_validate({"masterModules": [limit_module.model_dump()]})
        assert st.get_module(7) is not None
        assert "masterModules" in st.to_dict()

    def test_populate_by_name(self, limit_module):
        st = AppState(master_modules=[limit_module])
        assert st.master_modules[0].id == 7

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError):
            AppState(sectors=[Sector(id="a"), Sector(id="a")])
        with pytest.raises(ValidationError):
            AppState(clients=[Client(client_id="c"), Client(client_id="c")])
        with pytest.raises(ValidationError):
            AppState(
                master_modules=[MasterModule(id=1, name="x"), MasterModule(id=1, name="y")]
            )

    def test_lookups(self, state):
        assert state.get_sector("retail").name == "Retail"
        assert state.get_sector(None) is None
        assert state.get_sector("nope") is None
        assert state.get_client("acme").project_id == 1
        assert state.get_entity("client", "solo").name == "Solo"
        assert state.get_entity("sector", "retail") is state.get_sector("retail")

    def test_get_entity_unknown_kind(self, state):
        with pytest.raises(ValueError):
            state.get_entity("tenant", "x")

    def test_clients_in_sector(self, state):
        assert [c.client_id for c in state.clients_in_sector("retail")] == ["acme"]

    def test_to_dict_stringifies_module_keys(self, state_with_sector_config):
        data = state_with_sector_config.to_dict()
        assert list(data["sectors"][0]["modules"]) == ["7"]
