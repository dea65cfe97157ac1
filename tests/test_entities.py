"""
Tests for sector and client management.
"""

import pytest

from modular_analytics.core.models import Client, Sector
from modular_analytics.core.services.entities import (
    add_client,
    add_sector,
    delete_client,
    delete_sector,
    update_client,
    update_sector,
)
from modular_analytics.core.services.errors import EntityConflictError, EntityNotFoundError
from modular_analytics.core.services.instances import assign_module
from modular_analytics.core.services.resolution import resolve_effective_config


class TestSectors:
    def test_add(self, state):
        st = add_sector(state, Sector(id="food", name="Food"))
        assert st.get_sector("food").name == "Food"
        assert state.get_sector("food") is None

    def test_add_duplicate(self, state):
        with pytest.raises(EntityConflictError):
            add_sector(state, Sector(id="retail"))

    def test_update(self, state_with_sector_config):
        st = update_sector(state_with_sector_config, "retail", description="Shops", id="x")
        sector = st.get_sector("retail")
        assert sector.description == "Shops"
        assert 7 in sector.modules

    def test_update_missing(self, state):
        with pytest.raises(EntityNotFoundError):
            update_sector(state, "nope", name="x")

    def test_delete_leaves_clients_dangling(self, state_with_sector_config):
        st = assign_module(state_with_sector_config, "client", "acme", 7)
        st = delete_sector(st, "retail")
        assert st.get_sector("retail") is None
        assert st.get_client("acme").sector_id == "retail"

        resolved = resolve_effective_config(st, "client", "acme", 7)
        assert resolved.has_sector_tier is False
        assert resolved.locked_fields == []
        assert resolved.values == {"limit": 25}

    def test_delete_missing_is_noop(self, state):
        assert delete_sector(state, "nope") is state


class TestClients:
    def test_add(self, state):
        st = add_client(state, Client(client_id="new", name="New", sector_id="retail"))
        assert [c.client_id for c in st.clients_in_sector("retail")] == ["acme", "new"]

    def test_add_with_unknown_sector_accepted(self, state):
        st = add_client(state, Client(client_id="new", sector_id="ghost"))
        assert st.get_client("new").sector_id == "ghost"

    def test_add_duplicate(self, state):
        with pytest.raises(EntityConflictError):
            add_client(state, Client(client_id="acme"))

    def test_update_unlinks_sector(self, state):
        st = update_client(state, "acme", sector_id="")
        assert st.get_client("acme").sector_id is None
        assert st.get_client("acme").project_id == 1

    def test_update_missing(self, state):
        with pytest.raises(EntityNotFoundError):
            update_client(state, "nope", name="x")

    def test_delete(self, state):
        st = delete_client(state, "solo")
        assert st.get_client("solo") is None
        assert delete_client(st, "solo") is st
