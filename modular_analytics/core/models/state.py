"""
AppState — the root state model.

This is the single document that captures every sector, client, and
master module. It's serialized to the state file as one unit and loaded
on every operation; there is no partial persistence.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from modular_analytics.core.models.entities import Client, EntityKind, Sector
from modular_analytics.core.models.module import MasterModule


def _dupes(values: list) -> list:
    seen = set()
    dupes = []
    for v in values:
        if v in seen and v not in dupes:
            dupes.append(v)
        seen.add(v)
    return dupes


class AppState(BaseModel):
    """Root state model — serialized to the state file.

    ``master_modules`` is persisted under the key ``masterModules``.
    """

    model_config = ConfigDict(populate_by_name=True)

    # ── Schema ───────────────────────────────────────────────────
    schema_version: int = 1

    # ── Collections ──────────────────────────────────────────────
    sectors: list[Sector] = Field(default_factory=list)
    clients: list[Client] = Field(default_factory=list)
    master_modules: list[MasterModule] = Field(default_factory=list, alias="masterModules")

    @model_validator(mode="after")
    def _unique_ids(self) -> AppState:
        problems = []
        sector_dupes = _dupes([s.id for s in self.sectors])
        if sector_dupes:
            problems.append(f"duplicate sector ids: {sector_dupes}")
        client_dupes = _dupes([c.client_id for c in self.clients])
        if client_dupes:
            problems.append(f"duplicate client ids: {client_dupes}")
        module_dupes = _dupes([m.id for m in self.master_modules])
        if module_dupes:
            problems.append(f"duplicate module ids: {module_dupes}")
        if problems:
            raise ValueError("; ".join(problems))
        return self

    # ── Lookups ──────────────────────────────────────────────────

    def get_module(self, module_id: int) -> MasterModule | None:
        """Look up a master module by id."""
        for mod in self.master_modules:
            if mod.id == module_id:
                return mod
        return None

    def get_sector(self, sector_id: str | None) -> Sector | None:
        """Look up a sector by id. None and unknown ids both return None."""
        if sector_id is None:
            return None
        for sector in self.sectors:
            if sector.id == sector_id:
                return sector
        return None

    def get_client(self, client_id: str) -> Client | None:
        """Look up a client by id."""
        for client in self.clients:
            if client.client_id == client_id:
                return client
        return None

    def get_entity(self, kind: EntityKind, entity_id: str) -> Sector | Client | None:
        """Look up a sector or client by kind and id."""
        if kind == "sector":
            return self.get_sector(entity_id)
        if kind == "client":
            return self.get_client(entity_id)
        raise ValueError(f"Unknown entity kind: {kind!r}")

    def clients_in_sector(self, sector_id: str) -> list[Client]:
        """All clients that link to the given sector id."""
        return [c for c in self.clients if c.sector_id == sector_id]

    def to_dict(self) -> dict:
        """JSON-ready dict in the persisted shape."""
        return self.model_dump(mode="json", by_alias=True)
