"""
Sector and client models — the two tiers that own module instances.

Sectors hold default configuration. Clients are the leaf tier and may
point at one sector through ``sector_id``. That pointer is a weak
reference: it is only ever looked up, and it may name a sector that no
longer exists.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from modular_analytics.core.models.instance import ModuleInstance

EntityKind = Literal["sector", "client"]


class Sector(BaseModel):
    """A grouping of clients with default module configuration."""

    id: str
    name: str = ""
    description: str = ""
    modules: dict[int, ModuleInstance] = Field(default_factory=dict)

    @property
    def entity_id(self) -> str:
        return self.id


class Client(BaseModel):
    """A client with its own module instances and an optional sector link."""

    client_id: str
    name: str = ""
    project_id: int = 0
    category: str = ""
    sector_id: str | None = None
    modules: dict[int, ModuleInstance] = Field(default_factory=dict)

    @field_validator("sector_id", mode="before")
    @classmethod
    def _blank_sector_is_none(cls, value: object) -> object:
        # "" unlinks (e.g. `client update --sector ""`)
        if value == "":
            return None
        return value

    @property
    def entity_id(self) -> str:
        return self.client_id
