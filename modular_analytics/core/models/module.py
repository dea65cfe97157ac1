"""
Master module model — a reusable analytics capability definition.

Master modules are the building blocks assigned to sectors and clients.
Each one owns an ordered configuration schema; the module id is the key
under which every instance of the module is stored.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from modular_analytics.core.models.fields import ConfigField


class MasterModule(BaseModel):
    """A master module with its metrics and configuration schema."""

    id: int
    name: str
    query_name: str = ""
    tab: str = ""
    description: str = ""
    metrics: list[str] = Field(default_factory=list)
    config_schema: list[ConfigField] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_field_names(self) -> MasterModule:
        seen: set[str] = set()
        dupes: list[str] = []
        for f in self.config_schema:
            if f.name in seen:
                dupes.append(f.name)
            seen.add(f.name)
        if dupes:
            raise ValueError(
                f"Duplicate config field names in module {self.id}: {', '.join(sorted(set(dupes)))}"
            )
        return self

    def get_field(self, name: str) -> ConfigField | None:
        """Look up a schema field by name."""
        for f in self.config_schema:
            if f.name == name:
                return f
        return None

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.config_schema]
