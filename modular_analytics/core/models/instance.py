"""
Module instance model — a master module attached to a sector or client.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ModuleInstance(BaseModel):
    """Per-entity state of an assigned module.

    ``is_override`` only matters for client instances:
      - False: the client follows its sector's configuration.
      - True:  the client's own ``config_values`` are authoritative.
      - None:  sector instance, or client data written before the flag existed.
    """

    is_active: bool = False
    prompt: str = ""
    config_values: dict[str, Any] = Field(default_factory=dict)
    is_override: bool | None = None

    @property
    def overrides(self) -> bool:
        """Whether this instance is decoupled from its sector."""
        return self.is_override is True
