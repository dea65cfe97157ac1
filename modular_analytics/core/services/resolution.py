"""
Resolution engine — effective configuration of a module instance.

Every field of the module schema is resolved independently, at the
moment the configuration is read, using this precedence:

    1. the instance's own stored value            (source "stored")
    2. the sector's stored value, for a client
       that does not override its sector          (source "sector")
    3. the field's schema default                 (source "default")
    4. the field type's zero value                (source "zero")

Sectors have no parent tier, so step 2 never applies to them.

A client that follows its sector (``is_override`` not True) sees its
fields locked, so that it cannot silently diverge from the sector. The
only exception is a value stored on a historical instance that predates
the override flag (``is_override is None``): it was set by the client
itself and stays editable.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any

from modular_analytics.core.models import (
    AppState,
    Client,
    ConfigField,
    EntityKind,
    MasterModule,
    ModuleInstance,
)
from modular_analytics.core.services.field_types import coerce_for_read, zero_value

logger = logging.getLogger(__name__)


@dataclass
class ResolvedField:
    """The effective value of one schema field."""

    name: str
    value: Any
    source: str  # stored, sector, default, zero
    locked: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "value": self.value,
            "source": self.source,
            "locked": self.locked,
        }


@dataclass
class ResolvedConfig:
    """Effective configuration of one module instance, in schema order."""

    module_id: int
    entity_kind: EntityKind
    entity_id: str
    is_override: bool | None = None
    has_sector_tier: bool = False
    fields: list[ResolvedField] = field(default_factory=list)

    @property
    def values(self) -> dict[str, Any]:
        return {f.name: f.value for f in self.fields}

    @property
    def locked_fields(self) -> list[str]:
        return [f.name for f in self.fields if f.locked]

    def get(self, name: str) -> ResolvedField | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_dict(self) -> dict:
        return {
            "module_id": self.module_id,
            "entity_kind": self.entity_kind,
            "entity_id": self.entity_id,
            "is_override": self.is_override,
            "has_sector_tier": self.has_sector_tier,
            "values": self.values,
            "fields": [f.to_dict() for f in self.fields],
        }


# ── Sector tier lookup ──────────────────────────────────────────


def sector_instance_for(
    state: AppState,
    client: Client,
    module_id: int,
) -> ModuleInstance | None:
    """The sector-tier instance a client inherits from, if any.

    A missing ``sector_id``, a sector that no longer exists, and a sector
    without the module all mean "no sector tier".
    """
    sector = state.get_sector(client.sector_id)
    if sector is None:
        if client.sector_id is not None:
            logger.debug(
                "Client %s links to unknown sector %s — no sector tier",
                client.client_id,
                client.sector_id,
            )
        return None
    return sector.modules.get(module_id)


# ── Per-field precedence ────────────────────────────────────────


def resolve_field(
    config_field: ConfigField,
    stored: dict[str, Any] | None,
    sector_values: dict[str, Any] | None,
) -> tuple[Any, str]:
    """Resolve one field. Pass ``sector_values=None`` to skip step 2.

    Returns:
        Tuple of (value, source).
    """
    name = config_field.name
    if stored is not None and name in stored:
        return coerce_for_read(config_field, copy.deepcopy(stored[name])), "stored"
    if sector_values is not None and name in sector_values:
        return coerce_for_read(config_field, copy.deepcopy(sector_values[name])), "sector"
    if config_field.has_default:
        return coerce_for_read(config_field, copy.deepcopy(config_field.default)), "default"
    return zero_value(config_field.type), "zero"


def resolve_instance(
    module: MasterModule,
    instance: ModuleInstance | None,
    kind: EntityKind,
    entity_id: str,
    sector_instance: ModuleInstance | None = None,
) -> ResolvedConfig:
    """Resolve every schema field of an instance.

    ``instance`` may be None to compute the values a brand-new instance
    is born with. ``sector_instance`` is ignored for sectors.
    """
    is_override = instance.is_override if instance is not None else None
    follows_sector = (
        kind == "client"
        and sector_instance is not None
        and is_override is not True
    )
    stored = instance.config_values if instance is not None else None
    sector_values = sector_instance.config_values if follows_sector else None

    resolved = ResolvedConfig(
        module_id=module.id,
        entity_kind=kind,
        entity_id=entity_id,
        is_override=is_override,
        has_sector_tier=kind == "client" and sector_instance is not None,
    )
    for config_field in module.config_schema:
        value, source = resolve_field(config_field, stored, sector_values)
        historical_own_value = source == "stored" and is_override is None
        resolved.fields.append(
            ResolvedField(
                name=config_field.name,
                value=value,
                source=source,
                locked=follows_sector and not historical_own_value,
            )
        )
    return resolved


# ── State-level queries ─────────────────────────────────────────


def resolve_effective_config(
    state: AppState,
    kind: EntityKind,
    entity_id: str,
    module_id: int,
) -> ResolvedConfig | None:
    """Effective configuration of an entity's module instance.

    Returns:
        ResolvedConfig, or None if the entity, its instance, or the
        master module does not exist.
    """
    entity = state.get_entity(kind, entity_id)
    if entity is None:
        return None
    instance = entity.modules.get(module_id)
    if instance is None:
        return None
    module = state.get_module(module_id)
    if module is None:
        logger.debug("Instance %s on %s %s has no master module", module_id, kind, entity_id)
        return None

    sector_instance = None
    if isinstance(entity, Client):
        sector_instance = sector_instance_for(state, entity, module_id)
    return resolve_instance(module, instance, kind, entity_id, sector_instance)


def initial_config_values(
    state: AppState,
    kind: EntityKind,
    entity_id: str,
    module: MasterModule,
) -> dict[str, Any]:
    """Config values a new instance is born with (steps 2–4 for every field)."""
    sector_instance = None
    if kind == "client":
        client = state.get_client(entity_id)
        if client is not None:
            sector_instance = sector_instance_for(state, client, module.id)
    return resolve_instance(module, None, kind, entity_id, sector_instance).values
