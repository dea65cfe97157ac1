"""
Instance store commands — assign, unassign, activate, and prompt edits.

Every command returns a new AppState. Commands that name a missing
entity, module, or instance are logged no-ops that return the state
unchanged.

On a client, activation and prompt edits are always per-client
overrides: they set ``is_override`` and freeze the configuration the
client currently sees.
"""

from __future__ import annotations

import logging

from modular_analytics.core.models import (
    AppState,
    Client,
    EntityKind,
    ModuleInstance,
    Sector,
)
from modular_analytics.core.services.resolution import (
    initial_config_values,
    resolve_instance,
    sector_instance_for,
)

logger = logging.getLogger(__name__)


def _locate(
    state: AppState,
    kind: EntityKind,
    entity_id: str,
    module_id: int,
) -> tuple[Sector | Client | None, ModuleInstance | None]:
    entity = state.get_entity(kind, entity_id)
    if entity is None:
        logger.info("No %s with id %s — ignoring", kind, entity_id)
        return None, None
    instance = entity.modules.get(module_id)
    if instance is None:
        logger.info("Module %s is not assigned to %s %s — ignoring", module_id, kind, entity_id)
    return entity, instance


def mark_override(state: AppState, client: Client, module_id: int) -> None:
    """Switch a client instance to override, freezing its displayed values.

    Mutates ``client`` in place; callers pass an entity from a state copy.
    Instances that already override are left as they are.
    """
    instance = client.modules[module_id]
    if instance.is_override is True:
        return
    module = state.get_module(module_id)
    if module is not None:
        resolved = resolve_instance(
            module,
            instance,
            "client",
            client.client_id,
            sector_instance_for(state, client, module_id),
        )
        instance.config_values = {**instance.config_values, **resolved.values}
    instance.is_override = True
    logger.debug("Client %s now overrides module %s", client.client_id, module_id)


def assign_module(
    state: AppState,
    kind: EntityKind,
    entity_id: str,
    module_id: int,
) -> AppState:
    """Attach a master module to a sector or client.

    The new instance is born with the values resolution would show for it
    (sector values, then defaults, then zero values). A client whose sector
    already has the module also inherits the sector's activation and
    prompt, and starts out following the sector (``is_override=False``).
    """
    module = state.get_module(module_id)
    if module is None:
        logger.info("Cannot assign unknown module %s — ignoring", module_id)
        return state
    entity = state.get_entity(kind, entity_id)
    if entity is None:
        logger.info("Cannot assign module %s to unknown %s %s", module_id, kind, entity_id)
        return state
    if module_id in entity.modules:
        logger.info("Module %s already assigned to %s %s", module_id, kind, entity_id)
        return state

    instance = ModuleInstance(
        config_values=initial_config_values(state, kind, entity_id, module),
    )
    if isinstance(entity, Client):
        instance.is_override = False
        sector_instance = sector_instance_for(state, entity, module_id)
        if sector_instance is not None:
            instance.is_active = sector_instance.is_active
            instance.prompt = sector_instance.prompt

    new_state = state.model_copy(deep=True)
    new_state.get_entity(kind, entity_id).modules[module_id] = instance
    logger.info("Assigned module %s to %s %s", module_id, kind, entity_id)
    return new_state


def unassign_module(
    state: AppState,
    kind: EntityKind,
    entity_id: str,
    module_id: int,
) -> AppState:
    """Remove an entity's instance of a module. Other entities are untouched."""
    entity, instance = _locate(state, kind, entity_id, module_id)
    if instance is None:
        return state

    new_state = state.model_copy(deep=True)
    del new_state.get_entity(kind, entity_id).modules[module_id]
    logger.info("Unassigned module %s from %s %s", module_id, kind, entity_id)
    return new_state


def toggle_active(
    state: AppState,
    kind: EntityKind,
    entity_id: str,
    module_id: int,
) -> AppState:
    """Flip an instance's activation flag."""
    entity, instance = _locate(state, kind, entity_id, module_id)
    if instance is None:
        return state

    new_state = state.model_copy(deep=True)
    target = new_state.get_entity(kind, entity_id)
    if isinstance(target, Client):
        mark_override(new_state, target, module_id)
    target.modules[module_id].is_active = not instance.is_active
    logger.info(
        "Module %s on %s %s is now %s",
        module_id,
        kind,
        entity_id,
        "active" if not instance.is_active else "inactive",
    )
    return new_state


def update_prompt(
    state: AppState,
    kind: EntityKind,
    entity_id: str,
    module_id: int,
    prompt: str,
) -> AppState:
    """Replace an instance's prompt text."""
    entity, instance = _locate(state, kind, entity_id, module_id)
    if instance is None:
        return state

    new_state = state.model_copy(deep=True)
    target = new_state.get_entity(kind, entity_id)
    if isinstance(target, Client):
        mark_override(new_state, target, module_id)
    target.modules[module_id].prompt = prompt
    logger.info("Updated prompt of module %s on %s %s", module_id, kind, entity_id)
    return new_state
