"""
Config editing — save, copy-from-sector, and override switching.

A save is all-or-nothing: if any json field fails to parse, the save is
refused with per-field errors and the state is left as it was.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from modular_analytics.core.models import AppState, Client, EntityKind
from modular_analytics.core.services.errors import ConfigValidationError
from modular_analytics.core.services.field_types import validate_values
from modular_analytics.core.services.instances import mark_override
from modular_analytics.core.services.resolution import (
    initial_config_values,
    resolve_effective_config,
    sector_instance_for,
)

logger = logging.getLogger(__name__)


def save_config(
    state: AppState,
    kind: EntityKind,
    entity_id: str,
    module_id: int,
    values: dict[str, Any],
    override: bool | None = None,
) -> AppState:
    """Save config values for an entity's module instance.

    Only ``values`` is validated; it is then merged over the configuration
    currently displayed, so callers may pass only the fields they changed.
    Json fields in ``values`` may be given as text; they are stored as
    parsed structures. Values already persisted are never re-parsed.

    For clients, ``override`` sets ``is_override``; when omitted the
    current flag is kept. Sectors ignore it.

    Raises:
        ConfigValidationError: If any json field does not parse. Nothing
            is saved in that case.
    """
    entity = state.get_entity(kind, entity_id)
    if entity is None or module_id not in entity.modules:
        logger.info("No module %s on %s %s — save ignored", module_id, kind, entity_id)
        return state
    module = state.get_module(module_id)
    resolved = resolve_effective_config(state, kind, entity_id, module_id)
    if module is None or resolved is None:
        logger.info("Module %s no longer exists — save ignored", module_id)
        return state

    coerced, errors = validate_values(module.config_schema, values)
    if errors:
        logger.warning(
            "Refusing to save module %s on %s %s: %d invalid field(s)",
            module_id,
            kind,
            entity_id,
            len(errors),
        )
        raise ConfigValidationError(errors)

    new_state = state.model_copy(deep=True)
    instance = new_state.get_entity(kind, entity_id).modules[module_id]
    instance.config_values = {**instance.config_values, **resolved.values, **coerced}
    if kind == "client" and override is not None:
        instance.is_override = override
    logger.info("Saved config of module %s on %s %s", module_id, kind, entity_id)
    return new_state


def copy_sector_config(state: AppState, client_id: str, module_id: int) -> AppState:
    """Snapshot the sector's config into the client and start overriding.

    A no-op when the client has no sector tier for the module.
    """
    client = state.get_client(client_id)
    if client is None or module_id not in client.modules:
        logger.info("No module %s on client %s — copy ignored", module_id, client_id)
        return state
    sector_instance = sector_instance_for(state, client, module_id)
    if sector_instance is None:
        logger.info("Client %s has no sector config for module %s", client_id, module_id)
        return state

    new_state = state.model_copy(deep=True)
    instance = new_state.get_client(client_id).modules[module_id]
    instance.config_values = copy.deepcopy(sector_instance.config_values)
    instance.is_override = True
    logger.info("Copied sector config of module %s into client %s", module_id, client_id)
    return new_state


def set_override(
    state: AppState,
    client_id: str,
    module_id: int,
    enabled: bool,
) -> AppState:
    """Switch a client instance between overriding and following its sector.

    Enabling freezes the currently displayed values into the instance.
    Disabling re-inherits: config values are rebuilt from the sector's
    current values, then defaults.
    """
    client = state.get_client(client_id)
    if client is None or module_id not in client.modules:
        logger.info("No module %s on client %s — override ignored", module_id, client_id)
        return state
    if client.modules[module_id].overrides == enabled:
        return state

    new_state = state.model_copy(deep=True)
    target: Client = new_state.get_client(client_id)
    if enabled:
        mark_override(new_state, target, module_id)
    else:
        instance = target.modules[module_id]
        module = new_state.get_module(module_id)
        if module is not None:
            instance.config_values = initial_config_values(new_state, "client", client_id, module)
        instance.is_override = False
    logger.info(
        "Client %s %s module %s",
        client_id,
        "overrides" if enabled else "follows sector for",
        module_id,
    )
    return new_state
