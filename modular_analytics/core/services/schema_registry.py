"""
Schema registry — add, update, and delete master modules.

Schema edits never migrate stored ``config_values``. Stale keys are
ignored and missing keys are filled by the resolution engine the next
time an instance's configuration is read.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from modular_analytics.core.models import AppState, MasterModule
from modular_analytics.core.services.cascade import drop_module_instances
from modular_analytics.core.services.errors import (
    MasterModuleNotFoundError,
    ModuleConflictError,
)

logger = logging.getLogger(__name__)


def next_module_id(state: AppState) -> int:
    """A fresh module id: epoch milliseconds, above every existing id."""
    candidate = int(time.time() * 1000)
    highest = max((m.id for m in state.master_modules), default=0)
    return max(candidate, highest + 1)


def add_module(state: AppState, module: MasterModule) -> AppState:
    """Register a new master module.

    Raises:
        ModuleConflictError: If a module with the same id exists.
    """
    if state.get_module(module.id) is not None:
        raise ModuleConflictError(f"Module id {module.id} already exists")

    new_state = state.model_copy(deep=True)
    new_state.master_modules.append(module.model_copy(deep=True))
    logger.info(
        "Added module %s '%s' (%d config fields)",
        module.id,
        module.name,
        len(module.config_schema),
    )
    return new_state


def update_module(state: AppState, module_id: int, **changes: Any) -> AppState:
    """Merge changed attributes into a master module.

    The merged module is validated as a whole, so a schema edit that
    introduces duplicate field names is rejected. The id cannot change.

    Raises:
        MasterModuleNotFoundError: If no module has this id.
        pydantic.ValidationError: If the merged module is invalid.
    """
    current = state.get_module(module_id)
    if current is None:
        raise MasterModuleNotFoundError(f"No module with id {module_id}")

    changes.pop("id", None)
    merged = current.model_dump()
    merged.update(changes)
    updated = MasterModule.model_validate(merged)

    new_state = state.model_copy(deep=True)
    new_state.master_modules = [
        updated if m.id == module_id else m for m in new_state.master_modules
    ]
    logger.info("Updated module %s (%s)", module_id, ", ".join(sorted(changes)) or "no changes")
    return new_state


def delete_module(state: AppState, module_id: int) -> AppState:
    """Remove a master module and cascade to every sector and client.

    Deleting an unknown id is a no-op apart from the (empty) cascade.
    """
    new_state = state.model_copy(deep=True)
    before = len(new_state.master_modules)
    new_state.master_modules = [m for m in new_state.master_modules if m.id != module_id]
    if len(new_state.master_modules) < before:
        logger.info("Deleted module %s", module_id)

    new_state, _removed = drop_module_instances(new_state, module_id)
    return new_state
