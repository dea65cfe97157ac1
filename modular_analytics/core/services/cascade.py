"""
Cascade manager — drops module instances when their master module goes away.

Removal is unconditional and idempotent: client overrides are dropped
along with everything else, and deleting an id that nothing holds is a
no-op.
"""

from __future__ import annotations

import logging

from modular_analytics.core.models import AppState

logger = logging.getLogger(__name__)


def drop_module_instances(state: AppState, module_id: int) -> tuple[AppState, int]:
    """Remove every sector and client instance of a module.

    Returns:
        Tuple of (new_state, removed_count).
    """
    new_state = state.model_copy(deep=True)
    removed = 0

    for sector in new_state.sectors:
        if sector.modules.pop(module_id, None) is not None:
            removed += 1
    for client in new_state.clients:
        if client.modules.pop(module_id, None) is not None:
            removed += 1

    if removed:
        logger.info("Cascade: dropped %d instance(s) of module %s", removed, module_id)
    else:
        logger.debug("Cascade: no instances of module %s", module_id)
    return new_state, removed
