"""
Entity management — create, edit, and delete sectors and clients.

Deleting a sector does not touch its clients: their ``sector_id`` keeps
pointing at the missing sector and resolution treats it as "no sector
tier".
"""

from __future__ import annotations

import logging
from typing import Any

from modular_analytics.core.models import AppState, Client, Sector
from modular_analytics.core.services.errors import EntityConflictError, EntityNotFoundError

logger = logging.getLogger(__name__)


# ── Sectors ─────────────────────────────────────────────────────


def add_sector(state: AppState, sector: Sector) -> AppState:
    """Add a sector. Raises EntityConflictError on a duplicate id."""
    if state.get_sector(sector.id) is not None:
        raise EntityConflictError(f"Sector '{sector.id}' already exists")
    new_state = state.model_copy(deep=True)
    new_state.sectors.append(sector.model_copy(deep=True))
    logger.info("Added sector %s", sector.id)
    return new_state


def update_sector(state: AppState, sector_id: str, **changes: Any) -> AppState:
    """Merge changed attributes into a sector. The id cannot change."""
    current = state.get_sector(sector_id)
    if current is None:
        raise EntityNotFoundError(f"No sector with id '{sector_id}'")
    changes.pop("id", None)
    updated = Sector.model_validate({**current.model_dump(), **changes})

    new_state = state.model_copy(deep=True)
    new_state.sectors = [updated if s.id == sector_id else s for s in new_state.sectors]
    logger.info("Updated sector %s", sector_id)
    return new_state


def delete_sector(state: AppState, sector_id: str) -> AppState:
    """Remove a sector. Linked clients keep their (now dangling) reference."""
    if state.get_sector(sector_id) is None:
        return state
    new_state = state.model_copy(deep=True)
    new_state.sectors = [s for s in new_state.sectors if s.id != sector_id]
    orphans = len(new_state.clients_in_sector(sector_id))
    logger.info("Deleted sector %s (%d client(s) still reference it)", sector_id, orphans)
    return new_state


# ── Clients ─────────────────────────────────────────────────────


def add_client(state: AppState, client: Client) -> AppState:
    """Add a client. Raises EntityConflictError on a duplicate id.

    An unknown ``sector_id`` is accepted as-is.
    """
    if state.get_client(client.client_id) is not None:
        raise EntityConflictError(f"Client '{client.client_id}' already exists")
    if client.sector_id is not None and state.get_sector(client.sector_id) is None:
        logger.warning("Client %s links to unknown sector %s", client.client_id, client.sector_id)
    new_state = state.model_copy(deep=True)
    new_state.clients.append(client.model_copy(deep=True))
    logger.info("Added client %s", client.client_id)
    return new_state


def update_client(state: AppState, client_id: str, **changes: Any) -> AppState:
    """Merge changed attributes into a client. The client_id cannot change."""
    current = state.get_client(client_id)
    if current is None:
        raise EntityNotFoundError(f"No client with id '{client_id}'")
    changes.pop("client_id", None)
    updated = Client.model_validate({**current.model_dump(), **changes})

    new_state = state.model_copy(deep=True)
    new_state.clients = [
        updated if c.client_id == client_id else c for c in new_state.clients
    ]
    logger.info("Updated client %s", client_id)
    return new_state


def delete_client(state: AppState, client_id: str) -> AppState:
    """Remove a client and its instances."""
    if state.get_client(client_id) is None:
        return state
    new_state = state.model_copy(deep=True)
    new_state.clients = [c for c in new_state.clients if c.client_id != client_id]
    logger.info("Deleted client %s", client_id)
    return new_state
