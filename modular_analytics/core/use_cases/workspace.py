"""
Workspace use case — locate, load, and commit the state file.

Every CLI command goes through here: resolve which state file to use,
load it, apply one service call, and save the result.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from modular_analytics.core.config.loader import load_settings
from modular_analytics.core.context import get_state_path
from modular_analytics.core.models import AppState
from modular_analytics.core.persistence.state_file import load_state, save_state

logger = logging.getLogger(__name__)


def resolve_state_path(config_path: Path | None = None) -> Path:
    """The state file to use: the context path if set, else the settings file's.

    Raises:
        ConfigError: If the settings file is invalid.
    """
    path = get_state_path()
    if path is not None:
        return path
    return load_settings(config_path).state_path()


def open_state(config_path: Path | None = None) -> tuple[AppState, Path]:
    """Load the current state and return it with its path."""
    path = resolve_state_path(config_path)
    return load_state(path), path


def apply_and_save(
    operation: Callable[[AppState], AppState],
    config_path: Path | None = None,
) -> AppState:
    """Load the state, apply one operation, and save the result.

    The file is only rewritten when the operation produced a different
    state; exceptions from the operation propagate and nothing is saved.
    """
    state, path = open_state(config_path)
    new_state = operation(state)
    if new_state != state:
        save_state(new_state, path)
    else:
        logger.debug("No changes — %s left untouched", path)
    return new_state
