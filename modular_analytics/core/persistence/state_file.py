"""
State file persistence — atomic read/write, import, and export of AppState.

State is stored as JSON (default .state/analytics.json). Writes are
atomic (write to temp file, then rename) so a crash mid-write never
leaves a half-written state behind. Json-typed config values are stored
as JSON structures, not as escaped text.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from modular_analytics.core.models.state import AppState

logger = logging.getLogger(__name__)

# Default state file path (relative to the settings file's directory)
DEFAULT_STATE_DIR = ".state"
DEFAULT_STATE_FILE = "analytics.json"


def default_state_path(root: Path) -> Path:
    """Get the default state file path under a root directory."""
    return root / DEFAULT_STATE_DIR / DEFAULT_STATE_FILE


def export_state(state: AppState) -> str:
    """Serialize state to indented JSON text (the persisted shape)."""
    return json.dumps(state.to_dict(), indent=2, ensure_ascii=False) + "\n"


def import_state(text: str) -> AppState | None:
    """Parse and validate exported JSON text.

    Returns:
        The AppState, or None if the text is not valid JSON or does not
        describe a valid state.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Import failed — invalid JSON: %s", e)
        return None
    if not isinstance(data, dict):
        logger.warning("Import failed — expected a JSON object, got %s", type(data).__name__)
        return None
    try:
        return AppState.model_validate(data)
    except ValidationError as e:
        logger.warning("Import failed — invalid state: %s", e)
        return None


def load_state(path: Path) -> AppState:
    """Load state from a JSON file.

    Args:
        path: Path to the state JSON file.

    Returns:
        AppState model. If the file doesn't exist or is corrupt, returns
        a fresh state.
    """
    if not path.is_file():
        logger.info("No state file at %s — starting fresh", path)
        return AppState()

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Cannot read state from %s: %s — starting fresh", path, e)
        return AppState()

    state = import_state(raw)
    if state is None:
        logger.warning("Corrupt state file %s — starting fresh", path)
        return AppState()
    logger.debug(
        "Loaded state from %s (%d sectors, %d clients, %d modules)",
        path,
        len(state.sectors),
        len(state.clients),
        len(state.master_modules),
    )
    return state


def save_state(state: AppState, path: Path) -> None:
    """Save state to a JSON file (atomic write).

    Uses write-to-temp-then-rename to prevent corruption.

    Args:
        state: The state to save.
        path: Target path for the state file.
    """
    # Ensure parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    content = export_state(state)

    # Atomic write: temp file in same directory, then rename
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=".state_",
            suffix=".tmp",
        )
        os.close(fd)
        tmp = Path(tmp_path)
        try:
            tmp.write_text(content, encoding="utf-8")
            tmp.replace(path)
            logger.debug("State saved to %s", path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
    except Exception as e:
        logger.error("Failed to save state to %s: %s", path, e)
        raise


def import_state_file(text: str, path: Path) -> bool:
    """Replace the state file with imported JSON text.

    Returns:
        True on success. On failure the existing file is left untouched.
    """
    state = import_state(text)
    if state is None:
        return False
    save_state(state, path)
    logger.info("Imported state into %s", path)
    return True


def clear_state(path: Path) -> None:
    """Reset the state file to an empty state."""
    save_state(AppState(), path)
    logger.info("Cleared state at %s", path)
