"""
State context — the single source of truth for "which state file are we using."

The path is set ONCE at startup by whichever entry point launches the app:

    - CLI:    main.py  → context.set_state_path(path)
    - Tests:  conftest → context.set_state_path(tmp_path / "state.json")

get_state_path() returns None when unset; callers fall back to the
settings file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


_state_path: Optional[Path] = None


def set_state_path(path: Path | None) -> None:
    """Register the state file path for the current process."""
    global _state_path
    _state_path = path


def get_state_path() -> Optional[Path]:
    """Return the current state file path, or None if not yet set."""
    return _state_path
