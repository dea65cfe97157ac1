"""
Configuration loader — reads analytics.yml and module definition files.

analytics.yml holds process settings (where the state file lives, how
to log). Module definition files describe a master module and its
config schema in YAML (or JSON, which YAML also reads).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from modular_analytics.core.models.module import MasterModule

logger = logging.getLogger(__name__)

# Default settings filename
SETTINGS_FILE = "analytics.yml"

# Environment overrides
ENV_STATE_FILE = "MA_STATE_FILE"
ENV_LOG_LEVEL = "MA_LOG_LEVEL"
ENV_LOG_FILE = "MA_LOG_FILE"
ENV_LOG_FILE_LEVEL = "MA_LOG_FILE_LEVEL"


class ConfigError(Exception):
    """Raised when a settings or module definition file is invalid or missing."""


class Settings(BaseModel):
    """Process settings loaded from analytics.yml.

    ``state_file`` is relative to ``root`` unless absolute.
    """

    state_file: str = ".state/analytics.json"
    log_level: str = "WARNING"
    log_file: str | None = None
    log_file_level: str | None = None

    root: Path = Path(".")

    def state_path(self) -> Path:
        """Absolute path of the state file."""
        path = Path(self.state_file).expanduser()
        if not path.is_absolute():
            path = self.root / path
        return path.resolve()

    def log_path(self) -> Path | None:
        """Absolute path of the log file, if one is configured."""
        if not self.log_file:
            return None
        path = Path(self.log_file).expanduser()
        return path if path.is_absolute() else (self.root / path).resolve()


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for analytics.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to analytics.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def _apply_env(settings: Settings) -> Settings:
    overrides: dict[str, Any] = {}
    if os.environ.get(ENV_STATE_FILE):
        overrides["state_file"] = os.environ[ENV_STATE_FILE]
    if os.environ.get(ENV_LOG_LEVEL):
        overrides["log_level"] = os.environ[ENV_LOG_LEVEL]
    if os.environ.get(ENV_LOG_FILE):
        overrides["log_file"] = os.environ[ENV_LOG_FILE]
    if os.environ.get(ENV_LOG_FILE_LEVEL):
        overrides["log_file_level"] = os.environ[ENV_LOG_FILE_LEVEL]
    return settings.model_copy(update=overrides) if overrides else settings


def load_settings(path: Path | None = None) -> Settings:
    """Load process settings.

    Args:
        path: Explicit path to analytics.yml. If None, searches upward and
            falls back to defaults rooted at the cwd when nothing is found.

    Returns:
        Settings with environment overrides applied.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_settings_file()
        if path is None:
            logger.debug("No %s found — using defaults", SETTINGS_FILE)
            return _apply_env(Settings(root=Path.cwd()))
    elif not path.is_file():
        raise ConfigError(f"Settings file not found: {path}")

    logger.debug("Loading settings from %s", path)
    data = _read_yaml_mapping(path)
    data["root"] = path.parent.resolve()

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    return _apply_env(settings)


def load_module_definition(path: Path) -> dict[str, Any]:
    """Read a master module definition file.

    The file may wrap the definition under a ``module`` key or be flat.
    ``id`` is optional; callers assign one when it is missing.

    Returns:
        The definition mapping, validated against MasterModule (with a
        placeholder id when none was given).

    Raises:
        ConfigError: If the file is missing or the definition is invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Module definition not found: {path}")

    data = _read_yaml_mapping(path)
    definition = data.get("module", data)
    if not isinstance(definition, dict):
        raise ConfigError(f"Expected a module mapping in {path}")

    try:
        MasterModule.model_validate({"id": 0, **definition})
    except ValidationError as e:
        raise ConfigError(f"Invalid module definition in {path}: {e}") from e

    logger.info("Loaded module definition '%s' from %s", definition.get("name", "?"), path)
    return definition
