"""
Service errors — raised by the schema registry, entity management, and
config editing.

Not-found conditions in instance commands (assign, toggle, prompt, save)
are never raised; those commands degrade to a logged no-op.
"""

from __future__ import annotations


class ModularAnalyticsError(Exception):
    """Base class for every error raised by the core services."""


class ConfigValidationError(ModularAnalyticsError):
    """A config save was refused because one or more fields are invalid.

    ``errors`` maps field name to a human-readable message. Nothing is
    persisted when this is raised.
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        names = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid config values for: {names}")


class ModuleConflictError(ModularAnalyticsError):
    """A master module with the same id already exists."""


class MasterModuleNotFoundError(ModularAnalyticsError):
    """No master module with the given id exists."""


class EntityConflictError(ModularAnalyticsError):
    """A sector or client with the same id already exists."""


class EntityNotFoundError(ModularAnalyticsError):
    """No sector or client with the given id exists."""
