"""
Domain models — Pydantic types for modules, sectors, and clients.

All models are re-exported here for convenient access:

    from modular_analytics.core.models import AppState, MasterModule, ConfigField
"""

from modular_analytics.core.models.entities import Client, EntityKind, Sector
from modular_analytics.core.models.fields import (
    CHOICE_TYPES,
    FIELD_TYPES,
    ConfigField,
    FieldType,
)
from modular_analytics.core.models.instance import ModuleInstance
from modular_analytics.core.models.module import MasterModule
from modular_analytics.core.models.state import AppState

__all__ = [
    # state.py
    "AppState",
    # entities.py
    "Client",
    "EntityKind",
    "Sector",
    # fields.py
    "CHOICE_TYPES",
    "ConfigField",
    "FIELD_TYPES",
    "FieldType",
    # instance.py
    "ModuleInstance",
    # module.py
    "MasterModule",
]
