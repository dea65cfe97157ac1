"""
Config field model — one typed entry of a module's configuration schema.

The field type decides the zero value, coercion, and editing form of
every value stored under the field's name (see services/field_types.py).
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, model_validator

FieldType = Literal[
    "text",
    "textarea",
    "number",
    "checkbox",
    "select",
    "multi-select",
    "date",
    "json",
]

FIELD_TYPES: tuple[str, ...] = (
    "text",
    "textarea",
    "number",
    "checkbox",
    "select",
    "multi-select",
    "date",
    "json",
)

# Field types that pick their value(s) from ``options``
CHOICE_TYPES = frozenset({"select", "multi-select"})


class ConfigField(BaseModel):
    """A typed configuration field declared by a master module.

    ``name`` is the stable key used in every ``config_values`` mapping;
    ``label`` is display-only. A ``default`` of None means "no default".
    """

    name: str
    label: str = ""
    type: FieldType = "text"
    required: bool = False
    default: Any = None
    options: list[str] | None = None
    description: str | None = None

    @model_validator(mode="after")
    def _check_options(self) -> ConfigField:
        if not self.label:
            self.label = self.name
        if self.type in CHOICE_TYPES:
            if not self.options:
                raise ValueError(
                    f"Field '{self.name}' of type {self.type} needs at least one option"
                )
        else:
            self.options = None
        return self

    @property
    def has_default(self) -> bool:
        return self.default is not None
