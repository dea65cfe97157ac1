"""
Field type system — zero values and coercion for the 8 config field kinds.

Each field type has one coercion function, selected from ``_COERCERS`` by
the field's ``type``. Coercion is applied when a value is written (config
save) and, except for json, when it is read back (resolution). Json
text is parsed only on write; persisted json values are structures.

Json fields are the only kind that can fail: their editing form is text,
and text that does not parse is reported per field instead of being
coerced to something else.
"""

from __future__ import annotations

import json
import math
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from modular_analytics.core.models.fields import ConfigField


class InvalidFieldValue(ValueError):
    """A value cannot be coerced to its field's type."""

    def __init__(self, field_name: str, message: str):
        self.field_name = field_name
        self.message = message
        super().__init__(f"{field_name}: {message}")


# ── Zero values ─────────────────────────────────────────────────


def zero_value(field_type: str) -> Any:
    """The value a field takes when it has no stored value and no default.

    Mutable zero values are created fresh on every call.
    """
    if field_type == "number":
        return 0
    if field_type == "checkbox":
        return False
    if field_type == "multi-select":
        return []
    if field_type == "json":
        return {}
    # text, textarea, select, date
    return ""


# ── Per-type coercion ───────────────────────────────────────────


def _coerce_text(field: ConfigField, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _coerce_number(field: ConfigField, value: Any) -> int | float:
    # bool is an int subclass, but a checkbox value is not a number
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            parsed = float(text)
        except ValueError:
            return 0
        return parsed if math.isfinite(parsed) else 0
    return 0


def _coerce_checkbox(field: ConfigField, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return False


def _coerce_date(field: ConfigField, value: Any) -> str:
    # YAML loads unquoted dates as date objects
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return _coerce_text(field, value)


def _coerce_multi_select(field: ConfigField, value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    allowed = field.options or []
    result: list[str] = []
    for item in value:
        if isinstance(item, str) and item in allowed and item not in result:
            result.append(item)
    return result


def _coerce_json(field: ConfigField, value: Any) -> Any:
    if isinstance(value, str):
        if not value.strip():
            return {}
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise InvalidFieldValue(field.name, f"Invalid JSON format: {e.msg}") from e
    if value is None:
        return {}
    return value


_COERCERS: dict[str, Callable[[ConfigField, Any], Any]] = {
    "text": _coerce_text,
    "textarea": _coerce_text,
    "select": _coerce_text,
    "date": _coerce_date,
    "number": _coerce_number,
    "checkbox": _coerce_checkbox,
    "multi-select": _coerce_multi_select,
    "json": _coerce_json,
}


def coerce_value(field: ConfigField, value: Any) -> Any:
    """Coerce a raw value to the field's type.

    Raises:
        InvalidFieldValue: If a json field's text does not parse.
    """
    return _COERCERS[field.type](field, value)


def coerce_for_read(field: ConfigField, value: Any) -> Any:
    """Coerce a persisted value for display.

    Persisted json values are already parsed structures, so they are
    returned as they are; a stored str is a json string, not json text.
    """
    if field.type == "json":
        return {} if value is None else value
    return coerce_value(field, value)


def format_for_edit(field: ConfigField, value: Any) -> Any:
    """Editing form of a value: json structures become indented text."""
    if field.type == "json":
        return json.dumps(value, indent=2, ensure_ascii=False)
    return value


def validate_values(
    schema: list[ConfigField],
    values: dict[str, Any],
) -> tuple[dict[str, Any], dict[str, str]]:
    """Coerce every schema field present in ``values``.

    Keys that are not in the schema are passed through untouched.

    Returns:
        Tuple of (coerced_values, errors). ``errors`` maps field name to
        message and is empty when every field is valid.
    """
    coerced = dict(values)
    errors: dict[str, str] = {}
    for field in schema:
        if field.name not in values:
            continue
        try:
            coerced[field.name] = coerce_value(field, values[field.name])
        except InvalidFieldValue as e:
            errors[field.name] = e.message
    return coerced, errors
