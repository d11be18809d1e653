"""Coercion of caller-supplied property values to strings."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from core.models.event_models import NIL


def coerce_property_value(value: Any) -> str:
    """
    Convert one property value to its stored string form.

    Precedence:
      str          -> unchanged
      bool         -> "true" / "false"
      int / float  -> canonical decimal form ("1", "3.5")
      anything else -> "nil"

    bool is checked before int because bool is an int subclass.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        return repr(float(value))
    return NIL


def coerce_properties(properties: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Coerce every value of a property mapping. Keys are stringified."""
    if not properties:
        return {}
    return {str(key): coerce_property_value(value) for key, value in properties.items()}
