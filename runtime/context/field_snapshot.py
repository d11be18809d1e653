"""Field snapshot: the current values attached to new records.

Owned by exactly one EventLogger. Setters are not synchronized with the
write channel: a submission reads whatever values are current when it
reaches the channel, so a setter racing a submission may or may not show
up in that record. Attribution is best-effort, not causal.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from core.fields.field_registry import LogField


class FieldSnapshot:
    def __init__(self, initial: Optional[Mapping[LogField, str]] = None) -> None:
        self._values: Dict[LogField, str] = dict(initial or {})

    def get(self, field: LogField) -> Optional[str]:
        return self._values.get(field)

    def set(self, field: LogField, value: Optional[str]) -> None:
        """Set a field, or clear it when `value` is None."""
        if value is None:
            self._values.pop(field, None)
        else:
            self._values[field] = value

    def update(self, values: Mapping[LogField, Optional[str]]) -> None:
        for field, value in values.items():
            self.set(field, value)

    def set_user(self, user_id: str, name: str, email: Optional[str] = None) -> None:
        self.set(LogField.USER_ID, user_id)
        self.set(LogField.USER_NAME, name)
        self.set(LogField.USER_EMAIL, email)

    def set_device_id(self, device_id: str) -> None:
        self.set(LogField.DEVICE_ID, device_id)

    def set_location(self, latitude: Optional[float], longitude: Optional[float]) -> None:
        """Store coordinates with six decimals; None clears a coordinate."""
        self.set(LogField.LATITUDE, None if latitude is None else "%.6f" % latitude)
        self.set(LogField.LONGITUDE, None if longitude is None else "%.6f" % longitude)

    def copy(self) -> Dict[LogField, str]:
        """Return a point-in-time copy for record construction."""
        return dict(self._values)
