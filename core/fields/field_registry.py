"""
core.fields.field_registry

Closed enumeration of the fields an event record carries.

Each field has:
  - a canonical name  (e.g. "createdAt", "userID")
  - a storage key     (e.g. "created_at", "user_id") used in the persisted
    layout and in filter configurations
  - a record path     (attribute path into EventRecord) when the field
    holds a scalar value that filters can match against

Adding, renaming or removing a member is a schema change: bump
REGISTRY_VERSION when doing so.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple

from exceptions.exceptions import UnfilterableField, UnknownField


REGISTRY_VERSION = 1


class LogField(str, Enum):
    """Registry members. The enum value is the storage key."""

    LOG_ID = "log_id"
    CREATED_AT = "created_at"
    EVENT_NAME = "event_name"
    LOG_LEVEL = "log_level"
    CORRELATION_ID = "correlation_id"
    PROPERTIES = "properties"

    USER_ID = "user_id"
    USER_NAME = "user_name"
    USER_EMAIL = "user_email"

    MODEL = "model"
    OS_VERSION = "os_version"
    OPERATING_SYSTEM = "os"
    APP_VERSION = "app_version"
    LATITUDE = "latitude"
    LONGITUDE = "longitude"
    TIME_ZONE = "time_zone"
    DEVICE_ID = "device_id"

    USER_INFO = "user_info"
    DEVICE_INFO = "device_info"

    @property
    def storage_key(self) -> str:
        return self.value

    @property
    def canonical_name(self) -> str:
        return _CANONICAL_NAMES[self]

    @property
    def record_path(self) -> Optional[Tuple[str, ...]]:
        """Attribute path into EventRecord, or None for container fields."""
        return _RECORD_PATHS.get(self)

    @property
    def is_filterable(self) -> bool:
        return self.record_path is not None


_CANONICAL_NAMES: Dict[LogField, str] = {
    LogField.LOG_ID: "logID",
    LogField.CREATED_AT: "createdAt",
    LogField.EVENT_NAME: "eventName",
    LogField.LOG_LEVEL: "logLevel",
    LogField.CORRELATION_ID: "correlationID",
    LogField.PROPERTIES: "properties",
    LogField.USER_ID: "userID",
    LogField.USER_NAME: "userName",
    LogField.USER_EMAIL: "userEmail",
    LogField.MODEL: "model",
    LogField.OS_VERSION: "osVersion",
    LogField.OPERATING_SYSTEM: "operatingSystem",
    LogField.APP_VERSION: "appVersion",
    LogField.LATITUDE: "latitude",
    LogField.LONGITUDE: "longitude",
    LogField.TIME_ZONE: "timeZone",
    LogField.DEVICE_ID: "deviceID",
    LogField.USER_INFO: "userInfo",
    LogField.DEVICE_INFO: "deviceInfo",
}

# Container fields (properties, user_info, device_info) have no entry.
_RECORD_PATHS: Dict[LogField, Tuple[str, ...]] = {
    LogField.LOG_ID: ("log_id",),
    LogField.CREATED_AT: ("created_at",),
    LogField.EVENT_NAME: ("event_name",),
    LogField.LOG_LEVEL: ("log_level",),
    LogField.CORRELATION_ID: ("correlation_id",),
    LogField.USER_ID: ("user_info", "user_id"),
    LogField.USER_NAME: ("user_info", "name"),
    LogField.USER_EMAIL: ("user_info", "email"),
    LogField.MODEL: ("device_info", "model"),
    LogField.OS_VERSION: ("device_info", "os_version"),
    LogField.OPERATING_SYSTEM: ("device_info", "operating_system"),
    LogField.APP_VERSION: ("device_info", "app_version"),
    LogField.LATITUDE: ("device_info", "latitude"),
    LogField.LONGITUDE: ("device_info", "longitude"),
    LogField.TIME_ZONE: ("device_info", "time_zone"),
    LogField.DEVICE_ID: ("device_info", "device_id"),
}

_BY_CANONICAL_NAME: Dict[str, LogField] = {
    name: field for field, name in _CANONICAL_NAMES.items()
}


def storage_key_for(canonical_name: str) -> str:
    """Return the storage key for a canonical field name."""
    field = _BY_CANONICAL_NAME.get(canonical_name)
    if field is None:
        raise UnknownField(canonical_name)
    return field.storage_key


def canonical_name_for(storage_key: str) -> str:
    """Return the canonical field name for a storage key."""
    try:
        return LogField(storage_key).canonical_name
    except ValueError:
        raise UnknownField(storage_key) from None


def resolve_field(name: str) -> LogField:
    """
    Resolve either a storage key ("user_id") or a canonical name ("userID")
    to its registry member. Storage keys take precedence.
    """
    try:
        return LogField(name)
    except ValueError:
        pass
    field = _BY_CANONICAL_NAME.get(name)
    if field is None:
        raise UnknownField(name)
    return field


def resolve_filter_field(name: str) -> LogField:
    """Like resolve_field, but also rejects container fields."""
    field = resolve_field(name)
    if not field.is_filterable:
        raise UnfilterableField(name)
    return field


def all_fields() -> List[LogField]:
    return list(LogField)
