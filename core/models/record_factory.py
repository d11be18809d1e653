"""
Pure construction of EventRecord objects from a field snapshot.

No I/O, no clocks, no randomness beyond `new_log_id()`: the caller passes
the id and timestamp in, so the same inputs always build the same record.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Mapping, Optional
from uuid import uuid4

from core.fields.field_registry import LogField
from core.models.event_models import NIL, DeviceInfo, EventRecord, LogLevel, UserInfo


def new_log_id() -> str:
    return str(uuid4()).upper()


def normalize_timestamp(value: datetime) -> datetime:
    """Return `value` as an aware UTC datetime (naive means local time)."""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.astimezone(timezone.utc)


def build_event_record(
    fields: Mapping[LogField, str],
    *,
    log_id: str,
    created_at: datetime,
    event_name: str,
    level: LogLevel,
    properties: Optional[Mapping[str, str]] = None,
) -> EventRecord:
    """Build a fully populated record; missing fields become "nil"."""

    def value(field: LogField) -> str:
        current = fields.get(field)
        return NIL if current is None else current

    user_info = UserInfo(
        user_id=value(LogField.USER_ID),
        name=value(LogField.USER_NAME),
        email=value(LogField.USER_EMAIL),
    )
    device_info = DeviceInfo(
        model=value(LogField.MODEL),
        os_version=value(LogField.OS_VERSION),
        operating_system=value(LogField.OPERATING_SYSTEM),
        app_version=value(LogField.APP_VERSION),
        latitude=value(LogField.LATITUDE),
        longitude=value(LogField.LONGITUDE),
        time_zone=value(LogField.TIME_ZONE),
        device_id=value(LogField.DEVICE_ID),
    )
    return EventRecord(
        log_id=log_id,
        created_at=normalize_timestamp(created_at),
        event_name=event_name,
        log_level=level,
        # Same as log_id at creation; reserved for cross-record linking.
        correlation_id=log_id,
        user_info=user_info,
        device_info=device_info,
        properties=dict(properties or {}),
    )
