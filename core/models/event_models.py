"""
Event record models.

These describe:
- LogLevel enum (default, info, debug, error, fault)
- UserInfo / DeviceInfo sub-records embedded in every record
- EventRecord, the committed, immutable shape of one log entry

Field aliases are the canonical serialization keys, so
`model_dump(by_alias=True)` produces the persisted / rendered layout.
Field order matters: it is the key order of the rendered payload.
"""

from datetime import datetime
from enum import Enum
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


# Stored in place of any value the caller never set.
NIL = "nil"


class LogLevel(str, Enum):
    DEFAULT = "default"
    INFO = "info"
    DEBUG = "debug"
    ERROR = "error"
    FAULT = "fault"


class UserInfo(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_id: str = Field(default=NIL, alias="id")
    name: str = NIL
    email: str = NIL


class DeviceInfo(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        protected_namespaces=(),
    )

    model: str = NIL
    os_version: str = NIL
    operating_system: str = Field(default=NIL, alias="os")
    app_version: str = NIL
    latitude: str = NIL
    longitude: str = NIL
    time_zone: str = NIL
    device_id: str = NIL


class EventRecord(BaseModel):
    """One committed log entry.

    `rendered_payload` is computed once at commit time and stored with the
    record (persisted as `as_json`); it is never part of its own rendering.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    log_id: str
    created_at: datetime
    event_name: str = Field(min_length=1)
    log_level: LogLevel = LogLevel.DEFAULT
    correlation_id: str
    user_info: UserInfo = Field(default_factory=UserInfo)
    device_info: DeviceInfo = Field(default_factory=DeviceInfo)
    properties: Dict[str, str] = Field(default_factory=dict)
    rendered_payload: str = Field(default="", alias="as_json")
