"""
HTTP request/response models for the event-log runtime API.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from core.models.event_models import LogLevel


class SubmitRequest(BaseModel):
    event_name: str = Field(min_length=1)
    level: LogLevel = LogLevel.DEFAULT
    # Values may be any JSON type; they are coerced to strings on commit.
    properties: Dict[str, Any] = Field(default_factory=dict)


class SubmitResponse(BaseModel):
    log_id: str
    message: str


class UserRequest(BaseModel):
    user_id: str
    name: str
    email: Optional[str] = None


class DeviceRequest(BaseModel):
    device_id: str


class LocationRequest(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class QueryResponse(BaseModel):
    """
    pages: one list per page, each entry being the canonical record layout
    (the same object stored as the record's rendered payload).
    """
    page_count: int
    record_count: int
    pages: List[List[Dict[str, Any]]]
