"""HTTP routes for interacting with the event-log store.

Exposes endpoints like:

- POST /logs           -> submit one event, wait for the commit
- POST /logs/query     -> takes a filter configuration (wire keys) and
                          returns the matching records as pages
- PUT  /logs/user      -> set user fields for subsequent records
- PUT  /logs/device    -> set the device id
- PUT  /logs/location  -> set (or clear) coordinates
- GET  /logs/fields    -> list the field registry
"""

import logging

from fastapi import APIRouter, HTTPException
from typing import Any, Dict, Optional

from pydantic import ValidationError

from core.fields.field_registry import REGISTRY_VERSION, all_fields
from core.query.filter_config import FilterConfiguration
from core.serialization.record_serializer import record_to_payload
from exceptions.exceptions import UnknownField, WriteError
from ..event_logger import EventLogger
from ..models.api_models import (
    DeviceRequest,
    LocationRequest,
    QueryResponse,
    SubmitRequest,
    SubmitResponse,
    UserRequest,
)


logger = logging.getLogger(__name__)

# Router for all log endpoints
router = APIRouter()


# Module-level reference, to be initialized by the server.
_EVENT_LOGGER: Optional[EventLogger] = None


def init_routes(event_logger: EventLogger) -> None:
    """Initialize the module-level EventLogger used by the route handlers."""
    global _EVENT_LOGGER
    _EVENT_LOGGER = event_logger


def _require_event_logger() -> EventLogger:
    if _EVENT_LOGGER is None:
        raise HTTPException(
            status_code=500,
            detail="EventLogger is not configured on the server.",
        )
    return _EVENT_LOGGER


@router.post("", response_model=SubmitResponse)
def submit_event(request: SubmitRequest) -> SubmitResponse:
    """Commit one event and return its id and forwarded message."""
    event_logger = _require_event_logger()
    try:
        rendered = event_logger.log(
            request.event_name,
            properties=request.properties,
            level=request.level,
        )
    except WriteError as e:
        logger.warning("[API] write failed for event=%r: %s", request.event_name, e)
        raise HTTPException(status_code=500, detail=str(e))
    return SubmitResponse(log_id=rendered.record.log_id, message=rendered.message)


@router.post("/query", response_model=QueryResponse)
def query_events(config: Dict[str, Any]) -> QueryResponse:
    """Run a query; the body uses the filter configuration wire keys."""
    event_logger = _require_event_logger()
    try:
        filter_config = FilterConfiguration.model_validate(config)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        )

    try:
        pages = event_logger.query(filter_config)
    except UnknownField as e:
        logger.warning("[API] query rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    return QueryResponse(
        page_count=len(pages),
        record_count=sum(len(page) for page in pages),
        pages=[[record_to_payload(record) for record in page] for page in pages],
    )


@router.put("/user")
def set_user(request: UserRequest) -> Dict[str, str]:
    _require_event_logger().set_user(request.user_id, request.name, request.email)
    return {"status": "ok"}


@router.put("/device")
def set_device(request: DeviceRequest) -> Dict[str, str]:
    _require_event_logger().set_device_id(request.device_id)
    return {"status": "ok"}


@router.put("/location")
def set_location(request: LocationRequest) -> Dict[str, str]:
    _require_event_logger().set_location(request.latitude, request.longitude)
    return {"status": "ok"}


@router.get("/fields")
def list_fields() -> Dict[str, Any]:
    return {
        "version": REGISTRY_VERSION,
        "fields": [
            {
                "name": field.canonical_name,
                "key": field.storage_key,
                "filterable": field.is_filterable,
            }
            for field in all_fields()
        ],
    }


# --------------------------------------------------------
# Endpoint: GET /healthz
# --------------------------------------------------------
@router.get("/healthz")
def health_check():
    """
    Simple health check endpoint for uptime monitoring.
    """
    return {"status": "ok"}
