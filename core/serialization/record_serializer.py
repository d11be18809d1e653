"""
core.serialization.record_serializer

Canonical textual form of an EventRecord.

The output is a compact JSON object with the layout:

    {
      "log_id": ..., "created_at": ..., "event_name": ...,
      "log_level": ..., "correlation_id": ...,
      "user_info": {"id": ..., "name": ..., "email": ...},
      "device_info": {"model": ..., "os_version": ..., "os": ...,
                      "app_version": ..., "latitude": ..., "longitude": ...,
                      "time_zone": ..., "device_id": ...},
      "properties": {<sorted caller keys>: <string values>}
    }

The same string is stored with the record (`as_json`) and forwarded to the
system logger, so `render()` never raises.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from core.models.event_models import EventRecord
from exceptions.exceptions import SerializationFault


logger = logging.getLogger(__name__)


def record_to_payload(record: EventRecord) -> Dict[str, Any]:
    """Return the canonical dict layout of a record (without as_json)."""
    payload = record.model_dump(
        mode="json",
        by_alias=True,
        exclude={"rendered_payload"},
    )
    payload["properties"] = dict(sorted(payload["properties"].items()))
    return payload


def _encode(record: EventRecord) -> str:
    try:
        payload = record_to_payload(record)
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise SerializationFault(getattr(record, "log_id", None), details=str(e)) from e


def render(record: EventRecord) -> str:
    """Render a record to its canonical string. Never raises."""
    try:
        return _encode(record)
    except SerializationFault as e:
        logger.warning("[SERIALIZE] %s", e)
        return json.dumps(
            {
                "error": "serialization_fault",
                "log_id": str(e.log_id),
                "details": e.details,
            },
            separators=(",", ":"),
        )
