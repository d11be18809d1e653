"""
Filter configuration consumed by the query engine.

Wire format (JSON), as delivered by the remote configuration:

    {
      "sync_frequency": 3600,
      "logs_after": "2025-08-14T10:00:00.000Z",
      "logs_before": "2025-08-15 10:00:00",
      "events_count": 100,
      "page_size": 20,
      "filters": [{"log_level": ["error", "fault"]}, {"user_id": ["42"]}]
    }

Timestamps accept ISO-8601 (with or without fractional seconds) or
"YYYY-MM-DD HH:MM:SS" in local time. An empty string means "unset".
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.models.record_factory import normalize_timestamp


DEFAULT_EVENTS_COUNT = 100

_LOCAL_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_timestamp(raw: str) -> Optional[datetime]:
    """Parse a configuration timestamp; returns None for an empty string."""
    text = raw.strip()
    if not text:
        return None
    # fromisoformat() only learned the trailing "Z" in Python 3.11
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = datetime.strptime(text, _LOCAL_FORMAT)
    return normalize_timestamp(parsed)


class FilterConfiguration(BaseModel):
    """Immutable per-query bounds, constraints and limits."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Opaque to the store; carried for the host's sync scheduler.
    sync_frequency: int = 0
    logs_after: Optional[datetime] = None
    logs_before: Optional[datetime] = None
    events_count: int = Field(default=DEFAULT_EVENTS_COUNT, ge=0)
    page_size: int = 0
    filters: Tuple[Dict[str, Tuple[str, ...]], ...] = ()

    @field_validator("logs_after", "logs_before", mode="before")
    @classmethod
    def parse_bounds(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            return parse_timestamp(value)
        if isinstance(value, datetime):
            return normalize_timestamp(value)
        return value

    @field_validator("filters", mode="before")
    @classmethod
    def default_filters(cls, value: Any) -> Any:
        if value is None:
            return ()
        return value

    def constraints(self) -> List[Tuple[str, Tuple[str, ...]]]:
        """Flatten `filters` into ordered (field name, allowed values) pairs."""
        pairs: List[Tuple[str, Tuple[str, ...]]] = []
        for mapping in self.filters:
            for name, values in mapping.items():
                pairs.append((name, values))
        return pairs

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "FilterConfiguration":
        return cls.model_validate(json.loads(text))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "FilterConfiguration":
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Invalid filter configuration in {path}: expected object")
        return cls.model_validate(data)
