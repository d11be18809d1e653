"""Fakes and record builders shared across the test suite."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from core.fields.field_registry import LogField
from core.models.event_models import EventRecord, LogLevel
from core.models.record_factory import build_event_record
from core.serialization.record_serializer import render


T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeContextProvider:
    """Deterministic provider: a ticking clock and fixed device values.

    Each call to now() returns the next queued timestamp if any, otherwise
    advances one second from the previous value.
    """

    def __init__(self, start: datetime = T0, times: Optional[Iterable[datetime]] = None) -> None:
        self._current = start - timedelta(seconds=1)
        self._queued: List[datetime] = list(times or [])
        self._lock = threading.Lock()
        self.model = "TestModel"
        self.os_version = "17.4"
        self.os_name = "TestOS"
        self.time_zone = "Europe/Kyiv"
        self.app_version = "1.2.3.45"

    def queue(self, *times: datetime) -> None:
        with self._lock:
            self._queued.extend(times)

    def current_model(self) -> str:
        return self.model

    def current_os_version(self) -> str:
        return self.os_version

    def current_os_name(self) -> str:
        return self.os_name

    def current_time_zone_id(self) -> str:
        return self.time_zone

    def current_app_version(self) -> str:
        return self.app_version

    def now(self) -> datetime:
        with self._lock:
            if self._queued:
                self._current = self._queued.pop(0)
            else:
                self._current = self._current + timedelta(seconds=1)
            return self._current


class RecordingSink:
    """System sink that keeps every emitted (level, message) pair."""

    def __init__(self) -> None:
        self.messages: List[Tuple[LogLevel, str]] = []
        self._lock = threading.Lock()

    def emit(self, level: LogLevel, message: str) -> None:
        with self._lock:
            self.messages.append((level, message))


def make_record(
    log_id: str,
    created_at: datetime,
    event_name: str = "screen_view",
    level: LogLevel = LogLevel.INFO,
    fields: Optional[Mapping[LogField, str]] = None,
    properties: Optional[Dict[str, str]] = None,
) -> EventRecord:
    record = build_event_record(
        fields or {},
        log_id=log_id,
        created_at=created_at,
        event_name=event_name,
        level=level,
        properties=properties,
    )
    return record.model_copy(update={"rendered_payload": render(record)})
