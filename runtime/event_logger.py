"""EventLogger: the public entry point of the event-log store.

One EventLogger owns:
- a FieldSnapshot (user / device / location values attached to records)
- a LogStore (committed records, optionally file-backed)
- a WriteChannel (single writer through which every commit passes)
- a SystemLogSink (receives the rendered record after each commit)

Write path:
    submit(event, properties, level)
      -> coerce properties, assign log_id + created_at, refresh time zone
      -> WriteChannel job: build record, render, append, notify sink
      -> Future[RenderedRecord]

Read path:
    query(config) -> List[List[EventRecord]]
      runs against an immutable snapshot of the store and never touches the
      write channel.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Any, Callable, List, Mapping, Optional, Union

from configs.settings import settings
from core.fields.field_registry import LogField
from core.ingestion.coercion import coerce_properties
from core.models.event_models import EventRecord, LogLevel
from core.models.record_factory import new_log_id
from core.query.filter_config import FilterConfiguration
from core.query.query_engine import run_query
from runtime.context.context_provider import (
    ContextProvider,
    PlatformContextProvider,
    collect_device_context,
    collect_time_zone,
)
from runtime.context.field_snapshot import FieldSnapshot
from runtime.ingestion.write_channel import RenderedRecord, Submission, WriteChannel
from runtime.sinks.system_logger import LoggingSink, SystemLogSink
from runtime.store.log_store import LogStore


logger = logging.getLogger(__name__)


class EventLogger:
    """Append-only event log with filtered, paginated retrieval.

    Parameters
    ----------
    configuration:
        Default FilterConfiguration used by `fetch()`.
    store:
        Record store. Defaults to a memory-only LogStore.
    context_provider:
        Source of device context and of the clock.
    sink:
        System sink receiving rendered records. Defaults to a LoggingSink
        on `settings.logger_name`.
    """

    def __init__(
        self,
        configuration: Optional[FilterConfiguration] = None,
        store: Optional[LogStore] = None,
        context_provider: Optional[ContextProvider] = None,
        sink: Optional[SystemLogSink] = None,
    ) -> None:
        self.configuration = configuration or FilterConfiguration()
        self.store = store if store is not None else LogStore()
        self.context_provider = context_provider or PlatformContextProvider()
        self.sink = sink if sink is not None else LoggingSink(settings.logger_name)

        self.fields = FieldSnapshot()
        self.refresh_context()

        self._channel = WriteChannel(
            store=self.store,
            fields=self.fields,
            sink=self.sink,
            message_tag=settings.logger_name,
        )

    @classmethod
    def from_settings(cls, **kwargs: Any) -> "EventLogger":
        """Build a logger from `configs.settings` (file-backed if enabled)."""
        if "store" not in kwargs:
            log_file = str(settings.log_file) if settings.persist else None
            kwargs["store"] = LogStore(log_file=log_file)
        if "configuration" not in kwargs and settings.query_config_path is not None:
            kwargs["configuration"] = FilterConfiguration.from_file(settings.query_config_path)
        return cls(**kwargs)

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def submit(
        self,
        event: str,
        properties: Optional[Mapping[str, Any]] = None,
        level: Union[LogLevel, str] = LogLevel.DEFAULT,
        completion: Optional[Callable[[str], None]] = None,
    ) -> "Future[RenderedRecord]":
        """Queue an event for commit and return its completion Future.

        The Future resolves to a RenderedRecord, or raises WriteError if the
        store rejected the commit. `completion`, if given, is called with the
        forwarded message after a successful commit.

        Raises
        ------
        ValueError
            If `event` is empty or `level` is not a known log level.
        """
        if not event:
            raise ValueError("event name must be a non-empty string")
        level = LogLevel(level)

        self.fields.set(LogField.TIME_ZONE, collect_time_zone(self.context_provider))
        submission = Submission(
            log_id=new_log_id(),
            created_at=self.context_provider.now(),
            event_name=event,
            level=level,
            properties=coerce_properties(properties),
        )
        return self._channel.submit(submission, callback=completion)

    def log(
        self,
        event: str,
        properties: Optional[Mapping[str, Any]] = None,
        level: Union[LogLevel, str] = LogLevel.DEFAULT,
        timeout: Optional[float] = None,
    ) -> RenderedRecord:
        """Submit and wait for the commit. Raises WriteError on failure."""
        return self.submit(event, properties, level).result(timeout=timeout)

    # ------------------------------------------------------------------
    # Field snapshot setters
    # ------------------------------------------------------------------

    def set_user(self, user_id: str, name: str, email: Optional[str] = None) -> None:
        self.fields.set_user(user_id, name, email)

    def set_device_id(self, device_id: str) -> None:
        self.fields.set_device_id(device_id)

    def set_location(self, latitude: Optional[float], longitude: Optional[float]) -> None:
        self.fields.set_location(latitude, longitude)

    def refresh_context(self) -> None:
        """Re-poll the context provider for device-level values."""
        self.fields.update(collect_device_context(self.context_provider))

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def query(self, config: FilterConfiguration) -> List[List[EventRecord]]:
        """Return committed records matching `config`, as pages.

        Raises
        ------
        UnknownField
            If a filter names a field outside the registry.
        """
        return run_query(self.store.snapshot(), config)

    def fetch(self) -> List[List[EventRecord]]:
        """Run `query()` with this logger's default configuration."""
        return self.query(self.configuration)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Wait for pending commits and stop the write channel."""
        self._channel.close(wait=True)

    def __enter__(self) -> "EventLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
