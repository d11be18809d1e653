"""
Single-writer channel for record commits.

Every submission becomes one job on a one-thread executor, so commits are
totally ordered: a job builds the record from the field snapshot, renders
it, appends it to the store and only then does the next job start.

The caller gets a Future that resolves to a RenderedRecord or fails with
WriteError. Nothing is retried here.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional

from core.models.event_models import EventRecord, LogLevel
from core.models.record_factory import build_event_record
from core.serialization.record_serializer import render
from exceptions.exceptions import WriteError
from runtime.context.field_snapshot import FieldSnapshot
from runtime.sinks.system_logger import SystemLogSink
from runtime.store.log_store import LogStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Submission:
    log_id: str
    created_at: datetime
    event_name: str
    level: LogLevel
    properties: Dict[str, str]


@dataclass(frozen=True)
class RenderedRecord:
    """Result of a successful commit."""

    record: EventRecord
    # "<tag>: <rendered payload>", the text forwarded to the system sink.
    message: str

    @property
    def payload(self) -> str:
        return self.record.rendered_payload


class WriteChannel:
    """Serializes commits through one worker thread.

    Parameters
    ----------
    store:
        Destination for committed records.
    fields:
        Field snapshot read (never mutated) when a job runs.
    sink:
        Optional system sink notified after each commit.
    message_tag:
        Prefix of the forwarded message.
    """

    def __init__(
        self,
        store: LogStore,
        fields: FieldSnapshot,
        sink: Optional[SystemLogSink] = None,
        message_tag: str = "EventLog",
    ) -> None:
        self.store = store
        self.fields = fields
        self.sink = sink
        self.message_tag = message_tag
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="eventlog-writer")
        self._closed = False
        self._close_lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(
        self,
        submission: Submission,
        callback: Optional[Callable[[str], None]] = None,
    ) -> "Future[RenderedRecord]":
        """Queue one submission. Never raises; failures land in the Future."""
        with self._close_lock:
            if self._closed:
                future: "Future[RenderedRecord]" = Future()
                future.set_exception(
                    WriteError(submission.event_name, details="write channel is closed")
                )
                return future
            future = self._executor.submit(self._commit, submission)

        if callback is not None:
            future.add_done_callback(lambda done: self._run_callback(done, callback))
        return future

    def close(self, wait: bool = True) -> None:
        """Stop accepting submissions; pending ones still complete."""
        with self._close_lock:
            self._closed = True
        self._executor.shutdown(wait=wait)

    # ------------------------------------------------------------------
    # Worker side
    # ------------------------------------------------------------------

    def _commit(self, submission: Submission) -> RenderedRecord:
        try:
            record = build_event_record(
                self.fields.copy(),
                log_id=submission.log_id,
                created_at=submission.created_at,
                event_name=submission.event_name,
                level=submission.level,
                properties=submission.properties,
            )
            record = record.model_copy(update={"rendered_payload": render(record)})
            self.store.append(record)
        except Exception as e:
            logger.error(
                "[WRITE] commit failed for event=%r log_id=%s: %s",
                submission.event_name,
                submission.log_id,
                e,
            )
            self._notify(LogLevel.FAULT, f"{submission.event_name} failed to save")
            raise WriteError(submission.event_name, details=str(e)) from e

        rendered = RenderedRecord(
            record=record,
            message=f"{self.message_tag}: {record.rendered_payload}",
        )
        self._notify(submission.level, rendered.message)
        return rendered

    def _notify(self, level: LogLevel, message: str) -> None:
        if self.sink is None:
            return
        try:
            self.sink.emit(level, message)
        except Exception:
            logger.warning("[WRITE] system sink failed to emit message", exc_info=True)

    @staticmethod
    def _run_callback(future: "Future[RenderedRecord]", callback: Callable[[str], None]) -> None:
        if future.cancelled() or future.exception() is not None:
            return
        try:
            callback(future.result().message)
        except Exception:
            logger.exception("[WRITE] completion callback raised")
