"""
LogStore: append-only storage for committed event records.

Records are kept in memory in commit order and, if a log file is
configured, appended as JSON lines to:

    <data_dir>/logs/events.jsonl

Each line is the record's canonical layout plus `as_json` (the rendered
payload computed at commit time), so loading never re-serializes.

The design is intentionally simple:
- In-memory access is the primary source of truth during a run.
- The file is replayed on start-up so that records survive restarts.
- A record is only visible to readers after its line has been written.
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from core.models.event_models import EventRecord


logger = logging.getLogger(__name__)


class DuplicateRecordError(Exception):
    """Raised when a record id is already present in the store."""

    def __init__(self, log_id: str) -> None:
        self.log_id = log_id
        super().__init__(f"Record already exists: {log_id}")


class LogStore:
    """In-memory + optional file-backed record store.

    Parameters
    ----------
    log_file:
        Path of the JSON-lines file used for durability. If not provided,
        the store is memory-only.

    Appends are expected from a single writer (the write channel); the
    internal lock only guards readers against observing a half-applied
    append.
    """

    def __init__(self, log_file: Optional[str] = None) -> None:
        self._records: List[EventRecord] = []
        self._index: Dict[str, EventRecord] = {}
        self._lock = threading.Lock()

        self._log_file: Optional[Path] = Path(log_file) if log_file else None
        if self._log_file is not None:
            self._log_file.parent.mkdir(parents=True, exist_ok=True)
            self._load()

    @property
    def log_file(self) -> Optional[Path]:
        return self._log_file

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def append(self, record: EventRecord) -> None:
        """Commit one record.

        Raises
        ------
        DuplicateRecordError
            If a record with the same log_id was already committed.
        OSError
            If the log file could not be written. Nothing is committed.
        """
        if record.log_id in self._index:
            raise DuplicateRecordError(record.log_id)

        if self._log_file is not None:
            self._write_line(record)

        with self._lock:
            self._records.append(record)
            self._index[record.log_id] = record

    def get(self, log_id: str) -> Optional[EventRecord]:
        with self._lock:
            return self._index.get(log_id)

    def snapshot(self) -> Tuple[EventRecord, ...]:
        """Return every committed record, in commit order."""
        with self._lock:
            return tuple(self._records)

    # ------------------------------------------------------------------
    # File persistence
    # ------------------------------------------------------------------

    def _write_line(self, record: EventRecord) -> None:
        """Append one line; on any failure the file is cut back to its old length."""
        line = json.dumps(
            record.model_dump(mode="json", by_alias=True),
            ensure_ascii=False,
            separators=(",", ":"),
        )
        data = (line + "\n").encode("utf-8")

        # Unbuffered, so a failed write leaves nothing pending for truncate().
        with self._log_file.open("a+b", buffering=0) as f:
            start = f.seek(0, os.SEEK_END)
            if start > 0:
                f.seek(start - 1)
                if f.read(1) != b"\n":
                    # Torn tail from an interrupted write: keep it on its own line.
                    data = b"\n" + data
            try:
                view = memoryview(data)
                while view:
                    written = f.write(view)
                    view = view[written:]
                os.fsync(f.fileno())
            except Exception:
                f.truncate(start)
                raise

    def _load(self) -> None:
        """Replay the log file into memory, skipping unreadable lines."""
        if not self._log_file.is_file():
            return

        loaded = 0
        with self._log_file.open("r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    record = EventRecord.model_validate_json(line)
                except ValidationError as e:
                    logger.warning(
                        "[STORE] skipping unreadable line %d in %s: %s",
                        line_no,
                        self._log_file,
                        e.errors()[0]["msg"] if e.errors() else e,
                    )
                    continue
                if record.log_id in self._index:
                    logger.warning(
                        "[STORE] skipping duplicate log_id=%s at line %d",
                        record.log_id,
                        line_no,
                    )
                    continue
                self._records.append(record)
                self._index[record.log_id] = record
                loaded += 1

        logger.info("[STORE] loaded %d record(s) from %s", loaded, self._log_file)
