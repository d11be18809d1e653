"""Tests for the append-only LogStore."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from core.fields.field_registry import LogField
from runtime.store.log_store import DuplicateRecordError, LogStore
from helpers import make_record


BASE = datetime(2026, 2, 1, tzinfo=timezone.utc)


def test_append_and_snapshot_keep_commit_order() -> None:
    store = LogStore()
    records = [make_record(f"R{i}", BASE + timedelta(seconds=-i)) for i in range(3)]

    for record in records:
        store.append(record)

    assert len(store) == 3
    assert store.snapshot() == tuple(records)
    assert store.get("R1") is records[1]
    assert store.get("missing") is None


def test_duplicate_id_is_rejected_and_store_unchanged() -> None:
    store = LogStore()
    store.append(make_record("dup", BASE))

    with pytest.raises(DuplicateRecordError):
        store.append(make_record("dup", BASE + timedelta(seconds=1)))

    assert len(store) == 1


def test_snapshot_is_isolated_from_later_appends() -> None:
    store = LogStore()
    store.append(make_record("a", BASE))
    snapshot = store.snapshot()

    store.append(make_record("b", BASE))

    assert [r.log_id for r in snapshot] == ["a"]


def test_records_survive_reload(tmp_path: Path) -> None:
    """A file-backed store replays its JSON lines, payload included."""
    log_file = tmp_path / "logs" / "events.jsonl"
    store = LogStore(log_file=str(log_file))
    original = make_record(
        "persisted",
        BASE,
        fields={LogField.USER_EMAIL: "a@b.c"},
        properties={"k": "v"},
    )
    store.append(original)

    reloaded = LogStore(log_file=str(log_file))

    assert len(reloaded) == 1
    record = reloaded.get("persisted")
    assert record == original
    assert record.rendered_payload == original.rendered_payload
    assert json.loads(log_file.read_text(encoding="utf-8"))["as_json"] == original.rendered_payload


def test_unreadable_lines_are_skipped(tmp_path: Path) -> None:
    log_file = tmp_path / "events.jsonl"
    store = LogStore(log_file=str(log_file))
    store.append(make_record("good", BASE))
    with log_file.open("a", encoding="utf-8") as f:
        f.write('{"log_id": "half-written"\n')
        f.write("\n")

    reloaded = LogStore(log_file=str(log_file))

    assert [r.log_id for r in reloaded.snapshot()] == ["good"]


def test_failed_file_write_commits_nothing(tmp_path: Path, monkeypatch) -> None:
    store = LogStore(log_file=str(tmp_path / "events.jsonl"))

    def fail(record):
        raise OSError("disk full")

    monkeypatch.setattr(store, "_write_line", fail)

    with pytest.raises(OSError):
        store.append(make_record("lost", BASE))
    assert len(store) == 0
    assert store.get("lost") is None


def test_failed_sync_leaves_no_line_behind(tmp_path: Path, monkeypatch) -> None:
    """A record whose fsync failed must not reappear after a restart."""
    log_file = tmp_path / "events.jsonl"
    store = LogStore(log_file=str(log_file))
    store.append(make_record("kept", BASE))
    size_before = log_file.stat().st_size

    def fail_sync(fd):
        raise OSError("fsync failed")

    monkeypatch.setattr("runtime.store.log_store.os.fsync", fail_sync)
    with pytest.raises(OSError):
        store.append(make_record("failed", BASE + timedelta(seconds=1)))
    monkeypatch.undo()

    assert log_file.stat().st_size == size_before
    assert [r.log_id for r in store.snapshot()] == ["kept"]
    assert [r.log_id for r in LogStore(log_file=str(log_file)).snapshot()] == ["kept"]


def test_append_after_torn_tail_survives_reload(tmp_path: Path) -> None:
    """A half-written last line must not swallow the next committed record."""
    log_file = tmp_path / "events.jsonl"
    log_file.write_text('{"log_id":"torn","created_at":"2026', encoding="utf-8")

    store = LogStore(log_file=str(log_file))
    assert len(store) == 0
    store.append(make_record("good", BASE))

    reloaded = LogStore(log_file=str(log_file))
    assert [r.log_id for r in reloaded.snapshot()] == ["good"]
