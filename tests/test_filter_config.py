"""Tests for decoding filter configurations from their wire format."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from core.query.filter_config import FilterConfiguration, parse_timestamp


WIRE = {
    "sync_frequency": 3600,
    "logs_after": "2025-08-14T10:00:00.250Z",
    "logs_before": "2025-08-15T10:00:00+02:00",
    "events_count": 50,
    "page_size": 10,
    "filters": [{"log_level": ["error", "fault"]}, {"user_id": ["42"]}],
}


def test_decodes_wire_keys() -> None:
    config = FilterConfiguration.model_validate(WIRE)

    assert config.sync_frequency == 3600
    assert config.logs_after == datetime(2025, 8, 14, 10, 0, 0, 250000, tzinfo=timezone.utc)
    assert config.logs_before == datetime(2025, 8, 15, 8, 0, 0, tzinfo=timezone.utc)
    assert config.events_count == 50
    assert config.page_size == 10
    assert config.constraints() == [("log_level", ("error", "fault")), ("user_id", ("42",))]


def test_empty_timestamp_means_unset() -> None:
    config = FilterConfiguration.model_validate({**WIRE, "logs_after": "", "logs_before": None})
    assert config.logs_after is None
    assert config.logs_before is None


def test_local_time_format_is_accepted() -> None:
    """'YYYY-MM-DD HH:MM:SS' is read in local time and normalised to UTC."""
    parsed = parse_timestamp("2025-08-14 10:00:00")

    expected = datetime(2025, 8, 14, 10, 0, 0).astimezone().astimezone(timezone.utc)
    assert parsed == expected
    assert parsed.tzinfo == timezone.utc


def test_invalid_timestamp_is_rejected() -> None:
    with pytest.raises(ValidationError):
        FilterConfiguration.model_validate({**WIRE, "logs_after": "yesterday"})


def test_negative_events_count_is_rejected() -> None:
    with pytest.raises(ValidationError):
        FilterConfiguration.model_validate({**WIRE, "events_count": -1})


def test_multiple_keys_in_one_mapping_each_become_constraints() -> None:
    config = FilterConfiguration.model_validate(
        {"filters": [{"user_id": ["1"], "device_id": ["d"]}]}
    )
    assert config.constraints() == [("user_id", ("1",)), ("device_id", ("d",))]


def test_loads_from_json_and_file(tmp_path: Path) -> None:
    path = tmp_path / "filters.json"
    path.write_text(json.dumps(WIRE), encoding="utf-8")

    from_file = FilterConfiguration.from_file(path)
    from_text = FilterConfiguration.from_json(json.dumps(WIRE))

    assert from_file == from_text
    assert from_file.events_count == 50


def test_file_must_hold_an_object(tmp_path: Path) -> None:
    path = tmp_path / "filters.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ValueError):
        FilterConfiguration.from_file(path)
