"""Tests for the command-line front end."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cli.main import main


def test_submit_and_query(tmp_path: Path, capsys) -> None:
    log_file = str(tmp_path / "events.jsonl")

    code = main(
        [
            "--log-file", log_file,
            "submit", "signup",
            "--level", "info",
            "-p", "plan=pro",
            "-p", "seats=3",
            "--user-id", "u-1",
            "--user-name", "Kim",
        ]
    )
    assert code == 0
    message = capsys.readouterr().out.strip()
    assert message.startswith("eventlog: ")
    payload = json.loads(message.split(": ", 1)[1])
    assert payload["properties"] == {"plan": "pro", "seats": "3"}
    assert payload["user_info"]["id"] == "u-1"

    assert main(["--log-file", log_file, "submit", "other"]) == 0
    capsys.readouterr()

    code = main(["--log-file", log_file, "query", "-f", "event_name=signup", "--page-size", "5"])
    assert code == 0
    pages = json.loads(capsys.readouterr().out)
    assert len(pages) == 1
    assert [record["event_name"] for record in pages[0]] == ["signup"]


def test_query_from_config_file(tmp_path: Path, capsys) -> None:
    log_file = str(tmp_path / "events.jsonl")
    for name in ("a", "b", "c"):
        assert main(["--log-file", log_file, "submit", name]) == 0
    capsys.readouterr()

    config = tmp_path / "filters.json"
    config.write_text(json.dumps({"events_count": 2, "page_size": 1, "filters": []}), encoding="utf-8")

    assert main(["--log-file", log_file, "query", "--config", str(config)]) == 0
    pages = json.loads(capsys.readouterr().out)
    assert [len(page) for page in pages] == [1, 1]


def test_query_unknown_field_exits_with_error(tmp_path: Path, capsys) -> None:
    code = main(["--log-file", str(tmp_path / "events.jsonl"), "query", "-f", "colour=red"])

    assert code == 2
    assert "colour" in capsys.readouterr().err


def test_malformed_property_is_a_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["--log-file", str(tmp_path / "events.jsonl"), "submit", "x", "-p", "novalue"])


def test_fields_command_lists_registry(capsys) -> None:
    assert main(["fields"]) == 0
    out = capsys.readouterr().out
    assert "createdAt" in out
    assert "created_at" in out
