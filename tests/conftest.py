"""Shared fixtures for the event-log test suite."""

from __future__ import annotations

import os

# Keep stores created from settings memory-only during tests. Must run
# before configs.settings is imported.
os.environ.setdefault("EVENTLOG_PERSIST", "0")

import pytest

from helpers import FakeContextProvider, RecordingSink
from runtime.event_logger import EventLogger
from runtime.store.log_store import LogStore


@pytest.fixture
def context_provider() -> FakeContextProvider:
    return FakeContextProvider()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def event_logger(context_provider: FakeContextProvider, sink: RecordingSink):
    """Memory-only EventLogger wired to the fake provider and sink."""
    with EventLogger(store=LogStore(), context_provider=context_provider, sink=sink) as logger:
        yield logger
