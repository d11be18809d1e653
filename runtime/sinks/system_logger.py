"""
System-level log sinks.

After a record is committed, the write channel forwards its rendered form
to a sink. Sinks are fire-and-forget: the channel observes their failures
but never turns them into write failures.
"""

from __future__ import annotations

import logging
from typing import Dict, Protocol

from core.models.event_models import LogLevel


class SystemLogSink(Protocol):
    def emit(self, level: LogLevel, message: str) -> None:
        ...


_LEVELS: Dict[LogLevel, int] = {
    LogLevel.DEFAULT: logging.INFO,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.FAULT: logging.CRITICAL,
}


class LoggingSink:
    """Forward messages to a stdlib logger, mapping record levels."""

    def __init__(self, logger_name: str = "eventlog") -> None:
        self.logger = logging.getLogger(logger_name)

    def emit(self, level: LogLevel, message: str) -> None:
        self.logger.log(_LEVELS.get(level, logging.INFO), "%s", message)
