"""
Context snapshot providers.

A provider answers "what device / host am I running on right now" plus the
current time. The event logger polls it when it starts, on
`refresh_context()`, and (for the clock and time zone) on every submission.

Any provider failure degrades to the "nil" sentinel; it never fails a
submission.
"""

from __future__ import annotations

import logging
import os
import platform
import time
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from configs.settings import settings
from core.fields.field_registry import LogField
from core.models.event_models import NIL


logger = logging.getLogger(__name__)

LOCALTIME_PATH = "/etc/localtime"
_ZONEINFO_MARKER = "zoneinfo" + os.sep


def _zone_key_from_path(path: str) -> Optional[str]:
    _, marker, key = path.rpartition(_ZONEINFO_MARKER)
    return key if marker and key else None


def local_zone_name(localtime_path: Optional[str] = None) -> Optional[str]:
    """Return the host's IANA zone id (e.g. "Europe/Berlin"), or None.

    `TZ` wins when set; otherwise the zone is read from the target of the
    /etc/localtime symlink.
    """
    tz = os.environ.get("TZ", "").lstrip(":")
    if tz:
        if os.path.isabs(tz):
            return _zone_key_from_path(tz)
        try:
            return ZoneInfo(tz).key
        except (ZoneInfoNotFoundError, ValueError):
            # POSIX rule strings such as "EST5EDT,M3.2.0,M11.1.0"
            return None

    localtime_path = localtime_path or LOCALTIME_PATH
    if not os.path.islink(localtime_path):
        return None
    return _zone_key_from_path(os.path.realpath(localtime_path))


class ContextProvider(Protocol):
    """Interface for anything that can describe the host environment."""

    def current_model(self) -> str:
        ...

    def current_os_version(self) -> str:
        ...

    def current_os_name(self) -> str:
        ...

    def current_time_zone_id(self) -> str:
        ...

    def current_app_version(self) -> str:
        ...

    def now(self) -> datetime:
        ...


class PlatformContextProvider:
    """Default provider backed by the `platform` module and the local clock."""

    def __init__(self, app_version: Optional[str] = None) -> None:
        self._app_version = app_version if app_version is not None else settings.app_version

    def current_model(self) -> str:
        return platform.machine() or NIL

    def current_os_version(self) -> str:
        return platform.release() or NIL

    def current_os_name(self) -> str:
        return platform.system() or NIL

    def current_time_zone_id(self) -> str:
        zone = local_zone_name()
        if zone:
            return zone
        # No IANA id available; the abbreviation ("CET", "UTC") is all we have.
        local = datetime.now().astimezone()
        return local.tzname() or time.tzname[0]

    def current_app_version(self) -> str:
        return self._app_version

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def _safe(getter: Callable[[], str], field: LogField) -> str:
    try:
        value = getter()
    except Exception as e:
        logger.warning("[CONTEXT] could not read %s: %s", field.storage_key, e)
        return NIL
    return value if value else NIL


def collect_device_context(provider: ContextProvider) -> Dict[LogField, str]:
    """Poll every device-level value from `provider`."""
    return {
        LogField.MODEL: _safe(provider.current_model, LogField.MODEL),
        LogField.OS_VERSION: _safe(provider.current_os_version, LogField.OS_VERSION),
        LogField.OPERATING_SYSTEM: _safe(provider.current_os_name, LogField.OPERATING_SYSTEM),
        LogField.APP_VERSION: _safe(provider.current_app_version, LogField.APP_VERSION),
        LogField.TIME_ZONE: _safe(provider.current_time_zone_id, LogField.TIME_ZONE),
    }


def collect_time_zone(provider: ContextProvider) -> str:
    return _safe(provider.current_time_zone_id, LogField.TIME_ZONE)
