from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off")


class Settings:
    """
    Central configuration for the event-log store.

    Values are loaded once from environment variables (with sensible defaults)
    and then exposed via typed properties.
    """

    def __init__(self) -> None:
        # Storage
        self._data_dir = Path(os.getenv("EVENTLOG_DATA_DIR", "runtime/data"))
        self._persist = _env_flag("EVENTLOG_PERSIST", True)

        # Logging
        self._log_level = os.getenv("EVENTLOG_LOG_LEVEL", "INFO").upper()
        self._logger_name = os.getenv("EVENTLOG_LOGGER_NAME", "eventlog")

        # Host application info attached to every record
        self._app_version = os.getenv("EVENTLOG_APP_VERSION", "")
        self._app_build = os.getenv("EVENTLOG_APP_BUILD", "")

        # Default query configuration used by EventLogger.fetch()
        self._query_config_path = os.getenv("EVENTLOG_QUERY_CONFIG") or None

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def persist(self) -> bool:
        return self._persist

    @property
    def log_file(self) -> Path:
        return self._data_dir / "logs" / "events.jsonl"

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    @property
    def log_level(self) -> str:
        return self._log_level

    @property
    def logger_name(self) -> str:
        return self._logger_name

    # ------------------------------------------------------------------
    # Host application
    # ------------------------------------------------------------------

    @property
    def app_version(self) -> str:
        """Return `<version>.<build>` as attached to device_info.app_version.

        Empty parts are left out, so an unset version and build give "" and
        the record carries "nil".
        """
        return ".".join(part for part in (self._app_version, self._app_build) if part)

    @property
    def query_config_path(self) -> Optional[Path]:
        if self._query_config_path is None:
            return None
        return Path(self._query_config_path)


settings = Settings()
