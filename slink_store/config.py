"""
Runtime configuration for slink-store
=====================================

Simple settings module that reads from environment variables (only here),
and exposes a `settings` snapshot plus `get_settings()` for call-time reads.
Avoid reading env vars anywhere else; import from this module instead.

Storage
-------
- SLINK_STORAGE_BACKEND : "sqlite" (default) or "remote"

Local store
-----------
- SLINK_SQLITE_PATH     : database file (default "slinks.db")
- SLINK_SQLITE_TIMEOUT  : seconds to wait on a locked database file (default 5.0)

Remote store
------------
- SLINK_REMOTE_URL      : base URL of the query/mutation service, e.g. "https://happy-otter-123.example.cloud"
- SLINK_REMOTE_TOKEN    : bearer token merged into every request's args
- SLINK_REMOTE_TIMEOUT  : per-request timeout in seconds (default 10.0)
"""

import os


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, str(default))
    try:
        return float(raw)
    except ValueError:
        return default


class _Settings:
    def __init__(self) -> None:
        # -------- Storage --------
        self.STORAGE_BACKEND: str = os.getenv("SLINK_STORAGE_BACKEND", "sqlite").strip().lower()

        # -------- Local store --------
        self.SQLITE_PATH: str = os.getenv("SLINK_SQLITE_PATH", "slinks.db")
        self.SQLITE_TIMEOUT: float = _get_float("SLINK_SQLITE_TIMEOUT", 5.0)

        # -------- Remote store --------
        self.REMOTE_URL: str = os.getenv("SLINK_REMOTE_URL", "").strip().rstrip("/")
        self.REMOTE_TOKEN: str = os.getenv("SLINK_REMOTE_TOKEN", "")
        self.REMOTE_TIMEOUT: float = _get_float("SLINK_REMOTE_TIMEOUT", 10.0)


def get_settings() -> _Settings:
    """Read the environment now and return a fresh settings object."""
    return _Settings()


settings = get_settings()
