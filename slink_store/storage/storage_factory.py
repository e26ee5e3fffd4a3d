"""
Storage factory – switch storage backend from config
====================================================

This module centralizes selection of the storage backend (local SQLite vs
remote RPC service) so the rest of the service can stay ignorant of where
data lives. The backend is chosen once, at construction time.

- Reads environment **at call time** (via `get_settings()`) to avoid stale
  values in tests.
- Imports the remote backend (and httpx) **only if** it is selected.

Environment variables
---------------------
- SLINK_STORAGE_BACKEND: "sqlite" (default) or "remote"
- SLINK_SQLITE_PATH / SLINK_SQLITE_TIMEOUT for "sqlite"
- SLINK_REMOTE_URL / SLINK_REMOTE_TOKEN / SLINK_REMOTE_TIMEOUT for "remote"
"""

import logging
from typing import Optional

from ..config import get_settings
from .base import BaseStorage
from .sqlite_storage import SQLiteStorage

log = logging.getLogger("slink.storage")


def get_storage(backend: Optional[str] = None, **kwargs) -> BaseStorage:
    """
    Return a storage backend based on configuration.

    Parameters
    ----------
    backend : str, optional
        "sqlite" or "remote". If omitted, reads SLINK_STORAGE_BACKEND.
    kwargs : dict
        Overrides for the backend constructor: path/timeout for sqlite,
        url/token/timeout/client for remote.

    Returns
    -------
    BaseStorage

    Raises
    ------
    ValueError
        For an unknown backend name or a remote backend without a URL.
    """
    cfg = get_settings()
    be = (backend or cfg.STORAGE_BACKEND).strip().lower()
    log.info("Selected storage backend: %r", be)

    if be == "sqlite":
        return SQLiteStorage(
            path=kwargs.get("path") or cfg.SQLITE_PATH,
            timeout=kwargs.get("timeout", cfg.SQLITE_TIMEOUT),
        )

    if be == "remote":
        url = kwargs.get("url") or cfg.REMOTE_URL
        if not url:
            raise ValueError("REMOTE_URL is required for remote backend (env SLINK_REMOTE_URL)")
        # Local import to avoid loading httpx when not using the remote store
        from .remote_storage import RemoteStorage

        return RemoteStorage(
            url=url,
            token=kwargs.get("token", cfg.REMOTE_TOKEN),
            timeout=kwargs.get("timeout", cfg.REMOTE_TIMEOUT),
            client=kwargs.get("client"),
        )

    raise ValueError(f"Unknown storage backend: {be!r}")
