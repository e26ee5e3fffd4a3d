"""
Storage backends for slink-store.

- SQLiteStorage: embedded local store (sqlite_storage.py)
- RemoteStorage: query/mutation RPC client (remote_storage.py, imported lazily)
- get_storage(): pick one from configuration
"""

from .base import BaseStorage
from .sqlite_storage import SQLiteStorage
from .storage_factory import get_storage

__all__ = ["BaseStorage", "SQLiteStorage", "get_storage"]
