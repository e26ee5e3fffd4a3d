"""
slink_store package initializer.

Persistence layer for a short-link redirection service: link records and
click counters behind one storage contract with interchangeable backends.
"""

from .exceptions import (
    ApplicationError,
    NotFoundError,
    ProtocolError,
    StorageError,
    TransientIOError,
    ValidationError,
)
from .keys import normalize
from .models import ClickStats, Link
from .storage import BaseStorage, SQLiteStorage, get_storage

__all__ = [
    "ApplicationError",
    "BaseStorage",
    "ClickStats",
    "Link",
    "NotFoundError",
    "ProtocolError",
    "SQLiteStorage",
    "StorageError",
    "TransientIOError",
    "ValidationError",
    "get_storage",
    "normalize",
]
