"""
Error taxonomy shared by every storage backend.

Callers branch on the exception class, never on message text:

    StorageError
    ├── NotFoundError      load() found no record for the key
    ├── ValidationError    a backend invariant was violated (fatal to the call)
    ├── ProtocolError      malformed envelope / unexpected status from the remote store
    ├── ApplicationError   the remote store reported a logical failure
    └── TransientIOError   network, connection or local database failures

None of these are retried internally; retry/backoff belongs to the caller.
"""


class StorageError(Exception):
    """Base class for all slink storage errors."""


class NotFoundError(StorageError, LookupError):
    """Raised when no link exists for the requested short name."""

    def __init__(self, short: str) -> None:
        super().__init__(f"slink not found: {short!r}")
        self.short = short


class ValidationError(StorageError):
    """Raised when a backend detects an internal invariant violation."""


class ProtocolError(StorageError):
    """Raised when the remote store answers outside the RPC contract."""


class ApplicationError(StorageError):
    """Raised when the remote store answers with status "error"."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransientIOError(StorageError, OSError):
    """Raised for connection, transport and local I/O failures."""
