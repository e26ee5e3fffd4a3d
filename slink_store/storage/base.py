"""
Base storage interface for slink-store.

Purpose:
    Define the one contract that both backends (embedded SQLite and the
    remote query/mutation service) implement, so redirect dispatch and
    administration never care which one is active.

Contract:
    - Every call blocks until it completes or fails; there are no callbacks.
    - Returned Link objects and stats dicts are fresh copies owned by the caller.
    - Failures are raised as `slink_store.exceptions` types and never swallowed.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from typing import List, Mapping

from ..models import ClickStats, Link


class BaseStorage(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod  # pragma: no cover
    def load_all(self) -> List[Link]:
        """
        Return every stored link.

        The order is unspecified; compare results as sets or dicts.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def load(self, short: str) -> Link:
        """
        Return the link stored under normalize(short).

        Raises:
            NotFoundError: if there is no such link.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def save(self, link: Link) -> None:
        """
        Insert or fully replace the link keyed by normalize(link.short).

        Creating and replacing are indistinguishable to the caller.

        Raises:
            ValidationError: if the backend detects that the upsert did not
                touch exactly one record.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def load_stats(self) -> ClickStats:
        """
        Return total clicks per link, keyed by the link's current display name.

        Totals recorded for links that no longer exist are omitted.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def save_stats(self, stats: Mapping[str, int]) -> None:
        """
        Record click deltas observed since the previous flush.

        Repeated calls accumulate: the total for a link is the sum of every
        delta ever saved for it. The call is all-or-nothing.

        Raises:
            ValidationError: if a delta is negative or not an integer.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release backend resources. Safe to call more than once."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
