"""
SQLiteStorage – embedded local store for slink-store
====================================================

Persists links and click deltas in a SQLite database file. It implements
`BaseStorage`, so it can be swapped for the remote store without touching
callers.

Key Design Points
-----------------
- **Locking**: every instance owns an `RWLock`. Reads (`load_all`, `load`,
  `load_stats`) share it; writes (`save`, `save_stats`) hold it exclusively,
  so a write and its transaction are atomic with respect to every other
  call on the same instance.
- **Upserts**: `save` uses `INSERT OR REPLACE` keyed by the normalized ID and
  insists on exactly one affected row.
- **Stats ledger**: `save_stats` appends one row per link per flush inside a
  single transaction; `load_stats` sums them with `GROUP BY`.
- **Connections**: a short-lived connection per call, closed on every exit
  path. The database must therefore be a file, not ":memory:".
- **Errors**: `sqlite3.Error` is re-raised as `TransientIOError` with the
  original exception chained.

Schema
------
See `schema.sql` next to this module. It is applied with
`CREATE ... IF NOT EXISTS` whenever a store is opened.

Example
-------
>>> store = SQLiteStorage("/tmp/slinks.db")
>>> store.save(Link.new("docs", "https://example.com/docs", owner="alice"))
>>> store.load("Docs").long
'https://example.com/docs'
"""

import contextlib
import logging
import sqlite3
from datetime import datetime, timezone
from importlib import resources
from typing import List, Mapping

from ..exceptions import NotFoundError, TransientIOError, ValidationError
from ..keys import normalize
from ..models import ClickStats, Link, attribute_totals, from_epoch, merge_deltas, to_epoch
from .base import BaseStorage
from .locking import RWLock

log = logging.getLogger("slink.storage")

_SELECT_LINKS = "SELECT Short, Long, Created, LastEdit, Owner FROM Links"


def _load_schema() -> str:
    return resources.files(__package__).joinpath("schema.sql").read_text(encoding="utf-8")


def _row_to_link(row) -> Link:
    short, long, created, last_edit, owner = row
    return Link(
        short=short,
        long=long,
        created=from_epoch(created),
        last_edit=from_epoch(last_edit),
        owner=owner,
    )


class SQLiteStorage(BaseStorage):
    """SQLite implementation of the slink storage contract.

    Parameters
    ----------
    path : str
        Path of the database file; created if missing.
    timeout : float
        Seconds SQLite waits on a file lock held by another connection
        before failing with "database is locked".
    """

    def __init__(self, path: str, timeout: float = 5.0) -> None:
        self.path = path
        self.timeout = timeout
        self._lock = RWLock()
        with self._lock.write(), self._conn() as con:
            con.executescript(_load_schema())
            con.execute("SELECT 1").fetchone()
        log.info("SQLiteStorage opened: path=%s", path)

    # ---- Internal helpers -------------------------------------------------

    @contextlib.contextmanager
    def _conn(self):
        """Context manager creating a sqlite3 connection and translating its errors."""
        con = None
        try:
            con = sqlite3.connect(self.path, timeout=self.timeout)
            yield con
        except sqlite3.Error as exc:
            log.warning("SQLiteStorage error on %s: %s", self.path, exc)
            raise TransientIOError(f"sqlite {self.path}: {exc}") from exc
        finally:
            if con is not None:
                con.close()

    @staticmethod
    def _load_all(con) -> List[Link]:
        return [_row_to_link(row) for row in con.execute(_SELECT_LINKS).fetchall()]

    # ---- Contract methods -------------------------------------------------

    def load_all(self) -> List[Link]:
        """Return every stored link as a fresh list."""
        with self._lock.read(), self._conn() as con:
            links = self._load_all(con)
        log.debug("SQLiteStorage.load_all: %d links", len(links))
        return links

    def load(self, short: str) -> Link:
        """Return the link for `short` or raise NotFoundError."""
        key = normalize(short)
        with self._lock.read(), self._conn() as con:
            row = con.execute(_SELECT_LINKS + " WHERE ID = ? LIMIT 1", (key,)).fetchone()
        if row is None:
            raise NotFoundError(short)
        return _row_to_link(row)

    def save(self, link: Link) -> None:
        """Insert or replace a link.

        Raises
        ------
        ValidationError
            If the upsert affected anything other than exactly one row; the
            transaction is rolled back.
        """
        key = link.key
        log.debug("SQLiteStorage.save: id=%s short=%s", key, link.short)
        with self._lock.write(), self._conn() as con:
            with con:
                cur = con.execute(
                    "INSERT OR REPLACE INTO Links (ID, Short, Long, Created, LastEdit, Owner) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (key, link.short, link.long, to_epoch(link.created), to_epoch(link.last_edit), link.owner),
                )
                if cur.rowcount != 1:
                    raise ValidationError(f"expected to affect 1 row, affected {cur.rowcount}")

    def load_stats(self) -> ClickStats:
        """Return total clicks per display name; orphaned totals are dropped.

        The link set and the totals are read under one shared acquisition,
        so no save can land between the two reads.
        """
        with self._lock.read(), self._conn() as con:
            links = self._load_all(con)
            rows = con.execute("SELECT ID, SUM(Clicks) FROM Stats GROUP BY ID").fetchall()
        return attribute_totals(links, {key: int(clicks) for key, clicks in rows})

    def save_stats(self, stats: Mapping[str, int]) -> None:
        """Append one ledger row per link; all rows commit or none do."""
        deltas = merge_deltas(stats)
        if not deltas:
            return
        now = to_epoch(datetime.now(timezone.utc))
        log.debug("SQLiteStorage.save_stats: %d links", len(deltas))
        with self._lock.write(), self._conn() as con:
            with con:
                con.executemany(
                    "INSERT INTO Stats (ID, Created, Clicks) VALUES (?, ?, ?)",
                    [(key, now, clicks) for key, clicks in deltas.items()],
                )
