"""
Value types shared by all storage backends.

Link
    One short-name -> destination mapping. The storage key is derived from
    the display name (see `slink_store.keys.normalize`) and never stored on
    the object itself.

ClickStats
    Mapping of display name -> click count. On the way in (save_stats) the
    counts are deltas observed since the last flush; on the way out
    (load_stats) they are running totals.

Timestamps are `datetime` objects in memory and integer epoch seconds at
every storage boundary. Conversion happens only through `to_epoch` /
`from_epoch`, which never go through floats.
"""

import calendar
import dataclasses
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, Mapping

from .exceptions import ValidationError
from .keys import normalize

ClickStats = Dict[str, int]


def to_epoch(dt: datetime) -> int:
    """Convert a datetime to integer epoch seconds. Naive values are taken as UTC."""
    return calendar.timegm(dt.utctimetuple())


def from_epoch(seconds: int) -> datetime:
    """Convert integer epoch seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(int(seconds), tz=timezone.utc)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


@dataclass
class Link:
    """A short link record.

    Attributes:
        short (str): Display name as typed by the owner, e.g. "Team-Docs".
        long (str): Destination address.
        created (datetime): Creation time.
        last_edit (datetime): Time of the last change.
        owner (str): Login of the owner; empty when unknown.
    """

    short: str
    long: str
    created: datetime
    last_edit: datetime
    owner: str = ""

    @property
    def key(self) -> str:
        """Normalized storage key for this link."""
        return normalize(self.short)

    @classmethod
    def new(cls, short: str, long: str, owner: str = "") -> "Link":
        """Build a link stamped with the current UTC second."""
        now = _utc_now()
        return cls(short=short, long=long, created=now, last_edit=now, owner=owner)

    def copy(self) -> "Link":
        return dataclasses.replace(self)


def merge_deltas(stats: Mapping[str, int]) -> Dict[str, int]:
    """
    Validate click deltas and fold them onto normalized keys.

    Display names that normalize to the same key are summed, so
    {"Go-Link": 1, "golink": 2} becomes {"golink": 3} on every backend.

    Raises:
        ValidationError: if a delta is not a non-negative integer. Nothing is
            written in that case.
    """
    merged: Dict[str, int] = {}
    for short, clicks in stats.items():
        if isinstance(clicks, bool) or not isinstance(clicks, int) or clicks < 0:
            raise ValidationError(f"click delta for {short!r} must be a non-negative int, got {clicks!r}")
        key = normalize(short)
        merged[key] = merged.get(key, 0) + clicks
    return merged


def attribute_totals(links: Iterable[Link], totals: Mapping[str, int]) -> ClickStats:
    """
    Map per-key click totals back onto the current display names.

    Totals whose key has no live link are dropped; they are never reported
    as errors.
    """
    names = {link.key: link.short for link in links}
    return {names[key]: clicks for key, clicks in totals.items() if key in names}
