"""
Wire models for the remote query/mutation service.

Request body (both endpoints):

    {"path": "load:loadOne", "args": {"normalizedId": "docs", "token": "..."}, "format": "json"}

Response envelope:

    {"status": "success", "value": <payload>}
    {"status": "error", "errorMessage": "<text>"}

Link documents carry timestamps as numeric epoch seconds. Responses are
decoded with `parse_float=Decimal`, so the timestamp validators below see the
exact number that was sent and truncate it to an int exactly once.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from ..models import Link, from_epoch, to_epoch


class UdfExecution(BaseModel):
    """Request body naming the remote function and its arguments."""

    path: str
    args: Dict[str, Any] = Field(default_factory=dict)
    format: str = "json"


class RpcResponse(BaseModel):
    """Response envelope returned by both endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    value: Any = None
    error_message: Optional[str] = Field(default="", alias="errorMessage")

    @field_validator("error_message", mode="after")
    @classmethod
    def _blank_message(cls, value: Optional[str]) -> str:
        return value or ""


class LinkDocument(BaseModel):
    """A link as stored by the remote service."""

    model_config = ConfigDict(populate_by_name=True)

    normalized_id: str = Field(alias="normalizedId")
    short: str
    long: str
    created: int
    last_edit: int = Field(alias="lastEdit")
    owner: str = ""

    @field_validator("created", "last_edit", mode="before")
    @classmethod
    def _truncate_seconds(cls, value: Any) -> Any:
        # Decimal keeps every digit the server sent; int() truncates toward zero.
        if isinstance(value, Decimal):
            return int(value)
        return value

    @field_validator("created", "last_edit", mode="after")
    @classmethod
    def _representable(cls, value: int) -> int:
        # A timestamp no datetime can hold (e.g. milliseconds) is a malformed document.
        try:
            from_epoch(value)
        except (ValueError, OverflowError, OSError) as exc:
            raise ValueError(f"epoch seconds out of range: {value}") from exc
        return value

    @classmethod
    def from_link(cls, link: Link) -> "LinkDocument":
        return cls(
            normalized_id=link.key,
            short=link.short,
            long=link.long,
            created=to_epoch(link.created),
            last_edit=to_epoch(link.last_edit),
            owner=link.owner,
        )

    def to_link(self) -> Link:
        return Link(
            short=self.short,
            long=self.long,
            created=from_epoch(self.created),
            last_edit=from_epoch(self.last_edit),
            owner=self.owner,
        )


LinkDocumentList = TypeAdapter(List[LinkDocument])
StatsTotals = TypeAdapter(Dict[str, Decimal])
