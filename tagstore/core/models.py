"""
Value types passed between the router, composer and dispatcher.

Uses dataclasses for the transient per-request values and a Pydantic model
for batch operations, which arrive from callers as plain data.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tagstore.core.contract import CONTENT_SCHEME

_SCHEME_PREFIX = f"{CONTENT_SCHEME}://"
_ID_SEGMENT = re.compile(r"[0-9]+")


def is_id_segment(segment: str) -> bool:
    """True if the segment is a non-negative decimal integer."""
    return _ID_SEGMENT.fullmatch(segment) is not None


# =============================================================================
# Resource Address
# =============================================================================


@dataclass(frozen=True)
class ResourceAddress:
    """Structured identifier of a collection or of one item in it."""

    segments: tuple[str, ...]
    authority: str | None = None

    @classmethod
    def parse(cls, address: str | ResourceAddress) -> ResourceAddress:
        """Parse ``ndef_msgs/5`` or ``content://authority/ndef_msgs/5``."""
        if isinstance(address, ResourceAddress):
            return address

        authority = None
        path = address.strip()
        if path.startswith(_SCHEME_PREFIX):
            authority, _, path = path[len(_SCHEME_PREFIX):].partition("/")

        segments = tuple(segment for segment in path.split("/") if segment)
        return cls(segments=segments, authority=authority)

    @property
    def item_id(self) -> int | None:
        """The trailing item id, or None for a collection-level address."""
        if self.segments and is_id_segment(self.segments[-1]):
            return int(self.segments[-1])
        return None

    def with_appended_id(self, item_id: int) -> ResourceAddress:
        return ResourceAddress(self.segments + (str(item_id),), self.authority)

    def __str__(self) -> str:
        path = "/".join(self.segments)
        if self.authority is None:
            return path
        return f"{_SCHEME_PREFIX}{self.authority}/{path}"


# =============================================================================
# Predicate
# =============================================================================


@dataclass(frozen=True)
class Predicate:
    """A WHERE expression with ``?`` placeholders and its positional args."""

    where: str = ""
    args: tuple[Any, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, where: str | None = None, args: Sequence[Any] | None = None) -> Predicate:
        """Build from caller input, normalizing None to empty."""
        return cls(where=where or "", args=tuple(args or ()))

    @property
    def is_empty(self) -> bool:
        return not self.where


# =============================================================================
# Write Results
# =============================================================================


@dataclass(frozen=True)
class WriteResult:
    """Outcome of one write inside a batch.

    Inserts carry the new item address (None when no row was inserted);
    updates and deletes carry the affected-row count.
    """

    address: ResourceAddress | None = None
    count: int | None = None

    @property
    def item_id(self) -> int | None:
        return self.address.item_id if self.address is not None else None


class BatchOperation(BaseModel):
    """One write in a batch submitted to ``TagProvider.apply_batch``."""

    model_config = ConfigDict(extra="forbid")

    op: Literal["insert", "update", "delete"]
    address: str
    values: dict[str, Any] = Field(default_factory=dict)
    selection: str | None = None
    selection_args: list[str] = Field(default_factory=list)

    @field_validator("selection_args", mode="before")
    @classmethod
    def stringify_args(cls, v):
        """Selection arguments are bound as text."""
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return [str(arg) for arg in v]
        return v

    @classmethod
    def new_insert(cls, address: str, values: dict[str, Any]) -> BatchOperation:
        return cls(op="insert", address=str(address), values=values)

    @classmethod
    def new_update(
        cls,
        address: str,
        values: dict[str, Any],
        selection: str | None = None,
        selection_args: list[str] | None = None,
    ) -> BatchOperation:
        return cls(
            op="update",
            address=str(address),
            values=values,
            selection=selection,
            selection_args=selection_args or [],
        )

    @classmethod
    def new_delete(
        cls,
        address: str,
        selection: str | None = None,
        selection_args: list[str] | None = None,
    ) -> BatchOperation:
        return cls(
            op="delete",
            address=str(address),
            selection=selection,
            selection_args=selection_args or [],
        )

    @property
    def predicate(self) -> Predicate:
        return Predicate.of(self.selection, self.selection_args)
