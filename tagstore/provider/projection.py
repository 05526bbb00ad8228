"""
Projection maps: which fields a caller may select or order by.

Built once at startup and passed to the dispatcher; never mutated after.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Iterator

from tagstore.core.contract import NdefMessages, ResourceKind


class ProjectionMap(Mapping):
    """Read-only mapping of caller-visible field name to storage column."""

    def __init__(self, columns: Mapping[str, str]):
        self._columns = MappingProxyType(dict(columns))

    @classmethod
    def identity(cls, *names: str) -> ProjectionMap:
        """Map each name to the column of the same name."""
        return cls({name: name for name in names})

    def __getitem__(self, name: str) -> str:
        return self._columns[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __repr__(self) -> str:
        return f"ProjectionMap({dict(self._columns)!r})"


def default_projections() -> Mapping[ResourceKind, ProjectionMap]:
    """Projection maps for every readable resource kind."""
    messages = ProjectionMap.identity(
        NdefMessages.ID,
        NdefMessages.TITLE,
        NdefMessages.BYTES,
        NdefMessages.DATE,
        NdefMessages.STARRED,
    )
    return MappingProxyType({
        ResourceKind.MESSAGE_COLLECTION: messages,
        ResourceKind.MESSAGE_ITEM: messages,
    })
