"""
Address routing.

Classifies an address into a ResourceKind plus the item id it is scoped to.
Rules are checked in registration order and the first match wins. In a
pattern, ``#`` matches a non-negative integer segment (which becomes the
item id) and ``*`` matches any single segment.
"""

from __future__ import annotations

from dataclasses import dataclass

from tagstore.core.contract import NdefMessages, NdefRecords, NdefTags, ResourceKind
from tagstore.core.errors import UnrecognizedAddress
from tagstore.core.models import ResourceAddress, is_id_segment


@dataclass(frozen=True)
class RouteMatch:
    """Result of classifying an address."""

    kind: ResourceKind
    item_id: int | None = None


@dataclass(frozen=True)
class RouteRule:
    """One pattern and the kind it classifies to."""

    pattern: tuple[str, ...]
    kind: ResourceKind

    def match(self, address: ResourceAddress) -> RouteMatch | None:
        if len(address.segments) != len(self.pattern):
            return None

        item_id = None
        for expected, segment in zip(self.pattern, address.segments):
            if expected == "#":
                if not is_id_segment(segment):
                    return None
                item_id = int(segment)
            elif expected != "*" and expected != segment:
                return None
        return RouteMatch(self.kind, item_id)


class AddressRouter:
    """Ordered list of routing rules for one authority."""

    def __init__(self, authority: str):
        self.authority = authority
        self._rules: list[RouteRule] = []

    def add(self, pattern: str, kind: ResourceKind) -> None:
        """Register a pattern such as ``ndef_msgs/#``."""
        segments = tuple(segment for segment in pattern.split("/") if segment)
        self._rules.append(RouteRule(segments, kind))

    @property
    def rules(self) -> tuple[RouteRule, ...]:
        return tuple(self._rules)

    def match(self, address: str | ResourceAddress) -> RouteMatch | None:
        """Classify an address, or return None when no rule matches."""
        address = ResourceAddress.parse(address)
        if address.authority is not None and address.authority != self.authority:
            return None

        for rule in self._rules:
            matched = rule.match(address)
            if matched is not None:
                return matched
        return None

    def classify(self, address: str | ResourceAddress) -> RouteMatch:
        """Classify an address.

        Raises:
            UnrecognizedAddress: no rule matches
        """
        matched = self.match(address)
        if matched is None:
            raise UnrecognizedAddress(address)
        return matched


def default_router(authority: str) -> AddressRouter:
    """Router with the message, record and tag collections registered."""
    router = AddressRouter(authority)

    router.add(NdefMessages.COLLECTION.path, ResourceKind.MESSAGE_COLLECTION)
    router.add(f"{NdefMessages.COLLECTION.path}/#", ResourceKind.MESSAGE_ITEM)

    router.add(NdefRecords.COLLECTION.path, ResourceKind.RECORD_COLLECTION)
    router.add(f"{NdefRecords.COLLECTION.path}/#", ResourceKind.RECORD_ITEM)

    router.add(NdefTags.COLLECTION.path, ResourceKind.TAG_COLLECTION)
    return router
