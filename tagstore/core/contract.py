"""
Resource contract: collections, their backing tables, columns and types.

Callers address data through collection paths (``ndef_msgs``,
``ndef_msgs/5``). This module is the single place that ties those paths to
storage tables and MIME type tags.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

CONTENT_SCHEME = "content"

DIR_TYPE_PREFIX = "vnd.tagstore.dir/"
ITEM_TYPE_PREFIX = "vnd.tagstore.item/"

ID = "_id"


@dataclass(frozen=True)
class Collection:
    """A logical collection and the table that backs it."""

    path: str
    table: str
    subtype: str
    # Column written as NULL when an insert carries no values
    null_column: str | None = None

    @property
    def content_type(self) -> str:
        return DIR_TYPE_PREFIX + self.subtype

    @property
    def content_item_type(self) -> str:
        return ITEM_TYPE_PREFIX + self.subtype


# =============================================================================
# NDEF messages
# =============================================================================


class NdefMessages:
    """Columns of the message collection."""

    ID = ID
    TITLE = "title"
    BYTES = "bytes"
    DATE = "date"
    STARRED = "starred"

    COLLECTION = Collection(
        path="ndef_msgs",
        table="ndef_msgs",
        subtype="ndef_msg",
        null_column=TITLE,
    )


# =============================================================================
# NDEF records
# =============================================================================


class NdefRecords:
    """Columns of the record collection."""

    ID = ID
    MESSAGE_ID = "message_id"
    TNF = "tnf"
    TYPE = "type"
    PAYLOAD = "payload"
    POSITION = "position"

    COLLECTION = Collection(path="ndef_records", table="ndef_records", subtype="ndef_record")


# =============================================================================
# NDEF tags
# =============================================================================


class NdefTags:
    """Columns of the tag collection."""

    ID = ID
    TAG_ID = "tag_id"
    MESSAGE_ID = "message_id"
    DATE = "date"

    COLLECTION = Collection(path="ndef_tags", table="ndef_tags", subtype="ndef_tag")


class ResourceKind(str, Enum):
    """Closed set of resource kinds an address can classify to."""

    MESSAGE_COLLECTION = "message_collection"
    MESSAGE_ITEM = "message_item"
    RECORD_COLLECTION = "record_collection"
    RECORD_ITEM = "record_item"
    TAG_COLLECTION = "tag_collection"

    @property
    def collection(self) -> Collection:
        return _KIND_COLLECTIONS[self]

    @property
    def is_item(self) -> bool:
        return self in (ResourceKind.MESSAGE_ITEM, ResourceKind.RECORD_ITEM)

    @property
    def mime_type(self) -> str:
        if self.is_item:
            return self.collection.content_item_type
        return self.collection.content_type


_KIND_COLLECTIONS = {
    ResourceKind.MESSAGE_COLLECTION: NdefMessages.COLLECTION,
    ResourceKind.MESSAGE_ITEM: NdefMessages.COLLECTION,
    ResourceKind.RECORD_COLLECTION: NdefRecords.COLLECTION,
    ResourceKind.RECORD_ITEM: NdefRecords.COLLECTION,
    ResourceKind.TAG_COLLECTION: NdefTags.COLLECTION,
}


def authority_address(authority: str) -> str:
    """Canonical address that change notifications are sent to."""
    return f"{CONTENT_SCHEME}://{authority}"
