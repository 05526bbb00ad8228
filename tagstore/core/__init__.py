"""Core domain - resource contract, value types and errors."""

from tagstore.core.contract import (
    Collection,
    NdefMessages,
    NdefRecords,
    NdefTags,
    ResourceKind,
    authority_address,
)
from tagstore.core.errors import (
    InvalidColumn,
    TagStoreError,
    TransactionAborted,
    UnrecognizedAddress,
    UnsupportedOperation,
)
from tagstore.core.models import (
    BatchOperation,
    Predicate,
    ResourceAddress,
    WriteResult,
)

__all__ = [
    # Contract
    "Collection",
    "NdefMessages",
    "NdefRecords",
    "NdefTags",
    "ResourceKind",
    "authority_address",
    # Errors
    "TagStoreError",
    "UnrecognizedAddress",
    "UnsupportedOperation",
    "InvalidColumn",
    "TransactionAborted",
    # Models
    "ResourceAddress",
    "Predicate",
    "WriteResult",
    "BatchOperation",
]
