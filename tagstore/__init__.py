"""tagstore - resource-oriented data access for stored NFC tag data.

Callers address NDEF messages, records and tags by path (``ndef_msgs/7``);
the provider routes each call to a SQLite statement, runs writes in a
transaction and sends one change notification per completed write.

Environment Variables:
    TAGSTORE_DB_PATH: SQLite database file (default "data/tagstore.db").
    TAGSTORE_AUTHORITY: Authority of canonical addresses (default "tagstore").
    TAGSTORE_LOG_LEVEL: Logging level (default "INFO").
"""

from .core import (
    BatchOperation,
    InvalidColumn,
    NdefMessages,
    NdefRecords,
    NdefTags,
    Predicate,
    ResourceAddress,
    ResourceKind,
    TagStoreError,
    TransactionAborted,
    UnrecognizedAddress,
    UnsupportedOperation,
    WriteResult,
)
from .provider import (
    ChangeBus,
    ResultCursor,
    TagProvider,
)
from .storage import init_db

__version__ = "0.1.0"

__all__ = [
    # Call surface
    "TagProvider",
    "ResultCursor",
    "ChangeBus",
    "init_db",
    # Contract
    "NdefMessages",
    "NdefRecords",
    "NdefTags",
    "ResourceKind",
    # Values
    "ResourceAddress",
    "Predicate",
    "WriteResult",
    "BatchOperation",
    # Errors
    "TagStoreError",
    "UnrecognizedAddress",
    "UnsupportedOperation",
    "InvalidColumn",
    "TransactionAborted",
]
