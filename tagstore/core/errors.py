"""Error taxonomy for the data access layer.

Nothing here is retried by the layer. Soft failures (an insert that produced
no row, a write that touched zero rows, an empty query) are return values,
not exceptions.
"""

from __future__ import annotations


class TagStoreError(Exception):
    """Base class for all tagstore errors."""


class UnrecognizedAddress(TagStoreError, ValueError):
    """The address matches none of the registered routes."""

    def __init__(self, address: object):
        super().__init__(f"unknown address {address}")
        self.address = address


class UnsupportedOperation(TagStoreError):
    """The operation is not valid for the classified resource kind."""

    def __init__(self, operation: str, kind: object):
        super().__init__(f"{operation} is not supported for {kind}")
        self.operation = operation
        self.kind = kind


class InvalidColumn(TagStoreError, ValueError):
    """A field or column name was rejected before reaching storage."""

    def __init__(self, name: str, reason: str = "invalid column"):
        super().__init__(f"{reason}: {name}")
        self.name = name


class TransactionAborted(TagStoreError):
    """A write failed and its transaction was rolled back.

    The underlying storage error is kept as ``original`` and as ``__cause__``.
    """

    def __init__(self, original: BaseException):
        super().__init__(f"transaction aborted: {original}")
        self.original = original
