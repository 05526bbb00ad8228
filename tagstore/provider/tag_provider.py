"""
Inbound call surface for the tag store.

Callers pass addresses such as ``ndef_msgs`` or ``content://tagstore/ndef_msgs/7``;
each call is routed, scoped, dispatched and (for writes) announced with a
single change notification.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from tagstore.config import get_settings
from tagstore.core.contract import ResourceKind, authority_address
from tagstore.core.models import BatchOperation, Predicate, ResourceAddress, WriteResult
from tagstore.provider.dispatcher import CrudDispatcher, ResultCursor
from tagstore.provider.notifier import ChangeNotifier, NotificationSink
from tagstore.provider.projection import ProjectionMap, default_projections
from tagstore.provider.router import AddressRouter, RouteMatch, default_router
from tagstore.storage.database import ConnectionProvider
from tagstore.storage.transaction import TransactionManager

logger = logging.getLogger(__name__)


class TagProvider:
    """Resource-oriented access to stored NDEF messages, records and tags."""

    def __init__(
        self,
        connections: ConnectionProvider | None = None,
        sink: NotificationSink | None = None,
        authority: str | None = None,
        projections: Mapping[ResourceKind, ProjectionMap] | None = None,
    ):
        self.authority = authority or get_settings().authority
        self.router: AddressRouter = default_router(self.authority)
        self.notifier = ChangeNotifier(authority_address(self.authority), sink)

        self._connections = connections or ConnectionProvider()
        self._transactions = TransactionManager(self._connections)
        self._dispatcher = CrudDispatcher(
            self._connections,
            self._transactions,
            self.notifier,
            projections if projections is not None else default_projections(),
        )

    # =========================================================================
    # Single-call operations
    # =========================================================================

    def query(
        self,
        address: str | ResourceAddress,
        projection: Sequence[str] | None = None,
        selection: str | None = None,
        selection_args: Sequence[str] | None = None,
        sort_order: str | None = None,
    ) -> ResultCursor:
        """Query a message collection or a single message.

        Args:
            address: Collection or item address
            projection: Fields to return; None returns every field
            selection: WHERE expression with ``?`` placeholders
            selection_args: Values for the placeholders, in order
            sort_order: ORDER BY expression

        Returns:
            A lazily streamed ResultCursor (possibly empty)
        """
        match = self.router.classify(address)
        return self._dispatcher.read(
            match.kind,
            match.item_id,
            projection,
            Predicate.of(selection, selection_args),
            sort_order,
        )

    def insert(
        self,
        address: str | ResourceAddress,
        values: Mapping[str, Any] | None,
    ) -> ResourceAddress | None:
        """Insert a row into a collection.

        Returns:
            The new item's address, or None when storage inserted no row
        """
        address = ResourceAddress.parse(address)
        match = self.router.classify(address)
        item_id = self._dispatcher.create(match.kind, values or {})
        if item_id is None:
            return None
        return address.with_appended_id(item_id)

    def update(
        self,
        address: str | ResourceAddress,
        values: Mapping[str, Any],
        selection: str | None = None,
        selection_args: Sequence[str] | None = None,
    ) -> int:
        """Update matching messages; returns the affected-row count."""
        match = self.router.classify(address)
        return self._dispatcher.update(
            match.kind, match.item_id, values, Predicate.of(selection, selection_args)
        )

    def delete(
        self,
        address: str | ResourceAddress,
        selection: str | None = None,
        selection_args: Sequence[str] | None = None,
    ) -> int:
        """Delete matching messages; returns the affected-row count."""
        match = self.router.classify(address)
        return self._dispatcher.delete(
            match.kind, match.item_id, Predicate.of(selection, selection_args)
        )

    def resource_type(self, address: str | ResourceAddress) -> str | None:
        """MIME type tag of the addressed resource, or None if unrecognized."""
        match = self.router.match(address)
        if match is None:
            return None
        return match.kind.mime_type

    # =========================================================================
    # Batches
    # =========================================================================

    def bulk_insert(
        self,
        address: str | ResourceAddress,
        values_list: Iterable[Mapping[str, Any]],
    ) -> int:
        """Insert many rows in one transaction with one notification.

        Returns:
            Number of rows actually inserted
        """
        match = self.router.classify(address)
        CrudDispatcher.check("insert", match.kind)

        inserted = 0
        with self.notifier.deferred(), self._transactions.write():
            for values in values_list:
                if self._dispatcher.create(match.kind, values) is not None:
                    inserted += 1
        return inserted

    def apply_batch(
        self,
        operations: Sequence[BatchOperation | Mapping[str, Any]],
    ) -> list[WriteResult]:
        """Apply several writes atomically.

        Every operation is routed and checked before the transaction opens,
        so an unrecognized address or unsupported operation fails the batch
        with nothing started. All writes then share one transaction and the
        batch produces one change notification.

        Returns:
            One WriteResult per operation, in order

        Raises:
            UnrecognizedAddress: an operation's address matches no route
            UnsupportedOperation: an operation is not valid for its address
            TransactionAborted: a write failed; no operation was applied
        """
        plan: list[tuple[BatchOperation, ResourceAddress, RouteMatch]] = []
        for operation in operations:
            if not isinstance(operation, BatchOperation):
                operation = BatchOperation.model_validate(operation)
            address = ResourceAddress.parse(operation.address)
            match = self.router.classify(address)
            CrudDispatcher.check(operation.op, match.kind)
            plan.append((operation, address, match))

        logger.debug("Applying batch of %d operations", len(plan))
        with self.notifier.deferred(), self._transactions.write():
            return [self._apply(operation, address, match) for operation, address, match in plan]

    def _apply(
        self,
        operation: BatchOperation,
        address: ResourceAddress,
        match: RouteMatch,
    ) -> WriteResult:
        if operation.op == "insert":
            item_id = self._dispatcher.create(match.kind, operation.values)
            if item_id is None:
                return WriteResult()
            return WriteResult(address=address.with_appended_id(item_id))

        if operation.op == "update":
            count = self._dispatcher.update(
                match.kind, match.item_id, operation.values, operation.predicate
            )
        else:
            count = self._dispatcher.delete(match.kind, match.item_id, operation.predicate)
        return WriteResult(count=count)
