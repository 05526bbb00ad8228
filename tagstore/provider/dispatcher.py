"""
CRUD dispatch.

Turns a classified request (kind, item id) into a statement and runs it:
reads on a readable connection, writes inside a write transaction followed
by exactly one change notification.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from typing import Any, Callable, Iterator, Mapping, Sequence

from sqlalchemy.engine import Connection, CursorResult
from sqlalchemy.exc import IntegrityError

from tagstore.core.contract import ID, ResourceKind
from tagstore.core.errors import UnsupportedOperation
from tagstore.core.models import Predicate
from tagstore.provider.notifier import ChangeNotifier
from tagstore.provider.projection import ProjectionMap
from tagstore.provider.selection import merge
from tagstore.storage.database import ConnectionProvider
from tagstore.storage.query_builder import (
    build_delete,
    build_insert,
    build_select,
    build_update,
    project_columns,
)
from tagstore.storage.transaction import TransactionManager

logger = logging.getLogger(__name__)

SCOPE_WHERE = f"{ID}=?"

_MESSAGE_KINDS = frozenset({ResourceKind.MESSAGE_COLLECTION, ResourceKind.MESSAGE_ITEM})

SUPPORTED_KINDS: dict[str, frozenset[ResourceKind]] = {
    "query": _MESSAGE_KINDS,
    "insert": frozenset({
        ResourceKind.MESSAGE_COLLECTION,
        ResourceKind.RECORD_COLLECTION,
        ResourceKind.TAG_COLLECTION,
    }),
    "update": _MESSAGE_KINDS,
    "delete": _MESSAGE_KINDS,
}


class ResultCursor:
    """Rows of a query, streamed from the database as they are read.

    Each row is a dict keyed by caller-visible field names. The underlying
    connection is released once the rows are exhausted or the cursor is
    closed.
    """

    def __init__(self, result: CursorResult, release: Callable[[], None]):
        self._result = result
        self._release = release
        self._closed = False
        self.columns = list(result.keys())
        self.notification_address: str | None = None

    def set_notification_address(self, address: str) -> None:
        """Record the address whose change notifications invalidate these rows."""
        self.notification_address = address

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[dict[str, Any]]:
        try:
            while not self._closed:
                row = self._result.fetchone()
                if row is None:
                    break
                yield dict(row._mapping)
        finally:
            self.close()

    def fetchone(self) -> dict[str, Any] | None:
        if self._closed:
            return None
        row = self._result.fetchone()
        if row is None:
            self.close()
            return None
        return dict(row._mapping)

    def fetchall(self) -> list[dict[str, Any]]:
        return list(self)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._result.close()
        finally:
            self._release()

    def __enter__(self) -> ResultCursor:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class CrudDispatcher:
    """Executes read, create, update and delete for classified requests."""

    def __init__(
        self,
        connections: ConnectionProvider,
        transactions: TransactionManager,
        notifier: ChangeNotifier,
        projections: Mapping[ResourceKind, ProjectionMap],
    ):
        self._connections = connections
        self._transactions = transactions
        self._notifier = notifier
        self._projections = projections

    @staticmethod
    def check(operation: str, kind: ResourceKind) -> None:
        """Raise UnsupportedOperation unless ``operation`` is valid for ``kind``."""
        if kind not in SUPPORTED_KINDS[operation]:
            raise UnsupportedOperation(operation, kind.value)

    @staticmethod
    def scope(kind: ResourceKind, item_id: int | None, predicate: Predicate) -> Predicate:
        """Inject the item-id clause ahead of the caller's predicate."""
        if not kind.is_item:
            return predicate
        return merge(Predicate(SCOPE_WHERE, (str(item_id),)), predicate)

    # =========================================================================
    # Read
    # =========================================================================

    def read(
        self,
        kind: ResourceKind,
        item_id: int | None,
        fields: Sequence[str] | None,
        predicate: Predicate,
        sort_order: str | None = None,
    ) -> ResultCursor:
        """Run a SELECT and return a lazily streamed cursor.

        Args:
            kind: Classified resource kind (message kinds only)
            item_id: Item scope for item kinds
            fields: Caller-visible fields to select; None selects all
            predicate: Caller predicate, merged after the item scope
            sort_order: ORDER BY expression, passed through as given

        Returns:
            ResultCursor tagged with the canonical notification address

        Raises:
            UnsupportedOperation: kind is not readable
            InvalidColumn: a field is not in the kind's projection map
        """
        self.check("query", kind)
        predicate = self.scope(kind, item_id, predicate)
        columns = project_columns(self._projections[kind], fields)
        sql, params = build_select(kind.collection.table, columns, predicate, sort_order)

        logger.debug("Query: %s %s", sql, params)
        stack = ExitStack()
        conn = stack.enter_context(self._connections.get_readable())
        try:
            result = conn.exec_driver_sql(sql, params)
        except Exception:
            stack.close()
            raise

        cursor = ResultCursor(result, stack.close)
        cursor.set_notification_address(self._notifier.address)
        return cursor

    # =========================================================================
    # Writes
    # =========================================================================

    def create(self, kind: ResourceKind, values: Mapping[str, Any]) -> int | None:
        """Insert one row; return its id, or None if storage rejected it.

        A constraint violation is not an error here: it is logged and the
        caller gets None. Any other failure aborts the transaction.
        """
        self.check("insert", kind)
        collection = kind.collection
        sql, params = build_insert(collection.table, values, collection.null_column)

        with self._transactions.write() as conn:
            item_id = self._insert(conn, collection.table, sql, params)

        self._notifier.notify_changed()
        return item_id

    def update(
        self,
        kind: ResourceKind,
        item_id: int | None,
        values: Mapping[str, Any],
        predicate: Predicate,
    ) -> int:
        """Update matching rows and return how many changed (0 is fine)."""
        self.check("update", kind)
        predicate = self.scope(kind, item_id, predicate)
        sql, params = build_update(kind.collection.table, values, predicate)

        with self._transactions.write() as conn:
            count = self._execute(conn, sql, params).rowcount

        self._notifier.notify_changed()
        return count

    def delete(self, kind: ResourceKind, item_id: int | None, predicate: Predicate) -> int:
        """Delete matching rows and return how many were removed."""
        self.check("delete", kind)
        predicate = self.scope(kind, item_id, predicate)
        sql, params = build_delete(kind.collection.table, predicate)

        with self._transactions.write() as conn:
            count = self._execute(conn, sql, params).rowcount

        self._notifier.notify_changed()
        return count

    @staticmethod
    def _execute(conn: Connection, sql: str, params: tuple[Any, ...]) -> CursorResult:
        logger.debug("Write: %s %s", sql, params)
        return conn.exec_driver_sql(sql, params)

    def _insert(
        self,
        conn: Connection,
        table: str,
        sql: str,
        params: tuple[Any, ...],
    ) -> int | None:
        try:
            result = self._execute(conn, sql, params)
        except IntegrityError as exc:
            logger.warning("Insert into %s rejected: %s", table, exc.orig)
            return None

        if result.rowcount < 1:
            return None
        return result.lastrowid
