"""
Scoped write transactions.

Every write runs inside ``TransactionManager.write()``: the transaction
begins on entry, commits when the block completes, and rolls back on any
error. A write entered while another is open on the same thread joins the
outer transaction, which is how a batch shares one commit.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Connection

from tagstore.core.errors import TransactionAborted
from tagstore.storage.database import ConnectionProvider

logger = logging.getLogger(__name__)


class TransactionManager:
    """Opens, joins and closes write transactions."""

    def __init__(self, connections: ConnectionProvider):
        self._connections = connections
        self._local = threading.local()

    @property
    def in_transaction(self) -> bool:
        return getattr(self._local, "conn", None) is not None

    @contextmanager
    def write(self) -> Iterator[Connection]:
        """Run the block in a write transaction.

        Raises:
            TransactionAborted: the block or the commit failed; nothing was
                written. The storage error is the exception's cause.
        """
        current = getattr(self._local, "conn", None)
        if current is not None:
            yield current
            return

        with self._connections.get_writable() as conn:
            trans = conn.begin()
            self._local.conn = conn
            try:
                yield conn
                trans.commit()
            except Exception as exc:
                if trans.is_active:
                    trans.rollback()
                logger.warning("Write transaction rolled back: %s", exc)
                raise TransactionAborted(exc) from exc
            finally:
                self._local.conn = None
