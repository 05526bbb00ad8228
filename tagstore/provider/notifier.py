"""
Change notification.

Writes announce "the collection changed" to one canonical address, never to
the individual item. Delivery is best effort: a failing sink is logged and
the write that triggered it still succeeds.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Protocol

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Anything that accepts change notifications."""

    def notify(self, address: str) -> None: ...


class LoggingSink:
    """Sink that only logs."""

    def notify(self, address: str) -> None:
        logger.info("Change notification for %s", address)


def _related(observed: str, changed: str) -> bool:
    """True if one address is the other or an ancestor of it."""
    if observed == changed:
        return True
    return changed.startswith(observed.rstrip("/") + "/") or observed.startswith(
        changed.rstrip("/") + "/"
    )


class ChangeBus:
    """In-process sink that fans notifications out to subscribers.

    A subscriber receives notifications for its address and for any address
    above or below it in the path hierarchy.
    """

    def __init__(self):
        self._observers: list[tuple[str, Callable[[str], None]]] = []
        self._lock = threading.Lock()

    def subscribe(self, address: str, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register a callback; returns a function that unsubscribes it."""
        entry = (str(address), callback)
        with self._lock:
            self._observers.append(entry)

        def unsubscribe() -> None:
            with self._lock:
                if entry in self._observers:
                    self._observers.remove(entry)

        return unsubscribe

    def notify(self, address: str) -> None:
        with self._lock:
            observers = list(self._observers)
        for observed, callback in observers:
            if _related(observed, address):
                callback(address)


class ChangeNotifier:
    """Sends one notification per completed write to the canonical address."""

    def __init__(self, address: str, sink: NotificationSink | None = None):
        self.address = address
        self._sink = sink if sink is not None else LoggingSink()
        self._local = threading.local()

    def notify_changed(self) -> None:
        """Announce a completed write, or mark one pending inside ``deferred()``."""
        if getattr(self._local, "depth", 0) > 0:
            self._local.pending = True
            return
        self._send()

    @contextmanager
    def deferred(self) -> Iterator[None]:
        """Coalesce notifications raised inside the block into one.

        The single notification fires when the outermost block exits
        cleanly; an error discards it.
        """
        depth = getattr(self._local, "depth", 0)
        if depth == 0:
            self._local.pending = False
        self._local.depth = depth + 1
        try:
            yield
        finally:
            self._local.depth = depth

        if depth == 0 and self._local.pending:
            self._local.pending = False
            self._send()

    def _send(self) -> None:
        try:
            self._sink.notify(self.address)
        except Exception:
            logger.warning("Change notification for %s not delivered", self.address, exc_info=True)
