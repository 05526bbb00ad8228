"""
Tests for change notification.
"""

import logging

import pytest

from tagstore.provider.notifier import ChangeBus, ChangeNotifier

ADDRESS = "content://tagstore"


class FailingSink:
    def notify(self, address: str) -> None:
        raise RuntimeError("bus down")


class TestChangeNotifier:
    """Test notification delivery and coalescing."""

    def test_notify_sends_canonical_address(self, sink):
        ChangeNotifier(ADDRESS, sink).notify_changed()
        assert sink.addresses == [ADDRESS]

    def test_sink_failure_is_not_propagated(self, caplog):
        notifier = ChangeNotifier(ADDRESS, FailingSink())

        with caplog.at_level(logging.WARNING, logger="tagstore.provider.notifier"):
            notifier.notify_changed()

        assert "not delivered" in caplog.text

    def test_deferred_coalesces_to_one(self, sink):
        notifier = ChangeNotifier(ADDRESS, sink)

        with notifier.deferred():
            notifier.notify_changed()
            notifier.notify_changed()
            notifier.notify_changed()
            assert sink.addresses == []

        assert sink.addresses == [ADDRESS]

    def test_deferred_without_changes_sends_nothing(self, sink):
        notifier = ChangeNotifier(ADDRESS, sink)

        with notifier.deferred():
            pass

        assert sink.addresses == []

    def test_deferred_error_discards_pending(self, sink):
        notifier = ChangeNotifier(ADDRESS, sink)

        with pytest.raises(RuntimeError):
            with notifier.deferred():
                notifier.notify_changed()
                raise RuntimeError("boom")

        assert sink.addresses == []

        # A later write is not affected by the discarded one
        notifier.notify_changed()
        assert sink.addresses == [ADDRESS]

    def test_nested_deferred_fires_once_at_outermost(self, sink):
        notifier = ChangeNotifier(ADDRESS, sink)

        with notifier.deferred():
            with notifier.deferred():
                notifier.notify_changed()
            assert sink.addresses == []

        assert sink.addresses == [ADDRESS]


class TestChangeBus:
    """Test the in-process change bus."""

    def test_subscriber_on_same_address(self):
        bus = ChangeBus()
        received = []
        bus.subscribe(ADDRESS, received.append)

        bus.notify(ADDRESS)

        assert received == [ADDRESS]

    def test_item_subscriber_hears_collection_change(self):
        bus = ChangeBus()
        received = []
        bus.subscribe(f"{ADDRESS}/ndef_msgs/3", received.append)

        bus.notify(ADDRESS)

        assert received == [ADDRESS]

    def test_unrelated_subscriber_not_called(self):
        bus = ChangeBus()
        received = []
        bus.subscribe("content://other", received.append)
        bus.subscribe("content://tagstore-backup", received.append)

        bus.notify(ADDRESS)

        assert received == []

    def test_unsubscribe(self):
        bus = ChangeBus()
        received = []
        unsubscribe = bus.subscribe(ADDRESS, received.append)

        unsubscribe()
        bus.notify(ADDRESS)

        assert received == []
