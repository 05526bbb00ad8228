"""Pytest fixtures for test suite."""

import tempfile
from pathlib import Path

import pytest

from tagstore.provider import TagProvider
from tagstore.storage import ConnectionProvider, init_db, reset_engine, set_db_path


class RecordingSink:
    """Notification sink that remembers every address it was sent."""

    def __init__(self):
        self.addresses: list[str] = []

    def notify(self, address: str) -> None:
        self.addresses.append(address)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def temp_database():
    """Use a temporary database for each test."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        temp_path = Path(f.name)

    set_db_path(temp_path)
    init_db()
    yield temp_path

    # Cleanup
    reset_engine()
    for path in (temp_path, Path(f"{temp_path}-wal"), Path(f"{temp_path}-shm")):
        try:
            path.unlink()
        except OSError:
            pass


# =============================================================================
# Provider Fixtures
# =============================================================================


@pytest.fixture
def sink() -> RecordingSink:
    """Sink capturing change notifications."""
    return RecordingSink()


@pytest.fixture
def provider(sink: RecordingSink) -> TagProvider:
    """Provider over the temporary database."""
    return TagProvider(connections=ConnectionProvider(), sink=sink, authority="tagstore")


@pytest.fixture
def sample_message() -> dict:
    """Values for one stored NDEF message."""
    return {
        "title": "t",
        "bytes": b"\xd1\x01\x0cU\x03example.com",
        "date": 100,
        "starred": False,
    }
