"""Tests for storage backends."""

from uuid import uuid4

import pytest

from pocketbalance.models.audit import AuditEvent, AuditEventType
from pocketbalance.services.storage import (
    InMemoryAuditStorage,
    InMemoryStorage,
    KeyValueStorageInterface,
    LocalFileStorage,
    StorageReadError,
)


class TestLocalFileStorage:
    """Tests for the JSON file backend."""

    def test_missing_key_returns_none(self, tmp_path):
        """Test reading a key that was never written."""
        storage = LocalFileStorage(tmp_path)
        assert storage.get_item("pocketbalance-transactions") is None

    def test_set_then_get(self, tmp_path):
        """Test that written values are read back unchanged."""
        storage = LocalFileStorage(tmp_path / "nested" / "dir")
        storage.set_item("pocketbalance-transactions", '[{"id": "1"}]')

        assert storage.get_item("pocketbalance-transactions") == '[{"id": "1"}]'
        assert (tmp_path / "nested" / "dir" / "pocketbalance-transactions.json").exists()

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        """Test that replacing a value leaves only the target file."""
        storage = LocalFileStorage(tmp_path)
        storage.set_item("key", "one")
        storage.set_item("key", "two")

        assert storage.get_item("key") == "two"
        assert [p.name for p in tmp_path.iterdir()] == ["key.json"]

    @pytest.mark.parametrize("key", ["../escape", "a/b", "", "with space"])
    def test_rejects_unsafe_keys(self, tmp_path, key):
        """Test that keys cannot point outside the data directory."""
        storage = LocalFileStorage(tmp_path)
        with pytest.raises(ValueError):
            storage.get_item(key)

    def test_undecodable_file_raises_read_error(self, tmp_path):
        """Test that a non-UTF-8 file surfaces as StorageReadError."""
        (tmp_path / "key.json").write_bytes(b"\xff\xfe\xfa")
        storage = LocalFileStorage(tmp_path)
        with pytest.raises(StorageReadError):
            storage.get_item("key")


class TestInMemoryStorage:
    """Tests for the in-memory backend."""

    def test_initial_values(self):
        storage = InMemoryStorage({"key": "value"})
        assert storage.get_item("key") == "value"
        assert storage.get_item("missing") is None


class TestKeyValueStorageInterface:
    """Tests for the backend contract."""

    def test_get_and_set_are_the_whole_contract(self):
        """Test that a backend only needs get_item and set_item."""
        assert KeyValueStorageInterface.__abstractmethods__ == {"get_item", "set_item"}


class TestInMemoryAuditStorage:
    """Tests for the bounded audit sink."""

    def _event(self, correlation_id=None):
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Added",
            correlation_id=correlation_id,
        )

    def test_recent_events_newest_first(self):
        """Test ordering and limit of recent events."""
        sink = InMemoryAuditStorage()
        events = [self._event() for _ in range(3)]
        for event in events:
            sink.append_event(event)

        assert sink.get_recent_events(limit=2) == [events[2], events[1]]

    def test_drops_oldest_when_full(self):
        """Test that the sink keeps at most max_events."""
        sink = InMemoryAuditStorage(max_events=2)
        events = [self._event() for _ in range(3)]
        for event in events:
            sink.append_event(event)

        assert sink.get_recent_events() == [events[2], events[1]]

    def test_events_by_correlation_id(self):
        """Test filtering by correlation id."""
        sink = InMemoryAuditStorage()
        correlation_id = uuid4()
        related = self._event(correlation_id)
        sink.append_event(related)
        sink.append_event(self._event())

        assert sink.get_events_by_correlation_id(correlation_id) == [related]
