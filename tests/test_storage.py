"""
Tests for the key-value storage backends.

The JSON file backend only ever touches pytest's tmp_path.
"""

import json

import pytest

from finance_tracker.services.storage import (
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    KeyValueStorageInterface,
    StorageReadError,
)


class TestInMemoryStorage:
    """Tests for InMemoryKeyValueStorage."""

    def test_is_a_storage_backend(self):
        assert isinstance(InMemoryKeyValueStorage(), KeyValueStorageInterface)

    def test_get_missing(self):
        assert InMemoryKeyValueStorage().get("transactions") is None

    def test_set_get_remove(self):
        storage = InMemoryKeyValueStorage()
        storage.set("transactions", "[]")
        assert storage.get("transactions") == "[]"
        assert storage.keys() == ["transactions"]

        storage.remove("transactions")
        storage.remove("transactions")
        assert storage.get("transactions") is None

    def test_initial_data_is_copied(self):
        initial = {"a": "1"}
        storage = InMemoryKeyValueStorage(initial)
        storage.set("b", "2")
        assert initial == {"a": "1"}


class TestJsonFileStorage:
    """Tests for JsonFileKeyValueStorage."""

    @pytest.fixture
    def path(self, tmp_path):
        return tmp_path / "data" / "storage.json"

    def test_missing_file_reads_empty(self, path):
        storage = JsonFileKeyValueStorage(path)
        assert storage.get("transactions") is None
        assert storage.keys() == []

    def test_set_creates_parent_directories(self, path):
        JsonFileKeyValueStorage(path).set("transactions", "[]")
        assert path.exists()

    def test_values_survive_a_new_instance(self, path):
        JsonFileKeyValueStorage(path).set("transactions", '[{"id": 1}]')
        assert JsonFileKeyValueStorage(path).get("transactions") == '[{"id": 1}]'

    def test_file_layout_is_an_object_of_strings(self, path):
        storage = JsonFileKeyValueStorage(path)
        storage.set("transactions", "[]")
        storage.set("theme", "dark")
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "transactions": "[]",
            "theme": "dark",
        }

    def test_set_keeps_other_slots(self, path):
        storage = JsonFileKeyValueStorage(path)
        storage.set("a", "1")
        storage.set("b", "2")
        storage.set("a", "3")
        assert storage.get("a") == "3"
        assert storage.get("b") == "2"

    def test_no_temp_file_left_behind(self, path):
        JsonFileKeyValueStorage(path).set("transactions", "[]")
        assert [p.name for p in path.parent.iterdir()] == ["storage.json"]

    def test_corrupt_file_reads_empty_and_is_replaced(self, path):
        path.parent.mkdir(parents=True)
        path.write_text("{truncated", encoding="utf-8")
        storage = JsonFileKeyValueStorage(path)

        assert storage.get("transactions") is None

        storage.set("transactions", "[]")
        assert json.loads(path.read_text(encoding="utf-8")) == {"transactions": "[]"}

    def test_non_object_file_reads_empty(self, path):
        path.parent.mkdir(parents=True)
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert JsonFileKeyValueStorage(path).get("transactions") is None

    def test_non_string_values_are_ignored(self, path):
        path.parent.mkdir(parents=True)
        path.write_text('{"transactions": [], "theme": "dark"}', encoding="utf-8")
        storage = JsonFileKeyValueStorage(path)
        assert storage.get("transactions") is None
        assert storage.get("theme") == "dark"

    def test_undecodable_file_reads_empty_and_is_replaced(self, path):
        path.parent.mkdir(parents=True)
        path.write_bytes(b'{"transactions": "\xff\xfe"}')
        storage = JsonFileKeyValueStorage(path)

        assert storage.get("transactions") is None

        storage.set("transactions", "[]")
        assert json.loads(path.read_text(encoding="utf-8")) == {"transactions": "[]"}

    def test_remove(self, path):
        storage = JsonFileKeyValueStorage(path)
        storage.set("transactions", "[]")
        storage.remove("transactions")
        storage.remove("never-set")
        assert storage.keys() == []

    def test_unreadable_path_raises(self, tmp_path):
        storage = JsonFileKeyValueStorage(tmp_path)
        with pytest.raises(StorageReadError):
            storage.get("transactions")
