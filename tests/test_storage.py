"""Tests for the key-value persistence layer."""

import json
import logging
import os

from barbershop.storage import InMemoryStore, JsonFileStore, StorageKey


class TestInMemoryStore:
    def test_missing_key_returns_default(self):
        assert InMemoryStore().load(StorageKey.APPOINTMENTS, []) == []

    def test_save_then_load(self):
        store = InMemoryStore()
        store.save(StorageKey.ADMIN_MODE, True)
        assert store.load(StorageKey.ADMIN_MODE, False) is True

    def test_values_are_copied(self):
        store = InMemoryStore()
        items = [{"id": "AP-1"}]
        store.save("appointments", items)
        items.append({"id": "AP-2"})
        assert store.load("appointments", []) == [{"id": "AP-1"}]

    def test_unencodable_value_is_logged_not_raised(self, caplog):
        store = InMemoryStore()
        with caplog.at_level(logging.ERROR, logger="barbershop.storage"):
            store.save("services", {"bad": object()})
        assert "Error saving" in caplog.text
        assert store.load("services", "fallback") == "fallback"


class TestJsonFileStore:
    def test_missing_file_returns_default(self, tmp_path):
        store = JsonFileStore(data_dir=str(tmp_path), key_prefix="w8_")
        assert store.load(StorageKey.PROVIDERS, None) is None

    def test_round_trip_and_file_layout(self, tmp_path):
        store = JsonFileStore(data_dir=str(tmp_path), key_prefix="w8_")
        store.save(StorageKey.SERVICES, [{"id": "s1", "name": "Corte Normal"}])
        path = tmp_path / "w8_services.json"
        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8"))[0]["name"] == "Corte Normal"
        assert store.load(StorageKey.SERVICES, []) == [{"id": "s1", "name": "Corte Normal"}]

    def test_creates_data_dir(self, tmp_path):
        store = JsonFileStore(data_dir=str(tmp_path / "nested" / "dir"))
        store.save("admin_mode", False)
        assert store.load("admin_mode", True) is False

    def test_no_temp_files_left_behind(self, tmp_path):
        store = JsonFileStore(data_dir=str(tmp_path))
        store.save("appointments", [])
        store.save("appointments", [{"id": "AP-1"}])
        assert [name for name in os.listdir(tmp_path) if name.endswith(".tmp")] == []

    def test_corrupted_file_returns_default(self, tmp_path, caplog):
        store = JsonFileStore(data_dir=str(tmp_path), key_prefix="")
        (tmp_path / "appointments.json").write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="barbershop.storage"):
            assert store.load(StorageKey.APPOINTMENTS, []) == []
        assert "Error loading" in caplog.text

    def test_undecodable_file_returns_default(self, tmp_path, caplog):
        store = JsonFileStore(data_dir=str(tmp_path), key_prefix="w8_")
        (tmp_path / "w8_appointments.json").write_bytes(b"\xff\xfe\x00garbage")
        with caplog.at_level(logging.WARNING, logger="barbershop.storage"):
            assert store.load("appointments", "DEFAULT") == "DEFAULT"
        assert "Error loading" in caplog.text

    def test_default_is_not_shared(self, tmp_path):
        store = JsonFileStore(data_dir=str(tmp_path))
        default = []
        loaded = store.load("appointments", default)
        loaded.append("x")
        assert default == []

    def test_write_failure_is_logged(self, tmp_path, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = JsonFileStore(data_dir=str(blocker / "sub"))
        with caplog.at_level(logging.ERROR, logger="barbershop.storage"):
            store.save("appointments", [])
        assert "Error saving" in caplog.text
