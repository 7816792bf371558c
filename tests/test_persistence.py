"""
Tests for persistence backends and dated backups.
"""
import json
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from restobot.database import init_db, make_session_factory
from restobot.services.persistence import (
    DatedBackup,
    JsonFilePersistence,
    SqlPersistence,
    index_records,
)
from restobot.services.store import RestaurantStore


class TestJsonFile:
    def test_round_trip_keyed_object(self, tmp_path):
        backend = JsonFilePersistence(tmp_path / "restaurants.json")
        backend.save({"r1": {"id": "r1", "name": "Café Ünïcode"}})

        assert backend.load() == {"r1": {"id": "r1", "name": "Café Ünïcode"}}
        assert "Café" in (tmp_path / "restaurants.json").read_text(encoding="utf-8")

    def test_legacy_array_is_keyed_by_id(self, tmp_path):
        path = tmp_path / "restaurants.json"
        path.write_text(json.dumps([{"id": "a", "name": "A"}, {"name": "no id"}, {"id": "b"}]))

        assert JsonFilePersistence(path).load() == {"a": {"id": "a", "name": "A"}, "b": {"id": "b"}}

    def test_missing_file_is_empty(self, tmp_path):
        assert JsonFilePersistence(tmp_path / "nope.json").load() == {}

    def test_corrupt_file_is_empty(self, tmp_path, caplog):
        path = tmp_path / "restaurants.json"
        path.write_text("{not json")
        assert JsonFilePersistence(path).load() == {}
        assert "Error loading" in caplog.text

    def test_index_records_other_shapes(self):
        assert index_records("text") == {}
        assert index_records(None) == {}
        assert index_records({"r1": {"id": "r1"}, "r2": None, "r3": "x"}) == {"r1": {"id": "r1"}}

    def test_malformed_entries_do_not_block_load(self, tmp_path, caplog):
        path = tmp_path / "restaurants.json"
        path.write_text(json.dumps({"r1": {"id": "r1"}, "r2": None}))
        store = RestaurantStore(JsonFilePersistence(path))

        assert store.load() == 1
        assert store.ids() == ["r1"]
        assert "Dropping malformed restaurant entries" in caplog.text

    def test_save_replaces_file_without_leftovers(self, tmp_path):
        path = tmp_path / "restaurants.json"
        backend = JsonFilePersistence(path)
        backend.save({"r1": {"id": "r1", "v": 1}})
        backend.save({"r1": {"id": "r1", "v": 2}})

        assert backend.load() == {"r1": {"id": "r1", "v": 2}}
        assert [p.name for p in tmp_path.iterdir()] == ["restaurants.json"]

    def test_failed_save_keeps_previous_file(self, tmp_path):
        path = tmp_path / "restaurants.json"
        backend = JsonFilePersistence(path)
        backend.save({"r1": {"id": "r1"}})

        with pytest.raises(TypeError):
            backend.save({"r1": {"id": "r1", "bad": object()}})

        assert backend.load() == {"r1": {"id": "r1"}}
        assert [p.name for p in tmp_path.iterdir()] == ["restaurants.json"]


class TestDatedBackup:
    def test_one_file_per_day(self, tmp_path):
        days = iter([date(2024, 6, 1), date(2024, 6, 1), date(2024, 6, 2)])
        backup = DatedBackup(tmp_path, today=lambda: next(days))

        backup.write({"r1": {"v": 1}})
        backup.write({"r1": {"v": 2}})
        backup.write({"r1": {"v": 3}})

        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "restaurants-2024-06-01.json",
            "restaurants-2024-06-02.json",
        ]
        assert json.loads((tmp_path / "restaurants-2024-06-01.json").read_text()) == {"r1": {"v": 2}}

    def test_failure_is_logged_not_raised(self, tmp_path, caplog):
        blocker = tmp_path / "file"
        blocker.write_text("")
        backup = DatedBackup(blocker / "backups", today=lambda: date(2024, 6, 1))

        assert backup.write({"r1": {}}) is None
        assert "Backup write failed" in caplog.text


class TestSql:
    def make_backend(self):
        engine = create_engine(
            "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
        )
        init_db(engine)
        return SqlPersistence(make_session_factory(engine))

    def test_save_and_load(self):
        backend = self.make_backend()
        backend.save({"r1": {"id": "r1", "menu": [{"category": "A", "items": []}]}, "r2": {"id": "r2"}})

        assert backend.load() == {
            "r1": {"id": "r1", "menu": [{"category": "A", "items": []}]},
            "r2": {"id": "r2"},
        }

    def test_save_replaces_table_content(self):
        backend = self.make_backend()
        backend.save({"r1": {"id": "r1", "name": "Old"}, "r2": {"id": "r2"}})
        backend.save({"r1": {"id": "r1", "name": "New"}})

        assert backend.load() == {"r1": {"id": "r1", "name": "New"}}
