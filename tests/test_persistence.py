import json
from datetime import datetime, timezone

import pytest

from src.tasklist.db import SQLiteStorage
from src.tasklist.persistence import TaskPersister, build_store, decode_tasks, encode_tasks, load_tasks
from src.tasklist.settings import Settings
from src.tasklist.storage import InMemoryStorage, get_storage

KEY = "todos"


def make_settings(backend="memory", db_path="./data/tasks.db"):
    return Settings(
        persistence_backend=backend,
        sqlite_db_path=db_path,
        storage_key=KEY,
        cors_allow_origins=["*"],
        log_level="INFO",
    )


class TestEncoding:
    def test_field_names(self):
        raw = encode_tasks([{"text": "Buy milk", "created_at": datetime(2025, 1, 2, 3, 4, 5), "completed": False}])
        assert json.loads(raw) == [{"text": "Buy milk", "createdAt": "2025-01-02T03:04:05", "completed": False}]

    def test_decodes_browser_timestamps(self):
        raw = '[{"text": "Walk", "createdAt": "2024-06-01T10:00:00.000Z", "completed": true}]'
        tasks = decode_tasks(raw)
        assert tasks == [
            {"text": "Walk", "created_at": datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc), "completed": True}
        ]


class TestLoad:
    def test_missing_value_is_empty(self):
        assert load_tasks(InMemoryStorage(), KEY) == []

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            '{"text": "a"}',
            '[{"text": "a"}]',
            '[{"text": "   ", "createdAt": "2025-01-01T00:00:00", "completed": false}]',
        ],
    )
    def test_malformed_value_is_empty(self, raw):
        storage = InMemoryStorage({KEY: raw})
        assert load_tasks(storage, KEY) == []
        assert storage.get(KEY) == raw


class TestBuildStore:
    def test_mutations_write_through(self):
        storage = InMemoryStorage()
        store = build_store(storage, KEY)
        store.submit("first")
        store.submit("second")
        store.toggle_complete(0)
        assert decode_tasks(storage.get(KEY)) == store.tasks

        store.delete(0)
        assert [t["text"] for t in decode_tasks(storage.get(KEY))] == ["second"]

    def test_view_state_is_not_persisted(self):
        storage = InMemoryStorage()
        store = build_store(storage, KEY)
        store.set_pending_input("draft")
        store.set_filter("completed")
        store.submit("  ")
        assert storage.get(KEY) is None

    def test_round_trip_preserves_timestamps(self):
        storage = InMemoryStorage()
        store = build_store(storage, KEY)
        for text in ("a", "b", "c"):
            store.submit(text)
        store.toggle_complete(1)

        rehydrated = build_store(storage, KEY)
        assert rehydrated.tasks == store.tasks
        assert rehydrated.edit_index is None
        assert rehydrated.pending_input == ""

    def test_persister_overwrites(self):
        storage = InMemoryStorage({KEY: "stale"})
        TaskPersister(storage, KEY)([])
        assert storage.get(KEY) == "[]"


class TestSQLiteStorage:
    def test_get_set_overwrite(self, tmp_path):
        storage = SQLiteStorage(str(tmp_path / "nested" / "tasks.db"))
        assert storage.get(KEY) is None
        storage.set(KEY, "[]")
        storage.set(KEY, "[1]")
        assert storage.get(KEY) == "[1]"

    def test_survives_reopen(self, tmp_path):
        path = str(tmp_path / "tasks.db")
        store = build_store(SQLiteStorage(path), KEY)
        store.submit("persisted")

        reopened = build_store(SQLiteStorage(path), KEY)
        assert reopened.tasks == store.tasks


class TestGetStorage:
    def test_memory_backend(self):
        assert isinstance(get_storage(make_settings()), InMemoryStorage)

    def test_sqlite_backend(self, tmp_path):
        storage = get_storage(make_settings("sqlite", str(tmp_path / "tasks.db")))
        assert isinstance(storage, SQLiteStorage)

    def test_sqlite_falls_back_to_memory(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        storage = get_storage(make_settings("sqlite", str(blocker / "tasks.db")))
        assert isinstance(storage, InMemoryStorage)


class FailingStorage(InMemoryStorage):
    def set(self, key, value):
        raise OSError("disk full")


class TestWriteFailure:
    @pytest.fixture()
    def store(self):
        storage = InMemoryStorage()
        seeded = build_store(storage, KEY)
        seeded.submit("a")
        seeded.submit("b")
        seeded.toggle_complete(1)
        return build_store(FailingStorage({KEY: storage.get(KEY)}), KEY)

    def assert_unchanged(self, store, before, pending, edit_index):
        assert store.tasks == before
        assert store.pending_input == pending
        assert store.edit_index == edit_index

    def test_failed_add_is_not_applied(self, store):
        before = store.tasks
        store.set_pending_input("c")
        with pytest.raises(OSError):
            store.submit()
        self.assert_unchanged(store, before, "c", None)

    def test_failed_update_keeps_edit(self, store):
        before = store.tasks
        store.begin_edit(0)
        with pytest.raises(OSError):
            store.submit("changed")
        self.assert_unchanged(store, before, "a", 0)

    def test_failed_delete_keeps_task_and_form(self, store):
        before = store.tasks
        store.begin_edit(1)
        with pytest.raises(OSError):
            store.delete(0)
        self.assert_unchanged(store, before, "b", 1)

    def test_failed_toggle_keeps_flag(self, store):
        before = store.tasks
        with pytest.raises(OSError):
            store.toggle_complete(1)
        self.assert_unchanged(store, before, "", None)
        assert store.tasks[1]["completed"] is True
