# tests/test_local_storage.py

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from taskflow.backends.errors import BackendError, RecordNotFoundError
from taskflow.backends.local_storage import JsonFileStorage, LocalTaskBackend
from taskflow.tasks.task_models import Priority

from .fakes import FakeClock


def test_json_storage_get_set_remove(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    storage = JsonFileStorage(path)

    assert storage.get("tasks") is None
    storage.set("tasks", "[]")
    storage.set("other", "x")

    reopened = JsonFileStorage(path)
    assert reopened.get("tasks") == "[]"
    assert reopened.get("other") == "x"

    reopened.remove("other")
    assert JsonFileStorage(path).get("other") is None
    assert not path.with_suffix(".tmp").exists()


def test_json_storage_tolerates_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{not json", "utf-8")

    storage = JsonFileStorage(path)
    assert storage.get("tasks") is None

    storage.set("tasks", "[]")
    assert json.loads(path.read_text("utf-8")) == {"tasks": "[]"}


def test_local_backend_crud_survives_reopen(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    clock = FakeClock(1_700_000_000.0)
    backend = LocalTaskBackend(JsonFileStorage(path), clock=clock)

    a = backend.create_task({"title": "first", "priority": Priority.HIGH, "due_date": date(2024, 1, 5)})
    clock.advance(1)
    b = backend.create_task({"title": "second"})

    assert a.id == 1_700_000_000_000
    assert b.id == 1_700_000_001_000

    backend.update_task(a.id, {"completed": True, "description": "done early"})

    reopened = LocalTaskBackend(JsonFileStorage(path))
    tasks = reopened.list_tasks()
    assert [t.title for t in tasks] == ["second", "first"]

    first = reopened.get_task(a.id)
    assert first.completed is True
    assert first.description == "done early"
    assert first.priority == Priority.HIGH
    assert first.due_date == date(2024, 1, 5)

    reopened.delete_task(b.id)
    assert [t.id for t in reopened.list_tasks()] == [a.id]


def test_local_ids_stay_unique_when_clock_stands_still(tmp_path: Path) -> None:
    backend = LocalTaskBackend(JsonFileStorage(tmp_path / "s.json"), clock=FakeClock(5.0))

    ids = {backend.create_task({"title": f"t{i}"}).id for i in range(3)}

    assert len(ids) == 3


def test_local_backend_missing_task(tmp_path: Path) -> None:
    backend = LocalTaskBackend(JsonFileStorage(tmp_path / "s.json"))
    with pytest.raises(RecordNotFoundError):
        backend.get_task(1)
    with pytest.raises(RecordNotFoundError):
        backend.update_task(1, {"completed": True})
    with pytest.raises(RecordNotFoundError):
        backend.delete_task(1)


def test_local_backend_skips_malformed_entries(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "s.json")
    storage.set(
        "tasks",
        json.dumps(
            [
                {"id": 1, "title": "ok", "priority": "weird", "createdAt": "2024-01-01T00:00:00Z"},
                {"id": 2, "title": "   "},
                {"title": "no id"},
                "not an object",
            ]
        ),
    )

    tasks = LocalTaskBackend(storage).list_tasks()

    assert [(t.id, t.priority) for t in tasks] == [(1, Priority.MEDIUM)]


def test_local_backend_scopes_by_owner(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "s.json")
    alice = LocalTaskBackend(storage, owner="alice", clock=FakeClock(1.0))
    bob = LocalTaskBackend(storage, owner="bob", clock=FakeClock(2.0))

    a = alice.create_task({"title": "alice task"})
    bob.create_task({"title": "bob task"})

    assert [t.title for t in alice.list_tasks()] == ["alice task"]
    with pytest.raises(RecordNotFoundError):
        bob.delete_task(a.id)


def test_unreadable_storage_file_raises_instead_of_reading_empty(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.mkdir()

    storage = JsonFileStorage(path)

    with pytest.raises(BackendError, match="Could not read"):
        storage.get("tasks")
    with pytest.raises(BackendError):
        storage.set("tasks", "[]")


def test_bad_stored_due_date_reads_as_no_due_date(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "s.json")
    storage.set("tasks", json.dumps([{"id": 1, "title": "kept", "dueDate": "03/01/2024"}]))

    (task,) = LocalTaskBackend(storage).list_tasks()

    assert (task.id, task.title, task.due_date) == (1, "kept", None)


def test_malformed_entries_survive_writes(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "s.json")
    broken = {"id": "x1", "title": "from an older version"}
    storage.set("tasks", json.dumps([{"id": 1, "title": "ok"}, broken, "stray"]))
    backend = LocalTaskBackend(storage, clock=FakeClock(1.0))

    created = backend.create_task({"title": "new"})
    backend.update_task(1, {"completed": True})
    backend.delete_task(created.id)

    on_disk = json.loads(storage.get("tasks") or "[]")
    assert broken in on_disk
    assert "stray" in on_disk
    assert [t.title for t in backend.list_tasks()] == ["ok"]


def test_unreadable_task_list_is_never_overwritten(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "s.json")
    storage.set("tasks", "{not json")
    backend = LocalTaskBackend(storage)

    assert backend.list_tasks() == []
    with pytest.raises(BackendError, match="not overwriting"):
        backend.create_task({"title": "new"})
    assert storage.get("tasks") == "{not json"
