# src/taskflow/backends/local_storage.py

"""
Device-local persistence.

JsonFileStorage is a tiny synchronous key-value store (one JSON object on disk,
string values), the local analog of a browser's localStorage.
LocalTaskBackend keeps the whole task list JSON-serialized under one fixed key.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..core.ports import KeyValueStorage, TaskFields
from ..tasks.task_models import Priority, Task, TaskValidationError, parse_due_date, parse_timestamp, utc_now
from .errors import BackendError, RecordNotFoundError

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """
    String key-value storage persisted as a single JSON file.

    Every set() rewrites the file atomically (tmp file + os.replace).
    A missing file is an empty storage. A file that cannot be read raises
    BackendError; one that is not a JSON object is logged and treated as empty.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text("utf-8")
        except OSError as e:
            raise BackendError(f"Could not read {self._path}: {e}") from e
        try:
            data = json.loads(text)
        except ValueError:
            logger.exception("Storage file %s is not valid JSON; treating as empty", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s is not a JSON object; treating as empty", self._path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        tmp = self._path.with_suffix(".tmp")
        try:
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            raise BackendError(f"Could not write {self._path}: {e}") from e
        with contextlib.suppress(Exception):
            os.chmod(self._path, 0o600)

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "dueDate": task.due_date.isoformat() if task.due_date else "",
        "priority": task.priority.value,
        "completed": bool(task.completed),
        "createdAt": task.created_at.isoformat(),
        "updatedAt": task.updated_at.isoformat(),
        "owner": task.owner,
    }


def task_from_dict(raw: dict[str, Any]) -> Task:
    """Build a Task from its serialized form; raises ValueError/KeyError/TypeError on bad input."""
    title = str(raw.get("title") or "").strip()
    if not title:
        raise ValueError("empty title")
    task_id = int(raw["id"])
    created_at = parse_timestamp(raw.get("createdAt")) or utc_now()
    try:
        due_date = parse_due_date(raw.get("dueDate") or None)
    except TaskValidationError:
        logger.warning("Ignoring unparsable dueDate=%r on stored task %s", raw.get("dueDate"), task_id)
        due_date = None
    return Task(
        id=task_id,
        title=title,
        description=str(raw.get("description") or ""),
        due_date=due_date,
        priority=Priority.parse(raw.get("priority")),
        completed=bool(raw.get("completed", False)),
        created_at=created_at,
        updated_at=parse_timestamp(raw.get("updatedAt")) or created_at,
        owner=raw.get("owner") or None,
    )


@dataclass(slots=True)
class _StoredList:
    tasks: list[Task] = field(default_factory=list)
    unparsed: list[Any] = field(default_factory=list)


class LocalTaskBackend:
    """
    TaskBackend over KeyValueStorage.

    Identifiers are generated locally from the current time in milliseconds,
    bumped past the largest existing id if the clock has not moved on.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = "tasks",
        owner: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._key = key
        self._owner = owner
        self._clock = clock

    def close(self) -> None:
        """Compatibility hook for shutdown (nothing to close)."""
        return

    # ---- low-level helpers ----

    def _load_stored(self, *, for_write: bool = False) -> _StoredList:
        """
        Parse the stored list. Entries that do not parse are kept raw in
        `unparsed` and written back unchanged by _save().

        A stored value that is not a JSON list reads as empty, but is never
        overwritten: writes raise BackendError instead.
        """
        stored = _StoredList()
        raw = self._storage.get(self._key)
        if not raw:
            return stored
        try:
            items = json.loads(raw)
        except ValueError:
            items = None
        if not isinstance(items, list):
            if for_write:
                raise BackendError(f"Stored task list under key={self._key!r} is unreadable; not overwriting it")
            logger.warning("Stored task list under key=%s is not a JSON list; ignoring it", self._key)
            return stored

        for item in items:
            try:
                if not isinstance(item, dict):
                    raise TypeError(type(item).__name__)
                stored.tasks.append(task_from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.warning("Keeping malformed stored task as is: %r", item)
                stored.unparsed.append(item)
        return stored

    def _load(self) -> list[Task]:
        return self._load_stored().tasks

    def _save(self, stored: _StoredList) -> None:
        items = [task_to_dict(t) for t in stored.tasks] + stored.unparsed
        self._storage.set(self._key, json.dumps(items, ensure_ascii=False))

    def _next_id(self, stored: _StoredList) -> int:
        candidate = int(self._clock() * 1000)
        taken = {t.id for t in stored.tasks}
        for item in stored.unparsed:
            if isinstance(item, dict) and isinstance(item.get("id"), int):
                taken.add(item["id"])
        if candidate in taken:
            candidate = max(taken) + 1
        return candidate

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self._clock(), UTC)

    def _visible(self, tasks: list[Task]) -> list[Task]:
        if self._owner is None:
            return tasks
        return [t for t in tasks if t.owner in (None, self._owner)]

    @staticmethod
    def _index_of(tasks: list[Task], task_id: int) -> int:
        for i, t in enumerate(tasks):
            if t.id == task_id:
                return i
        raise RecordNotFoundError(f"Task {task_id} not found", status_code=404)

    # ---- TaskBackend ----

    def list_tasks(self) -> list[Task]:
        tasks = self._visible(self._load())
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)

    def get_task(self, task_id: int) -> Task:
        tasks = self._visible(self._load())
        return tasks[self._index_of(tasks, task_id)]

    def create_task(self, fields: TaskFields) -> Task:
        stored = self._load_stored(for_write=True)
        now = self._now()
        task = Task(
            id=self._next_id(stored),
            title=str(fields["title"]),
            description=str(fields.get("description") or ""),
            due_date=fields.get("due_date"),
            priority=Priority.parse(fields.get("priority")),
            completed=bool(fields.get("completed", False)),
            created_at=now,
            updated_at=now,
            owner=self._owner,
        )
        stored.tasks.append(task)
        self._save(stored)
        logger.debug("Local task created id=%s", task.id)
        return task

    def update_task(self, task_id: int, changes: TaskFields) -> Task:
        stored = self._load_stored(for_write=True)
        visible = self._visible(stored.tasks)
        task = visible[self._index_of(visible, task_id)]

        for name in ("title", "description", "due_date", "completed"):
            if name in changes:
                setattr(task, name, changes[name])
        if "priority" in changes:
            task.priority = Priority.parse(changes["priority"])
        task.updated_at = self._now()

        # task is the same object held in stored.tasks.
        self._save(stored)
        logger.debug("Local task updated id=%s fields=%s", task_id, sorted(changes))
        return task

    def delete_task(self, task_id: int) -> None:
        stored = self._load_stored(for_write=True)
        self._index_of(self._visible(stored.tasks), task_id)
        stored.tasks = [t for t in stored.tasks if t.id != task_id]
        self._save(stored)
        logger.debug("Local task deleted id=%s", task_id)
