# src/taskflow/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from .task_models import Task, TaskFilter, TaskStats

logger = logging.getLogger(__name__)


def filter_tasks(tasks: Iterable[Task], task_filter: TaskFilter) -> list[Task]:
    """
    Pure filter over a task list (order preserved).

    - all       -> everything
    - active    -> completed is False
    - completed -> completed is True
    """
    if task_filter == TaskFilter.ACTIVE:
        return [t for t in tasks if not t.completed]
    if task_filter == TaskFilter.COMPLETED:
        return [t for t in tasks if t.completed]
    return list(tasks)


def count_tasks(tasks: Iterable[Task]) -> TaskStats:
    items = list(tasks)
    completed = sum(1 for t in items if t.completed)
    return TaskStats(total=len(items), pending=len(items) - completed, completed=completed)


class TaskStore:
    """
    In-memory task list for the current session.

    The store only holds state and derives views from it. Writing to a backend
    is the sync client's job; the sync client either reloads the whole list
    (replace_all) or patches it (append/replace/remove) after a write.
    """

    def __init__(self, tasks: Iterable[Task] | None = None) -> None:
        self._tasks: list[Task] = list(tasks or [])
        self.filter: TaskFilter = TaskFilter.ALL

    # ---- reads ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: int) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def filtered(self, task_filter: TaskFilter | None = None) -> list[Task]:
        return filter_tasks(self._tasks, self.filter if task_filter is None else task_filter)

    def visible(self) -> list[Task]:
        """Tasks shown under the currently selected filter."""
        return self.filtered()

    def stats(self) -> TaskStats:
        return count_tasks(self._tasks)

    # ---- mutations ----

    def replace_all(self, tasks: Iterable[Task]) -> None:
        self._tasks = list(tasks)
        logger.debug("TaskStore reloaded total=%s", len(self._tasks))

    def append(self, task: Task) -> None:
        if self.get(task.id) is not None:
            raise ValueError(f"Task id {task.id} already exists")
        # Newest first, same order the backends return.
        self._tasks.insert(0, task)

    def replace(self, task: Task) -> bool:
        """Replace the task with the same id. Returns False if it is not in the list."""
        for i, t in enumerate(self._tasks):
            if t.id == task.id:
                self._tasks[i] = task
                return True
        return False

    def remove(self, task_id: int) -> Task | None:
        """Remove exactly one task by id; returns it, or None if it was not there."""
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return self._tasks.pop(i)
        return None
