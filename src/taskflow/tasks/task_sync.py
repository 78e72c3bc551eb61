# src/taskflow/tasks/task_sync.py

"""
Task sync client.

Translates user intents (create / update / delete / toggle) into backend calls
and keeps the TaskStore in line with the backend afterwards:
- reload_after_write=True  -> full reload from the backend (source of truth)
- reload_after_write=False -> patch the store with the record the backend returned

Failures are logged here and re-raised as TaskSyncError; showing them to the
user is the caller's job.
"""

from __future__ import annotations

import logging

from ..backends.errors import BackendError, RecordNotFoundError
from ..core.ports import TaskBackend, TaskFields
from .task_models import Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class TaskSyncError(RuntimeError):
    """
    A backend call made on behalf of the user failed.

    Message: "Failed to <action>: <reason>", plus " (task <id>)" when the call
    targeted one task.
    """

    def __init__(self, action: str, reason: str, *, task_id: int | None = None) -> None:
        message = f"Failed to {action}: {reason}"
        if task_id is not None:
            message += f" (task {task_id})"
        super().__init__(message)
        self.action = action
        self.reason = reason
        self.task_id = task_id


class TaskSyncClient:
    def __init__(self, backend: TaskBackend, store: TaskStore, *, reload_after_write: bool = True) -> None:
        self.backend = backend
        self.store = store
        self.reload_after_write = reload_after_write

    def refresh(self) -> list[Task]:
        """Replace the store's list with the backend's current list."""
        try:
            tasks = self.backend.list_tasks()
        except BackendError as e:
            logger.exception("list_tasks failed")
            raise TaskSyncError("load tasks", self._reason(e)) from e
        self.store.replace_all(tasks)
        return tasks

    def _after_write(self, action: str) -> None:
        # The write went through; a failed reload must not look like a failed write.
        try:
            self.refresh()
        except TaskSyncError:
            logger.warning("Reload after %s failed; store may be stale until next refresh", action)

    def create(self, fields: TaskFields) -> Task:
        try:
            task = self.backend.create_task(fields)
        except BackendError as e:
            logger.exception("create_task failed")
            raise TaskSyncError("add task", self._reason(e)) from e

        logger.info("Task created id=%s", task.id)
        if self.reload_after_write:
            self._after_write("create")
        elif not self.store.replace(task):
            self.store.append(task)
        return task

    def update(self, task_id: int, changes: TaskFields) -> Task:
        """Partial update: only the keys present in `changes` are sent."""
        try:
            task = self.backend.update_task(task_id, changes)
        except BackendError as e:
            logger.exception("update_task failed task_id=%s", task_id)
            raise TaskSyncError("update task", self._reason(e), task_id=task_id) from e

        logger.info("Task updated id=%s fields=%s", task_id, sorted(changes))
        if self.reload_after_write:
            self._after_write("update")
        else:
            self.store.replace(task)
        return task

    def toggle_completion(self, task_id: int) -> Task:
        """
        Flip the completed flag.

        Read-modify-write: the current value is read from the backend, then the
        negation is written. Two toggles racing on the same task can interleave;
        this is accepted (sequential, single-user front end).
        """
        try:
            current = self.backend.get_task(task_id)
            task = self.backend.update_task(task_id, {"completed": not current.completed})
        except BackendError as e:
            logger.exception("toggle_completion failed task_id=%s", task_id)
            raise TaskSyncError("update task status", self._reason(e), task_id=task_id) from e

        logger.info("Task toggled id=%s completed=%s", task_id, task.completed)
        if self.reload_after_write:
            self._after_write("toggle")
        else:
            self.store.replace(task)
        return task

    def delete(self, task_id: int) -> None:
        try:
            self.backend.delete_task(task_id)
        except BackendError as e:
            logger.exception("delete_task failed task_id=%s", task_id)
            raise TaskSyncError("delete task", self._reason(e), task_id=task_id) from e

        logger.info("Task deleted id=%s", task_id)
        if self.reload_after_write:
            self._after_write("delete")
        else:
            self.store.remove(task_id)

    @staticmethod
    def _reason(err: BackendError) -> str:
        if isinstance(err, RecordNotFoundError):
            return "task not found"
        return str(err) or err.__class__.__name__
