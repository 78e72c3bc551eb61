# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the persistence backend swappable (local file / remote record
service / in-memory fake in tests).
"""

from typing import Any, Protocol

TaskFields = dict[str, Any]
# Editable task fields keyed by Task attribute name:
# title, description, due_date, priority, completed.


class KeyValueStorage(Protocol):
    """Synchronous string key-value storage (device-local)."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class TaskBackend(Protocol):
    """
    Source of truth for tasks.

    Implementations raise backends.errors.BackendError (or a subclass) on failure.
    list_tasks returns newest first.
    """

    def list_tasks(self) -> list[Any]: ...
    def get_task(self, task_id: int) -> Any: ...
    def create_task(self, fields: TaskFields) -> Any: ...
    def update_task(self, task_id: int, changes: TaskFields) -> Any: ...
    def delete_task(self, task_id: int) -> None: ...
    def close(self) -> None: ...

