# src/taskflow/tasks/edit_session.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from .task_models import Task, TaskForm


class EditMode(StrEnum):
    CREATE = "idle-create"
    EDITING = "editing"


@dataclass(slots=True)
class EditSession:
    """
    Single-slot edit state plus the form it drives.

    idle-create --start(task)--> editing(task.id)
    editing     --start(other)-> editing(other.id)   (silently replaces the target)
    editing     --cancel()-----> idle-create          (form reset, no write)
    editing     --finish()-----> idle-create          (after a successful update)
    idle-create --finish()-----> idle-create          (after a successful create)
    """

    form: TaskForm = field(default_factory=TaskForm)
    editing_id: int | None = None

    @property
    def mode(self) -> EditMode:
        return EditMode.CREATE if self.editing_id is None else EditMode.EDITING

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    def start(self, task: Task) -> None:
        self.editing_id = task.id
        self.form = TaskForm.from_task(task)

    def cancel(self) -> None:
        self.editing_id = None
        self.form.reset()

    def finish(self) -> None:
        self.cancel()

    def describe(self) -> str:
        if self.editing_id is None:
            return EditMode.CREATE.value
        return f"{EditMode.EDITING.value}({self.editing_id})"
