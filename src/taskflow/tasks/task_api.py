# src/taskflow/tasks/task_api.py

"""
User-action layer.

Each function is what a front end calls for one user interaction. Validation
problems and backend failures never escape: they are logged and turned into
notices, and the form keeps whatever the user typed so they can retry.
"""

from __future__ import annotations

import logging

from ..core.state import AppState
from .task_models import Task, TaskFilter, TaskForm, TaskValidationError
from .task_sync import TaskSyncError

logger = logging.getLogger(__name__)


def refresh_tasks(state: AppState) -> bool:
    try:
        state.sync.refresh()
    except TaskSyncError as e:
        state.notices.error(str(e))
        return False
    return True


def submit_form(state: AppState) -> Task | None:
    """
    Submit the form: create in idle-create mode, update in editing mode.

    Returns the written task, or None if nothing was written.
    """
    session = state.session
    try:
        fields = session.form.validate()
    except TaskValidationError as e:
        logger.info("Form rejected: %s", e)
        state.notices.error(str(e))
        return None

    try:
        if session.editing_id is not None:
            task = state.sync.update(session.editing_id, fields)
        else:
            task = state.sync.create(fields)
    except TaskSyncError as e:
        state.notices.error(str(e))
        return None

    if session.is_editing:
        state.notices.success("Task updated successfully!")
    else:
        state.notices.success("Task added successfully!")
    session.finish()
    return task


def quick_add(state: AppState, title: str) -> Task | None:
    """
    Add a task from a title alone, with default values for the other fields.

    The form is left as it is. Refused while a task is being edited, so the
    text can never overwrite the edited task.
    """
    session = state.session
    if session.editing_id is not None:
        state.notices.warning(
            f"Finish or cancel editing task {session.editing_id} before adding a new one"
        )
        return None

    try:
        fields = TaskForm(title=title).validate()
    except TaskValidationError as e:
        state.notices.error(str(e))
        return None

    try:
        task = state.sync.create(fields)
    except TaskSyncError as e:
        state.notices.error(str(e))
        return None

    state.notices.success("Task added successfully!")
    return task


def start_editing(state: AppState, task_id: int) -> bool:
    task = state.store.get(task_id)
    if task is None:
        state.notices.error(f"Task {task_id} not found")
        return False
    state.session.start(task)
    logger.debug("Editing task id=%s", task_id)
    return True


def cancel_editing(state: AppState) -> None:
    state.session.cancel()


def toggle_task(state: AppState, task_id: int) -> Task | None:
    try:
        task = state.sync.toggle_completion(task_id)
    except TaskSyncError as e:
        state.notices.error(str(e))
        return None

    status = "completed" if task.completed else "incomplete"
    state.notices.info(f'Task "{task.title}" marked as {status}')
    return task


def delete_task(state: AppState, task_id: int) -> bool:
    """Delete after the user confirmed; cancels the edit session if it targeted this task."""
    known = state.store.get(task_id)
    try:
        state.sync.delete(task_id)
    except TaskSyncError as e:
        state.notices.error(str(e))
        return False

    if state.session.editing_id == task_id:
        state.session.cancel()

    title = known.title if known is not None else str(task_id)
    state.notices.success(f'Task "{title}" deleted')
    return True


def set_filter(state: AppState, name: str) -> TaskFilter | None:
    try:
        task_filter = TaskFilter.parse(name)
    except TaskValidationError as e:
        state.notices.error(str(e))
        return None
    state.store.filter = task_filter
    return task_filter
