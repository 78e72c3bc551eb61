# src/taskflow/cli/views.py

"""Plain-text renderings of the dashboard, the form and the not-found page."""

from __future__ import annotations

from ..core.notices import Notice
from ..core.routes import HOME_PATH, Route
from ..core.state import AppState
from ..tasks.task_models import Task, TaskFilter

_PRIORITY_MARK = {"high": "!!!", "medium": "!! ", "low": "!  "}


def render_task_line(task: Task, *, editing: bool = False) -> str:
    box = "[x]" if task.completed else "[ ]"
    mark = _PRIORITY_MARK.get(task.priority.value, "   ")
    due = f"  due {task.due_date.isoformat()}" if task.due_date else ""
    edit = "  (editing)" if editing else ""
    line = f"{box} {mark} {task.id}. {task.title}{due}{edit}"
    if task.description:
        line += f"\n          {task.description}"
    return line


def render_form(state: AppState) -> str:
    session = state.session
    form = session.form
    header = f"Edit task {session.editing_id}" if session.is_editing else "New task"
    action = "/submit to update, /cancel to stop editing" if session.is_editing else "/submit to add"
    return (
        f"{header}:\n"
        f"  Title*:      {form.title or '-'}\n"
        f"  Description: {form.description or '-'}\n"
        f"  Due date:    {form.due_date or '-'}\n"
        f"  Priority:    {form.priority}\n"
        f"  ({action})"
    )


def render_dashboard(state: AppState, task_filter: TaskFilter | None = None) -> str:
    store = state.store
    stats = store.stats()
    current = store.filter if task_filter is None else task_filter
    tasks = store.filtered(current)

    filters = "  ".join(f"[{f.value}]" if f == current else f.value for f in TaskFilter)
    lines = [
        f"{state.settings.app_name}",
        f"Total: {stats.total}   Pending: {stats.pending}   Completed: {stats.completed}",
        f"Filter: {filters}",
        "",
    ]

    if not tasks:
        lines.append("No tasks yet. Add a new task to get started." if stats.total == 0 else "No tasks match this filter.")
    else:
        lines.append("Your tasks:")
        for t in tasks:
            lines.append("  " + render_task_line(t, editing=t.id == state.session.editing_id))
    return "\n".join(lines)


def render_not_found(path: str) -> str:
    return (
        "Page Not Found\n"
        f"The page you're looking for ({path}) doesn't exist or has been moved.\n"
        f"Use /home to return to {HOME_PATH}."
    )


def render_page(state: AppState) -> str:
    if state.route == Route.NOT_FOUND:
        return render_not_found(state.path)
    return render_dashboard(state)


def render_notice(notice: Notice) -> str:
    return f"[{notice.level.value.upper()}] {notice.text}"
