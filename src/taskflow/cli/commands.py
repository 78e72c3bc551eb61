# src/taskflow/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.routes import HOME_PATH, normalize_path
from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_models import Priority, TaskFilter, TaskValidationError, parse_due_date
from . import views

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  (plain text) - quick add: add a task with the text as its title")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_task_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


def _after_write(state: AppState) -> str:
    return views.render_dashboard(state)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    stats = state.store.stats()
    backend = getattr(settings, "backend", "local")
    sync_mode = "full reload" if state.sync.reload_after_write else "local patch"
    return (
        "Status:\n"
        f"  Backend: {backend}\n"
        f"  After write: {sync_mode}\n"
        f"  Tasks: {stats.total} total, {stats.pending} pending, {stats.completed} completed\n"
        f"  Filter: {state.store.filter}\n"
        f"  Form: {state.session.describe()}\n"
        f"  Page: {state.path}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list             -> tasks under the selected filter
    /list <filter>    -> tasks under another filter (selection unchanged)
    """
    if not args:
        return views.render_page(state)
    try:
        task_filter = TaskFilter.parse(args[0])
    except TaskValidationError as e:
        return str(e)
    return views.render_dashboard(state, task_filter)


def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Filter is {state.store.filter}. Use /filter all | active | completed."
    if task_api.set_filter(state, args[0]) is None:
        return "Filter unchanged."
    return views.render_dashboard(state)


def cmd_title(state: AppState, args: list[str]) -> str:
    state.session.form.title = " ".join(args)
    return views.render_form(state)


def cmd_desc(state: AppState, args: list[str]) -> str:
    state.session.form.description = " ".join(args)
    return views.render_form(state)


def cmd_due(state: AppState, args: list[str]) -> str:
    """
    /due YYYY-MM-DD  -> set due date
    /due             -> clear it
    """
    raw = args[0] if args else ""
    try:
        parse_due_date(raw)
    except TaskValidationError as e:
        # Keep what was typed; submit will refuse it until fixed.
        state.session.form.due_date = raw
        return f"{e}\n{views.render_form(state)}"
    state.session.form.due_date = "" if raw.lower() in ("none", "null") else raw
    return views.render_form(state)


def cmd_priority(state: AppState, args: list[str]) -> str:
    if not args or args[0].lower() not in {p.value for p in Priority}:
        return "Usage: /priority low | medium | high"
    state.session.form.priority = Priority(args[0].lower())
    return views.render_form(state)


def cmd_form(state: AppState, args: list[str]) -> str:
    return views.render_form(state)


def _busy(emit: CommandEmitter | None, text: str) -> None:
    # Loading indicator while a backend call is in flight.
    if emit is not None:
        emit(text)


def cmd_submit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if state.session.form.title.strip():
        _busy(emit, "Updating task..." if state.session.is_editing else "Adding task...")
    task = task_api.submit_form(state)
    if task is None:
        return views.render_form(state)
    return _after_write(state)


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <title>  -> add a task with that title only (the form is untouched)
    /add          -> same as /submit
    """
    if not args:
        return cmd_submit(state, [], emit)
    if not state.session.is_editing:
        _busy(emit, "Adding task...")
    if task_api.quick_add(state, " ".join(args)) is None and state.session.is_editing:
        return views.render_form(state)
    return _after_write(state)


def cmd_edit(state: AppState, args: list[str]) -> str:
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Usage: /edit <id>"
    if not task_api.start_editing(state, task_id):
        return views.render_page(state)
    return views.render_form(state)


def cmd_cancel(state: AppState, args: list[str]) -> str:
    was_editing = state.session.is_editing
    task_api.cancel_editing(state)
    return "Edit cancelled." if was_editing else "Form cleared."


def cmd_toggle(state: AppState, args: list[str]) -> str:
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Usage: /toggle <id>"
    task_api.toggle_task(state, task_id)
    return _after_write(state)


def cmd_delete(state: AppState, args: list[str]) -> str:
    """
    /delete <id>      -> ask for confirmation
    /delete <id> yes  -> delete
    """
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Usage: /delete <id> [yes]"

    confirmed = len(args) > 1 and args[1].lower() in ("yes", "y", "confirm")
    if not confirmed:
        task = state.store.get(task_id)
        label = f'"{task.title}"' if task else str(task_id)
        return f"Delete task {label}? Repeat with /delete {task_id} yes to confirm."

    task_api.delete_task(state, task_id)
    return _after_write(state)


def cmd_refresh(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    _busy(emit, "Loading tasks...")
    task_api.refresh_tasks(state)
    return views.render_page(state)


def cmd_open(state: AppState, args: list[str]) -> str:
    state.path = normalize_path(args[0] if args else HOME_PATH)
    return views.render_page(state)


def cmd_home(state: AppState, args: list[str]) -> str:
    state.path = HOME_PATH
    return views.render_page(state)


def cmd_notices(state: AppState, args: list[str]) -> str:
    active = state.notices.active()
    if not active:
        return "No notices."
    return "\n".join(f"#{n.id} {views.render_notice(n)}" for n in active)


def cmd_dismiss(state: AppState, args: list[str]) -> str:
    """
    /dismiss <id>  -> dismiss one notice
    /dismiss all   -> dismiss everything
    """
    if args and args[0].lower() == "all":
        state.notices.clear()
        return "All notices dismissed."
    try:
        notice_id = int(args[0].lstrip("#")) if args else None
    except ValueError:
        notice_id = None
    if notice_id is None:
        return "Usage: /dismiss <id> | /dismiss all"
    return "Dismissed." if state.notices.dismiss(notice_id) else f"No active notice #{notice_id}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show backend, counts, filter and form mode.")
registry.register("list", cmd_list, help_text="Show tasks: /list [all | active | completed].", aliases=["ls"])
registry.register("filter", cmd_filter, help_text="Select filter: /filter all | active | completed.")
registry.register("title", cmd_title, help_text="Set form title: /title <text>.")
registry.register("desc", cmd_desc, help_text="Set form description: /desc <text>.")
registry.register("due", cmd_due, help_text="Set form due date: /due YYYY-MM-DD (empty clears).")
registry.register("priority", cmd_priority, help_text="Set form priority: /priority low | medium | high.")
registry.register("form", cmd_form, help_text="Show the form.")
registry.register("submit", cmd_submit, help_text="Add the task, or update it when editing.")
registry.register("add", cmd_add, help_text="Quick add: /add <title>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id>.")
registry.register("cancel", cmd_cancel, help_text="Cancel editing and reset the form.")
registry.register("toggle", cmd_toggle, help_text="Mark complete/incomplete: /toggle <id>.", aliases=["done"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id> yes.", aliases=["rm"])
registry.register("refresh", cmd_refresh, help_text="Reload tasks from the backend.")
registry.register("open", cmd_open, help_text="Open a page: /open <path>.")
registry.register("home", cmd_home, help_text="Return to the dashboard.")
registry.register("notices", cmd_notices, help_text="List active notices.")
registry.register("dismiss", cmd_dismiss, help_text="Dismiss notices: /dismiss <id> | /dismiss all.")
