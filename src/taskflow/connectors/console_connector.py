# src/taskflow/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli import views
from ..cli.commands import registry as command_registry
from ..core.notices import Notice
from ..core.state import AppState
from ..tasks import task_api

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _print_notice(notice: Notice) -> None:
    _print_ts(views.render_notice(notice))


def quick_add(state: AppState, text: str) -> str:
    """Plain (non-command) input: add a task with that title."""
    if task_api.quick_add(state, text) is None and state.session.is_editing:
        return views.render_form(state)
    return views.render_dashboard(state)


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (backend=%s).", getattr(state.settings, "backend", "local"))
    state.notices.add_listener(_print_notice)

    _print_ts(f"[CONSOLE] {state.settings.app_name}. Use /help for commands. Use /exit to quit.\n")
    print(views.render_page(state))
    # Notices posted before the console was attached (e.g. a failed initial load).
    for notice in reversed(state.notices.active()):
        _print_notice(notice)

    def emit(text: str) -> None:
        # Immediate user-visible feedback for slow backend calls.
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input("\n>>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            response = command_registry.handle(state, user_input, emit=emit)
            if response is None:
                response = quick_add(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        print(response)

    logger.info("Console connector finished.")
