# src/taskflow/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (backend chosen from settings),
loads the task list, then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging
import sys

from ..backends.errors import BackendError
from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import level_from_name, setup_logging
from ..tasks import task_api

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.sync.backend.close()
    except Exception:
        logger.debug("Backend close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(log_dir=settings.data_dir, console_level=level_from_name(settings.log_level))

    logger.info("Starting %s (log file: %s)", settings.app_name, log_file)

    try:
        state = create_initial_state(settings=settings)
    except BackendError as e:
        # Misconfigured remote backend: nothing to run against.
        logger.error("Cannot start: %s", e)
        sys.exit(2)

    try:
        # Failures here become a notice; the console still starts.
        task_api.refresh_tasks(state)
        run_console_loop(state)
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
