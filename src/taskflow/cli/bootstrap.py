# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the persistence backend (local file or remote record service),
- wires store / sync client / notices / edit session into AppState.
"""

from __future__ import annotations

import logging

from ..backends.local_storage import JsonFileStorage, LocalTaskBackend
from ..backends.record_client import RecordServiceClient
from ..backends.remote_backend import RemoteTaskBackend
from ..config import BACKEND_LOCAL, BACKEND_REMOTE, get_settings
from ..core.notices import NoticeBoard
from ..core.ports import TaskBackend
from ..core.state import AppState
from ..tasks.task_store import TaskStore
from ..tasks.task_sync import TaskSyncClient

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_backend(settings) -> TaskBackend:
    """
    One persistence strategy per run; the two are never merged.

    Raises BackendError if the remote backend is selected but not configured.
    """
    if getattr(settings, "backend", BACKEND_LOCAL) == BACKEND_REMOTE:
        client = RecordServiceClient(
            base_url=settings.record_base_url,
            project_id=settings.record_project_id,
            public_key=settings.record_public_key,
            timeout_seconds=settings.record_timeout_seconds,
        )
        logger.info("Using remote record service table=%s", settings.record_table)
        return RemoteTaskBackend(client, table=settings.record_table, owner=settings.owner)

    storage = JsonFileStorage(settings.storage_path)
    logger.info("Using local storage %s key=%s", storage.path, settings.storage_key)
    return LocalTaskBackend(storage, key=settings.storage_key, owner=settings.owner)


def create_initial_state(*, settings=None, backend: TaskBackend | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the backend) injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if backend is None:
        backend = create_backend(settings)

    store = TaskStore()
    return AppState(
        settings=settings,
        store=store,
        sync=TaskSyncClient(backend, store, reload_after_write=settings.reload_after_write),
        notices=NoticeBoard(ttl_seconds=settings.notice_ttl_seconds, max_items=settings.notice_max),
    )
