# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.edit_session import EditSession
from ..tasks.task_store import TaskStore
from ..tasks.task_sync import TaskSyncClient
from .notices import NoticeBoard
from .routes import HOME_PATH, Route, resolve


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    store: TaskStore
    sync: TaskSyncClient
    notices: NoticeBoard

    session: EditSession = field(default_factory=EditSession)
    path: str = HOME_PATH

    @property
    def route(self) -> Route:
        return resolve(self.path)
