# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.cli.bootstrap import create_initial_state
from taskflow.core.state import AppState

from .fakes import FakeTaskBackend


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="TaskFlow",
        backend="local",
        reload_after_write=True,
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.json",
        storage_key="tasks",
        owner=None,
        notice_ttl_seconds=3.0,
        notice_max=5,
    )


@pytest.fixture()
def backend() -> FakeTaskBackend:
    return FakeTaskBackend()


@pytest.fixture()
def state(settings: SimpleNamespace, backend: FakeTaskBackend) -> AppState:
    """AppState wired with the in-memory backend fake."""
    return create_initial_state(settings=settings, backend=backend)


@pytest.fixture()
def local_state(settings: SimpleNamespace) -> AppState:
    """
    AppState over the real local file backend.

    The JSON storage round trip is part of what we want to test here.
    """
    return create_initial_state(settings=settings)
