# src/taskflow/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app, passed explicitly to whatever needs it.
- No secrets required at import time (the remote backend validates its own keys).
- Nothing is read from the environment until get_settings() is first called.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "TASKFLOW"

BACKEND_LOCAL = "local"
BACKEND_REMOTE = "remote"
BACKENDS = (BACKEND_LOCAL, BACKEND_REMOTE)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv() -> None:
    """Load .env from the working directory; real environment variables win."""
    load_dotenv(find_dotenv(usecwd=True), override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Persistence ----
    backend: str
    reload_after_write: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_path: Path
    storage_key: str

    # ---- Remote record service ----
    record_base_url: str
    record_project_id: str
    record_public_key: Optional[str]
    record_table: str
    record_timeout_seconds: float
    owner: Optional[str]

    # ---- Notices ----
    notice_ttl_seconds: float
    notice_max: int

    @property
    def uses_remote(self) -> bool:
        return self.backend == BACKEND_REMOTE

    @staticmethod
    def from_env() -> "Settings":
        _load_dotenv()

        app_name = _env(_k("APP_NAME"), "TaskFlow").strip() or "TaskFlow"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        backend = _env(_k("BACKEND"), BACKEND_LOCAL).strip().lower()
        if backend not in BACKENDS:
            backend = BACKEND_LOCAL
        reload_after_write = _env_bool(_k("RELOAD_AFTER_WRITE"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskflow"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "storage.json")
        storage_key = _env(_k("STORAGE_KEY"), "tasks").strip() or "tasks"

        record_base_url = _env(_k("RECORD_BASE_URL")).strip().rstrip("/")
        record_project_id = _env(_k("RECORD_PROJECT_ID")).strip()
        record_public_key = _env(_k("RECORD_PUBLIC_KEY")).strip() or None
        record_table = _env(_k("RECORD_TABLE"), "task").strip() or "task"
        record_timeout_seconds = max(0.5, _env_float(_k("RECORD_TIMEOUT_SECONDS"), 10.0))
        owner = _env(_k("OWNER")).strip() or None

        notice_ttl_seconds = max(0.0, _env_float(_k("NOTICE_TTL_SECONDS"), 3.0))
        notice_max = max(1, _env_int(_k("NOTICE_MAX"), 5))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            backend=backend,
            reload_after_write=reload_after_write,
            data_dir=data_dir,
            storage_path=storage_path,
            storage_key=storage_key,
            record_base_url=record_base_url,
            record_project_id=record_project_id,
            record_public_key=record_public_key,
            record_table=record_table,
            record_timeout_seconds=record_timeout_seconds,
            owner=owner,
            notice_ttl_seconds=notice_ttl_seconds,
            notice_max=notice_max,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
