# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real keys. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKFLOW_APP_NAME": "App display name (default: TaskFlow).",
    "TASKFLOW_LOG_LEVEL": "Console logging level (default: INFO).",
    # Persistence
    "TASKFLOW_BACKEND": "Persistence backend: local or remote (default: local).",
    "TASKFLOW_RELOAD_AFTER_WRITE": "Reload the full list after each write (true/false, default: true).",
    "TASKFLOW_OWNER": "Optional owning-user reference; scopes the task list.",
    # Paths (gitignored)
    "TASKFLOW_DATA_DIR": "Local data directory (default: .local/taskflow).",
    "TASKFLOW_STORAGE_PATH": "Local key-value JSON file (default: <data_dir>/storage.json).",
    "TASKFLOW_STORAGE_KEY": "Key holding the task list in local storage (default: tasks).",
    # Remote record service
    "TASKFLOW_RECORD_BASE_URL": "Record service base URL (required for remote).",
    "TASKFLOW_RECORD_PROJECT_ID": "Record service project id (required for remote).",
    "TASKFLOW_RECORD_PUBLIC_KEY": "Record service public key (required for remote).",
    "TASKFLOW_RECORD_TABLE": "Record table holding tasks (default: task).",
    "TASKFLOW_RECORD_TIMEOUT_SECONDS": "HTTP timeout in seconds (default: 10).",
    # Notices
    "TASKFLOW_NOTICE_TTL_SECONDS": "Seconds before a notice auto-dismisses; 0 keeps it (default: 3).",
    "TASKFLOW_NOTICE_MAX": "Max notices kept at once (default: 5).",
}
