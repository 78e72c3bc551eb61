# src/taskflow/backends/errors.py

from __future__ import annotations


class BackendError(RuntimeError):
    """A persistence backend (local storage or record service) failed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RecordNotFoundError(BackendError):
    """The requested task/record does not exist."""
