# src/taskflow/tasks/task_models.py

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any


class TaskValidationError(ValueError):
    """User input that must be fixed before anything is written."""


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: str | None) -> Priority:
        """Lenient parse: unknown or empty values become MEDIUM."""
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.MEDIUM


class TaskFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str) -> TaskFilter:
        """Strict parse: raises TaskValidationError for unknown names."""
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            names = ", ".join(f.value for f in cls)
            raise TaskValidationError(f"Unknown filter {raw!r} (use one of: {names})") from None


# YYYY-MM-DD, optionally followed by a time ("T12:00:00Z", " 12:00").
_DUE_DATE = re.compile(r"(\d{4}-\d{2}-\d{2})(?:[T ]\d{2}:\d{2}\S*)?")


def utc_now() -> datetime:
    return datetime.now(UTC)


def parse_due_date(raw: str | date | None) -> date | None:
    """
    Accept a date, a 'YYYY-MM-DD' string, or empty/None.
    A datetime string (date, then 'T' or a space, then a time) keeps its date part.
    """
    if raw is None or isinstance(raw, date):
        return raw
    s = str(raw).strip()
    if not s or s.lower() in ("none", "null"):
        return None
    m = _DUE_DATE.fullmatch(s)
    try:
        if m is None:
            raise ValueError(s)
        return date.fromisoformat(m.group(1))
    except ValueError:
        raise TaskValidationError(f"Invalid due date {s!r} (expected YYYY-MM-DD)") from None


def parse_timestamp(raw: Any) -> datetime | None:
    """Parse an ISO timestamp (with or without 'Z'); naive values are taken as UTC."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        dt = raw
    else:
        try:
            dt = datetime.fromisoformat(str(raw).strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


@dataclass(slots=True)
class Task:
    id: int
    title: str
    description: str = ""
    due_date: date | None = None
    priority: Priority = Priority.MEDIUM
    completed: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    owner: str | None = None


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    pending: int
    completed: int


@dataclass(slots=True)
class TaskForm:
    """
    Values of the task form (what the user is typing).

    due_date stays a raw string until submission so that a half-typed value
    is never lost; validate() turns the form into backend fields.
    """

    title: str = ""
    description: str = ""
    due_date: str = ""
    priority: Priority = Priority.MEDIUM

    @classmethod
    def from_task(cls, task: Task) -> TaskForm:
        return cls(
            title=task.title,
            description=task.description or "",
            due_date=task.due_date.isoformat() if task.due_date else "",
            priority=task.priority or Priority.MEDIUM,
        )

    def reset(self) -> None:
        self.title = ""
        self.description = ""
        self.due_date = ""
        self.priority = Priority.MEDIUM

    def is_blank(self) -> bool:
        return self == TaskForm()

    def validate(self) -> dict[str, Any]:
        """
        Return the editable fields of a task, or raise TaskValidationError.

        The returned dict never contains 'completed': edits do not touch it.
        """
        title = (self.title or "").strip()
        if not title:
            raise TaskValidationError("Please enter a task title")

        return {
            "title": title,
            "description": (self.description or "").strip(),
            "due_date": parse_due_date(self.due_date),
            "priority": Priority.parse(self.priority),
        }
