# src/taskflow/backends/remote_backend.py

from __future__ import annotations

import logging
from typing import Any

from ..core.ports import TaskFields
from ..tasks.task_models import Priority, Task, parse_due_date, parse_timestamp, utc_now
from .errors import BackendError
from .record_client import RecordServiceClient

logger = logging.getLogger(__name__)

TASK_FIELDS = [
    "Id",
    "title",
    "description",
    "dueDate",
    "priority",
    "completed",
    "CreatedOn",
    "ModifiedOn",
    "Owner",
]

# Task attribute -> record field (editable fields only).
_FIELD_MAP = {
    "title": "title",
    "description": "description",
    "due_date": "dueDate",
    "priority": "priority",
    "completed": "completed",
}


def record_to_task(rec: dict[str, Any]) -> Task:
    try:
        task_id = int(rec["Id"])
    except (KeyError, TypeError, ValueError) as e:
        raise BackendError(f"Record without a usable Id: {rec!r}") from e

    created_at = parse_timestamp(rec.get("CreatedOn")) or utc_now()
    try:
        due_date = parse_due_date(rec.get("dueDate"))
    except ValueError:
        logger.warning("Ignoring unparsable dueDate=%r on record %s", rec.get("dueDate"), task_id)
        due_date = None

    owner = rec.get("Owner")
    if isinstance(owner, dict):
        # Lookup fields come back as {"Id": ..., "Name": ...}.
        owner = owner.get("Id") or owner.get("Name")

    return Task(
        id=task_id,
        title=str(rec.get("title") or ""),
        description=str(rec.get("description") or ""),
        due_date=due_date,
        priority=Priority.parse(rec.get("priority")),
        completed=bool(rec.get("completed") or False),
        created_at=created_at,
        updated_at=parse_timestamp(rec.get("ModifiedOn")) or created_at,
        owner=str(owner) if owner not in (None, "") else None,
    )


def fields_to_record(fields: TaskFields) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for name, value in fields.items():
        key = _FIELD_MAP.get(name)
        if key is None:
            continue
        if name == "due_date":
            value = value.isoformat() if value else None
        elif name == "priority":
            value = Priority.parse(value).value
        elif name == "completed":
            value = bool(value)
        out[key] = value
    return out


class RemoteTaskBackend:
    """TaskBackend over the remote record service (ids are assigned by the service)."""

    def __init__(self, client: RecordServiceClient, *, table: str = "task", owner: str | None = None) -> None:
        self._client = client
        self._table = table
        self._owner = owner

    def close(self) -> None:
        self._client.close()

    def list_tasks(self) -> list[Task]:
        where = None
        if self._owner:
            where = [{"field": "Owner", "operator": "EqualTo", "values": [self._owner]}]

        records = self._client.fetch_records(
            self._table,
            fields=TASK_FIELDS,
            where=where,
            order_by=[{"field": "CreatedOn", "direction": "desc"}],
        )

        tasks: list[Task] = []
        for rec in records:
            try:
                tasks.append(record_to_task(rec))
            except BackendError:
                logger.warning("Skipping malformed record: %r", rec)
        return tasks

    def get_task(self, task_id: int) -> Task:
        return record_to_task(self._client.get_record_by_id(self._table, task_id))

    def create_task(self, fields: TaskFields) -> Task:
        record = fields_to_record(fields)
        if self._owner:
            record["Owner"] = self._owner
        return record_to_task(self._client.create_record(self._table, record))

    def update_task(self, task_id: int, changes: TaskFields) -> Task:
        rec = self._client.update_record(self._table, task_id, fields_to_record(changes))
        if "title" not in rec:
            # Partial echo: read back the full record.
            rec = self._client.get_record_by_id(self._table, task_id)
        return record_to_task(rec)

    def delete_task(self, task_id: int) -> None:
        self._client.delete_record(self._table, task_id)
