# tests/test_record_client.py

from __future__ import annotations

import json
from datetime import date

import httpx
import pytest

from taskflow.backends.errors import BackendError, RecordNotFoundError
from taskflow.backends.record_client import RecordServiceClient
from taskflow.backends.remote_backend import TASK_FIELDS, RemoteTaskBackend, fields_to_record, record_to_task
from taskflow.tasks.task_models import Priority


class FakeRecordService:
    """
    Minimal in-memory record service behind httpx.MockTransport.

    Records every request as (method, path, json body) for assertions.
    """

    def __init__(self) -> None:
        self.records: dict[int, dict] = {}
        self.requests: list[tuple[str, str, object]] = []
        self.headers: list[httpx.Headers] = []
        self._next_id = 1
        self._tick = 0

    def _stamp(self) -> str:
        self._tick += 1
        return f"2024-01-01T00:00:{self._tick:02d}Z"

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        path = request.url.path
        self.requests.append((request.method, path, body))
        self.headers.append(request.headers)

        prefix = "/api/projects/p1/tables/task/"
        assert path.startswith(prefix), path
        rest = path[len(prefix) :]

        if request.method == "POST" and rest == "query":
            rows = list(self.records.values())
            for cond in (body or {}).get("where", []):
                rows = [r for r in rows if r.get(cond["field"]) in cond["values"]]
            rows.sort(key=lambda r: r["CreatedOn"], reverse=True)
            return httpx.Response(200, json={"success": True, "data": rows})

        if request.method == "POST" and rest == "records":
            stamp = self._stamp()
            rec = {"Id": self._next_id, "completed": False, "CreatedOn": stamp, "ModifiedOn": stamp, **body}
            self.records[self._next_id] = rec
            self._next_id += 1
            return httpx.Response(200, json={"success": True, "data": rec})

        record_id = int(rest.split("/")[1])
        rec = self.records.get(record_id)
        if rec is None:
            return httpx.Response(404, json={"success": False, "message": "Record not found"})

        if request.method == "GET":
            return httpx.Response(200, json={"success": True, "data": rec})
        if request.method == "PATCH":
            rec.update(body)
            rec["ModifiedOn"] = self._stamp()
            return httpx.Response(200, json={"success": True, "data": rec})
        if request.method == "DELETE":
            del self.records[record_id]
            return httpx.Response(204)
        return httpx.Response(405)


def _client(handler) -> RecordServiceClient:
    return RecordServiceClient(
        base_url="https://records.example.test/api/",
        project_id="p1",
        public_key="pk-test",
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture()
def service() -> FakeRecordService:
    return FakeRecordService()


@pytest.fixture()
def remote(service: FakeRecordService) -> RemoteTaskBackend:
    return RemoteTaskBackend(_client(service), table="task")


def test_missing_configuration_is_rejected() -> None:
    with pytest.raises(BackendError, match="base URL"):
        RecordServiceClient(base_url="", project_id="p", public_key="k")
    with pytest.raises(BackendError, match="project id"):
        RecordServiceClient(base_url="https://x.test", project_id="", public_key="k")
    with pytest.raises(BackendError, match="key"):
        RecordServiceClient(base_url="https://x.test", project_id="p", public_key=None)


def test_list_requests_fields_and_newest_first_order(service, remote) -> None:
    remote.list_tasks()

    method, path, body = service.requests[-1]
    assert (method, path) == ("POST", "/api/projects/p1/tables/task/query")
    assert body["fields"] == TASK_FIELDS
    assert body["orderBy"] == [{"field": "CreatedOn", "direction": "desc"}]
    assert "where" not in body
    assert service.headers[-1]["X-Project-Id"] == "p1"
    assert service.headers[-1]["X-Public-Key"] == "pk-test"


def test_owner_scopes_query_and_create(service) -> None:
    backend = RemoteTaskBackend(_client(service), owner="u7")

    backend.create_task({"title": "mine"})
    service.records[99] = {"Id": 99, "title": "theirs", "Owner": "u8", "CreatedOn": "2024-01-02T00:00:00Z"}

    assert [t.title for t in backend.list_tasks()] == ["mine"]
    _, _, body = service.requests[-1]
    assert body["where"] == [{"field": "Owner", "operator": "EqualTo", "values": ["u7"]}]


def test_crud_through_the_service(service, remote) -> None:
    created = remote.create_task(
        {"title": "Buy milk", "description": "", "due_date": date(2024, 5, 1), "priority": Priority.LOW}
    )
    assert created.id == 1
    assert service.requests[-1][2] == {
        "title": "Buy milk",
        "description": "",
        "dueDate": "2024-05-01",
        "priority": "low",
    }

    remote.create_task({"title": "Second"})
    assert [t.title for t in remote.list_tasks()] == ["Second", "Buy milk"]

    updated = remote.update_task(1, {"completed": True})
    assert service.requests[-1][:2] == ("PATCH", "/api/projects/p1/tables/task/records/1")
    assert service.requests[-1][2] == {"completed": True}
    assert updated.completed is True
    assert updated.title == "Buy milk"

    assert remote.get_task(1).completed is True

    remote.delete_task(1)
    assert [t.id for t in remote.list_tasks()] == [2]


def test_not_found_maps_to_record_not_found(remote) -> None:
    with pytest.raises(RecordNotFoundError):
        remote.get_task(123)


def test_error_shapes_become_backend_errors() -> None:
    def failing(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("query"):
            return httpx.Response(200, json={"success": False, "message": "quota exceeded"})
        if request.url.path.endswith("records"):
            return httpx.Response(500, text="boom")
        return httpx.Response(200, content=b"<html>")

    client = _client(failing)
    with pytest.raises(BackendError, match="quota exceeded"):
        client.fetch_records("task", fields=["Id"])
    with pytest.raises(BackendError) as exc_info:
        client.create_record("task", {"title": "x"})
    assert exc_info.value.status_code == 500
    with pytest.raises(BackendError, match="malformed JSON"):
        client.get_record_by_id("task", 1)


def test_transport_errors_become_backend_errors() -> None:
    def offline(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendError, match="request failed"):
        _client(offline).fetch_records("task", fields=["Id"])


def test_record_mapping_handles_lookup_owner_and_bad_dates() -> None:
    task = record_to_task(
        {
            "Id": "12",
            "title": "t",
            "dueDate": "soon",
            "priority": "HIGH",
            "completed": None,
            "Owner": {"Id": 3, "Name": "Ann"},
        }
    )
    assert (task.id, task.due_date, task.priority, task.completed, task.owner) == (12, None, Priority.HIGH, False, "3")

    with pytest.raises(BackendError):
        record_to_task({"title": "no id"})

    assert fields_to_record({"due_date": None, "bogus": 1}) == {"dueDate": None}
