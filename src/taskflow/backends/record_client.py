# src/taskflow/backends/record_client.py

"""
HTTP client for the remote record service.

The service exposes record tables under
    {base_url}/projects/{project_id}/tables/{table}/...
with JSON bodies shaped as {"success": bool, "data": ..., "message": str}.

Every failure (transport, HTTP status, success=false, malformed JSON) surfaces
as BackendError; HTTP 404 as RecordNotFoundError.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import BackendError, RecordNotFoundError

logger = logging.getLogger(__name__)


def _make_timeout(seconds: float) -> httpx.Timeout:
    # Connect fails fast; reads get the full budget.
    return httpx.Timeout(seconds, connect=min(5.0, seconds))


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        msg = body.get("message") or body.get("error")
        if msg:
            return str(msg)
    return f"HTTP {resp.status_code} {resp.reason_phrase}".strip()


class RecordServiceClient:
    """
    Thin synchronous client: one method per record-table operation.

    Credentials are passed through as headers; authentication itself is the
    service's business.
    """

    def __init__(
        self,
        *,
        base_url: str,
        project_id: str,
        public_key: str | None,
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not (base_url or "").strip():
            raise BackendError("Record service base URL is not set. Set TASKFLOW_RECORD_BASE_URL in your .env.")
        if not (project_id or "").strip():
            raise BackendError("Record service project id is not set. Set TASKFLOW_RECORD_PROJECT_ID in your .env.")
        if not (public_key or "").strip():
            raise BackendError("Record service key is not set. Set TASKFLOW_RECORD_PUBLIC_KEY in your .env.")

        root = f"{base_url.strip().rstrip('/')}/projects/{project_id.strip()}/"
        self._http = httpx.Client(
            base_url=root,
            headers={
                "X-Project-Id": project_id.strip(),
                "X-Public-Key": str(public_key).strip(),
                "Accept": "application/json",
            },
            timeout=_make_timeout(float(timeout_seconds)),
            transport=transport,
        )
        logger.info("RecordServiceClient ready base=%s", root)

    def close(self) -> None:
        self._http.close()

    # ---- low-level helpers ----

    def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        try:
            resp = self._http.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise BackendError(f"Record service request failed: {e}") from e

        if resp.status_code == 404:
            raise RecordNotFoundError(_error_message(resp), status_code=404)
        if resp.is_error:
            raise BackendError(_error_message(resp), status_code=resp.status_code)

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            body = resp.json()
        except ValueError as e:
            raise BackendError("Record service returned malformed JSON", status_code=resp.status_code) from e

        if not isinstance(body, dict):
            return body
        if body.get("success") is False:
            raise BackendError(str(body.get("message") or "Record service reported a failure"),
                               status_code=resp.status_code)
        return body.get("data")

    @staticmethod
    def _expect_record(data: Any, op: str) -> dict[str, Any]:
        if not isinstance(data, dict):
            raise BackendError(f"Record service returned no record for {op}")
        return data

    # ---- record-table operations ----

    def fetch_records(
        self,
        table: str,
        *,
        fields: list[str],
        where: list[dict[str, Any]] | None = None,
        order_by: list[dict[str, str]] | None = None,
    ) -> list[dict[str, Any]]:
        payload: dict[str, Any] = {"fields": list(fields)}
        if where:
            payload["where"] = where
        if order_by:
            payload["orderBy"] = order_by

        data = self._request("POST", f"tables/{table}/query", json=payload)
        if data is None:
            return []
        if not isinstance(data, list):
            raise BackendError("Record service returned a non-list for query")
        return [r for r in data if isinstance(r, dict)]

    def create_record(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        data = self._request("POST", f"tables/{table}/records", json=record)
        return self._expect_record(data, "create")

    def update_record(self, table: str, record_id: int, changes: dict[str, Any]) -> dict[str, Any]:
        data = self._request("PATCH", f"tables/{table}/records/{record_id}", json=changes)
        return self._expect_record(data, "update")

    def get_record_by_id(self, table: str, record_id: int) -> dict[str, Any]:
        data = self._request("GET", f"tables/{table}/records/{record_id}")
        return self._expect_record(data, "get")

    def delete_record(self, table: str, record_id: int) -> None:
        self._request("DELETE", f"tables/{table}/records/{record_id}")
