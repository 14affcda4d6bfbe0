"""Todoist provider adapter (REST API v1)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from types import TracebackType
from typing import Any

import httpx

from tomtimer.core.contracts.exceptions import AuthenticationError, ProviderError, RemoteItemNotFoundError
from tomtimer.core.contracts.provider import Provider
from tomtimer.core.contracts.record import Collection, CreateRecordInput, RemoteRecord, UpdateRecordInput
from tomtimer.core.providers.todoist._retrying_transport import RetryingTransport

_LOG = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.todoist.com/api/v1"
_PAGE_LIMIT = 200
_MAX_PAGES = 100
# Widest range the completed-tasks endpoint accepts per request.
_COMPLETED_WINDOW = timedelta(days=89)


class TodoistProvider(Provider):
    """Maps Todoist projects to collections and Todoist tasks to records.

    ``content`` carries the title and ``description`` the encoded metadata.
    ``GET /tasks`` only lists open tasks, so :meth:`fetch_records` also reads
    the tasks closed within the last 89 days from the completed-tasks endpoint.
    Older closed tasks are not listed; the sync engine confirms those with
    :meth:`get_record` before deleting their local counterpart.
    """

    def __init__(
        self,
        *,
        token: str,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = 3,
    ) -> None:
        self._token = token
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._transport = transport
        self._max_retries = max_retries
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> TodoistProvider:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            transport=RetryingTransport(transport=self._transport, max_retries=self._max_retries),
            headers={"Authorization": f"Bearer {self._token}"},
            timeout=httpx.Timeout(30.0),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def authenticate(self) -> None:
        await self._request("GET", "/projects", params={"limit": 1})

    async def list_collections(self) -> list[Collection]:
        projects = await self._paginate("/projects", {})
        return [Collection(id=str(project["id"]), name=str(project.get("name", ""))) for project in projects]

    async def fetch_records(self, collection_id: str) -> list[RemoteRecord]:
        open_tasks = await self._paginate("/tasks", {"project_id": collection_id})
        until = datetime.now(UTC)
        closed_tasks = await self._paginate(
            "/tasks/completed/by_completion_date",
            {
                "project_id": collection_id,
                "since": _format_datetime(until - _COMPLETED_WINDOW),
                "until": _format_datetime(until),
            },
            key="items",
        )
        _LOG.debug(
            "Fetched %d open and %d completed tasks from project %s", len(open_tasks), len(closed_tasks), collection_id
        )

        records = [self._record_from_task(task) for task in open_tasks]
        seen = {record.remote_identifier for record in records}
        for task in closed_tasks:
            record = self._record_from_task({**task, "checked": True})
            if record.remote_identifier not in seen:
                seen.add(record.remote_identifier)
                records.append(record)
        return records

    async def get_record(self, remote_identifier: str) -> RemoteRecord:
        response = await self._request("GET", f"/tasks/{remote_identifier}", remote_identifier=remote_identifier)
        task = self._json(response)
        if task.get("is_deleted"):
            raise RemoteItemNotFoundError(
                f"Todoist task {remote_identifier} was deleted", remote_identifier=remote_identifier
            )
        return self._record_from_task(task)

    async def create_record(self, collection_id: str, input: CreateRecordInput) -> str:
        response = await self._request(
            "POST",
            "/tasks",
            json={"content": input.title, "description": input.notes, "project_id": collection_id},
        )
        task_id = self._json(response).get("id")
        if not task_id:
            raise ProviderError("Todoist did not return an id for the created task")
        remote_identifier = str(task_id)
        if input.completed:
            await self._set_completed(remote_identifier, True)
        return remote_identifier

    async def update_record(self, remote_identifier: str, input: UpdateRecordInput) -> None:
        response = await self._request(
            "POST",
            f"/tasks/{remote_identifier}",
            json={"content": input.title, "description": input.notes},
            remote_identifier=remote_identifier,
        )
        if _is_checked(self._json(response)) != input.completed:
            await self._set_completed(remote_identifier, input.completed)

    async def delete_record(self, remote_identifier: str) -> None:
        await self._request("DELETE", f"/tasks/{remote_identifier}", remote_identifier=remote_identifier)

    async def _set_completed(self, remote_identifier: str, completed: bool) -> None:
        action = "close" if completed else "reopen"
        await self._request("POST", f"/tasks/{remote_identifier}/{action}", remote_identifier=remote_identifier)

    async def _paginate(self, path: str, params: dict[str, Any], *, key: str = "results") -> list[dict[str, Any]]:
        results: list[dict[str, Any]] = []
        cursor: str | None = None
        for _ in range(_MAX_PAGES):
            page_params = {**params, "limit": _PAGE_LIMIT}
            if cursor:
                page_params["cursor"] = cursor
            payload = self._json(await self._request("GET", path, params=page_params))
            page = payload.get(key)
            if not isinstance(page, list):
                raise ProviderError(f"Unexpected Todoist response for {path}")
            results.extend(item for item in page if isinstance(item, dict) and item.get("id"))
            cursor = payload.get("next_cursor")
            if not cursor:
                return results
        raise ProviderError(f"Todoist pagination for {path} exceeded {_MAX_PAGES} pages")

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        remote_identifier: str | None = None,
    ) -> httpx.Response:
        client = self._require_client()
        try:
            response = await client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            raise ProviderError(f"Todoist request {method} {path} failed: {exc}") from exc

        status = response.status_code
        if status in {401, 403}:
            raise AuthenticationError(f"Todoist rejected the API token ({status})")
        if status == 404 and remote_identifier is not None:
            raise RemoteItemNotFoundError(
                f"Todoist task {remote_identifier} not found",
                remote_identifier=remote_identifier,
            )
        if status >= 400:
            raise ProviderError(f"Todoist request {method} {path} failed with {status}: {response.text[:200]}")
        return response

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError("Todoist returned a non-JSON response") from exc
        if not isinstance(payload, dict):
            raise ProviderError("Todoist returned an unexpected payload")
        return payload

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise ProviderError("Provider is not initialized. Use 'async with'.")
        return self._client

    @staticmethod
    def _record_from_task(task: dict[str, Any]) -> RemoteRecord:
        return RemoteRecord(
            remote_identifier=str(task["id"]),
            title=str(task.get("content") or ""),
            notes=task.get("description") or None,
            completed=_is_checked(task),
            last_modified=_parse_datetime(task.get("updated_at") or task.get("added_at")),
        )


def _is_checked(task: dict[str, Any]) -> bool:
    return bool(task.get("checked", task.get("is_completed", False)))


def _format_datetime(value: datetime) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def _parse_datetime(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None
