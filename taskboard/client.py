"""Async HTTP client for the task API."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from taskboard.core.errors import TaskApiError, TaskNotFoundError, TaskValidationError
from taskboard.core.settings import get_client_settings
from taskboard.core.validation import FieldError
from taskboard.models.task_models import Task

log = structlog.get_logger(__name__)


def _payload(fields: dict[str, Any]) -> dict[str, Any]:
    # Dates go over the wire as ISO strings.
    return {k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in fields.items()}


class TaskApiClient:
    """Talks to `/v1/tasks` on the API configured by `VITE_API_URL`."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        api_key: str | None = None,
        api_key_header: str = "X-API-Key",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if base_url is None:
            base_url = get_client_settings().VITE_API_URL
        headers = {api_key_header: api_key} if api_key else None
        self.base_url = base_url
        self._http = httpx.AsyncClient(
            base_url=base_url, headers=headers, timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> TaskApiClient:
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        res = await self._http.request(method, path, **kwargs)
        if res.is_success:
            return res
        if res.status_code == 422:
            try:
                body = res.json()
            except ValueError:
                body = None
            errors = body.get("errors") if isinstance(body, dict) else None
            if isinstance(errors, list) and errors:
                raise TaskValidationError(
                    [FieldError(e["field"], e["kind"], e["message"]) for e in errors]
                )
        if res.status_code == 404:
            raise TaskNotFoundError(path.rsplit("/", 1)[-1])
        log.warning("task_api_request_failed", method=method, path=path, status=res.status_code)
        raise TaskApiError(res.status_code, res.text or None)

    async def create_task(self, **fields: Any) -> Task:
        res = await self._request("POST", "/v1/tasks", json=_payload(fields))
        return Task.model_validate(res.json())

    async def list_tasks(self, *, status: str | None = None, limit: int = 100) -> list[Task]:
        params: dict[str, Any] = {"limit": limit}
        if status is not None:
            params["status"] = status
        res = await self._request("GET", "/v1/tasks", params=params)
        return [Task.model_validate(item) for item in res.json()]

    async def get_task(self, task_id: str) -> Task:
        res = await self._request("GET", f"/v1/tasks/{task_id}")
        return Task.model_validate(res.json())

    async def update_task(self, task_id: str, **changes: Any) -> Task:
        res = await self._request("PATCH", f"/v1/tasks/{task_id}", json=_payload(changes))
        return Task.model_validate(res.json())

    async def replace_task(self, task_id: str, **fields: Any) -> Task:
        res = await self._request("PUT", f"/v1/tasks/{task_id}", json=_payload(fields))
        return Task.model_validate(res.json())

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/v1/tasks/{task_id}")
