"""
HTTP client for the remote browser automation task service (Browser Use).

A task is created from a natural-language description, then its status
is fetched until it leaves the running states.  Terminal success is
signalled by ``isSuccess``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from release_validator.core.config import settings
from release_validator.core.constants import NON_TERMINAL_TASK_STATUSES
from release_validator.core.logging import get_logger
from release_validator.pipeline.errors import TaskError, UpstreamApiError

logger = get_logger(__name__)


@dataclass(frozen=True)
class CreatedTask:
    id: str


@dataclass(frozen=True)
class RemoteTask:
    id: str
    status: str
    is_success: bool | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status not in NON_TERMINAL_TASK_STATUSES


class BrowserTaskClient:
    """Creates and inspects remote browser tasks."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.BROWSER_USE_BASE_URL).rstrip("/")
        self._client = httpx.AsyncClient(
            headers={
                "X-Browser-Use-API-Key": api_key,
                "Content-Type": "application/json",
            },
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_task(self, description: str) -> CreatedTask:
        url = f"{self.base_url}/tasks"
        response = await self._client.post(url, json={"task": description})
        data = self._json(response, "create browser task", url)

        task_id = data.get("id")
        if not task_id:
            raise TaskError("Task creation response carried no id")
        return CreatedTask(id=str(task_id))

    async def get_task(self, task_id: str) -> RemoteTask:
        url = f"{self.base_url}/tasks/{task_id}"
        response = await self._client.get(url)
        data = self._json(response, "fetch browser task", url, task_id=task_id)

        status = data.get("status")
        if not isinstance(status, str):
            raise TaskError(f"Task {task_id} response carried no status", task_id=task_id)
        return RemoteTask(id=task_id, status=status, is_success=data.get("isSuccess"))

    @staticmethod
    def _json(
        response: httpx.Response,
        operation: str,
        url: str,
        task_id: str | None = None,
    ) -> dict[str, Any]:
        if not response.is_success:
            raise UpstreamApiError(operation, response.status_code, url=url)
        try:
            data = response.json()
        except ValueError as exc:
            raise TaskError(f"Malformed response from {operation}", task_id=task_id) from exc
        if not isinstance(data, dict):
            raise TaskError(f"Unexpected payload from {operation}", task_id=task_id)
        return data
