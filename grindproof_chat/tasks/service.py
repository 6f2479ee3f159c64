"""
GrindProof Chat Service - Task Service Clients

The chat service never stores tasks itself. All task reads and mutations go
through the task service: over HTTP at runtime, in memory for tests and local
development. All operations are scoped by owner_id.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import httpx

from grindproof_chat.config import settings
from grindproof_chat.errors import TaskServiceError
from grindproof_chat.schemas import TaskDraft
from grindproof_chat.tasks.enums import TaskPriority, TaskStatus
from grindproof_chat.tasks.models import Task

logger = logging.getLogger(__name__)


class TaskServiceInterface(ABC):
    """
    Abstract interface for the task service collaborator.

    Implementations raise TaskServiceError when the service rejects a call.
    """

    @abstractmethod
    async def create_task(self, owner_id: str, draft: TaskDraft) -> Task:
        pass

    @abstractmethod
    async def delete_task(self, owner_id: str, task_id: str) -> Optional[Task]:
        """Delete a task; returns the deleted task when the service reports it."""
        pass

    @abstractmethod
    async def list_open_tasks(self, owner_id: str, limit: int) -> List[Task]:
        """Most recently created open tasks first."""
        pass

    @abstractmethod
    async def list_tasks(self, owner_id: str) -> List[Task]:
        """All tasks of the owner, most recent first."""
        pass


class HttpTaskService(TaskServiceInterface):
    """Task service reached over HTTP; the user id travels as X-User-Id."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.TASK_SERVICE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.TASK_SERVICE_TIMEOUT

    async def _request(
        self,
        method: str,
        path: str,
        owner_id: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> httpx.Response:
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout) as client:
            try:
                response = await client.request(
                    method,
                    path,
                    json=json,
                    params=params,
                    headers={"X-User-Id": owner_id},
                )
            except httpx.HTTPError as e:
                logger.warning(f"Task service unreachable: {method} {path}: {e}")
                raise TaskServiceError(f"Task service unavailable: {e}") from e

        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.warning(f"Task service rejected {method} {path}: {response.status_code} {detail}")
            raise TaskServiceError(detail, status_code=response.status_code)
        return response

    async def create_task(self, owner_id: str, draft: TaskDraft) -> Task:
        payload = draft.model_dump(mode="json")
        response = await self._request("POST", "/tasks", owner_id, json=payload)
        return Task.from_dict(response.json())

    async def delete_task(self, owner_id: str, task_id: str) -> Optional[Task]:
        response = await self._request("DELETE", f"/tasks/{task_id}", owner_id)
        if response.status_code == 204 or not response.content:
            return None
        return Task.from_dict(response.json())

    async def list_open_tasks(self, owner_id: str, limit: int) -> List[Task]:
        response = await self._request(
            "GET",
            "/tasks",
            owner_id,
            params={"status": TaskStatus.PENDING.value, "limit": limit},
        )
        return [Task.from_dict(item) for item in response.json()][:limit]

    async def list_tasks(self, owner_id: str) -> List[Task]:
        response = await self._request("GET", "/tasks", owner_id)
        return [Task.from_dict(item) for item in response.json()]


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("error") or body)
    return str(body)


class InMemoryTaskService(TaskServiceInterface):
    """
    In-memory implementation for CI-safe testing and local development.
    """

    def __init__(self):
        self._tasks: Dict[str, Task] = {}
        self.calls: List[tuple] = []

    def clear(self) -> None:
        self._tasks.clear()
        self.calls.clear()

    def add(self, task: Task) -> Task:
        """Seed a task directly (synchronous helper for tests)."""
        self._tasks[task.id] = task
        return task

    def get(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    async def create_task(self, owner_id: str, draft: TaskDraft) -> Task:
        self.calls.append(("create", owner_id, draft.title))
        if not draft.title.strip():
            raise TaskServiceError("Task title is required", status_code=422)
        task = Task.create(
            owner_id=owner_id,
            title=draft.title.strip(),
            priority=TaskPriority(draft.priority),
            description=draft.description,
            due_date=draft.due_date,
            start_time=draft.start_time,
            end_time=draft.end_time,
            tags=draft.tags,
        )
        self._tasks[task.id] = task
        return task

    async def delete_task(self, owner_id: str, task_id: str) -> Optional[Task]:
        self.calls.append(("delete", owner_id, task_id))
        task = self._tasks.get(task_id)
        if task is None or task.owner_id != owner_id:
            raise TaskServiceError(f"Task {task_id} not found", status_code=404)
        del self._tasks[task_id]
        return task

    async def list_open_tasks(self, owner_id: str, limit: int) -> List[Task]:
        tasks = [t for t in await self.list_tasks(owner_id) if t.is_open]
        return tasks[:limit]

    async def list_tasks(self, owner_id: str) -> List[Task]:
        results = [t for t in self._tasks.values() if t.owner_id == owner_id]
        results.sort(key=lambda t: t.created_at, reverse=True)
        return results
