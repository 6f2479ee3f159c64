"""
GrindProof Chat Service - Task Service Client Tests

The HTTP client is exercised with a patched httpx.AsyncClient; the in-memory
implementation is what every other test runs against.
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from grindproof_chat.errors import TaskServiceError
from grindproof_chat.schemas import TaskDraft
from grindproof_chat.tasks.enums import TaskPriority, TaskStatus
from grindproof_chat.tasks.service import HttpTaskService
from tests.conftest import OTHER_USER_ID, USER_ID

TASK_DOC = {
    "id": "3f2b8c1e-9a4d-4e6f-8b7a-1c2d3e4f5a6b",
    "user_id": USER_ID,
    "title": "workout",
    "status": "pending",
    "priority": "high",
    "due_date": "2025-01-16T00:00:00Z",
    "start_time": "06:00",
    "created_at": "2025-01-15T12:00:00Z",
    "updated_at": "2025-01-15T12:00:00Z",
}


def _mock_client(mock_client_class, status_code=200, body=None, content=b"{}"):
    mock_response = MagicMock()
    mock_response.status_code = status_code
    mock_response.content = content
    mock_response.text = ""
    mock_response.json.return_value = body

    mock_client = AsyncMock()
    mock_client.__aenter__.return_value = mock_client
    mock_client.__aexit__.return_value = None
    mock_client.request = AsyncMock(return_value=mock_response)
    mock_client_class.return_value = mock_client
    return mock_client


class TestHttpTaskService:

    @patch("grindproof_chat.tasks.service.httpx.AsyncClient")
    async def test_create_task(self, mock_client_class):
        mock_client = _mock_client(mock_client_class, status_code=201, body=TASK_DOC)
        draft = TaskDraft(title="workout", due_date=date(2025, 1, 16), start_time="6am", priority="high")

        task = await HttpTaskService(base_url="http://tasks").create_task(USER_ID, draft)

        assert task.title == "workout"
        assert task.owner_id == USER_ID
        assert task.priority == TaskPriority.HIGH
        assert task.due_date == date(2025, 1, 16)
        args, kwargs = mock_client.request.call_args
        assert args == ("POST", "/tasks")
        assert kwargs["headers"] == {"X-User-Id": USER_ID}
        assert kwargs["json"]["due_date"] == "2025-01-16"
        assert kwargs["json"]["start_time"] == "06:00"

    @patch("grindproof_chat.tasks.service.httpx.AsyncClient")
    async def test_list_open_tasks(self, mock_client_class):
        mock_client = _mock_client(mock_client_class, body=[TASK_DOC, {**TASK_DOC, "id": "x", "title": "read"}])

        tasks = await HttpTaskService(base_url="http://tasks").list_open_tasks(USER_ID, 1)

        assert [t.title for t in tasks] == ["workout"]
        assert tasks[0].status == TaskStatus.PENDING
        _, kwargs = mock_client.request.call_args
        assert kwargs["params"] == {"status": "pending", "limit": 1}

    @patch("grindproof_chat.tasks.service.httpx.AsyncClient")
    async def test_delete_no_content(self, mock_client_class):
        _mock_client(mock_client_class, status_code=204, content=b"")

        result = await HttpTaskService(base_url="http://tasks").delete_task(USER_ID, TASK_DOC["id"])

        assert result is None

    @patch("grindproof_chat.tasks.service.httpx.AsyncClient")
    async def test_rejection_raises_with_detail(self, mock_client_class):
        _mock_client(mock_client_class, status_code=404, body={"detail": "Task not found"})

        with pytest.raises(TaskServiceError) as exc_info:
            await HttpTaskService(base_url="http://tasks").delete_task(USER_ID, "missing")

        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == "Task not found"

    @patch("grindproof_chat.tasks.service.httpx.AsyncClient")
    async def test_unreachable_service(self, mock_client_class):
        mock_client = _mock_client(mock_client_class)
        mock_client.request.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(TaskServiceError) as exc_info:
            await HttpTaskService(base_url="http://tasks").list_tasks(USER_ID)

        assert "Task service unavailable" in str(exc_info.value)


class TestInMemoryTaskService:

    async def test_scoped_by_owner(self, task_service, make_task):
        make_task("Mine")
        make_task("Theirs", owner_id=OTHER_USER_ID)

        assert [t.title for t in await task_service.list_tasks(USER_ID)] == ["Mine"]

    async def test_open_tasks_newest_first(self, task_service, make_task):
        make_task("Older")
        make_task("Done", status=TaskStatus.COMPLETED)
        make_task("Newer")

        tasks = await task_service.list_open_tasks(USER_ID, 20)

        assert [t.title for t in tasks] == ["Newer", "Older"]
