"""
GrindProof Chat Service - Command Executor Tests
"""

from unittest.mock import AsyncMock

from grindproof_chat.errors import TaskServiceError
from grindproof_chat.executor import CommandExecutor
from grindproof_chat.schemas import TaskDraft
from tests.conftest import OTHER_USER_ID, USER_ID


class TestCommandExecutor:

    async def test_create_task(self, task_service):
        executor = CommandExecutor(task_service)
        result = await executor.create_task(USER_ID, TaskDraft(title="buy milk", priority="low"))

        assert result.success
        assert result.command == "create_task"
        assert result.data["task"]["title"] == "buy milk"
        assert result.data["task"]["priority"] == "low"
        assert "buy milk" in result.text
        assert len(await task_service.list_tasks(USER_ID)) == 1

    async def test_create_rejected_is_not_retried(self, task_service):
        executor = CommandExecutor(task_service)
        result = await executor.create_task(USER_ID, TaskDraft(title=""))

        assert not result.success
        assert result.command is None
        assert "Task title is required" in result.text
        assert task_service.calls == [("create", USER_ID, "")]

    async def test_delete_task(self, task_service, make_task):
        task = make_task("Write report")
        result = await CommandExecutor(task_service).delete_task(USER_ID, task.id)

        assert result.success
        assert result.command == "delete_task"
        assert result.data == {"taskId": task.id, "title": "Write report"}
        assert task_service.get(task.id) is None

    async def test_delete_other_users_task_fails(self, task_service, make_task):
        task = make_task("Write report", owner_id=OTHER_USER_ID)
        result = await CommandExecutor(task_service).delete_task(USER_ID, task.id)

        assert not result.success
        assert "not found" in result.text
        assert task_service.get(task.id) is not None

    async def test_service_error_text_is_surfaced(self):
        service = AsyncMock()
        service.delete_task.side_effect = TaskServiceError("Task service unavailable: boom")

        result = await CommandExecutor(service).delete_task(USER_ID, "some-id")

        assert not result.success
        assert "Task service unavailable: boom" in result.text
        service.delete_task.assert_awaited_once_with(USER_ID, "some-id")
