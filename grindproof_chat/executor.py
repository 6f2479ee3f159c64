"""
GrindProof Chat Service - Command Executor

Hands a fully resolved command to the task service. Each command calls the
service exactly once; a rejection is reported back as a failed result and is
never retried.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from grindproof_chat import composer
from grindproof_chat.errors import TaskServiceError
from grindproof_chat.schemas import TaskDraft
from grindproof_chat.tasks.service import TaskServiceInterface

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    success: bool
    text: str
    command: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


class CommandExecutor:

    def __init__(self, task_service: TaskServiceInterface):
        self._task_service = task_service

    async def create_task(self, owner_id: str, draft: TaskDraft) -> ExecutionResult:
        try:
            task = await self._task_service.create_task(owner_id, draft)
        except TaskServiceError as e:
            logger.warning(f"Task creation rejected for user {owner_id}: {e}")
            return ExecutionResult(success=False, text=composer.action_failed("create", str(e)))

        logger.info(f"Created task via chat: {task.id} for user {owner_id}")
        return ExecutionResult(
            success=True,
            text=composer.task_created(task),
            command="create_task",
            data={"task": task.to_dict()},
        )

    async def delete_task(self, owner_id: str, task_id: str) -> ExecutionResult:
        try:
            task = await self._task_service.delete_task(owner_id, task_id)
        except TaskServiceError as e:
            logger.warning(f"Task deletion rejected for user {owner_id}, task {task_id}: {e}")
            return ExecutionResult(success=False, text=composer.action_failed("delete", str(e)))

        title = task.title if task else None
        logger.info(f"Deleted task via chat: {task_id} for user {owner_id}")
        return ExecutionResult(
            success=True,
            text=composer.task_deleted(title),
            command="delete_task",
            data={"taskId": task_id, "title": title},
        )
