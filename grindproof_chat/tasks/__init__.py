"""Task service collaborator: models and client implementations."""

from grindproof_chat.tasks.enums import TaskStatus, TaskPriority
from grindproof_chat.tasks.models import Task
from grindproof_chat.tasks.service import (
    TaskServiceInterface,
    HttpTaskService,
    InMemoryTaskService,
)

__all__ = [
    "TaskStatus",
    "TaskPriority",
    "Task",
    "TaskServiceInterface",
    "HttpTaskService",
    "InMemoryTaskService",
]
