"""
GrindProof Chat Service - Test Configuration

Shared fixtures for CI-safe testing: no task service, no model provider.
"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Union

import pytest
from fastapi.testclient import TestClient

from grindproof_chat.llm import TextCompletionClient
from grindproof_chat.main import app
from grindproof_chat.router import get_chat_service, set_chat_service
from grindproof_chat.service import ChatInterpreterService
from grindproof_chat.tasks.enums import TaskPriority, TaskStatus
from grindproof_chat.tasks.models import Task
from grindproof_chat.tasks.service import InMemoryTaskService

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


class FakeLLMClient(TextCompletionClient):
    """
    Scripted completion client.

    Each call consumes the next scripted item; an exception item is raised
    instead of returned. Calls are recorded for assertions.
    """

    def __init__(self, *responses: Union[str, Exception]):
        self._responses: List[Union[str, Exception]] = list(responses)
        self.calls: List[tuple] = []

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if not self._responses:
            return ""
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


# Time control fixtures for deterministic date handling
class FrozenClock:
    """A clock that returns a fixed time for deterministic testing."""

    def __init__(self, frozen_time: datetime):
        self._frozen_time = frozen_time

    def __call__(self) -> datetime:
        return self._frozen_time

    def set(self, new_time: datetime) -> None:
        self._frozen_time = new_time

    def advance(self, delta: timedelta) -> None:
        self._frozen_time += delta


@pytest.fixture
def frozen_now() -> datetime:
    """A fixed 'now' time for testing (a Wednesday)."""
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def frozen_clock(frozen_now) -> FrozenClock:
    return FrozenClock(frozen_now)


@pytest.fixture
def task_service() -> InMemoryTaskService:
    """Provide a fresh in-memory task service for each test."""
    return InMemoryTaskService()


@pytest.fixture
def make_task(task_service, frozen_now):
    """
    Seed a task for USER_ID.

    Tasks seeded later are newer, so they sort first in open-task lists.
    """
    counter = {"n": 0}

    def _make(
        title: str,
        owner_id: str = USER_ID,
        status: TaskStatus = TaskStatus.PENDING,
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_date: Optional[date] = None,
        created_at: Optional[datetime] = None,
    ) -> Task:
        counter["n"] += 1
        task = Task.create(
            owner_id=owner_id,
            title=title,
            status=status,
            priority=priority,
            due_date=due_date,
        )
        task.created_at = created_at or frozen_now - timedelta(days=1) + timedelta(minutes=counter["n"])
        task.updated_at = task.created_at
        return task_service.add(task)

    return _make


@pytest.fixture
def chat_service(task_service, frozen_clock) -> ChatInterpreterService:
    """Interpreter without a language model (deterministic fallbacks)."""
    return ChatInterpreterService(task_service, llm_client=None, clock=frozen_clock)


@pytest.fixture
def client(chat_service):
    """Create test client with the in-memory chat service."""
    original = get_chat_service()
    set_chat_service(chat_service)
    yield TestClient(app)
    set_chat_service(original)


@pytest.fixture
def user_headers() -> dict:
    return {"X-User-Id": USER_ID}
