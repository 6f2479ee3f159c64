"""
GrindProof Chat Service - Task Models

Task record as returned by the task service.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional
import uuid

from grindproof_chat.tasks.enums import TaskStatus, TaskPriority


def _utcnow() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _parse_datetime(value) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif value:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    else:
        return _utcnow()
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Task:
    """Task entity owned by the task service."""

    id: str
    owner_id: str
    title: str
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    description: Optional[str] = None
    due_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def create(
        cls,
        owner_id: str,
        title: str,
        priority: TaskPriority = TaskPriority.MEDIUM,
        status: TaskStatus = TaskStatus.PENDING,
        description: Optional[str] = None,
        due_date: Optional[date] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> "Task":
        """Create a new task with generated ID."""
        now = _utcnow()
        return cls(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            title=title,
            status=status,
            priority=priority,
            description=description,
            due_date=due_date,
            start_time=start_time,
            end_time=end_time,
            tags=list(tags or []),
            created_at=now,
            updated_at=now,
        )

    @property
    def is_open(self) -> bool:
        return self.status == TaskStatus.PENDING

    def to_dict(self) -> dict:
        """Convert task to the task service wire format."""
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "title": self.title,
            "status": self.status.value,
            "priority": self.priority.value,
            "description": self.description,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "tags": list(self.tags),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create task from a task service document."""
        due_date = data.get("due_date")
        return cls(
            id=str(data["id"]),
            owner_id=str(data.get("owner_id") or data.get("user_id") or ""),
            title=data["title"],
            status=TaskStatus(data.get("status", TaskStatus.PENDING.value)),
            priority=TaskPriority(data.get("priority", TaskPriority.MEDIUM.value)),
            description=data.get("description"),
            due_date=date.fromisoformat(due_date[:10]) if due_date else None,
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            tags=list(data.get("tags") or []),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )
