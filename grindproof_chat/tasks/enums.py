"""
GrindProof Chat Service - Task Enums

Enums for task-related fields, mirroring the task service contract.
"""

from enum import Enum


class TaskStatus(str, Enum):
    """Task status values. Only PENDING counts as open."""
    PENDING = "pending"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class TaskPriority(str, Enum):
    """Task priority levels."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
