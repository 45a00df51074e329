from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A single to-do entry held by the task list store.

    Fields:
    - text: Display text, never blank (validated before any mutation)
    - created_at: Local creation timestamp, immutable after creation
    - completed: Boolean completion flag
    """

    text: str
    created_at: datetime
    completed: bool


# PUBLIC_INTERFACE
class TaskFilter(str, Enum):
    """View-level predicate selecting which tasks are displayed."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    def matches(self, task: TaskEntity) -> bool:
        if self is TaskFilter.ACTIVE:
            return not task["completed"]
        if self is TaskFilter.COMPLETED:
            return task["completed"]
        return True
