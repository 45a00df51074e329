"""
Task list package.

Exposes the task list store and its rehydration helper for
convenience imports.
"""

from .models import TaskEntity, TaskFilter  # noqa: F401
from .persistence import build_store  # noqa: F401
from .store import TaskListStore  # noqa: F401
