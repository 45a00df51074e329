from __future__ import annotations

from typing import Any, Dict

from .store import TaskListStore


# PUBLIC_INTERFACE
def state_envelope(store: TaskListStore) -> Dict[str, Any]:
    """
    Build the standard state envelope returned by task routes.

    Args:
        store: The task list store to snapshot.

    Returns:
        Dict with keys: tasks, pending_input, edit_index, filter, total.
    """
    snap = store.snapshot()
    return {
        "tasks": [{"index": i, **task} for i, task in snap["visible"]],
        "pending_input": snap["pending_input"],
        "edit_index": snap["edit_index"],
        "filter": snap["filter"],
        "total": snap["total"],
    }
