from __future__ import annotations

import logging
from datetime import datetime
from threading import RLock
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from .models import TaskEntity, TaskFilter

logger = logging.getLogger(__name__)

TaskListener = Callable[[List[TaskEntity]], None]


# PUBLIC_INTERFACE
class TaskListStore:
    """
    Owner of the task list state and its mutation operations.

    State:
    - tasks: ordered task entries, insertion order is display order
    - pending_input: working string of the shared add/update field
    - edit_index: index of the task being edited, or None
    - filter: active TaskFilter (view only)

    Mutation methods return True when the change was applied and False when it
    was declined (blank text, out-of-range index, unknown filter). Declined calls
    leave state untouched. Listeners receive the resulting full task list for
    every add, update, delete or toggle; if one raises, the mutation is not
    applied and the exception propagates.
    """

    def __init__(self, tasks: Optional[Iterable[TaskEntity]] = None) -> None:
        self._lock = RLock()
        self._tasks: List[TaskEntity] = [t.copy() for t in tasks or []]
        self._listeners: List[TaskListener] = []
        self.pending_input: str = ""
        self.edit_index: Optional[int] = None
        self.filter: TaskFilter = TaskFilter.ALL

    def _now(self) -> datetime:
        return datetime.now()

    def _valid_index(self, index: int) -> bool:
        return 0 <= index < len(self._tasks)

    def _staged(self) -> List[TaskEntity]:
        return [t.copy() for t in self._tasks]

    def _commit(self, action: str, staged: List[TaskEntity]) -> None:
        """
        Notify listeners with the staged list, then make it current.

        A listener that raises leaves the current task list untouched.
        """
        for listener in list(self._listeners):
            listener([t.copy() for t in staged])
        self._tasks = staged
        logger.debug("tasks %s total=%d", action, len(staged))

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    @property
    def tasks(self) -> List[TaskEntity]:
        """Copies of all tasks in display order."""
        with self._lock:
            return [t.copy() for t in self._tasks]

    def snapshot(self) -> Dict[str, Any]:
        """
        Consistent view of the store taken under a single lock.

        Keys: visible (index, task) pairs, pending_input, edit_index, filter, total.
        """
        with self._lock:
            return {
                "visible": self.visible_items(),
                "pending_input": self.pending_input,
                "edit_index": self.edit_index,
                "filter": self.filter,
                "total": len(self._tasks),
            }

    def subscribe(self, listener: TaskListener) -> Callable[[], None]:
        """
        Register a listener for task list mutations.

        Returns:
            A callable that removes the listener again.
        """
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    # PUBLIC_INTERFACE
    def set_pending_input(self, text: str) -> None:
        """Replace the working input string. Does not touch tasks."""
        with self._lock:
            self.pending_input = text

    # PUBLIC_INTERFACE
    def submit(self, text: Optional[str] = None) -> bool:
        """
        Add a new task, or update the task being edited.

        When text is None the current pending input is submitted. Blank or
        whitespace-only text is declined.
        """
        with self._lock:
            value = self.pending_input if text is None else text
            if not value.strip():
                return False

            staged = self._staged()
            if self.edit_index is not None:
                staged[self.edit_index]["text"] = value
                self._commit("update", staged)
                self.edit_index = None
                self.pending_input = ""
                return True

            staged.append({"text": value, "created_at": self._now(), "completed": False})
            self._commit("add", staged)
            self.pending_input = ""
            return True

    # PUBLIC_INTERFACE
    def begin_edit(self, index: int) -> bool:
        """Load the task at index into the input field and mark it as being edited."""
        with self._lock:
            if not self._valid_index(index):
                return False
            self.pending_input = self._tasks[index]["text"]
            self.edit_index = index
            return True

    # PUBLIC_INTERFACE
    def delete(self, index: int) -> bool:
        """
        Remove the task at index.

        Any in-progress edit is discarded, whichever task was deleted.
        """
        with self._lock:
            if not self._valid_index(index):
                return False
            staged = self._staged()
            del staged[index]
            self._commit("delete", staged)
            self.edit_index = None
            self.pending_input = ""
            return True

    # PUBLIC_INTERFACE
    def toggle_complete(self, index: int) -> bool:
        """Flip the completed flag of the task at index."""
        with self._lock:
            if not self._valid_index(index):
                return False
            staged = self._staged()
            staged[index]["completed"] = not staged[index]["completed"]
            self._commit("toggle", staged)
            return True

    # PUBLIC_INTERFACE
    def set_filter(self, category: Union[TaskFilter, str]) -> bool:
        """Select the view filter; unknown categories are declined."""
        try:
            selected = TaskFilter(category)
        except ValueError:
            return False
        with self._lock:
            self.filter = selected
            return True

    def visible_items(self) -> List[Tuple[int, TaskEntity]]:
        """Visible tasks paired with their index in the full task list."""
        with self._lock:
            return [(i, t.copy()) for i, t in enumerate(self._tasks) if self.filter.matches(t)]

    # PUBLIC_INTERFACE
    def visible_tasks(self) -> List[TaskEntity]:
        """Tasks selected by the current filter, in original order."""
        return [t for _, t in self.visible_items()]
