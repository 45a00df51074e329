"""
Task list persistence: encoding, rehydration and the write-through listener.

The full task list is stored as one JSON array under a fixed key. Every applied
mutation overwrites the stored value; there is no versioning or migration.
"""
from __future__ import annotations

import logging
from typing import List, Sequence

from pydantic import TypeAdapter, ValidationError

from .models import TaskEntity
from .schemas import TaskRecord
from .storage import KeyValueStorage
from .store import TaskListStore

logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(List[TaskRecord])


# PUBLIC_INTERFACE
def encode_tasks(tasks: Sequence[TaskEntity]) -> str:
    """Serialize tasks to the stored JSON form (text, createdAt, completed)."""
    records = [TaskRecord.from_entity(t) for t in tasks]
    return _RECORDS.dump_json(records, by_alias=True).decode("utf-8")


# PUBLIC_INTERFACE
def decode_tasks(raw: str) -> List[TaskEntity]:
    """
    Parse the stored JSON form back into task entities.

    Raises:
        pydantic.ValidationError if raw is not a valid encoded task list.
    """
    return [r.to_entity() for r in _RECORDS.validate_json(raw)]


# PUBLIC_INTERFACE
def load_tasks(storage: KeyValueStorage, key: str) -> List[TaskEntity]:
    """
    Read the task list stored under key.

    A missing value yields an empty list. So does a malformed one, which is
    logged and left in storage until the next write replaces it.
    """
    raw = storage.get(key)
    if raw is None:
        return []
    try:
        return decode_tasks(raw)
    except ValidationError as exc:
        logger.warning("discarding unreadable task list key=%s errors=%d", key, exc.error_count())
        return []


class TaskPersister:
    """Store listener writing the full task list to storage after each mutation."""

    def __init__(self, storage: KeyValueStorage, key: str) -> None:
        self.storage = storage
        self.key = key

    def __call__(self, tasks: List[TaskEntity]) -> None:
        self.storage.set(self.key, encode_tasks(tasks))
        logger.debug("persisted key=%s total=%d", self.key, len(tasks))


# PUBLIC_INTERFACE
def build_store(storage: KeyValueStorage, key: str) -> TaskListStore:
    """
    Rehydrate a TaskListStore from storage and wire write-through persistence.
    """
    tasks = load_tasks(storage, key)
    store = TaskListStore(tasks)
    store.subscribe(TaskPersister(storage, key))
    logger.info("TaskListStore ready key=%s total=%d", key, len(tasks))
    return store
