from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import TaskEntity, TaskFilter


# PUBLIC_INTERFACE
class TaskRecord(BaseModel):
    """
    Persisted encoding of a single task.

    Stored field names are text, createdAt and completed.
    """

    model_config = ConfigDict(populate_by_name=True)

    text: str
    created_at: datetime = Field(..., alias="createdAt")
    completed: bool = False

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("text must not be blank")
        return v

    @classmethod
    def from_entity(cls, task: TaskEntity) -> "TaskRecord":
        return cls(text=task["text"], created_at=task["created_at"], completed=task["completed"])

    def to_entity(self) -> TaskEntity:
        return {"text": self.text, "created_at": self.created_at, "completed": self.completed}


# PUBLIC_INTERFACE
class SubmitPayload(BaseModel):
    """
    Schema for submitting the add/update form.

    When text is omitted the store's pending input is submitted.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"text": "Buy milk"}})

    text: Optional[str] = Field(default=None, description="Task text; defaults to the pending input")


# PUBLIC_INTERFACE
class InputPayload(BaseModel):
    """Schema for updating the pending input string."""

    model_config = ConfigDict(json_schema_extra={"example": {"text": "Buy mi"}})

    text: str = Field(..., description="Current contents of the input field")


# PUBLIC_INTERFACE
class FilterPayload(BaseModel):
    """Schema for selecting the view filter."""

    model_config = ConfigDict(json_schema_extra={"example": {"filter": "active"}})

    filter: TaskFilter = Field(..., description="One of all, active, completed")


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    A visible task as returned by the API.

    index is the task's position in the full list, usable with the edit,
    toggle and delete routes regardless of the active filter.
    """

    index: int = Field(..., description="Position of the task in the full task list")
    text: str = Field(..., description="Task text")
    created_at: datetime = Field(..., description="Creation timestamp")
    completed: bool = Field(..., description="Completion status flag")


# PUBLIC_INTERFACE
class TaskListState(BaseModel):
    """
    Snapshot of the store returned by every task route.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "tasks": [
                    {
                        "index": 0,
                        "text": "Buy milk",
                        "created_at": "2025-01-25T10:15:30.123456",
                        "completed": False,
                    }
                ],
                "pending_input": "",
                "edit_index": None,
                "filter": "all",
                "total": 1,
            }
        }
    )

    tasks: List[TaskOut] = Field(..., description="Tasks selected by the current filter")
    pending_input: str = Field(..., description="Contents of the shared add/update input")
    edit_index: Optional[int] = Field(default=None, description="Index of the task being edited, if any")
    filter: TaskFilter = Field(..., description="Active view filter")
    total: int = Field(..., description="Number of tasks regardless of filter")
