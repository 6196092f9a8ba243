"""
Tasks module data models.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class Task(BaseModel):
    """
    A to-do item.

    Task values are immutable; view-model operations replace a cached task
    with an updated copy. date_completed is set exactly when is_complete is
    true, and a stored row breaking that rule fails to decode.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Task ID")
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Optional notes")
    is_complete: bool = Field(default=False, description="Completion flag")
    due_date: Optional[datetime] = Field(None, description="Due date")
    date_completed: Optional[datetime] = Field(None, description="Completion time")
    section: Optional[str] = Field(None, description="Section label; unset means the default")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_completion_timestamp(self) -> "Task":
        """Completion flag and completion timestamp must agree."""
        if self.is_complete != (self.date_completed is not None):
            raise ValueError("date_completed must be set if and only if is_complete is true")
        return self

    def toggled(self, now: Optional[datetime] = None) -> "Task":
        """Return a copy with the completion flag flipped."""
        if self.is_complete:
            return self.model_copy(update={"is_complete": False, "date_completed": None})
        return self.model_copy(
            update={
                "is_complete": True,
                "date_completed": now or datetime.now(timezone.utc),
            }
        )


class Section(BaseModel):
    """A named grouping of tasks. The name is also its key."""

    name: str = Field(..., min_length=1, description="Section name")


class CreateTaskRequest(BaseModel):
    """Request to add a task."""

    title: str = Field(..., description="Task title")
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    section: Optional[str] = Field(None, description="Target section; defaults to the inbox")


class SetDueDateRequest(BaseModel):
    """Request to set or clear a task's due date."""

    due_date: Optional[datetime] = Field(None, description="New due date; null clears it")


class CreateSectionRequest(BaseModel):
    """Request to add a section."""

    name: str


class TaskListResponse(BaseModel):
    """Cached task state of the signed-in user."""

    tasks: list[Task] = Field(default_factory=list, description="Incomplete tasks, by due date")
    completed_tasks: list[Task] = Field(default_factory=list)
    sections: list[str] = Field(default_factory=list, description="Default section first")
