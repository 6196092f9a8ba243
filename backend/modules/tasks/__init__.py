"""
Tasks module.

Per-user task list with sections, completion tracking and due dates.
"""

from .models import Task, Section
from .repository import TaskCollection, SectionCollection
from .viewmodel import TaskViewModel
from .exceptions import TaskNotFoundError, InvalidTaskError

__all__ = [
    "Task",
    "Section",
    "TaskCollection",
    "SectionCollection",
    "TaskViewModel",
    "TaskNotFoundError",
    "InvalidTaskError",
]
