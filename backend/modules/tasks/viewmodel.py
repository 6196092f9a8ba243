"""
Task view-model.

Keeps the signed-in user's tasks split into incomplete and completed lists,
plus the ordered list of section names, and mirrors every change to the
tasks and sections collections.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from supabase import Client

from shared.config import get_settings
from shared.viewmodel import CachedViewModel
from modules.auth.interfaces import IIdentityProvider

from .exceptions import InvalidTaskError, TaskNotFoundError
from .models import Section, Task
from .repository import SectionCollection, TaskCollection

logger = logging.getLogger(__name__)


def _due_date_key(task: Task) -> tuple[bool, float]:
    """Sort key placing undated tasks after every dated one."""
    if task.due_date is None:
        return (True, 0.0)
    return (False, task.due_date.timestamp())


class TaskViewModel(CachedViewModel):
    """
    Controller for the task list.

    State:
        tasks: Incomplete tasks, sorted by due date (undated last)
        completed_tasks: Completed tasks, in completion order
        sections: Section names, the default section always first
    """

    def __init__(
        self,
        identity: IIdentityProvider,
        db: Client,
        default_section: Optional[str] = None,
    ) -> None:
        super().__init__(identity, db)
        self.default_section = default_section or get_settings().default_section
        self.tasks: list[Task] = []
        self.completed_tasks: list[Task] = []
        self.sections: list[str] = [self.default_section]
        self._task_collection: Optional[TaskCollection] = None
        self._section_collection: Optional[SectionCollection] = None

    def _bind(self, user_id: str) -> None:
        self._task_collection = TaskCollection(self._db, user_id)
        self._section_collection = SectionCollection(self._db, user_id)

    # -------------------------------------------------------------------------
    # Fetching
    # -------------------------------------------------------------------------

    async def refresh(self) -> None:
        """Fetch all tasks and sections and rebuild the cache."""
        all_tasks = self._task_collection.list_all()
        stored_sections = {s.name for s in self._section_collection.list_all()}

        self.tasks = [t for t in all_tasks if not t.is_complete]
        self.completed_tasks = [t for t in all_tasks if t.is_complete]
        self.sections = self._ordered_sections(
            stored_sections | {self._section_of(t) for t in all_tasks}
        )
        self.sort_tasks()

    async def fetch_sections(self) -> list[str]:
        """
        Re-read the sections collection.

        Creates the default section document if it doesn't exist yet.
        """
        self._require_loaded()
        names = {s.name for s in self._section_collection.list_all()}
        if self.default_section not in names:
            self._section_collection.upsert(Section(name=self.default_section))
            logger.debug(f"Created default section for user {self.user.id}")
        all_tasks = self.tasks + self.completed_tasks
        self.sections = self._ordered_sections(names | {self._section_of(t) for t in all_tasks})
        return self.sections

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_task(self, task_id: str) -> Task:
        """Find a cached task by id in either list."""
        for task in self.tasks + self.completed_tasks:
            if task.id == task_id:
                return task
        raise TaskNotFoundError(task_id)

    def tasks_in_section(self, section: str) -> list[Task]:
        """Incomplete tasks filed under a section."""
        return [t for t in self.tasks if self._section_of(t) == section]

    def sort_tasks(self) -> None:
        """Stable sort of incomplete tasks by due date, undated tasks last."""
        self.tasks = sorted(self.tasks, key=_due_date_key)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def add_section(self, name: str) -> list[str]:
        self._require_loaded()
        name = (name or "").strip()
        if not name:
            raise InvalidTaskError("Section name cannot be empty", field="name")

        self.sections = self._ordered_sections(set(self.sections) | {name})
        async with self._reconcile_on_failure("add_section"):
            self._section_collection.upsert(Section(name=name))
        return self.sections

    async def add_task(
        self,
        title: str,
        description: Optional[str] = None,
        due_date: Optional[datetime] = None,
        section: Optional[str] = None,
    ) -> Task:
        """
        Create a task in the incomplete list.

        The default section document and the target section document are
        created first if they don't exist. The incomplete list stays sorted
        by due date.

        Raises:
            InvalidTaskError: If the title is blank
            BackendError: If a write fails (the cache is re-fetched)
        """
        self._require_loaded()
        title = (title or "").strip()
        if not title:
            raise InvalidTaskError("Task title cannot be empty", field="title")
        section = (section or "").strip() or self.default_section

        for name in dict.fromkeys((self.default_section, section)):
            if not self._section_collection.exists(name):
                self._section_collection.upsert(Section(name=name))

        task = Task(title=title, description=description, due_date=due_date, section=section)
        self.tasks.append(task)
        self.sort_tasks()
        if section not in self.sections:
            self.sections = self._ordered_sections(set(self.sections) | {section})

        async with self._reconcile_on_failure("add_task"):
            self._task_collection.upsert(task)
        return task

    async def toggle_complete(self, task: Task) -> Task:
        """
        Flip a task's completion and move it to the other list.

        Completing stamps date_completed with the current time; reopening
        clears it. Every other field is kept.
        """
        self._require_loaded()
        current = self.get_task(task.id)
        updated = current.toggled()

        if updated.is_complete:
            self.tasks = [t for t in self.tasks if t.id != current.id]
            self.completed_tasks.append(updated)
        else:
            self.completed_tasks = [t for t in self.completed_tasks if t.id != current.id]
            self.tasks.append(updated)
            self.sort_tasks()

        async with self._reconcile_on_failure("toggle_complete"):
            self._task_collection.update(
                current.id,
                {
                    "is_complete": updated.is_complete,
                    "date_completed": updated.date_completed,
                },
            )
        return updated

    async def delete_task(self, task: Task) -> None:
        """Delete a task from the list matching its completion state."""
        self._require_loaded()
        current = self.get_task(task.id)

        if current.is_complete:
            self.completed_tasks = [t for t in self.completed_tasks if t.id != current.id]
        else:
            self.tasks = [t for t in self.tasks if t.id != current.id]

        async with self._reconcile_on_failure("delete_task"):
            self._task_collection.delete(current.id)

    async def set_due_date(self, task: Task, due_date: Optional[datetime]) -> Task:
        """Set or clear (None) a task's due date."""
        self._require_loaded()
        current = self.get_task(task.id)
        updated = current.model_copy(update={"due_date": due_date})

        self._replace(updated)
        self.sort_tasks()

        async with self._reconcile_on_failure("set_due_date"):
            self._task_collection.update(current.id, {"due_date": due_date})
        return updated

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _section_of(self, task: Task) -> str:
        return task.section or self.default_section

    def _ordered_sections(self, names: Iterable[str]) -> list[str]:
        others = sorted(n for n in set(names) if n != self.default_section)
        return [self.default_section] + others

    def _replace(self, updated: Task) -> None:
        target = self.completed_tasks if updated.is_complete else self.tasks
        for index, task in enumerate(target):
            if task.id == updated.id:
                target[index] = updated
                return
