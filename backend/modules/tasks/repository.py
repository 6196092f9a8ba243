"""
Task and section collections.

Rows live in the tasks and sections tables, scoped by user_id.
"""

from shared.repository import UserCollection
from .models import Section, Task


class TaskCollection(UserCollection[Task]):
    """The user's tasks. Undecodable rows are logged and skipped."""

    table = "tasks"
    model = Task
    order_column = "due_date"


class SectionCollection(UserCollection[Section]):
    """The user's sections, keyed by name."""

    table = "sections"
    model = Section
    key_column = "name"
    order_column = "name"
