"""
Habit view-model.

Caches the signed-in user's habits and answers which are due on a date.
Completion writes replace the whole habit document.
"""

from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from pydantic import ValidationError as PydanticValidationError
from supabase import Client

from shared.viewmodel import CachedViewModel
from modules.auth.interfaces import IIdentityProvider

from .exceptions import HabitNotFoundError, InvalidHabitError
from .models import DayLike, Habit
from .repository import HabitCollection


def _build_habit(data: dict[str, Any]) -> Habit:
    try:
        return Habit.model_validate(data)
    except PydanticValidationError as e:
        field = str(e.errors()[0]["loc"][0]) if e.errors() else "habit"
        raise InvalidHabitError(f"Invalid habit: {e.errors()[0]['msg']}", field=field) from e


class HabitViewModel(CachedViewModel):
    """Controller for the habit tracker."""

    def __init__(self, identity: IIdentityProvider, db: Client) -> None:
        super().__init__(identity, db)
        self.habits: list[Habit] = []
        self._collection: Optional[HabitCollection] = None

    def _bind(self, user_id: str) -> None:
        self._collection = HabitCollection(self._db, user_id)

    async def refresh(self) -> None:
        self.habits = self._collection.list_all()

    def get_habit(self, habit_id: str) -> Habit:
        for habit in self.habits:
            if habit.id == habit_id:
                return habit
        raise HabitNotFoundError(habit_id)

    def habits_due_on(self, day: DayLike) -> list[Habit]:
        """Habits whose active weekdays include day's weekday."""
        return [h for h in self.habits if h.is_due_on(day)]

    async def add_habit(
        self,
        title: str,
        interval: Iterable[int] = (),
        description: Optional[str] = None,
        start_date: Optional[datetime] = None,
    ) -> Habit:
        self._require_loaded()
        title = (title or "").strip()
        if not title:
            raise InvalidHabitError("Habit title cannot be empty", field="title")

        data: dict[str, Any] = {
            "title": title,
            "interval": list(interval),
            "description": description,
        }
        if start_date is not None:
            data["start_date"] = start_date
        habit = _build_habit(data)

        self.habits.append(habit)
        async with self._reconcile_on_failure("add_habit"):
            self._collection.upsert(habit)
        return habit

    async def edit_habit(
        self,
        habit: Habit,
        title: Optional[str] = None,
        interval: Optional[Iterable[int]] = None,
        description: Optional[str] = None,
    ) -> Habit:
        """Change a habit's title, active weekdays or description."""
        self._require_loaded()
        current = self.get_habit(habit.id)

        data = current.model_dump()
        if title is not None:
            title = title.strip()
            if not title:
                raise InvalidHabitError("Habit title cannot be empty", field="title")
            data["title"] = title
        if interval is not None:
            data["interval"] = list(interval)
        if description is not None:
            data["description"] = description or None
        updated = _build_habit(data)

        self._replace(updated)
        async with self._reconcile_on_failure("edit_habit"):
            self._collection.upsert(updated)
        return updated

    async def complete_habit(self, habit: Habit, moment: Optional[datetime] = None) -> Habit:
        """
        Toggle the habit's completion for moment's calendar day.

        The full completion list is written back (replace semantics).
        """
        self._require_loaded()
        current = self.get_habit(habit.id)
        updated = current.toggled_completion(moment or datetime.now(timezone.utc))

        self._replace(updated)
        async with self._reconcile_on_failure("complete_habit"):
            self._collection.upsert(updated)
        return updated

    async def delete_habit(self, habit: Habit) -> None:
        self._require_loaded()
        current = self.get_habit(habit.id)

        self.habits = [h for h in self.habits if h.id != current.id]
        async with self._reconcile_on_failure("delete_habit"):
            self._collection.delete(current.id)

    def _replace(self, updated: Habit) -> None:
        self.habits = [updated if h.id == updated.id else h for h in self.habits]
