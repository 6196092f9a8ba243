"""
Habits module.

Recurring habits with active weekdays and per-day completion.
"""

from .models import Habit, weekday_index, same_day
from .repository import HabitCollection
from .viewmodel import HabitViewModel
from .exceptions import HabitNotFoundError, InvalidHabitError

__all__ = [
    "Habit",
    "weekday_index",
    "same_day",
    "HabitCollection",
    "HabitViewModel",
    "HabitNotFoundError",
    "InvalidHabitError",
]
