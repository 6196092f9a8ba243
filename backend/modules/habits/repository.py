"""
Habit collection.
"""

from shared.repository import UserCollection
from .models import Habit


class HabitCollection(UserCollection[Habit]):
    """
    The user's habits.

    A row that fails to decode aborts the whole fetch.
    """

    table = "habits"
    model = Habit
    order_column = "start_date"
    skip_undecodable = False
