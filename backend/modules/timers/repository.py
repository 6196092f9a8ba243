"""
Timer entry collection.
"""

from shared.repository import UserCollection
from .models import TimerEntry


class TimerCollection(UserCollection[TimerEntry]):
    """The user's saved stopwatch sessions, newest first."""

    table = "timers"
    model = TimerEntry
    order_column = "timestamp"
    order_desc = True
    server_columns = frozenset({"timestamp"})
