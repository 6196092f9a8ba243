"""
Timers module.

A stopwatch and a log of saved sessions.
"""

from .stopwatch import Stopwatch, StopwatchState, format_elapsed
from .models import TimerEntry, StopwatchStatus
from .repository import TimerCollection
from .viewmodel import TimerViewModel
from .exceptions import TimerNotStartedError, TimerNotFoundError

__all__ = [
    "Stopwatch",
    "StopwatchState",
    "format_elapsed",
    "TimerEntry",
    "StopwatchStatus",
    "TimerCollection",
    "TimerViewModel",
    "TimerNotStartedError",
    "TimerNotFoundError",
]
