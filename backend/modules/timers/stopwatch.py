"""
Stopwatch state machine driving the timer view-model.

The stopwatch accumulates elapsed time in small steps from an asyncio tick
task while running. Pausing folds in the time since the last step, so the
elapsed total is exact even when the tick task falls behind.
"""

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_elapsed(seconds: float) -> str:
    """Render a duration as MM:SS.cc (minutes are not wrapped at an hour)."""
    whole = int(seconds)
    minutes, secs = divmod(whole, 60)
    centiseconds = int((seconds - whole) * 100)
    return f"{minutes:02d}:{secs:02d}.{centiseconds:02d}"


class StopwatchState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class Stopwatch:
    """
    idle -> running -> paused -> running ... ; reset() returns to idle.

    Args:
        tick_interval: Seconds between accumulation steps
        clock: Returns the current time; injectable for tests
    """

    def __init__(self, tick_interval: float = 0.01, clock: Optional[Clock] = None):
        self.tick_interval = tick_interval
        self._clock = clock or utc_now
        self._state = StopwatchState.IDLE
        self._elapsed = 0.0
        self._started_at: Optional[datetime] = None
        self._stopped_at: Optional[datetime] = None
        self._reference: Optional[datetime] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> StopwatchState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == StopwatchState.RUNNING

    @property
    def elapsed(self) -> float:
        """Accumulated seconds as of the last step."""
        return self._elapsed

    @property
    def started_at(self) -> Optional[datetime]:
        """Instant of the first start since the last reset."""
        return self._started_at

    @property
    def stopped_at(self) -> Optional[datetime]:
        """Instant of the most recent pause; cleared by start()."""
        return self._stopped_at

    def start(self) -> None:
        """Start or resume. Starting a running stopwatch does nothing."""
        if self._state == StopwatchState.RUNNING:
            return

        now = self._clock()
        if self._started_at is None:
            self._started_at = now
        self._stopped_at = None
        self._reference = now
        self._state = StopwatchState.RUNNING

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: elapsed time is still folded in by tick() and pause()
            logger.debug("Stopwatch started outside an event loop; not scheduling ticks")
            return
        self._task = loop.create_task(self._run())

    def tick(self) -> None:
        """Add the time since the previous step to the elapsed total."""
        if self._state != StopwatchState.RUNNING or self._reference is None:
            return
        now = self._clock()
        self._elapsed += max((now - self._reference).total_seconds(), 0.0)
        self._reference = now

    def pause(self) -> None:
        """Stop accumulating and record the stop instant."""
        if self._state != StopwatchState.RUNNING:
            return
        self.tick()
        self._cancel_task()
        self._stopped_at = self._reference
        self._state = StopwatchState.PAUSED

    def reset(self) -> None:
        """Return to idle with zero elapsed time."""
        self._cancel_task()
        self._state = StopwatchState.IDLE
        self._elapsed = 0.0
        self._started_at = None
        self._stopped_at = None
        self._reference = None

    def formatted(self) -> str:
        return format_elapsed(self._elapsed)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            self.tick()

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
