"""
Timer view-model.

Owns the stopwatch and the user's saved sessions, with a text filter and a
multi-selection for bulk deletes.
"""

import logging
from datetime import timedelta
from typing import Optional

from supabase import Client

from shared.config import get_settings
from shared.viewmodel import CachedViewModel
from modules.auth.interfaces import IIdentityProvider

from .exceptions import TimerNotFoundError, TimerNotStartedError
from .models import StopwatchStatus, TimerEntry
from .repository import TimerCollection
from .stopwatch import Clock, Stopwatch

logger = logging.getLogger(__name__)


class TimerViewModel(CachedViewModel):
    """
    Controller for the stopwatch screen.

    State:
        previous_timers: Saved entries, newest first
        recent_descriptions: Distinct descriptions, sorted
        filter_text: Case-insensitive description filter
        selected_ids: Entry ids selected for bulk deletion
    """

    def __init__(
        self,
        identity: IIdentityProvider,
        db: Client,
        stopwatch: Optional[Stopwatch] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(identity, db)
        settings = get_settings()
        self.untitled_description = settings.untitled_timer_description
        self.stopwatch = stopwatch or Stopwatch(settings.stopwatch_tick_interval, clock)
        self.previous_timers: list[TimerEntry] = []
        self.recent_descriptions: list[str] = []
        self.filter_text = ""
        self.selected_ids: set[str] = set()
        self._collection: Optional[TimerCollection] = None

    def _bind(self, user_id: str) -> None:
        self._collection = TimerCollection(self._db, user_id)

    async def refresh(self) -> None:
        self.previous_timers = self._collection.list_all()
        self.recent_descriptions = sorted({t.description for t in self.previous_timers})
        self.selected_ids &= {t.id for t in self.previous_timers}

    # -------------------------------------------------------------------------
    # Stopwatch
    # -------------------------------------------------------------------------

    def start(self) -> None:
        self.stopwatch.start()

    def pause(self) -> None:
        self.stopwatch.pause()

    def reset(self) -> None:
        self.stopwatch.reset()

    def status(self) -> StopwatchStatus:
        return StopwatchStatus(
            state=self.stopwatch.state,
            elapsed=self.stopwatch.elapsed,
            formatted=self.stopwatch.formatted(),
            started_at=self.stopwatch.started_at,
            stopped_at=self.stopwatch.stopped_at,
        )

    async def save(self, description: Optional[str] = None) -> TimerEntry:
        """
        Pause the stopwatch and store the session.

        The stopwatch is reset only after the write succeeds, so a failed
        save can be retried.

        Raises:
            TimerNotStartedError: If there is no start and stop instant
            BackendError: If the write fails (the cache is re-fetched)
        """
        self._require_loaded()
        self.stopwatch.pause()

        started_at = self.stopwatch.started_at
        stopped_at = self.stopwatch.stopped_at
        if started_at is None or stopped_at is None:
            raise TimerNotStartedError()

        description = (description or "").strip() or self.untitled_description
        entry = TimerEntry(
            start_time=started_at,
            end_time=stopped_at,
            elapsed_time=self.stopwatch.elapsed,
            description=description,
        )

        self.previous_timers.insert(0, entry)
        async with self._reconcile_on_failure("save"):
            stored = self._collection.upsert(entry)

        self._replace(stored)
        if description not in self.recent_descriptions:
            self.recent_descriptions.append(description)
        self.stopwatch.reset()
        logger.debug(f"Saved timer {stored.id} ({stored.elapsed_time:.2f}s)")
        return stored

    # -------------------------------------------------------------------------
    # Saved entries
    # -------------------------------------------------------------------------

    def get_timer(self, timer_id: str) -> TimerEntry:
        for timer in self.previous_timers:
            if timer.id == timer_id:
                return timer
        raise TimerNotFoundError(timer_id)

    async def update_timer(
        self, timer_id: str, description: str, elapsed_time: float
    ) -> TimerEntry:
        """Change an entry's description and duration; end time follows the duration."""
        self._require_loaded()
        current = self.get_timer(timer_id)
        description = (description or "").strip() or self.untitled_description
        updated = current.model_copy(
            update={
                "description": description,
                "elapsed_time": elapsed_time,
                "end_time": current.start_time + timedelta(seconds=elapsed_time),
            }
        )

        self._replace(updated)
        async with self._reconcile_on_failure("update_timer"):
            self._collection.update(
                timer_id,
                {
                    "description": updated.description,
                    "elapsed_time": updated.elapsed_time,
                    "end_time": updated.end_time,
                },
            )
        if description not in self.recent_descriptions:
            self.recent_descriptions = sorted(set(self.recent_descriptions) | {description})
        return updated

    async def delete_timer(self, timer_id: str) -> None:
        self._require_loaded()
        self.get_timer(timer_id)

        self.previous_timers = [t for t in self.previous_timers if t.id != timer_id]
        self.selected_ids.discard(timer_id)
        async with self._reconcile_on_failure("delete_timer"):
            self._collection.delete(timer_id)

    def filtered_timers(self) -> list[TimerEntry]:
        """Entries whose description contains filter_text, ignoring case."""
        needle = self.filter_text.strip().casefold()
        if not needle:
            return list(self.previous_timers)
        return [t for t in self.previous_timers if needle in t.description.casefold()]

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def toggle_select(self, timer_id: str) -> None:
        self.get_timer(timer_id)
        if timer_id in self.selected_ids:
            self.selected_ids.remove(timer_id)
        else:
            self.selected_ids.add(timer_id)

    def toggle_select_all(self) -> None:
        """Select every entry, or clear the selection if all are selected."""
        if self.are_all_selected:
            self.selected_ids.clear()
        else:
            self.selected_ids = {t.id for t in self.previous_timers}

    @property
    def are_all_selected(self) -> bool:
        return self.selected_ids == {t.id for t in self.previous_timers}

    async def delete_selected(self) -> int:
        """
        Delete every selected entry. Returns the number deleted.

        With every entry selected the whole collection is cleared in one call.
        """
        self._require_loaded()
        doomed = [t.id for t in self.previous_timers if t.id in self.selected_ids]
        clear_all = bool(doomed) and self.are_all_selected

        self.previous_timers = [t for t in self.previous_timers if t.id not in self.selected_ids]
        self.selected_ids.clear()
        async with self._reconcile_on_failure("delete_selected"):
            if clear_all:
                self._collection.delete_all()
            else:
                for timer_id in doomed:
                    self._collection.delete(timer_id)
        return len(doomed)

    def _replace(self, updated: TimerEntry) -> None:
        self.previous_timers = [
            updated if t.id == updated.id else t for t in self.previous_timers
        ]
