"""
Per-user sessions.

A session holds one identity adapter and the four view-models for a user,
so caches and the running stopwatch survive across requests. Sessions are
created on a user's first authenticated request and dropped on sign-out or
account deletion, or once they sit idle longer than the registry's
idle timeout.
"""

import logging
import time
from typing import Callable, Optional

from supabase import Client

from modules.auth.service import SupabaseIdentityProvider
from modules.habits.viewmodel import HabitViewModel
from modules.profiles.viewmodel import ProfileViewModel
from modules.tasks.viewmodel import TaskViewModel
from modules.timers.viewmodel import TimerViewModel

logger = logging.getLogger(__name__)


class UserSession:
    """View-models sharing one identity adapter, bound to one user."""

    def __init__(self, user_id: str, identity: SupabaseIdentityProvider, db: Client) -> None:
        self.user_id = user_id
        self.identity = identity
        self.profile = ProfileViewModel(identity, db)
        self.tasks = TaskViewModel(identity, db)
        self.habits = HabitViewModel(identity, db)
        self.timers = TimerViewModel(identity, db)
        self.last_seen = 0.0

    def bind_token(self, access_token: str) -> None:
        """Point the identity adapter at the token of the current request."""
        self.identity.use_access_token(access_token)

    def close(self) -> None:
        """Stop background work owned by the session."""
        self.timers.reset()


SessionFactory = Callable[[str], UserSession]
Clock = Callable[[], float]


class SessionRegistry:
    """
    Maps user ids to their sessions.

    Args:
        factory: Builds a new session for a user id
        idle_timeout: Seconds without a request after which a session is
            closed; None keeps sessions until they are dropped
        clock: Monotonic time source, in seconds
    """

    def __init__(
        self,
        factory: SessionFactory,
        idle_timeout: Optional[float] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self._factory = factory
        self._idle_timeout = idle_timeout
        self._clock = clock
        self._sessions: dict[str, UserSession] = {}

    def get(self, user_id: str, access_token: str) -> UserSession:
        """Get the user's session, creating it on first use."""
        self.evict_idle()
        session = self._sessions.get(user_id)
        if session is None:
            session = self._factory(user_id)
            self._sessions[user_id] = session
            logger.debug(f"Opened session for user {user_id}")
        session.bind_token(access_token)
        session.last_seen = self._clock()
        return session

    def evict_idle(self) -> int:
        """Close sessions idle for longer than the timeout. Returns the number closed."""
        if self._idle_timeout is None:
            return 0
        cutoff = self._clock() - self._idle_timeout
        expired = [uid for uid, s in self._sessions.items() if s.last_seen < cutoff]
        for user_id in expired:
            self.drop(user_id)
        if expired:
            logger.info(f"Closed {len(expired)} idle session(s)")
        return len(expired)

    def drop(self, user_id: str) -> None:
        """Close and forget a user's session. Unknown users are ignored."""
        session = self._sessions.pop(user_id, None)
        if session is not None:
            session.close()
            logger.debug(f"Closed session for user {user_id}")

    def clear(self) -> None:
        for user_id in list(self._sessions):
            self.drop(user_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._sessions
