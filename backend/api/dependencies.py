"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together the identity
adapter, the database client and the per-user sessions. Routes depend on
the functions at the bottom of this file, never on the container directly,
so tests can swap any piece through app.dependency_overrides.
"""

from typing import TYPE_CHECKING, Optional

from fastapi import Depends

from shared.config import get_settings
from shared.models import AuthenticatedUser

from .middleware.auth import get_access_token, get_current_user
from .sessions import SessionRegistry, UserSession

# Type checking imports (avoids importing the Supabase client at import time)
if TYPE_CHECKING:
    from supabase import Client
    from modules.auth.service import SupabaseIdentityProvider
    from modules.habits.viewmodel import HabitViewModel
    from modules.profiles.viewmodel import ProfileViewModel
    from modules.tasks.viewmodel import TaskViewModel
    from modules.timers.viewmodel import TimerViewModel
    from shared.connectivity import ConnectivityMonitor


class ServiceContainer:
    """
    Container for the process-wide objects.

    Instances are created lazily on first access and cached. Use reset()
    to clear them for testing.
    """

    def __init__(self) -> None:
        self._db: "Optional[Client]" = None
        self._connectivity: "Optional[ConnectivityMonitor]" = None
        self._sessions: Optional[SessionRegistry] = None

    @property
    def db(self) -> "Client":
        """Service-role Supabase client."""
        if self._db is None:
            from shared.database import get_supabase_client
            self._db = get_supabase_client()
        return self._db

    @property
    def connectivity(self) -> "ConnectivityMonitor":
        """Backend reachability monitor."""
        if self._connectivity is None:
            from shared.connectivity import ConnectivityMonitor
            settings = get_settings()
            self._connectivity = ConnectivityMonitor(
                settings.supabase_url,
                api_key=settings.supabase_anon_key,
                interval=settings.connectivity_check_interval,
                timeout=settings.connectivity_timeout,
            )
        return self._connectivity

    @property
    def sessions(self) -> SessionRegistry:
        """Registry of per-user sessions."""
        if self._sessions is None:
            self._sessions = SessionRegistry(
                self._create_session,
                idle_timeout=get_settings().session_idle_timeout,
            )
        return self._sessions

    def create_identity_provider(self) -> "SupabaseIdentityProvider":
        """Create an identity adapter with its own auth client."""
        from modules.auth.service import SupabaseIdentityProvider
        from shared.database import get_supabase_anon_client
        return SupabaseIdentityProvider(get_supabase_anon_client(), admin_client=self.db)

    def _create_session(self, user_id: str) -> UserSession:
        return UserSession(user_id, self.create_identity_provider(), self.db)

    def reset(self) -> None:
        """
        Reset all cached instances.

        This is primarily for testing - allows tests to get fresh
        instances with different mock dependencies.
        """
        if self._sessions is not None:
            self._sessions.clear()
        self._db = None
        self._connectivity = None
        self._sessions = None


# Module-level container singleton
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container.
    Primarily used for testing.
    """
    global _container
    if _container is not None:
        _container.reset()
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_database() -> "Client":
    """FastAPI dependency for the service-role Supabase client."""
    return get_container().db


def get_connectivity_monitor() -> "ConnectivityMonitor":
    """FastAPI dependency for the reachability monitor."""
    return get_container().connectivity


def get_session_registry() -> SessionRegistry:
    """FastAPI dependency for the session registry."""
    return get_container().sessions


def get_account_view_model() -> "ProfileViewModel":
    """
    FastAPI dependency for unauthenticated account flows.

    Each request gets a fresh identity adapter, so sign-in state never
    leaks between callers.
    """
    from modules.profiles.viewmodel import ProfileViewModel
    container = get_container()
    return ProfileViewModel(container.create_identity_provider(), container.db)


def get_user_session(
    user: AuthenticatedUser = Depends(get_current_user),
    access_token: str = Depends(get_access_token),
    registry: SessionRegistry = Depends(get_session_registry),
) -> UserSession:
    """FastAPI dependency for the caller's session."""
    return registry.get(user.id, access_token)


def get_profile_view_model(
    session: UserSession = Depends(get_user_session),
) -> "ProfileViewModel":
    return session.profile


async def get_task_view_model(
    session: UserSession = Depends(get_user_session),
) -> "TaskViewModel":
    """FastAPI dependency for the caller's task view-model, loaded on first use."""
    await session.tasks.ensure_loaded()
    return session.tasks


async def get_habit_view_model(
    session: UserSession = Depends(get_user_session),
) -> "HabitViewModel":
    """FastAPI dependency for the caller's habit view-model, loaded on first use."""
    await session.habits.ensure_loaded()
    return session.habits


async def get_timer_view_model(
    session: UserSession = Depends(get_user_session),
) -> "TimerViewModel":
    """FastAPI dependency for the caller's timer view-model, loaded on first use."""
    await session.timers.ensure_loaded()
    return session.timers
