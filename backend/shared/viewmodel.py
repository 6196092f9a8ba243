"""
Base class for the per-feature view-models.

A view-model owns an in-memory copy of one or more user collections and
exposes the operations the presentation layer calls. All view-models share
one sync policy: local state is changed first, the write is issued, and a
failed write triggers a full re-fetch so the cache never stays diverged from
the backend.
"""

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

from supabase import Client

from .exceptions import NotLoadedError, SparkTasksError

if TYPE_CHECKING:
    from modules.auth.interfaces import IIdentityProvider
    from modules.auth.models import Identity

logger = logging.getLogger(__name__)


class CachedViewModel:
    """
    Stateful controller bound to the signed-in user's collections.

    Subclasses implement _bind() to create their collections for a user id
    and refresh() to replace the cache with a fresh read.
    """

    def __init__(self, identity: "IIdentityProvider", db: Client) -> None:
        self._identity = identity
        self._db = db
        self._user: Optional["Identity"] = None

    @property
    def user(self) -> Optional["Identity"]:
        """Identity the view-model is loaded for, if any."""
        return self._user

    @property
    def is_loaded(self) -> bool:
        return self._user is not None

    async def load_for_user(self) -> None:
        """
        Resolve the current identity, bind collections and fetch them.

        Raises:
            NotAuthenticatedError: If nobody is signed in
            BackendError: If the initial fetch fails
        """
        identity = await self._identity.get_current_user()
        self._bind(identity.id)
        self._user = identity
        try:
            await self.refresh()
        except SparkTasksError:
            self._user = None
            raise
        logger.debug(f"{type(self).__name__} loaded for user {identity.id}")

    async def ensure_loaded(self) -> None:
        """Load on first use; later calls keep the existing cache."""
        if not self.is_loaded:
            await self.load_for_user()

    async def refresh(self) -> None:
        """Replace the cache with the backend's current state."""
        raise NotImplementedError

    def _bind(self, user_id: str) -> None:
        raise NotImplementedError

    def _require_loaded(self) -> None:
        if self._user is None:
            raise NotLoadedError(type(self).__name__)

    @asynccontextmanager
    async def _reconcile_on_failure(self, operation: str) -> AsyncIterator[None]:
        """
        Wrap a backend write that follows an optimistic local change.

        On failure the cache is re-fetched and the original error re-raised.
        A failing re-fetch is logged; it never replaces the original error.
        """
        try:
            yield
        except SparkTasksError as error:
            logger.warning(
                f"{type(self).__name__}.{operation} failed, re-fetching: {error.message}"
            )
            try:
                await self.refresh()
            except SparkTasksError as refetch_error:
                logger.error(
                    f"Re-fetch after failed {operation} also failed: {refetch_error.message}"
                )
            raise
