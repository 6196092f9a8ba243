"""
Profile repository for database access.

Encapsulates Supabase queries for the profiles table, one row per user
keyed by user_id.
"""

from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from shared.exceptions import DecodingError
from shared.repository import BaseRepository
from .models import UserProfile


class ProfileRepository(BaseRepository[UserProfile]):
    """
    Repository for profile documents.

    Profiles are created with a plain insert (never merged into an
    existing row) and deleted with the account.
    """

    TABLE = "profiles"

    def get(self, user_id: str) -> Optional[UserProfile]:
        """Get a profile by user id, or None if it doesn't exist."""
        query = self._db.table(self.TABLE).select("*").eq("user_id", user_id)
        result = self._execute(query, "get", self.TABLE)
        if not result.data:
            return None
        return self._map_to_profile(result.data[0])

    def exists(self, user_id: str) -> bool:
        query = self._db.table(self.TABLE).select("user_id").eq("user_id", user_id)
        result = self._execute(query, "exists", self.TABLE)
        return bool(result.data)

    def create(self, profile: UserProfile) -> UserProfile:
        """
        Insert a new profile.

        Raises:
            BackendError: If the insert fails, including when a profile
                already exists for the user
        """
        data = profile.model_dump(mode="json")
        if data.get("date_created") is None:
            data.pop("date_created")
        result = self._execute(self._db.table(self.TABLE).insert(data), "create", self.TABLE)
        if result.data:
            return self._map_to_profile(result.data[0])
        return profile

    def delete(self, user_id: str) -> None:
        """
        Delete a profile.

        Note: The user's tasks, sections, habits and timers are deleted via CASCADE.
        """
        query = self._db.table(self.TABLE).delete().eq("user_id", user_id)
        self._execute(query, "delete", self.TABLE)

    def _map_to_profile(self, data: dict[str, Any]) -> UserProfile:
        """Map database row to UserProfile model."""
        try:
            return UserProfile.model_validate(data)
        except PydanticValidationError as e:
            raise DecodingError(self.TABLE, data.get("user_id"), str(e)) from e
