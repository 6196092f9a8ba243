"""
Profile module data models.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from modules.auth.models import Identity


class UserProfile(BaseModel):
    """
    Profile document keyed by the auth subject id.

    Created once, at the user's first sign-in or sign-up, and removed
    together with the account.
    """

    user_id: str = Field(..., description="Auth subject id")
    email: Optional[str] = Field(None, description="Email at sign-up time")
    date_created: Optional[datetime] = Field(None, description="Profile creation time")
    photo_url: Optional[str] = Field(None, description="Avatar URL")

    @classmethod
    def from_identity(cls, identity: Identity) -> "UserProfile":
        """Build a new profile for a freshly signed-in identity."""
        return cls(
            user_id=identity.id,
            email=identity.email,
            photo_url=identity.photo_url,
            date_created=datetime.now(timezone.utc),
        )
