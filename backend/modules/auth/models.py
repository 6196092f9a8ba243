"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ProviderKind(str, Enum):
    """Sign-in methods a Supabase identity can be linked to."""

    EMAIL = "email"
    GOOGLE = "google"
    APPLE = "apple"


class Identity(BaseModel):
    """
    The signed-in user as reported by the identity provider.

    The id is the auth subject id and keys every per-user collection.
    """

    id: str = Field(..., description="Auth subject id (UUID from Supabase)")
    email: Optional[str] = Field(None, description="User's email, if the provider shares it")
    photo_url: Optional[str] = Field(None, description="Avatar URL from the provider")

    model_config = {"frozen": True}


class AuthSession(BaseModel):
    """Tokens returned by a successful sign-in."""

    access_token: str
    refresh_token: str
    expires_at: Optional[int] = Field(None, description="Expiry as a unix timestamp")
    identity: Identity


class JWTPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    This matches the structure of Supabase Auth JWTs.
    """

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User's email")
    email_confirmed_at: Optional[str] = Field(None, description="Email confirmation time")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")
    role: str = Field(default="authenticated", description="User role")

    # Supabase-specific claims
    app_metadata: dict = Field(default_factory=dict)
    user_metadata: dict = Field(default_factory=dict)
