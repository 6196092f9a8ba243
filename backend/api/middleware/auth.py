"""
JWT Authentication middleware.

Validates Supabase access tokens and extracts user information. Failures
raise the auth module's exceptions, which the API error handler renders
as 401 responses.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shared.config import get_settings
from shared.exceptions import AuthenticationError
from shared.models import AuthenticatedUser
from modules.auth.exceptions import MissingTokenError
from modules.auth.service import decode_access_token

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


async def get_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Dependency returning the raw bearer token."""
    if credentials is None:
        raise MissingTokenError("Missing authorization header")
    return credentials.credentials


def verify_token(token: str) -> AuthenticatedUser:
    """
    Verify a Supabase access token with the configured JWT secret.

    Raises:
        AuthenticationError: If the server has no JWT secret configured
        MissingTokenError, ExpiredTokenError, InvalidTokenError: If the
            token is rejected
    """
    settings = get_settings()
    if not settings.supabase_jwt_secret:
        raise AuthenticationError(
            "Server authentication not configured",
            code="AUTH_NOT_CONFIGURED",
        )
    return decode_access_token(token, settings.supabase_jwt_secret)


async def get_current_user(token: str = Depends(get_access_token)) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    return verify_token(token)
