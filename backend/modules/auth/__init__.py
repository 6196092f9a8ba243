"""
Authentication module.

Identity provider adapter over Supabase Auth: sign-in (email/password,
Google and Apple ID tokens), account management and access-token checks.

Public API:
- IIdentityProvider: Interface for identity operations
- SupabaseIdentityProvider: Supabase Auth implementation
- Identity, AuthSession, ProviderKind: Identity data
- Auth exceptions: NotAuthenticatedError, InvalidCredentialsError, etc.
"""

from .interfaces import IIdentityProvider
from .models import AuthSession, Identity, JWTPayload, ProviderKind
from .service import SupabaseIdentityProvider, decode_access_token
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    NotAuthenticatedError,
    InvalidCredentialsError,
    AccountConflictError,
    WeakPasswordError,
    UnsupportedProviderError,
    IdentityProviderError,
)

__all__ = [
    # Interface
    "IIdentityProvider",
    # Implementation
    "SupabaseIdentityProvider",
    "decode_access_token",
    # Models
    "AuthSession",
    "Identity",
    "JWTPayload",
    "ProviderKind",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "NotAuthenticatedError",
    "InvalidCredentialsError",
    "AccountConflictError",
    "WeakPasswordError",
    "UnsupportedProviderError",
    "IdentityProviderError",
]
