"""
Shared infrastructure for SparkTasks backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- repository: Base repository and per-user collection
- viewmodel: Base class for cached view-models
- connectivity: Backend reachability monitor

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, get_supabase_anon_client, reset_client_cache
from .exceptions import (
    SparkTasksError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    NotLoadedError,
    DecodingError,
    ExternalServiceError,
    BackendError,
)
from .models import AuthenticatedUser

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "get_supabase_anon_client",
    "reset_client_cache",
    "SparkTasksError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "NotLoadedError",
    "DecodingError",
    "ExternalServiceError",
    "BackendError",
    "AuthenticatedUser",
]
