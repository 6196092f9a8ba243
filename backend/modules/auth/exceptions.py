"""
Authentication module exceptions.

These exceptions are raised by the identity adapter and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import (
    AuthenticationError,
    ConflictError,
    ExternalServiceError,
    ValidationError,
)


class InvalidTokenError(AuthenticationError):
    """Raised when a JWT token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a JWT token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class NotAuthenticatedError(AuthenticationError):
    """Raised when an operation needs a signed-in user and there is none."""

    def __init__(self, message: str = "No user is signed in"):
        super().__init__(message, code="NOT_AUTHENTICATED")


class InvalidCredentialsError(AuthenticationError):
    """Raised when the provider rejects an email/password or ID token."""

    def __init__(self, message: str = "Invalid login credentials"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class AccountConflictError(ConflictError):
    """Raised when signing up with an email or identity that is already taken."""

    def __init__(self, reason: str):
        super().__init__(
            "An account with these credentials already exists",
            code="ACCOUNT_CONFLICT",
            details={"reason": reason},
        )


class WeakPasswordError(ValidationError):
    """Raised when the provider rejects a password as too weak."""

    def __init__(self, message: str = "Password is too weak"):
        super().__init__(message, code="WEAK_PASSWORD")


class UnsupportedProviderError(ValidationError):
    """Raised when a token sign-in names a provider that doesn't issue ID tokens."""

    def __init__(self, provider: str):
        super().__init__(
            f"Provider does not support token sign-in: {provider}",
            code="UNSUPPORTED_PROVIDER",
            details={"provider": provider},
        )


class IdentityProviderError(ExternalServiceError):
    """Raised when Supabase Auth fails for any other reason."""

    def __init__(self, message: str, operation: str):
        super().__init__(
            message,
            service="supabase-auth",
            code="IDENTITY_PROVIDER_ERROR",
            details={"operation": operation},
        )
