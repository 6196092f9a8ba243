"""
Authentication module interface.

View-models and the API depend on IIdentityProvider, not the concrete
Supabase implementation. This enables testing with mocks and swapping the
identity backend without touching callers.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import AuthSession, Identity, ProviderKind


@runtime_checkable
class IIdentityProvider(Protocol):
    """
    Interface for identity operations.

    Every method is a pure delegation to the identity backend; no state is
    kept beyond the current session tokens.
    """

    @property
    def session(self) -> Optional[AuthSession]:
        """Tokens from the most recent sign-in, if any."""
        ...

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Verify an access token locally and return its user.

        Raises:
            AuthenticationError: If token is missing, invalid or expired
        """
        ...

    async def get_current_user(self) -> Identity:
        """
        Get the signed-in user.

        Raises:
            NotAuthenticatedError: If no user is signed in
        """
        ...

    async def sign_in(self, email: str, password: str) -> Identity:
        """Sign in with email and password."""
        ...

    async def create_account(self, email: str, password: str) -> Identity:
        """Create an email/password account."""
        ...

    async def sign_in_with_federated_token(
        self,
        provider: ProviderKind,
        token: str,
        nonce: Optional[str] = None,
        access_token: Optional[str] = None,
    ) -> Identity:
        """
        Exchange a Google or Apple ID token for a session.

        Args:
            provider: GOOGLE or APPLE
            token: ID token issued by the provider
            nonce: Raw nonce used when requesting the token (Apple)
            access_token: Provider access token (Google)
        """
        ...

    async def sign_out(self) -> None:
        """End the current session."""
        ...

    async def delete_account(self) -> None:
        """Delete the signed-in user's auth account."""
        ...

    async def send_password_reset(self, email: str) -> None:
        """Send a password reset email."""
        ...

    async def update_password(self, password: str) -> None:
        """Change the signed-in user's password."""
        ...

    async def update_email(self, email: str) -> None:
        """Request an email change; the provider sends a confirmation link."""
        ...

    async def list_linked_providers(self) -> set[ProviderKind]:
        """Sign-in methods linked to the signed-in user."""
        ...
