"""
Profile view-model.

Account-level flows: sign-up and sign-in (creating the profile document on
first sign-in), linked providers, password reset and account deletion.
"""

import logging
from typing import Optional

from supabase import Client

from shared.exceptions import ValidationError
from modules.auth.interfaces import IIdentityProvider
from modules.auth.models import AuthSession, Identity, ProviderKind

from .exceptions import ProfileNotFoundError
from .models import UserProfile
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


def _require_credentials(email: str, password: str) -> None:
    if not email or not email.strip() or not password:
        raise ValidationError(
            "Email and password are required",
            code="MISSING_CREDENTIALS",
        )


class ProfileViewModel:
    """Controller for the signed-in user's profile and account."""

    def __init__(self, identity: IIdentityProvider, db: Client) -> None:
        self._identity = identity
        self._profiles = ProfileRepository(db)
        self.profile: Optional[UserProfile] = None
        self.auth_providers: list[ProviderKind] = []

    @property
    def session(self) -> Optional[AuthSession]:
        """Tokens from the most recent sign-in through this view-model."""
        return self._identity.session

    async def load_current_user(self) -> UserProfile:
        """
        Load the signed-in user's profile.

        Raises:
            NotAuthenticatedError: If nobody is signed in
            ProfileNotFoundError: If the profile document is missing
        """
        identity = await self._identity.get_current_user()
        profile = self._profiles.get(identity.id)
        if profile is None:
            raise ProfileNotFoundError(identity.id)
        self.profile = profile
        return profile

    async def load_auth_providers(self) -> list[ProviderKind]:
        providers = await self._identity.list_linked_providers()
        self.auth_providers = sorted(providers, key=lambda p: p.value)
        return self.auth_providers

    async def sign_up(self, email: str, password: str) -> UserProfile:
        """Create an email/password account and its profile document."""
        _require_credentials(email, password)
        identity = await self._identity.create_account(email.strip(), password)
        return self._ensure_profile(identity)

    async def sign_in(self, email: str, password: str) -> Identity:
        _require_credentials(email, password)
        return await self._identity.sign_in(email.strip(), password)

    async def sign_in_with_federated_token(
        self,
        provider: ProviderKind,
        token: str,
        nonce: Optional[str] = None,
        access_token: Optional[str] = None,
    ) -> UserProfile:
        """Sign in with a Google or Apple ID token, creating the profile on first use."""
        if not token:
            raise ValidationError("An ID token is required", code="MISSING_TOKEN")
        identity = await self._identity.sign_in_with_federated_token(
            provider, token, nonce=nonce, access_token=access_token
        )
        return self._ensure_profile(identity)

    async def sign_out(self) -> None:
        await self._identity.sign_out()
        self.profile = None
        self.auth_providers = []

    async def send_password_reset(self, email: str) -> None:
        """Send a password reset email to an arbitrary address (signed-out flow)."""
        if not email or not email.strip():
            raise ValidationError("Email is required", code="MISSING_EMAIL")
        await self._identity.send_password_reset(email.strip())

    async def reset_password(self) -> None:
        """Send a password reset email to the signed-in user's address."""
        identity = await self._identity.get_current_user()
        if not identity.email:
            raise ValidationError(
                "No email address is linked to this account",
                code="MISSING_EMAIL",
            )
        await self._identity.send_password_reset(identity.email)

    async def update_password(self, password: str) -> None:
        if not password:
            raise ValidationError("Password is required", code="MISSING_CREDENTIALS")
        await self._identity.update_password(password)

    async def update_email(self, email: str) -> None:
        """Request an email change; the new address must be confirmed by link."""
        if not email or not email.strip():
            raise ValidationError("Email is required", code="MISSING_EMAIL")
        await self._identity.update_email(email.strip())

    async def delete_account(self) -> None:
        """
        Delete the profile document, then the auth account.

        The user's collections are removed by the database cascade on the
        profile row.
        """
        identity = await self._identity.get_current_user()
        self._profiles.delete(identity.id)
        await self._identity.delete_account()
        logger.info(f"Deleted account for user {identity.id}")
        self.profile = None
        self.auth_providers = []

    def _ensure_profile(self, identity: Identity) -> UserProfile:
        existing = self._profiles.get(identity.id)
        if existing is not None:
            logger.debug(f"Profile already exists for {identity.id}")
            self.profile = existing
            return existing

        profile = self._profiles.create(UserProfile.from_identity(identity))
        logger.info(f"Created profile for new user {identity.id}")
        self.profile = profile
        return profile
