"""
Identity provider implementation backed by Supabase Auth.

Wraps a Supabase client's auth API: email/password and ID-token sign-in,
account management, and local verification of Supabase access tokens.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import jwt
from supabase import AuthApiError, AuthError, Client

from shared.config import Settings, get_settings
from shared.models import AuthenticatedUser

from .interfaces import IIdentityProvider
from .models import AuthSession, Identity, JWTPayload, ProviderKind
from .exceptions import (
    AccountConflictError,
    ExpiredTokenError,
    IdentityProviderError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    NotAuthenticatedError,
    UnsupportedProviderError,
    WeakPasswordError,
)

logger = logging.getLogger(__name__)

# Supabase Auth error codes, grouped by the exception they map to
_INVALID_CREDENTIAL_CODES = {"invalid_credentials", "invalid_grant", "bad_jwt"}
_CONFLICT_CODES = {"user_already_exists", "email_exists", "identity_already_exists"}
_SESSION_CODES = {"session_not_found", "no_authorization", "user_not_found"}


def decode_access_token(token: Optional[str], secret: str) -> AuthenticatedUser:
    """
    Validate a Supabase access token and return the authenticated user.

    Supabase signs access tokens with the project's JWT secret (HS256)
    and the "authenticated" audience.

    Raises:
        MissingTokenError: If the token is empty
        ExpiredTokenError: If the token has expired
        InvalidTokenError: If the token is malformed or badly signed
    """
    if not token:
        raise MissingTokenError()

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            audience="authenticated",
        )
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError()
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(str(e))

    jwt_payload = JWTPayload(**payload)

    return AuthenticatedUser(
        id=jwt_payload.sub,
        email=jwt_payload.email,
        email_verified=jwt_payload.email_confirmed_at is not None,
        last_sign_in=datetime.fromtimestamp(jwt_payload.iat, tz=timezone.utc),
        role=jwt_payload.role if jwt_payload.role != "authenticated" else "user",
    )


def _to_identity(user: Any) -> Identity:
    """Map a Supabase User to an Identity."""
    metadata = getattr(user, "user_metadata", None) or {}
    return Identity(
        id=str(user.id),
        email=user.email or None,
        photo_url=metadata.get("avatar_url") or metadata.get("picture"),
    )


def _map_auth_error(error: AuthError, operation: str) -> Exception:
    """Translate a Supabase Auth error into the module's exceptions."""
    code = getattr(error, "code", None)
    message = getattr(error, "message", None) or str(error)

    if code in _INVALID_CREDENTIAL_CODES:
        return InvalidCredentialsError()
    if code in _CONFLICT_CODES:
        return AccountConflictError(code)
    if code == "weak_password":
        return WeakPasswordError(message)
    if code in _SESSION_CODES or not isinstance(error, AuthApiError):
        # Session-missing errors are raised client-side, without an API code
        if operation in ("get_current_user", "delete_account", "update_user"):
            return NotAuthenticatedError()
    return IdentityProviderError(message, operation)


class SupabaseIdentityProvider(IIdentityProvider):
    """
    Identity adapter over a Supabase client.

    Works in two modes:
    - Client mode: sign-in calls store the session on the client and later
      calls use it.
    - Token mode: the adapter is bound to a caller's access token with
      use_access_token(); user lookups pass the token explicitly and account
      changes go through the admin client.
    """

    def __init__(
        self,
        client: Client,
        admin_client: Optional[Client] = None,
        access_token: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        self._client = client
        self._admin = admin_client
        self._access_token = access_token
        self._settings = settings or get_settings()
        self._session: Optional[AuthSession] = None

    @property
    def session(self) -> Optional[AuthSession]:
        return self._session

    def use_access_token(self, access_token: Optional[str]) -> None:
        """Bind the adapter to a caller's access token."""
        self._access_token = access_token

    # -------------------------------------------------------------------------
    # Tokens and current user
    # -------------------------------------------------------------------------

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """Validate a Supabase JWT using the project's JWT secret."""
        return decode_access_token(token, self._settings.supabase_jwt_secret)

    async def get_current_user(self) -> Identity:
        try:
            response = self._client.auth.get_user(self._access_token)
        except AuthError as e:
            raise _map_auth_error(e, "get_current_user")

        if response is None or response.user is None:
            raise NotAuthenticatedError()
        return _to_identity(response.user)

    # -------------------------------------------------------------------------
    # Sign-in and sign-up
    # -------------------------------------------------------------------------

    async def sign_in(self, email: str, password: str) -> Identity:
        try:
            response = self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as e:
            raise _map_auth_error(e, "sign_in")
        return self._store_session(response, "sign_in")

    async def create_account(self, email: str, password: str) -> Identity:
        try:
            response = self._client.auth.sign_up({"email": email, "password": password})
        except AuthError as e:
            raise _map_auth_error(e, "create_account")
        return self._store_session(response, "create_account")

    async def sign_in_with_federated_token(
        self,
        provider: ProviderKind,
        token: str,
        nonce: Optional[str] = None,
        access_token: Optional[str] = None,
    ) -> Identity:
        if provider == ProviderKind.EMAIL:
            raise UnsupportedProviderError(provider.value)

        credentials: dict[str, Any] = {"provider": provider.value, "token": token}
        if nonce:
            credentials["nonce"] = nonce
        if access_token:
            credentials["access_token"] = access_token

        try:
            response = self._client.auth.sign_in_with_id_token(credentials)
        except AuthError as e:
            raise _map_auth_error(e, "sign_in_with_federated_token")
        return self._store_session(response, "sign_in_with_federated_token")

    async def sign_out(self) -> None:
        try:
            if self._access_token and self._admin is not None:
                self._admin.auth.admin.sign_out(self._access_token)
            else:
                self._client.auth.sign_out()
        except AuthError as e:
            raise _map_auth_error(e, "sign_out")
        self._session = None
        self._access_token = None

    # -------------------------------------------------------------------------
    # Account management
    # -------------------------------------------------------------------------

    async def delete_account(self) -> None:
        """Delete the signed-in user. Requires the service-role admin client."""
        identity = await self.get_current_user()
        if self._admin is None:
            raise IdentityProviderError(
                "Account deletion requires a service-role client", "delete_account"
            )
        try:
            self._admin.auth.admin.delete_user(identity.id)
        except AuthError as e:
            raise _map_auth_error(e, "delete_account")
        logger.info(f"Deleted auth account {identity.id}")
        self._session = None
        self._access_token = None

    async def send_password_reset(self, email: str) -> None:
        try:
            self._client.auth.reset_password_for_email(email)
        except AuthError as e:
            raise _map_auth_error(e, "send_password_reset")

    async def update_password(self, password: str) -> None:
        await self._update_user({"password": password})

    async def update_email(self, email: str) -> None:
        await self._update_user({"email": email})

    async def list_linked_providers(self) -> set[ProviderKind]:
        try:
            response = self._client.auth.get_user(self._access_token)
        except AuthError as e:
            raise _map_auth_error(e, "get_current_user")
        if response is None or response.user is None:
            raise NotAuthenticatedError()

        user = response.user
        names = list((user.app_metadata or {}).get("providers", []))
        for linked in user.identities or []:
            names.append(linked.provider)

        providers: set[ProviderKind] = set()
        for name in names:
            try:
                providers.add(ProviderKind(name))
            except ValueError:
                logger.warning(f"Ignoring unknown auth provider: {name}")
        return providers

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    async def _update_user(self, attributes: dict[str, str]) -> None:
        try:
            if self._access_token and self._admin is not None:
                identity = await self.get_current_user()
                self._admin.auth.admin.update_user_by_id(identity.id, attributes)
            else:
                self._client.auth.update_user(attributes)
        except AuthError as e:
            raise _map_auth_error(e, "update_user")

    def _store_session(self, response: Any, operation: str) -> Identity:
        if response is None or response.user is None:
            raise IdentityProviderError("Provider returned no user", operation)

        identity = _to_identity(response.user)
        session = response.session
        if session is not None:
            self._session = AuthSession(
                access_token=session.access_token,
                refresh_token=session.refresh_token,
                expires_at=session.expires_at,
                identity=identity,
            )
            self._access_token = session.access_token
        else:
            # Sign-up with email confirmation enabled returns no session
            self._session = None
        return identity
