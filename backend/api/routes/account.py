"""
Account endpoints that don't need a signed-in caller.

Sign-up, sign-in (email/password and Google/Apple ID tokens) and password
reset requests. Successful sign-ins return the Supabase session tokens the
client sends back as its bearer token.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field

from modules.auth.models import AuthSession, ProviderKind
from modules.profiles.models import UserProfile
from modules.profiles.viewmodel import ProfileViewModel

from ..dependencies import get_account_view_model
from ..models.errors import ERROR_RESPONSES

router = APIRouter(responses=ERROR_RESPONSES)


class CredentialsRequest(BaseModel):
    """Email/password credentials."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class FederatedSignInRequest(BaseModel):
    """ID token issued by Google or Apple."""

    provider: ProviderKind
    id_token: str
    nonce: Optional[str] = Field(None, description="Raw nonce (Apple)")
    access_token: Optional[str] = Field(None, description="Provider access token (Google)")


class PasswordResetRequest(BaseModel):
    email: EmailStr


class SignInResponse(BaseModel):
    """Session tokens plus the profile, when one was loaded or created."""

    session: Optional[AuthSession] = Field(
        None, description="Absent when the account still needs email confirmation"
    )
    profile: Optional[UserProfile] = None


@router.post("/sign-up", response_model=SignInResponse, status_code=201)
async def sign_up(
    request: CredentialsRequest,
    account: ProfileViewModel = Depends(get_account_view_model),
) -> SignInResponse:
    """Create an email/password account and its profile."""
    profile = await account.sign_up(request.email, request.password)
    return SignInResponse(session=account.session, profile=profile)


@router.post("/sign-in", response_model=SignInResponse)
async def sign_in(
    request: CredentialsRequest,
    account: ProfileViewModel = Depends(get_account_view_model),
) -> SignInResponse:
    await account.sign_in(request.email, request.password)
    return SignInResponse(session=account.session)


@router.post("/sign-in/token", response_model=SignInResponse)
async def sign_in_with_token(
    request: FederatedSignInRequest,
    account: ProfileViewModel = Depends(get_account_view_model),
) -> SignInResponse:
    """Sign in with a Google or Apple ID token, creating the profile on first use."""
    profile = await account.sign_in_with_federated_token(
        request.provider,
        request.id_token,
        nonce=request.nonce,
        access_token=request.access_token,
    )
    return SignInResponse(session=account.session, profile=profile)


@router.post("/password-reset", status_code=202)
async def request_password_reset(
    request: PasswordResetRequest,
    account: ProfileViewModel = Depends(get_account_view_model),
) -> None:
    """Send a password reset email for an address."""
    await account.send_password_reset(request.email)
