"""
User-related endpoints.

Provides endpoints for the signed-in user's profile and account.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field

from modules.auth.models import ProviderKind
from modules.profiles.models import UserProfile
from modules.profiles.viewmodel import ProfileViewModel
from shared.models import AuthenticatedUser

from ..dependencies import get_profile_view_model, get_session_registry
from ..middleware.auth import get_current_user
from ..models.errors import ERROR_RESPONSES
from ..sessions import SessionRegistry

router = APIRouter(responses=ERROR_RESPONSES)


class ProvidersResponse(BaseModel):
    providers: list[ProviderKind]


class UpdatePasswordRequest(BaseModel):
    password: str = Field(..., min_length=1)


class UpdateEmailRequest(BaseModel):
    email: EmailStr


@router.get("/me", response_model=UserProfile)
async def get_current_user_profile(
    profile: ProfileViewModel = Depends(get_profile_view_model),
) -> UserProfile:
    """
    Get the current user's profile.

    Requires authentication.
    """
    return await profile.load_current_user()


@router.get("/me/providers", response_model=ProvidersResponse)
async def list_auth_providers(
    profile: ProfileViewModel = Depends(get_profile_view_model),
) -> ProvidersResponse:
    """Sign-in methods linked to the account."""
    return ProvidersResponse(providers=await profile.load_auth_providers())


@router.post("/me/password-reset", status_code=202)
async def reset_password(
    profile: ProfileViewModel = Depends(get_profile_view_model),
) -> None:
    """Send a password reset email to the account's address."""
    await profile.reset_password()


@router.put("/me/password", status_code=204)
async def update_password(
    request: UpdatePasswordRequest,
    profile: ProfileViewModel = Depends(get_profile_view_model),
) -> None:
    await profile.update_password(request.password)


@router.put("/me/email", status_code=202)
async def update_email(
    request: UpdateEmailRequest,
    profile: ProfileViewModel = Depends(get_profile_view_model),
) -> None:
    """Request an email change; takes effect once the link is confirmed."""
    await profile.update_email(request.email)


@router.post("/me/sign-out", status_code=204)
async def sign_out(
    user: AuthenticatedUser = Depends(get_current_user),
    profile: ProfileViewModel = Depends(get_profile_view_model),
    registry: SessionRegistry = Depends(get_session_registry),
) -> None:
    """End the session and drop the user's cached state."""
    await profile.sign_out()
    registry.drop(user.id)


@router.delete("/me", status_code=204)
async def delete_account(
    user: AuthenticatedUser = Depends(get_current_user),
    profile: ProfileViewModel = Depends(get_profile_view_model),
    registry: SessionRegistry = Depends(get_session_registry),
) -> None:
    """
    Delete the account.

    Removes the profile (and with it every collection) and then the auth
    account.
    """
    await profile.delete_account()
    registry.drop(user.id)
