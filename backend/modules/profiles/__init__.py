"""
Profiles module.

One profile document per user, created at first sign-in, plus the
account-level flows that touch it.
"""

from .models import UserProfile
from .repository import ProfileRepository
from .viewmodel import ProfileViewModel
from .exceptions import ProfileNotFoundError

__all__ = [
    "UserProfile",
    "ProfileRepository",
    "ProfileViewModel",
    "ProfileNotFoundError",
]
