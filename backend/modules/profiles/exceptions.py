"""
Profile module exceptions.
"""

from shared.exceptions import NotFoundError


class ProfileNotFoundError(NotFoundError):
    """Raised when the signed-in user has no profile document."""

    def __init__(self, user_id: str):
        super().__init__(
            f"Profile not found: {user_id}",
            code="PROFILE_NOT_FOUND",
            details={"user_id": user_id},
        )
