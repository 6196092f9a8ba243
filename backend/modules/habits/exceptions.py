"""
Habits module exceptions.
"""

from shared.exceptions import NotFoundError, ValidationError


class HabitNotFoundError(NotFoundError):
    """Raised when a habit is not in the signed-in user's cache."""

    def __init__(self, habit_id: str):
        super().__init__(
            f"Habit not found: {habit_id}",
            code="HABIT_NOT_FOUND",
            details={"habit_id": habit_id},
        )


class InvalidHabitError(ValidationError):
    """Raised when a habit fails client-side validation."""

    def __init__(self, message: str, field: str):
        super().__init__(
            message,
            code="INVALID_HABIT",
            details={"field": field},
        )
