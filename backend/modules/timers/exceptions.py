"""
Timers module exceptions.
"""

from shared.exceptions import NotFoundError, ValidationError


class TimerNotStartedError(ValidationError):
    """Raised when saving a session that was never started and stopped."""

    def __init__(self):
        super().__init__(
            "Timer has not been started/stopped",
            code="TIMER_NOT_STARTED",
        )


class TimerNotFoundError(NotFoundError):
    """Raised when a timer entry id is not in the signed-in user's cache."""

    def __init__(self, timer_id: str):
        super().__init__(
            f"Timer entry not found: {timer_id}",
            code="TIMER_NOT_FOUND",
            details={"timer_id": timer_id},
        )
