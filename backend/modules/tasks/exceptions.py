"""
Tasks module exceptions.
"""

from shared.exceptions import NotFoundError, ValidationError


class TaskNotFoundError(NotFoundError):
    """Raised when a task is not in the signed-in user's cache."""

    def __init__(self, task_id: str):
        super().__init__(
            f"Task not found: {task_id}",
            code="TASK_NOT_FOUND",
            details={"task_id": task_id},
        )


class InvalidTaskError(ValidationError):
    """Raised when a task or section fails client-side validation."""

    def __init__(self, message: str, field: str):
        super().__init__(
            message,
            code="INVALID_TASK",
            details={"field": field},
        )
