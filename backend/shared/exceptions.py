"""
Base exception classes for the SparkTasks backend.

Each module should define its own exceptions that inherit from these bases.
The API renders every SparkTasksError through a single handler, so the
class a module picks decides the HTTP status its callers see.
"""

from typing import Optional, Any


class SparkTasksError(Exception):
    """
    Base exception for all SparkTasks errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(SparkTasksError):
    """Resource not found."""

    pass


class ValidationError(SparkTasksError):
    """Input validation failed."""

    pass


class ConflictError(SparkTasksError):
    """Resource already exists or conflicts with existing state."""

    pass


class AuthenticationError(SparkTasksError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(SparkTasksError):
    """Authorization failed (insufficient permissions)."""

    pass


class NotLoadedError(ValidationError):
    """A view-model operation was called before load_for_user()."""

    def __init__(self, view_model: str):
        super().__init__(
            f"{view_model} has not been loaded for a user",
            code="NOT_LOADED",
            details={"view_model": view_model},
        )


class DecodingError(SparkTasksError):
    """A stored document could not be parsed into its entity shape."""

    def __init__(self, collection: str, document_id: Optional[str], reason: str):
        super().__init__(
            f"Failed to decode {collection} document {document_id}: {reason}",
            code="DECODING_ERROR",
            details={"collection": collection, "document_id": document_id},
        )


class ExternalServiceError(SparkTasksError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service


class BackendError(ExternalServiceError):
    """The document backend rejected a request or could not be reached."""

    def __init__(self, message: str, operation: str, collection: str):
        super().__init__(
            message,
            service="supabase",
            code="BACKEND_ERROR",
            details={"operation": operation, "collection": collection},
        )
